"""
Import configuration settings.

Tunables for the SMS/CSV import path, read from the environment so they can be
changed per deployment without code changes.
"""
import os
from dataclasses import dataclass

TRUE_VALUES = ('1', 'true', 'yes', 'on')


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in TRUE_VALUES


@dataclass
class ImportConfig:
    """Configuration class for the import endpoints."""

    sort_newest_first: bool = False  # Reorder results by date/time descending
    max_text_bytes: int = 1_048_576  # Largest SMS body or CSV file accepted
    file_storage_bucket: str = 'cbe-sms-ledger-dev-file-storage'
    aws_region: str = 'eu-west-2'

    @classmethod
    def from_environment(cls) -> 'ImportConfig':
        """
        Create configuration from environment variables with fallback to defaults.

        Environment variables:
        - IMPORT_SORT_NEWEST_FIRST
        - IMPORT_MAX_TEXT_BYTES
        - FILE_STORAGE_BUCKET
        - AWS_REGION
        """
        return cls(
            sort_newest_first=_env_flag('IMPORT_SORT_NEWEST_FIRST', False),
            max_text_bytes=int(os.getenv('IMPORT_MAX_TEXT_BYTES', 1_048_576)),
            file_storage_bucket=os.getenv('FILE_STORAGE_BUCKET', 'cbe-sms-ledger-dev-file-storage'),
            aws_region=os.getenv('AWS_REGION', 'eu-west-2'),
        )
