"""
Import service for bank notification text.

Wraps the SMS and CSV parsers for callers that receive raw request input:
validates and decodes it, runs the right parser and reports how many
candidates were skipped.
"""
import logging
from datetime import datetime
from typing import List, Optional

from models.transaction import ImportResult, ImportSource, ParsedTransaction
from utils.csv_parser import UTF8_BOM, find_header_row, parse_csv_rows
from utils.csv_tokenizer import tokenize_csv
from utils.import_config import ImportConfig
from utils.message_segmenter import split_messages
from utils.sms_parser import parse_multiple_sms

logger = logging.getLogger(__name__)


def sort_newest_first(transactions: List[ParsedTransaction]) -> List[ParsedTransaction]:
    """Order by transaction date then time, latest first. Ties keep input order."""
    return sorted(
        transactions,
        key=lambda tx: (tx.transaction_date, tx.transaction_time),
        reverse=True,
    )


class SmsImportService:
    """Turns pasted SMS text or uploaded CSV exports into an ImportResult."""

    def __init__(self, config: Optional[ImportConfig] = None):
        self.config = config or ImportConfig.from_environment()

    def _check_size(self, size: int, what: str) -> None:
        if size > self.config.max_text_bytes:
            raise ValueError(f"{what} is too large: {size} bytes exceeds {self.config.max_text_bytes}")

    def _finalise(self, transactions: List[ParsedTransaction]) -> List[ParsedTransaction]:
        if self.config.sort_newest_first:
            return sort_newest_first(transactions)
        return transactions

    def import_sms_text(self, sms_text: str, now: Optional[datetime] = None) -> ImportResult:
        """Parse pasted bulk SMS text."""
        if not isinstance(sms_text, str):
            raise TypeError(f"SMS text must be a string, got {type(sms_text).__name__}")
        if not sms_text.strip():
            raise ValueError("SMS text is required")
        self._check_size(len(sms_text.encode('utf-8')), "SMS text")

        messages = split_messages(sms_text)
        transactions = parse_multiple_sms(messages, now)
        result = ImportResult(
            source=ImportSource.SMS,
            transactions=self._finalise(transactions),
            candidate_count=len(messages),
            skipped_count=len(messages) - len(transactions),
        )
        logger.info(
            f"SMS import: {result.transaction_count} transaction(s), "
            f"{result.skipped_count} of {result.candidate_count} message(s) skipped"
        )
        return result

    def import_csv_text(self, csv_text: str, now: Optional[datetime] = None) -> ImportResult:
        """Parse CSV export text."""
        if not isinstance(csv_text, str):
            raise TypeError(f"CSV content must be a string, got {type(csv_text).__name__}")
        if not csv_text.strip():
            raise ValueError("CSV content is required")
        self._check_size(len(csv_text.encode('utf-8')), "CSV file")

        rows = tokenize_csv(csv_text.lstrip(UTF8_BOM))
        transactions = parse_csv_rows(rows, now)
        header_index = find_header_row(rows)
        # Without a header every row counts as a skipped candidate.
        data_rows = len(rows) - header_index - 1 if header_index is not None else max(len(rows) - 1, 0)
        result = ImportResult(
            source=ImportSource.CSV,
            transactions=self._finalise(transactions),
            candidate_count=data_rows,
            skipped_count=data_rows - len(transactions),
        )
        logger.info(
            f"CSV import: {result.transaction_count} transaction(s), "
            f"{result.skipped_count} of {result.candidate_count} row(s) skipped"
        )
        return result

    def import_csv_file(self, content: bytes, now: Optional[datetime] = None) -> ImportResult:
        """Decode an uploaded CSV file as UTF-8 and parse it."""
        if not content:
            raise ValueError("CSV file is required")
        self._check_size(len(content), "CSV file")
        try:
            csv_text = content.decode('utf-8')
        except UnicodeDecodeError as e:
            raise ValueError(f"CSV file is not valid UTF-8: {str(e)}") from e
        return self.import_csv_text(csv_text, now)
