"""
S3 Data Access Object for reading uploaded import files.
"""
import logging
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import ClientError

from utils.import_config import ImportConfig

logger = logging.getLogger(__name__)


def get_s3_client(config: ImportConfig):
    return boto3.client('s3', region_name=config.aws_region)


def get_object(key: str, config: Optional[ImportConfig] = None) -> Optional[Dict[str, Any]]:
    """
    Get an uploaded object from the configured file storage bucket.

    Args:
        key: The S3 key of the object to retrieve
        config: Bucket and region to read from (defaults to the environment)

    Returns:
        The S3 object response if successful, None otherwise
    """
    config = config or ImportConfig.from_environment()
    try:
        return get_s3_client(config).get_object(Bucket=config.file_storage_bucket, Key=key)
    except ClientError as e:
        logger.error(f"Error getting object {key} from bucket {config.file_storage_bucket}: {str(e)}")
        return None


def get_object_content(key: str, config: Optional[ImportConfig] = None) -> Optional[bytes]:
    """Get the content of an uploaded object as bytes, or None when it cannot be read."""
    response = get_object(key, config)
    if response is None:
        return None
    return response['Body'].read()
