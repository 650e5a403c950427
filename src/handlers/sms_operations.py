"""
Lambda handler for importing bank SMS notifications.

Routes:
    POST /transactions/sms   body: {"sms": "<pasted messages>"}
    POST /transactions/csv   body: {"file": "<base64 CSV>"} or {"s3Key": "<uploaded key>"}

The handler only parses; storing the returned records is up to the caller.
"""
import base64
import logging
import logging.config
import os
from typing import Any, Dict

from services.sms_import_service import SmsImportService
from utils.auth import NotFound, checked_user_owns_key
from utils.handler_decorators import api_handler
from utils.import_config import ImportConfig
from utils.lambda_utils import create_response, mandatory_body_parameter, parse_json_body
from utils.s3_dao import get_object_content

# Configure logging
log_conf = os.environ.get('LOGGING_CONFIG')
if log_conf:
    logging.config.fileConfig(log_conf)
else:
    logging.basicConfig(
        level=os.environ.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

logger = logging.getLogger(__name__)

NO_SMS_TRANSACTIONS = "No valid CBE transactions found in the SMS text"
NO_CSV_TRANSACTIONS = "No valid transactions found in CSV file"


def import_sms_handler(event: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """Handle POST /transactions/sms."""
    sms_text = mandatory_body_parameter(event, "sms")
    if not isinstance(sms_text, str):
        raise ValueError("Body parameter sms must be a string")

    result = SmsImportService(ImportConfig.from_environment()).import_sms_text(sms_text)
    if result.is_empty:
        logger.info(f"No transactions recognised in SMS import for user {user_id}")
        return create_response(400, {"message": NO_SMS_TRANSACTIONS, "parsed": []})

    logger.info(f"User {user_id} imported {result.transaction_count} transaction(s) from SMS")
    return result.to_response_body()


def import_csv_handler(event: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """Handle POST /transactions/csv."""
    config = ImportConfig.from_environment()
    body = parse_json_body(event)
    encoded_file = body.get("file")
    s3_key = body.get("s3Key")

    if encoded_file:
        content = base64.b64decode(encoded_file, validate=True)
    elif s3_key:
        checked_user_owns_key(user_id, s3_key)
        content = get_object_content(s3_key, config)
        if content is None:
            raise NotFound(f"Uploaded file not found: {s3_key}")
    else:
        raise KeyError("Body parameter file or s3Key is required")

    result = SmsImportService(config).import_csv_file(content)
    if result.is_empty:
        logger.info(f"No transactions recognised in CSV import for user {user_id}")
        return create_response(400, {"message": NO_CSV_TRANSACTIONS})

    logger.info(f"User {user_id} imported {result.transaction_count} transaction(s) from CSV")
    return result.to_response_body()


@api_handler()
def handler(event: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """Main handler for SMS import operations."""
    route = event.get("routeKey")
    if not route:
        raise ValueError("Route not specified")

    route_map = {
        "POST /transactions/sms": import_sms_handler,
        "POST /transactions/csv": import_csv_handler,
    }

    handler_func = route_map.get(route)
    if not handler_func:
        raise ValueError(f"Unsupported route: {route}")

    return handler_func(event, user_id)
