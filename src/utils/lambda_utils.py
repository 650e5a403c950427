import base64
import json
from typing import Dict, Any, Optional
from decimal import Decimal
from enum import Enum


class DecimalEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, Decimal):
            # Always return as string to preserve precision and ensure consistent type
            return str(obj)
        if isinstance(obj, Enum):
            return obj.value
        return super(DecimalEncoder, self).default(obj)


def create_response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    """Create a standardized API response."""
    return {
        "statusCode": status_code,
        "headers": {
            "Content-Type": "application/json",
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Headers": "Content-Type,Authorization",
            "Access-Control-Allow-Methods": "POST,OPTIONS"
        },
        "body": json.dumps(body, cls=DecimalEncoder)
    }


def parse_json_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """Decode the JSON request body. Raises ValueError for anything but a JSON object."""
    body = event.get('body') or '{}'
    if event.get('isBase64Encoded'):
        body = base64.b64decode(body).decode('utf-8')
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError as e:
        raise ValueError(f"Request body is not valid JSON: {str(e)}") from e
    if not isinstance(parsed, dict):
        raise ValueError("Request body must be a JSON object")
    return parsed


# extract parameters from json payload body
def optional_body_parameter(event: Dict[str, Any], parameter_name: str) -> Optional[Any]:
    """Extract a json-encoded body parameter from the event."""
    return parse_json_body(event).get(parameter_name)


def mandatory_body_parameter(event: Dict[str, Any], parameter_name: str) -> Any:
    """Extract a mandatory json-encoded body parameter from the event."""
    parameter_value = optional_body_parameter(event, parameter_name)
    if not parameter_value:
        raise KeyError(f"Body parameter {parameter_name} is required")
    return parameter_value
