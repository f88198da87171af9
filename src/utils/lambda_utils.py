from typing import Dict, Any, Optional
import json
import datetime
import uuid
from decimal import Decimal


class DecimalEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, Decimal):
            # Always return as string to preserve precision and ensure consistent type
            return str(obj)
        if isinstance(obj, uuid.UUID):
            return str(obj)
        if isinstance(obj, datetime.date):
            return obj.isoformat()
        return super(DecimalEncoder, self).default(obj)


def create_response(status_code: int, body: Any) -> Dict[str, Any]:
    """Create a standardized API response."""
    return {
        "statusCode": status_code,
        "headers": {
            "Content-Type": "application/json",
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Headers": "Content-Type,Authorization",
            "Access-Control-Allow-Methods": "GET,POST,OPTIONS"
        },
        "body": json.dumps(body, cls=DecimalEncoder, ensure_ascii=False)
    }


def _json_body(event: Dict[str, Any]) -> Dict[str, Any]:
    body = json.loads(event.get('body') or '{}')
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    return body


# extract parameters from json payload body
def optional_body_parameter(event: Dict[str, Any], parameter_name: str) -> Optional[Any]:
    """Extract a json-encoded body parameter from the event."""
    return _json_body(event).get(parameter_name)


def mandatory_body_parameter(event: Dict[str, Any], parameter_name: str) -> Any:
    """Extract a mandatory json-encoded body parameter from the event."""
    parameter_value = optional_body_parameter(event, parameter_name)
    if not parameter_value:
        raise KeyError(f"Body parameter {parameter_name} is required")
    return parameter_value
