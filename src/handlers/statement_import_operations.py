"""
Lambda handler for statement CSV preview and import.

Routes:
    POST /statements/preview  - parse an uploaded statement and return the result
    POST /statements/import   - parse and persist the extracted transactions
    GET  /statements/formats  - list supported banks and cards

The request body carries `content` (base64-encoded file bytes), `kind`
("bank" or "card") and an optional `format` tag that skips auto-detection.
"""
import base64
import binascii
import logging
from typing import Any, Dict, Optional

from services.statement_import_service import StatementImportService
from services.statement_parser_service import available_banks, available_cards
from utils.auth import get_user_from_event, NotAuthorized
from utils.handler_decorators import standard_error_handling
from utils.lambda_utils import mandatory_body_parameter, optional_body_parameter
from utils.logging_config import configure_logging

configure_logging()
logger = logging.getLogger(__name__)

# Initialize services
import_service = StatementImportService()

STATEMENT_KINDS = ("bank", "card")


def _statement_request(event: Dict[str, Any]):
    """Decode the upload and read the kind/format parameters from the body."""
    encoded = mandatory_body_parameter(event, "content")
    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, TypeError) as e:
        raise ValueError(f"content must be base64 encoded: {str(e)}")

    kind = optional_body_parameter(event, "kind") or "bank"
    if kind not in STATEMENT_KINDS:
        raise ValueError(f"Unsupported statement kind: {kind}")

    format_tag: Optional[str] = optional_body_parameter(event, "format")
    return import_service.decode_upload(raw), kind, format_tag


def preview_statement_handler(event: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    content, kind, format_tag = _statement_request(event)
    logger.info(f"Previewing {kind} statement for user {user_id} (format: {format_tag or 'auto'})")
    if kind == "card":
        return import_service.preview_card_csv(content, format_tag).to_dict()
    return import_service.preview_bank_csv(content, format_tag).to_dict()


def import_statement_handler(event: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    content, kind, format_tag = _statement_request(event)
    logger.info(f"Importing {kind} statement for user {user_id} (format: {format_tag or 'auto'})")
    if kind == "card":
        return import_service.import_card_csv(user_id, content, format_tag).to_dict()
    return import_service.import_bank_csv(user_id, content, format_tag).to_dict()


def list_formats_handler(event: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    return {"banks": available_banks(), "cards": available_cards()}


@standard_error_handling
def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Main handler for statement import operations."""
    user = get_user_from_event(event)
    if not user:
        raise NotAuthorized("Unauthorized")
    user_id = user["id"]

    route = event.get("routeKey")
    if not route:
        raise ValueError("Route not specified")

    logger.info(f"Statement import request: {route}")

    if route == "POST /statements/preview":
        return preview_statement_handler(event, user_id)
    elif route == "POST /statements/import":
        return import_statement_handler(event, user_id)
    elif route == "GET /statements/formats":
        return list_formats_handler(event, user_id)
    else:
        raise ValueError(f"Unsupported route: {route}")
