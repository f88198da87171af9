"""
Handler decorators for reducing boilerplate code in Lambda handlers.
"""

import logging
import traceback
from functools import wraps
from typing import Dict, Any, Callable

from pydantic import ValidationError

from utils.auth import NotAuthorized
from utils.lambda_utils import create_response

logger = logging.getLogger(__name__)


def standard_error_handling(func: Callable) -> Callable:
    """
    Decorator that provides standard error handling for Lambda handlers.

    Maps common exceptions to appropriate HTTP status codes:
    - ValidationError, ValueError, KeyError -> 400 Bad Request
    - NotAuthorized -> 403 Forbidden
    - Exception -> 500 Internal Server Error

    Handlers decorated with this can focus on business logic and return raw data.
    The decorator will wrap the result in a proper API Gateway response.
    """
    @wraps(func)
    def wrapper(*args, **kwargs) -> Dict[str, Any]:
        try:
            result = func(*args, **kwargs)

            # If handler returns a dict with statusCode, it's already a response
            if isinstance(result, dict) and "statusCode" in result:
                return result

            return create_response(200, result)

        except (ValidationError, ValueError, KeyError) as e:
            logger.error(f"Validation error in {func.__name__}: {str(e)}")
            return create_response(400, {"message": str(e)})

        except NotAuthorized as e:
            logger.warning(f"Authorization error in {func.__name__}: {str(e)}")
            return create_response(403, {"message": str(e)})

        except Exception as e:
            logger.error(f"Unexpected error in {func.__name__}: {str(e)}")
            logger.error(f"Stacktrace: {traceback.format_exc()}")
            return create_response(500, {"message": f"Error in {func.__name__.replace('_handler', '')}"})

    return wrapper

