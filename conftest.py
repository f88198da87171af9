import sys
import os
import pytest
from pathlib import Path

# Add the src directory to Python path for imports
project_dir = Path(__file__).parent
src_dir = project_dir / "src"
sys.path.insert(0, str(src_dir))
sys.path.insert(0, str(project_dir))

# Parsers must not pick up a developer's table configuration
os.environ.pop("LEDGER_TABLE", None)


def pytest_configure(config):
    """
    Register custom markers
    """
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )


@pytest.fixture
def lambda_event():
    """Build an API Gateway HTTP API event for an authenticated user."""
    def _build(route_key, body=None, user_id="test-user-id"):
        event = {
            "routeKey": route_key,
            "requestContext": {
                "authorizer": {
                    "jwt": {
                        "claims": {
                            "sub": user_id,
                            "email": "test@example.com",
                            "auth_time": "1712000000"
                        }
                    }
                }
            }
        }
        if body is not None:
            event["body"] = body
        return event
    return _build
