import secrets
from uuid import UUID

from fastapi import Request, Security
from fastapi.security import APIKeyHeader

from hive.main.config import get_settings
from hive.main.exceptions import AuthenticationException, CronTokenException
from hive.main.logging import get_logger

logger = get_logger(__name__)

ADMIN_API_KEY_SCHEME = APIKeyHeader(name="X-API-Key", auto_error=False)
CRON_TOKEN_SCHEME = APIKeyHeader(name="X-Cron-Token", auto_error=False)


def _resolve_header(request: Request, provided: str | None, header_name: str) -> str | None:
    """Use the security scheme's value, or the configured header name if it differs."""
    if provided:
        return provided

    if header_name and header_name.lower() != "x-api-key":
        return request.headers.get(header_name)

    return provided


def authenticate_admin_api_key(
    request: Request,
    api_key_header: str | None = Security(ADMIN_API_KEY_SCHEME),
) -> str:
    settings = get_settings()
    resolved_key = _resolve_header(request, api_key_header, settings.admin_api_key_header_name)

    if (
        resolved_key
        and settings.admin_api_key
        and secrets.compare_digest(
            settings.admin_api_key.encode("utf-8"), resolved_key.encode("utf-8")
        )
    ):
        return resolved_key

    raise AuthenticationException("Unauthorized")


def get_actor_id(request: Request) -> UUID:
    """The acting user, asserted by the front end that owns user sessions."""
    header_name = get_settings().actor_header_name
    raw = request.headers.get(header_name)
    if not raw:
        raise AuthenticationException(f"Missing {header_name} header")

    try:
        return UUID(raw)
    except ValueError as e:
        raise AuthenticationException(f"Invalid {header_name} header") from e


def verify_cron_token(cron_token: str | None = Security(CRON_TOKEN_SCHEME)) -> None:
    expected = get_settings().cron_token

    if not expected:
        logger.error("CRON_TOKEN is not configured, rejecting scheduled retention run")
        raise CronTokenException("Cron token not configured")

    if not cron_token or not secrets.compare_digest(
        cron_token.encode("utf-8"), expected.encode("utf-8")
    ):
        raise CronTokenException("Cron token mismatch")
