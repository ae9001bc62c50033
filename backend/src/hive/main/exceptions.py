from enum import IntEnum


class ErrorCodes(IntEnum):
    UNAUTHENTICATED = 9000
    UNAUTHORIZED = 9001
    NOT_FOUND = 9002
    CRON_TOKEN_REJECTED = 9010


class AuthenticationException(Exception):
    pass


class UnauthorizedException(Exception):
    pass


class CronTokenException(Exception):
    """The scheduler's shared secret is missing, wrong, or not configured."""


class NotFoundException(Exception):
    pass


# Map of exception -> (status code, message override, error code)
# A message of None means str(exc) is returned.
EXCEPTION_MAP = {
    AuthenticationException: (401, None, ErrorCodes.UNAUTHENTICATED),
    UnauthorizedException: (403, None, ErrorCodes.UNAUTHORIZED),
    CronTokenException: (403, "Forbidden", ErrorCodes.CRON_TOKEN_REJECTED),
    NotFoundException: (404, None, ErrorCodes.NOT_FOUND),
}
