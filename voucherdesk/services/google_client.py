"""
voucherdesk/services/google_client.py

Purpose: Shared plumbing for Google API clients

- Builds discovery clients from a user's OAuth access token
- Applies the configured HTTP timeout
- Runs blocking `execute()` calls off the event loop
- Normalizes API and transport failures into GoogleWorkspaceError
"""

import asyncio
from typing import Any, Optional

import httplib2
from google.oauth2.credentials import Credentials
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from voucherdesk.core.config import settings
from voucherdesk.core.logging import get_logger

logger = get_logger(__name__)


class GoogleWorkspaceError(Exception):
    """Raised when a Google Sheets or Drive call fails."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.message = message
        self.status = status
        super().__init__(message)


def build_google_service(api: str, version: str, access_token: str) -> Any:
    """
    Builds a Google API client acting as the signed-in user.

    Args:
        api: API name ("sheets", "drive")
        version: API version ("v4", "v3")
        access_token: OAuth access token from the user's login

    Returns:
        googleapiclient Resource
    """
    credentials = Credentials(token=access_token)
    http = AuthorizedHttp(
        credentials,
        http=httplib2.Http(timeout=settings.GOOGLE_HTTP_TIMEOUT_SECONDS),
    )
    return build(api, version, http=http, cache_discovery=False)


def _describe_http_error(error: HttpError) -> str:
    reason = getattr(error, "reason", None)
    if reason:
        return str(reason)
    return str(error)


async def execute(request: Any, action: str) -> Any:
    """
    Executes a prepared googleapiclient request in a worker thread.

    Nothing is retried: a failure surfaces immediately to the caller.

    Args:
        request: HttpRequest returned by the discovery client
        action: Short description used in logs and errors

    Raises:
        GoogleWorkspaceError: On API errors, timeouts or transport failures
    """
    try:
        return await asyncio.to_thread(request.execute)
    except HttpError as e:
        status = getattr(e.resp, "status", None)
        message = _describe_http_error(e)
        logger.error(f"Google API error during {action} (status={status}): {message}")
        raise GoogleWorkspaceError(f"{action} failed: {message}", status=status) from e
    except (httplib2.HttpLib2Error, OSError) as e:
        logger.error(f"Network error during {action}: {e}")
        raise GoogleWorkspaceError(f"{action} failed: {e}") from e
