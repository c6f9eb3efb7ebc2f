"""Exchange the Dropbox refresh token for a short-lived access token.

Dropbox apps configured for offline access receive a long-lived refresh
token once, during the initial consent. Every run of this tool trades it for
a fresh bearer token without user interaction. The token is valid for a few
hours, well beyond the lifetime of a single publish run, so it is neither
cached nor refreshed.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from .config import SecretBundle
from .errors import AuthError

logger = logging.getLogger(__name__)

TOKEN_URL = "https://api.dropbox.com/oauth2/token"


def get_access_token(
    secrets: SecretBundle,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> str:
    """Return a new access token for the Dropbox app.

    Parameters
    ----------
    secrets: SecretBundle
        App key, app secret and refresh token.
    session: requests.Session, optional
        HTTP session to send the request with. Defaults to the ``requests``
        module itself.
    timeout: float, optional
        Seconds to wait for the server. ``None`` waits indefinitely.

    Raises
    ------
    AuthError
        If Dropbox rejects the exchange or the response has no token.
    """
    http = session or requests
    data = {
        "grant_type": "refresh_token",
        "client_id": secrets.app_key,
        "client_secret": secrets.app_secret,
        "refresh_token": secrets.refresh_token,
    }
    logger.debug("Requesting access token from %s", TOKEN_URL)
    # requests form-encodes a dict body and sets the matching Content-Type
    response = http.post(TOKEN_URL, data=data, timeout=timeout)
    if response.status_code != 200:
        raise AuthError(response.status_code, response.text)
    try:
        token = response.json().get("access_token")
    except (ValueError, AttributeError) as e:
        raise AuthError(
            response.status_code, response.text, f"failed to decode token response ({e})"
        ) from e
    if not token:
        raise AuthError(
            response.status_code, response.text, "token response did not contain an access_token"
        )
    return token
