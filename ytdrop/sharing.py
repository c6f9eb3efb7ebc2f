"""Create public shared links for files stored in Dropbox."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Optional

import requests

from .errors import ShareError

logger = logging.getLogger(__name__)

SHARE_URL = "https://api.dropboxapi.com/2/sharing/create_shared_link_with_settings"


@dataclass(frozen=True)
class ShareLink:
    url: str


def _existing_link_url(response) -> Optional[str]:
    """Extract the link Dropbox reports in a ``shared_link_already_exists`` error."""
    try:
        error = response.json().get("error", {})
        if error.get(".tag") != "shared_link_already_exists":
            return None
        return error["shared_link_already_exists"]["metadata"]["url"]
    except (ValueError, KeyError, TypeError, AttributeError):
        return None


def get_shareable_link(
    path: str,
    access_token: str,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> ShareLink:
    """Return a public link for the file at ``path``.

    A new link is created with default visibility settings. When the file is
    already shared, Dropbox answers with a conflict that carries the existing
    link, and that link is returned instead. No lookup is made beforehand.

    Raises
    ------
    ShareError
        If Dropbox rejects the request for any other reason.
    """
    http = session or requests
    headers = {
        "Authorization": f"Bearer {access_token}",
        "Content-Type": "application/json",
    }
    logger.debug("Requesting shared link for %s", path)
    response = http.post(
        SHARE_URL, data=json.dumps({"path": path}), headers=headers, timeout=timeout
    )
    if response.status_code == 409:
        url = _existing_link_url(response)
        if url:
            logger.debug("Reusing existing shared link for %s", path)
            return ShareLink(url=url)
    if response.status_code != 200:
        raise ShareError(response.status_code, response.text)
    try:
        return ShareLink(url=response.json()["url"])
    except (ValueError, KeyError, TypeError) as e:
        raise ShareError(
            response.status_code,
            response.text,
            f"failed to decode the shared link response ({e!r})",
        ) from e
