"""Upload files to Dropbox and check that they exist.

Uploads are single-shot: the whole file is sent as the request body of
``files/upload``, which Dropbox accepts for files up to 150 MB. The target
path and write policy travel in the ``Dropbox-API-Arg`` header as JSON.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

import requests

from .errors import MetadataLookupError, UploadError

logger = logging.getLogger(__name__)

UPLOAD_URL = "https://content.dropboxapi.com/2/files/upload"
METADATA_URL = "https://api.dropboxapi.com/2/files/get_metadata"

# Uploaded files land in this folder of the app's Dropbox
UPLOAD_FOLDER = "/downloads/"

# get_metadata answers 409 Conflict when the path does not exist
NOT_FOUND_STATUS = 409


@dataclass(frozen=True)
class UploadDescriptor:
    """Destination and write policy of an upload.

    ``mode="add"`` makes Dropbox reject the upload when a file already exists
    at ``path``; with ``autorename`` off nothing is silently renamed either.
    """

    path: str
    mode: str = "add"
    autorename: bool = False
    mute: bool = False

    @classmethod
    def for_file(cls, local_path: str | Path) -> "UploadDescriptor":
        return cls(path=UPLOAD_FOLDER + Path(local_path).name)

    def to_header(self) -> str:
        return json.dumps(asdict(self))


@dataclass(frozen=True)
class RemoteObject:
    """A file stored in Dropbox.

    ``id`` is the stable handle used for later lookups. ``path_lower`` is
    only informational; Dropbox may normalise it.
    """

    id: str
    path_lower: str


def upload_file(
    local_path: str | Path,
    access_token: str,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> RemoteObject:
    """Upload ``local_path`` to ``/downloads/<file name>``.

    The file is streamed from disk.

    Raises
    ------
    FileNotFoundError
        If ``local_path`` does not exist.
    UploadError
        If Dropbox rejects the upload, including when a file already
        exists at the target path.
    """
    http = session or requests
    path = Path(local_path)
    descriptor = UploadDescriptor.for_file(path)
    headers = {
        "Authorization": f"Bearer {access_token}",
        "Content-Type": "application/octet-stream",
        "Dropbox-API-Arg": descriptor.to_header(),
    }
    logger.debug("Uploading %s to %s", path, descriptor.path)
    with path.open("rb") as body:
        response = http.post(UPLOAD_URL, data=body, headers=headers, timeout=timeout)
    if response.status_code != 200:
        raise UploadError(response.status_code, response.text)
    try:
        data = response.json()
        return RemoteObject(id=data["id"], path_lower=data["path_lower"])
    except (ValueError, KeyError, TypeError) as e:
        raise UploadError(
            response.status_code,
            response.text,
            f"failed to decode the file upload response ({e!r})",
        ) from e


def file_exists(
    identifier: str,
    access_token: str,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> bool:
    """Return whether ``identifier`` (an ``id:`` handle or a path) exists.

    Returns
    -------
    bool
        True on 200, False when Dropbox reports the path as not found.

    Raises
    ------
    MetadataLookupError
        For any other status.
    """
    http = session or requests
    payload = {
        "path": identifier,
        "include_deleted": False,
        "include_has_explicit_shared_members": False,
        "include_media_info": False,
    }
    headers = {
        "Authorization": f"Bearer {access_token}",
        "Content-Type": "application/json",
    }
    logger.debug("Looking up metadata for %s", identifier)
    response = http.post(METADATA_URL, data=json.dumps(payload), headers=headers, timeout=timeout)
    if response.status_code == 200:
        return True
    if response.status_code == NOT_FOUND_STATUS:
        return False
    raise MetadataLookupError(response.status_code, response.text)
