"""Publish a local file to Dropbox and return a public link.

The workflow is a strictly linear sequence where each step consumes the
previous step's result::

    INIT -> CREDENTIAL_OBTAINED -> UPLOADED -> VERIFIED -> PUBLISHED -> DONE

Any failure moves the run to ``FAILED`` and the original exception is
re-raised. Nothing is retried: a partially completed run (for example
uploaded but not shared) is reported so the operator can decide what to do.

The existence check after the upload is a single lookup. Dropbox is assumed
to make an uploaded file visible immediately; if the lookup says otherwise
the run fails rather than polling.

Example usage::

    from ytdrop.config import load_dropbox_secrets
    from ytdrop.publisher import DropboxPublisher

    link = DropboxPublisher(load_dropbox_secrets()).publish("clip.mp4")
    print(link.url)
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Callable, Optional

import requests

from . import credentials, sharing, storage
from .config import SecretBundle
from .errors import VerificationError
from .sharing import ShareLink
from .storage import RemoteObject


class PublishState(enum.Enum):
    INIT = "init"
    CREDENTIAL_OBTAINED = "credential obtained"
    UPLOADED = "uploaded"
    VERIFIED = "verified"
    PUBLISHED = "published"
    DONE = "done"
    FAILED = "failed"


class DropboxPublisher:
    """Run one upload-verify-share sequence against Dropbox.

    Parameters
    ----------
    secrets: SecretBundle
        Used once to obtain the access token for this run.
    session: requests.Session, optional
        Shared by every request of the run.
    timeout: float, optional
        Per-request timeout in seconds. ``None`` waits indefinitely.
    echo: callable, optional
        Receives one progress line per transition. Defaults to ``print``.
    """

    def __init__(
        self,
        secrets: SecretBundle,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        echo: Callable[[str], None] = print,
    ) -> None:
        self.secrets = secrets
        self.session = session
        self.timeout = timeout
        self.echo = echo
        self.state = PublishState.INIT
        self.remote: Optional[RemoteObject] = None
        self.link: Optional[ShareLink] = None
        self.error: Optional[BaseException] = None
        self._access_token: Optional[str] = None

    def _advance(self, state: PublishState, message: str) -> None:
        self.state = state
        self.echo(message)

    def publish(self, local_path: str | Path) -> ShareLink:
        """Upload ``local_path``, confirm it exists and return its shared link.

        Raises
        ------
        AuthError, UploadError, MetadataLookupError, ShareError
            When the corresponding Dropbox call is rejected.
        VerificationError
            When the uploaded file cannot be found right after the upload.
        RuntimeError
            If this publisher has already been used.
        """
        if self.state is not PublishState.INIT:
            raise RuntimeError(f"publisher already used (state: {self.state.value})")
        try:
            return self._run(Path(local_path))
        except Exception as e:
            last_state = self.state
            self.state = PublishState.FAILED
            self.error = e
            self.echo(f"Publishing failed after step '{last_state.value}': {e}")
            raise
        finally:
            self._access_token = None

    def _run(self, local_path: Path) -> ShareLink:
        self.echo("Requesting Dropbox access token...")
        self._access_token = credentials.get_access_token(
            self.secrets, session=self.session, timeout=self.timeout
        )
        self._advance(PublishState.CREDENTIAL_OBTAINED, "Access token obtained.")

        self.echo(f"Uploading {local_path.name} to Dropbox...")
        self.remote = storage.upload_file(
            local_path, self._access_token, session=self.session, timeout=self.timeout
        )
        self._advance(
            PublishState.UPLOADED,
            f"File successfully uploaded to Dropbox: {self.remote.path_lower}",
        )

        self.echo(f"Checking if file ID '{self.remote.id}' exists on Dropbox...")
        exists = storage.file_exists(
            self.remote.id, self._access_token, session=self.session, timeout=self.timeout
        )
        if not exists:
            raise VerificationError(
                reason=f"file '{self.remote.id}' does not exist on Dropbox immediately after upload"
            )
        self._advance(PublishState.VERIFIED, "File found on Dropbox. Proceeding to get share link.")

        self.link = sharing.get_shareable_link(
            self.remote.path_lower, self._access_token, session=self.session, timeout=self.timeout
        )
        self._advance(PublishState.PUBLISHED, f"Sharable link retrieved: {self.link.url}")

        self._advance(PublishState.DONE, "Done.")
        return self.link


def publish_file(
    local_path: str | Path,
    secrets: SecretBundle,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
    echo: Callable[[str], None] = print,
) -> ShareLink:
    """Convenience wrapper running a fresh :class:`DropboxPublisher`."""
    publisher = DropboxPublisher(secrets, session=session, timeout=timeout, echo=echo)
    return publisher.publish(local_path)
