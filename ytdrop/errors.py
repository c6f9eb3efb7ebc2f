"""Exceptions raised while configuring and publishing to Dropbox.

Every remote failure carries the HTTP status and the response body verbatim
so a provider-side rejection (quota, bad path, expired token) can be
diagnosed from the message alone.
"""

from __future__ import annotations

from typing import Optional


class ConfigError(ValueError):
    """Raised when ``config.json`` or the Dropbox secrets are unusable."""


class DropboxError(RuntimeError):
    """Base class for a Dropbox API call that returned an unexpected status."""

    action = "dropbox request"

    def __init__(self, status: Optional[int] = None, body: str = "", reason: str | None = None):
        self.status = status
        self.body = body
        self.reason = reason or f"{self.action} failed"
        if status is None:
            message = self.reason
        else:
            message = f"{self.reason} with status {status}: {body}"
        super().__init__(message)


class AuthError(DropboxError):
    action = "token request"


class UploadError(DropboxError):
    action = "file upload request"


class MetadataLookupError(DropboxError):
    action = "metadata request"


class ShareError(DropboxError):
    action = "shared link request"


class VerificationError(DropboxError):
    """The upload was accepted but the file could not be found afterwards."""

    action = "upload verification"
