"""Top-level package for the yt-dlp download and Dropbox publishing tool.

Downloads go through the yt-dlp executable; publishing is a fixed sequence
of Dropbox calls (token, upload, existence check, shared link) driven by
:class:`DropboxPublisher`.
"""

from .config import Config, SecretBundle, load_config, load_dropbox_secrets
from .downloader import VideoInfo, build_output_filename, download_file, fetch_video_info
from .errors import (
    AuthError,
    ConfigError,
    DropboxError,
    MetadataLookupError,
    ShareError,
    UploadError,
    VerificationError,
)
from .publisher import DropboxPublisher, PublishState, publish_file
from .sharing import ShareLink
from .storage import RemoteObject

__all__ = [
    "Config",
    "SecretBundle",
    "load_config",
    "load_dropbox_secrets",
    "VideoInfo",
    "build_output_filename",
    "download_file",
    "fetch_video_info",
    "AuthError",
    "ConfigError",
    "DropboxError",
    "MetadataLookupError",
    "ShareError",
    "UploadError",
    "VerificationError",
    "DropboxPublisher",
    "PublishState",
    "publish_file",
    "ShareLink",
    "RemoteObject",
]
