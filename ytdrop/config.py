"""Load the tool configuration and the Dropbox app secrets.

Two sources are involved:

* ``config.json`` describes where ``yt-dlp`` lives and how output files are
  named.
* A ``.env`` file (or the process environment) holds the Dropbox app key, app
  secret and the long-lived refresh token. These are read with
  ``python-dotenv`` and handed to the publisher as a :class:`SecretBundle`;
  the publisher itself never looks at the environment.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigError

DEFAULT_AUDIO_FORMAT = "mp3"
DEFAULT_OUTPUT_TEMPLATE = "%(title)s-%(id)s.%(ext)s"

# Environment variables holding the Dropbox app secrets
SECRET_VARIABLES = ("APP_KEY", "APP_SECRET", "REFRESH_TOKEN")


@dataclass(frozen=True)
class Config:
    """Settings read from ``config.json``.

    Attributes
    ----------
    path_to_yt_dlp_directory: str
        Directory that contains the ``yt-dlp`` executable.
    audio_format: str
        Format passed to ``--audio-format`` when downloading audio only.
    default_output_template: str
        yt-dlp style output template, e.g. ``%(title)s-%(id)s.%(ext)s``.
    """

    path_to_yt_dlp_directory: str
    audio_format: str = DEFAULT_AUDIO_FORMAT
    default_output_template: str = DEFAULT_OUTPUT_TEMPLATE

    @property
    def yt_dlp_path(self) -> Path:
        return Path(self.path_to_yt_dlp_directory) / "yt-dlp"


@dataclass(frozen=True)
class SecretBundle:
    """Dropbox app credentials used to mint short-lived access tokens."""

    app_key: str
    app_secret: str
    refresh_token: str

    def __repr__(self) -> str:
        # keep secrets out of tracebacks and logs
        return f"SecretBundle(app_key={self.app_key!r}, app_secret='***', refresh_token='***')"


def load_config(path: str | Path = "config.json") -> Config:
    """Read ``config.json`` and return a :class:`Config`.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ConfigError
        If the file is not valid UTF-8 JSON or lacks ``path_to_yt_dlp_directory``.
    """
    config_path = Path(path)
    with config_path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ConfigError(f"{config_path} is not valid UTF-8 JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a JSON object")
    yt_dlp_dir = data.get("path_to_yt_dlp_directory")
    if not yt_dlp_dir:
        raise ConfigError(f"{config_path} is missing 'path_to_yt_dlp_directory'")
    return Config(
        path_to_yt_dlp_directory=str(yt_dlp_dir),
        audio_format=data.get("audio_format") or DEFAULT_AUDIO_FORMAT,
        default_output_template=data.get("default_output_template") or DEFAULT_OUTPUT_TEMPLATE,
    )


def load_dropbox_secrets(env_file: str | Path | None = None) -> SecretBundle:
    """Load the Dropbox secrets from a ``.env`` file and the environment.

    Values already present in the environment win over the ``.env`` file.
    An explicit ``env_file`` that does not exist raises :class:`ConfigError`.
    """
    if env_file is not None:
        env_path = Path(env_file)
        if not env_path.is_file():
            raise ConfigError(f"env file not found: {env_path}")
        load_dotenv(dotenv_path=env_path)
    else:
        load_dotenv(find_dotenv(usecwd=True))
    values = {name: os.environ.get(name, "") for name in SECRET_VARIABLES}
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ConfigError(f"missing Dropbox settings: {', '.join(missing)}")
    return SecretBundle(
        app_key=values["APP_KEY"],
        app_secret=values["APP_SECRET"],
        refresh_token=values["REFRESH_TOKEN"],
    )
