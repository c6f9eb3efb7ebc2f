"""Download videos and audio using the yt-dlp command-line tool.

This module drives the ``yt-dlp`` executable rather than its Python API, so
the tool can be upgraded independently of this package. Two invocations are
made per download: a ``--simulate`` run that prints the video's metadata as
JSON, and the real download. The metadata is used to compute the output
filename up front so the file can be located afterwards (for example to
publish it to Dropbox).

Note: the path to ``yt-dlp`` comes from ``config.json`` (see
:mod:`ytdrop.config`). The executable needs internet access.
"""

from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List

# Characters that are unsafe or awkward in file names
_TITLE_REPLACEMENTS = (":", "?", " ", "/")


@dataclass
class VideoInfo:
    """Metadata of a remote video as reported by ``yt-dlp --print-json``.

    Attributes
    ----------
    id: str
        The site-specific identifier of the video.
    title: str
        Human readable title. May contain characters that are not valid in
        file names; see :func:`sanitize_title`.
    """

    id: str
    title: str


def fetch_video_info(yt_dlp_path: str | Path, url: str) -> VideoInfo:
    """Return the metadata of ``url`` without downloading it.

    Raises
    ------
    subprocess.CalledProcessError
        If ``yt-dlp`` exits with a non-zero status.
    ValueError
        If the output is not the expected JSON document.
    """
    print("Fetching video metadata...")
    cmd = [str(yt_dlp_path), "--print-json", "--simulate", url]
    result = subprocess.run(cmd, check=True, capture_output=True, text=True)
    try:
        data = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise ValueError(f"failed to parse video metadata JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("video metadata is not a JSON object")
    return VideoInfo(id=str(data.get("id", "")), title=str(data.get("title", "")))


def sanitize_title(title: str) -> str:
    """Replace characters that are invalid in file paths with underscores."""
    for char in _TITLE_REPLACEMENTS:
        title = title.replace(char, "_")
    return title


def build_output_filename(
    template: str,
    info: VideoInfo,
    audio_only: bool = False,
    audio_format: str = "mp3",
) -> str:
    """Fill a yt-dlp output template with the video's metadata.

    Only ``%(title)s``, ``%(id)s`` and ``%(ext)s`` are substituted. The
    extension is ``audio_format`` for audio-only downloads and ``mp4``
    otherwise. Spaces left in the template are replaced with underscores.
    """
    output = template.replace("%(title)s", sanitize_title(info.title))
    output = output.replace("%(id)s", info.id)
    output = output.replace("%(ext)s", audio_format if audio_only else "mp4")
    return output.replace(" ", "_")


def download_file(
    yt_dlp_path: str | Path,
    url: str,
    filename: str | Path,
    audio_only: bool = False,
    audio_format: str = "mp3",
) -> Path:
    """Download ``url`` to ``filename`` and return the path.

    yt-dlp's progress output is connected to the console.

    Raises
    ------
    subprocess.CalledProcessError
        If ``yt-dlp`` exits with a non-zero status.
    """
    cmd: List[str] = [str(yt_dlp_path)]
    if audio_only:
        cmd.extend(["-f", "bestaudio", "-x", "--audio-format", audio_format])
    cmd.extend(["-o", str(filename)])
    # the URL always goes last
    cmd.append(url)

    print("Download started...")
    subprocess.run(cmd, check=True)
    return Path(filename)
