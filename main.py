"""Command-line entry point for downloading media and publishing it to Dropbox.

This script downloads a video (or only its audio) with yt-dlp and, when
"--dropbox" is given, uploads the file to the Dropbox app folder and prints a
public sharing link. The location of yt-dlp and the output naming scheme come
from "config.json"; the Dropbox app key, app secret and refresh token are read
from a ".env" file or the environment (APP_KEY, APP_SECRET, REFRESH_TOKEN).

Usage example:

    python main.py \
        --url https://www.youtube.com/watch?v=dQw4w9WgXcQ \
        --mp3 \
        --dropbox
"""

from __future__ import annotations

import argparse
import subprocess
from pathlib import Path
from typing import List, Optional

import requests

import ytdrop.downloader as downloader
from ytdrop.config import load_config, load_dropbox_secrets
from ytdrop.errors import ConfigError, DropboxError
from ytdrop.publisher import publish_file


def run(
    url: str,
    audio_only: bool,
    upload_to_dropbox: bool,
    config_path: Path,
    env_file: Optional[Path] = None,
    timeout: Optional[float] = None,
) -> Optional[str]:
    """Download ``url`` and optionally publish it.

    Returns
    -------
    str or None
        The public Dropbox link when ``upload_to_dropbox`` is set, else None.
    """
    config = load_config(config_path)
    info = downloader.fetch_video_info(config.yt_dlp_path, url)
    # The name of the downloaded file, needed to find it again for the upload
    local_file = downloader.build_output_filename(
        config.default_output_template,
        info,
        audio_only=audio_only,
        audio_format=config.audio_format,
    )
    downloader.download_file(
        config.yt_dlp_path,
        url,
        local_file,
        audio_only=audio_only,
        audio_format=config.audio_format,
    )
    if not upload_to_dropbox:
        return None

    secrets = load_dropbox_secrets(env_file)
    with requests.Session() as session:
        link = publish_file(local_file, secrets, session=session, timeout=timeout)
    return link.url


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Download a video with yt-dlp and optionally share it through Dropbox."
    )
    parser.add_argument("--url", required=True, help="The video URL to download")
    parser.add_argument(
        "--mp3",
        dest="audio_only",
        action="store_true",
        help="Download audio only (format taken from config.json)",
    )
    parser.add_argument(
        "--dropbox",
        action="store_true",
        help="Upload the downloaded file to Dropbox and print a sharable link",
    )
    parser.add_argument(
        "--config",
        default="config.json",
        help="Path to the JSON configuration file (default: config.json)",
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="File holding APP_KEY, APP_SECRET and REFRESH_TOKEN (default: .env lookup)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for each Dropbox request (default: no limit)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    try:
        link = run(
            url=args.url,
            audio_only=args.audio_only,
            upload_to_dropbox=args.dropbox,
            config_path=Path(args.config),
            env_file=Path(args.env_file) if args.env_file else None,
            timeout=args.timeout,
        )
    except (FileNotFoundError, ConfigError) as e:
        raise SystemExit(f"Error: {e}")
    except subprocess.CalledProcessError as e:
        raise SystemExit(f"yt-dlp command failed: {e}")
    except ValueError as e:
        raise SystemExit(f"Failed to fetch video info: {e}")
    except (DropboxError, requests.RequestException) as e:
        raise SystemExit(f"Failed to publish to Dropbox: {e}")
    if link:
        print(link)


if __name__ == "__main__":
    main()
