"""
Downloader — acquire artifacts over HTTP or from a container registry.

Files are streamed into a temp file next to the destination and only
renamed into place once complete. A failed or interrupted download
never leaves a half-written artifact at the final path, and a retry
always starts from byte zero.
"""

from __future__ import annotations

import logging
import os
import tempfile
import urllib.error
import urllib.request
from pathlib import Path

from holen import __version__
from holen.adapters.base import Downloader, Runner
from holen.core.errors import DownloadFailed

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 8192


class DefaultDownloader(Downloader):
    """urllib for files, the docker CLI (via the runner) for images."""

    def __init__(self, runner: Runner):
        self._runner = runner

    def download_file(self, url: str, local_path: str | Path) -> None:
        dest = Path(local_path)
        logger.debug("Downloading file from %s to %s", url, dest)

        try:
            req = urllib.request.Request(
                url,
                headers={"User-Agent": f"holen/{__version__}"},
            )
        except ValueError as e:
            raise DownloadFailed(f"unable to download {url}: {e}") from e

        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=dest.parent,
                prefix=f".{dest.name}_",
                suffix=".part",
            )
        except OSError as e:
            raise DownloadFailed(f"unable to create file {dest}: {e}") from e

        tmp = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as out, urllib.request.urlopen(req) as resp:
                downloaded = 0
                while True:
                    chunk = resp.read(_CHUNK_SIZE)
                    if not chunk:
                        break
                    out.write(chunk)
                    downloaded += len(chunk)
            tmp.replace(dest)
        except urllib.error.HTTPError as e:
            tmp.unlink(missing_ok=True)
            raise DownloadFailed(f"unable to download {url}: HTTP {e.code} {e.reason}") from e
        except (urllib.error.URLError, OSError, ValueError) as e:
            tmp.unlink(missing_ok=True)
            raise DownloadFailed(f"unable to download {url}: {e}") from e

        logger.info("Downloaded %d bytes to %s", downloaded, dest)

    def pull_docker_image(self, image: str) -> None:
        self._runner.run_command("docker", ["pull", image])
