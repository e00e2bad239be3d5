"""
Dataset download
================

Fetches the compressed Storm Events CSV to local disk. No retries:
network and filesystem errors propagate to the caller.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import requests

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def download_dataset(url: str, dest: Union[str, Path], *, force: bool = False, timeout: float = 300) -> Path:
    """Download `url` to `dest` and return the destination path.

    An existing file is reused unless `force` is set. The body is streamed
    to `<dest>.part` and renamed once complete, so an interrupted download
    never leaves a truncated file at `dest`.
    """
    dest = Path(dest)
    if dest.exists() and not force:
        logger.info("Using cached %s", dest)
        return dest

    dest.parent.mkdir(parents=True, exist_ok=True)
    part = dest.with_name(dest.name + ".part")
    logger.info("Downloading %s", url)
    try:
        with requests.get(url, stream=True, timeout=timeout) as r:
            r.raise_for_status()
            with open(part, "wb") as f:
                for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
    except BaseException:
        part.unlink(missing_ok=True)
        raise
    part.replace(dest)
    logger.info("Saved %s (%d bytes)", dest, dest.stat().st_size)
    return dest
