# Copyright (c) 2025 Ryan Kenning
# Licensed under the MIT License - see LICENSE file for details

"""Stage the font and charset mapping files the renderer reads.

A font directory given by the user is used as is. Otherwise the archive
bundled with the package is unpacked into a temporary directory by a small
pool of worker threads. Either way the caller gets the directory and a
cleanup function to call once the directory is no longer needed.

Directory entries in the archive are skipped. Any other entry that cannot
be extracted fails the whole staging run, after all workers finished.
"""
from __future__ import annotations

import logging
import os
import shutil
import tempfile
import zipfile
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Optional, Tuple

from .config import EXTRACT_WORKERS, FONT_ARCHIVE
from .errors import AssetError, ConfigError

logger = logging.getLogger(__name__)

BUNDLED_ARCHIVE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "fontdir.zip")

Cleanup = Callable[[], None]


def _noop() -> None:
    return None


def bundled_archive(archive: Optional[str] = None) -> str:
    """Return the font archive to unpack, or raise ConfigError."""
    path = archive or FONT_ARCHIVE or BUNDLED_ARCHIVE
    if not os.path.isfile(path):
        raise ConfigError(f"no fontdir given, and no fontdir is bundled (looked for {path!r})")
    if not zipfile.is_zipfile(path):
        raise ConfigError(f"bundled font archive {path!r} is not a zip file")
    return path


def _target_path(dest: str, name: str) -> str:
    target = os.path.normpath(os.path.join(dest, name))
    root = os.path.normpath(dest)
    if os.path.isabs(name) or os.path.commonpath([root, target]) != root:
        raise AssetError(f"refusing to extract {name!r} outside {dest!r}")
    return target


def _extract_member(archive: str, name: str, dest: str) -> str:
    """Copy one archive entry into ``dest``; returns the written path."""
    target = _target_path(dest, name)
    os.makedirs(os.path.dirname(target), exist_ok=True)
    logger.debug(f"copying {name} to {target}")
    with zipfile.ZipFile(archive) as zf:
        with zf.open(name) as src, open(target, "wb") as dst:
            shutil.copyfileobj(src, dst)
    return target


def extract_archive(archive: str, dest: str, workers: int = EXTRACT_WORKERS) -> int:
    """Extract every file of ``archive`` into ``dest`` concurrently.

    At most ``workers`` entries are extracted at the same time. Returns the
    number of files written.
    """
    try:
        with zipfile.ZipFile(archive) as zf:
            names = [info.filename for info in zf.infolist() if not info.is_dir()]
    except (OSError, zipfile.BadZipFile) as e:
        raise AssetError(f"error opening zip {archive!r}: {e}") from e

    errors = []
    with ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
        futures = {executor.submit(_extract_member, archive, name, dest): name for name in names}
        for future in as_completed(futures):
            name = futures[future]
            try:
                future.result()
            except Exception as e:
                logger.error(f"error extracting {name!r}: {e}")
                errors.append((name, e))
    if errors:
        name, err = errors[0]
        raise AssetError(f"error extracting {name!r} from {archive!r}: {err}") from err
    logger.debug(f"Extracted {len(names)} files from {archive} to {dest}")
    return len(names)


def prepare_font_dir(path: Optional[str] = None, archive: Optional[str] = None,
                     workers: int = EXTRACT_WORKERS) -> Tuple[str, Cleanup]:
    """Return ``(font_dir, cleanup)``.

    ``cleanup`` removes the temporary directory, if one was created; it is
    safe to call more than once.
    """
    if path:
        if not os.path.isdir(path):
            raise ConfigError(f"font directory {path!r} does not exist")
        return path, _noop

    archive = bundled_archive(archive)
    try:
        font_dir = tempfile.mkdtemp(prefix="csv2pdf-font-")
    except OSError as e:
        raise ConfigError(f"cannot create temp dir for fonts: {e}") from e

    def cleanup() -> None:
        shutil.rmtree(font_dir, ignore_errors=True)

    try:
        extract_archive(archive, font_dir, workers)
    except BaseException:
        cleanup()
        raise
    logger.info(f"Font files staged in {font_dir}")
    return font_dir, cleanup
