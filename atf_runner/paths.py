"""Helpers for work directory resolution and path normalization."""

from __future__ import annotations

import os
import posixpath
import sys
from datetime import datetime
from pathlib import Path
from typing import Mapping

from atf_common.errors import RunnerIOError

WORKDIR_ROOT = "atfrunner"
STAMP_FORMAT = "%Y%m%d_%H%M%S"


def is_windows(platform: str | None = None) -> bool:
    return (platform or sys.platform).startswith(("win", "cygwin"))


def to_slash(path: str | os.PathLike[str], platform: str | None = None) -> str:
    """Return ``path`` using forward slashes as separators."""
    text = os.fspath(path)
    if is_windows(platform):
        return text.replace("\\", "/")
    if os.sep != "/":
        return text.replace(os.sep, "/")
    return text


def now_file_stamp(now: datetime | None = None) -> str:
    """Timestamp safe for use inside a file name."""
    return (now or datetime.now()).strftime(STAMP_FORMAT)


def home_directory(
    environ: Mapping[str, str] | None = None, platform: str | None = None
) -> str:
    """Home directory following the platform convention."""
    env = os.environ if environ is None else environ
    if is_windows(platform):
        return env.get("USERPROFILE", "")
    return env.get("HOME", "")


def resolve_workdir(
    basedir: str | None,
    test_set_name: str,
    *,
    now: datetime | None = None,
    environ: Mapping[str, str] | None = None,
    platform: str | None = None,
) -> str:
    """Return the run work directory.

    An explicit ``basedir`` wins. Otherwise the directory is
    ``<home>/atfrunner/<test_set_name>_<timestamp>``.
    """
    if not basedir:
        home = to_slash(home_directory(environ, platform), platform)
        basedir = posixpath.join(
            home, WORKDIR_ROOT, f"{test_set_name}_{now_file_stamp(now)}"
        )
    return to_slash(basedir, platform)


def ensure_workdir(workdir: str) -> Path:
    """Create the work directory (and parents) if missing."""
    path = Path(workdir)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise RunnerIOError(
            f"Working directory {workdir} could not be created",
            context={"workdir": workdir},
            cause=exc,
        ) from exc
    if not path.is_dir():
        raise RunnerIOError(
            f"Working directory {workdir} is not a directory",
            context={"workdir": workdir},
        )
    return path
