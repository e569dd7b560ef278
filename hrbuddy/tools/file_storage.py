"""
Resume and attachment storage on the local filesystem.

Files live under ``<upload_dir>/applications/<application_id>/``.
"""

import re
import time
from pathlib import Path

from hrbuddy.config import settings

UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _root() -> Path:
    return Path(settings.upload_dir).resolve()


def _application_dir(application_id: str) -> Path:
    return _root() / "applications" / (UNSAFE_CHARS.sub("_", application_id).lstrip(".") or "_")


def _resolve(storage_path: str) -> Path:
    """Resolve a stored path, refusing anything outside the upload directory."""
    path = Path(storage_path).resolve()
    if not path.is_relative_to(_root()):
        raise ValueError(f"Path outside upload directory: {storage_path}")
    return path


def save_file(content: bytes, file_name: str, application_id: str) -> str:
    """
    Save a file for an application.

    Args:
        content: File bytes
        file_name: Original file name
        application_id: Application the file belongs to

    Returns:
        Storage path of the saved file
    """
    directory = _application_dir(application_id)
    directory.mkdir(parents=True, exist_ok=True)

    safe_name = UNSAFE_CHARS.sub("_", Path(file_name).name) or "file"
    path = directory / f"{int(time.time() * 1000)}-{safe_name}"
    path.write_bytes(content)
    return str(path)


def read_file(storage_path: str) -> bytes:
    return _resolve(storage_path).read_bytes()


def delete_file(storage_path: str) -> None:
    _resolve(storage_path).unlink(missing_ok=True)


def list_application_files(application_id: str) -> list[str]:
    """List stored file paths for an application."""
    directory = _application_dir(application_id)
    if not directory.exists():
        return []
    return sorted(str(p) for p in directory.iterdir() if p.is_file())

