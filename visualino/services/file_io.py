"""File read/write helpers for workspace documents and the temp sketch."""

from __future__ import annotations

import locale
import os
from pathlib import Path

from visualino.errors import OpenFailedError, WriteFailedError


def local_encoding() -> str:
    return locale.getpreferredencoding(False) or "utf-8"


def read_document(path: str) -> str:
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise OpenFailedError(f"Couldn't open file to read content: {path}.", path=path) from exc
    return raw.decode("utf-8", errors="replace")


def write_document(path: str, text: str) -> None:
    try:
        with open(path, "wb") as handle:
            handle.write(str(text or "").encode("utf-8"))
    except OSError as exc:
        raise WriteFailedError(f"Couldn't open file to save content: {path}.", path=path) from exc


def ensure_directory(path: str) -> None:
    try:
        Path(path).mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise WriteFailedError(f"Couldn't create directory: {path} ({exc}).", path=path) from exc


def recreate_file(path: str) -> None:
    """Remove any previous file at path and leave an empty one in its place."""
    target = Path(path)
    try:
        if target.exists() or target.is_symlink():
            os.unlink(target)
        target.touch()
    except OSError as exc:
        raise WriteFailedError(f"Couldn't create file: {path} ({exc}).", path=path) from exc


def write_local_text(path: str, text: str) -> None:
    data = str(text or "").encode(local_encoding(), errors="replace")
    try:
        with open(path, "wb") as handle:
            handle.write(data)
    except OSError as exc:
        raise WriteFailedError(f"Couldn't write file: {path} ({exc}).", path=path) from exc
