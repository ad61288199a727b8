"""
Atomic file writes for the draft store and contract repository.

Every persisted JSON file goes through `write_text_atomic`: the text is written
to a hidden sibling tmp file, fsynced, then moved over the destination with
os.replace, so readers see either the previous file or the new one.

Notes
- The tmp file lives in the destination directory; os.replace is only atomic
  within one filesystem.
- Synchronous; concurrent writers to the same key are last-writer-wins.
"""

from __future__ import annotations

import os
import uuid

from .errors import IoWriteError

__all__ = ["exists", "write_text_atomic"]


def exists(path: str) -> bool:
    return os.path.exists(path)


def _tmp_sibling(path: str) -> str:
    parent = os.path.dirname(path) or "."
    return os.path.join(parent, f".{os.path.basename(path)}.{uuid.uuid4().hex}.tmp")


def write_text_atomic(path: str, text: str) -> None:
    """
    Replace ``path`` with UTF-8 ``text`` atomically.

    Args:
        path (str): Destination file; missing parent directories are created.
        text (str): Full file content.

    Raises:
        IoWriteError: On any OS failure. A leftover tmp file is removed.
    """
    tmp = _tmp_sibling(path)
    try:
        os.makedirs(os.path.dirname(tmp), exist_ok=True)
        with open(tmp, "wb") as fh:
            fh.write(text.encode("utf-8"))
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp, path)
    except OSError as exc:
        if exists(tmp):
            try:
                os.remove(tmp)
            except OSError:
                pass
        raise IoWriteError(f"failed to write {path!r}: {exc}") from exc
