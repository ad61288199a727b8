"""
Exceptions raised by orqui.io.

Contract-level failures (unknown schema tag, unparseable JSON, hash mismatch)
stay in orqui.core.errors; this module only covers storage and configuration.

- IoConfigError: an explicitly requested settings file is unreadable or invalid TOML.
- IoReadError: a stored draft or contract file exists but cannot be decoded.
- IoWriteError: the tmp → fsync → replace write path failed.
"""

from __future__ import annotations


class IoError(Exception):
    """Common base for storage and configuration failures."""


class IoConfigError(IoError):
    """Settings could not be loaded from an explicitly given file."""


class IoReadError(IoError):
    """A stored value exists but is not readable JSON."""


class IoWriteError(IoError):
    """
    An atomic write did not complete.

    Notes:
        The destination keeps its previous content; the tmp file is cleaned up.
    """
