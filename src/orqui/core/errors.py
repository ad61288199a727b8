"""
Core exception types raised by envelope unwrapping, import parsing, and migrations.

Provides typed exceptions for the few core-domain failures that are allowed to
surface to a user:
- SchemaMismatch for envelopes whose schema tag is missing or unknown.
- MalformedInput for text that is not parseable structured data at all.
- HashMismatch for the opt-in import-time digest verification.
- VersionMismatch when no migration path exists between two schema versions.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - Token resolution, the override cascade, and registry normalization never
      raise; they degrade to "absent" or silently correct instead.

Examples:
    Catch an import failure and report the offending schema tag.

    >>> from orqui.core.errors import SchemaMismatch
    >>> try:
    ...     raise SchemaMismatch("unknown-schema")
    ... except SchemaMismatch as e:
    ...     bad = e.schema
    >>> bad
    'unknown-schema'
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "ContractError",
    "SchemaMismatch",
    "MalformedInput",
    "HashMismatch",
    "VersionMismatch",
]


class ContractError(ValueError):
    """Base class for contract import failures surfaced to the caller."""


class SchemaMismatch(ContractError):
    """
    Envelope schema tag is missing or does not name a known contract schema.

    Attributes:
        schema (Any): The offending schema value (None when the tag was absent).
    """

    def __init__(self, schema: Any, message: str | None = None) -> None:
        self.schema = schema
        if message is None:
            if schema is None:
                message = "contract envelope has no schema tag"
            else:
                message = f"unknown contract schema {schema!r}"
        super().__init__(message)


class MalformedInput(ContractError):
    """Input is not parseable structured data (e.g. invalid JSON text)."""


class HashMismatch(ContractError):
    """
    Envelope hash does not match the digest recomputed from its document.

    Attributes:
        expected (str | None): Hash recorded in the envelope.
        actual (str): Digest recomputed from the unwrapped document.
    """

    def __init__(self, expected: str | None, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"contract hash mismatch: envelope={expected!r} recomputed={actual!r}")


class VersionMismatch(RuntimeError):
    """Incompatible or unexpected schema version encountered."""
