"""
Lightweight typing aliases used across the contract engine.

Provides minimal NewTypes and aliases to improve readability and static checks.
This module contains no runtime logic and is zero-IO.

Notes:
    - Intended for use in annotations across core and io modules.
    - Contract documents are duck-typed JSON; aliases stay deliberately broad.

Examples:
    >>> from orqui.core.typing import PageId, JsonDict
    >>> def page_key(p: PageId) -> str:
    ...     return f"page:{p}"
    >>> page_key(PageId("dashboard"))
    'page:dashboard'
"""

from __future__ import annotations

from typing import Any, NewType

__all__ = [
    "PageId",
    "Digest",
    "JsonDict",
]

PageId = NewType("PageId", str)
# "sha256:<64 hex>"
Digest = NewType("Digest", str)

JsonDict = dict[str, Any]
