"""
Command line for the Orqui contract engine.

Commands
- hash FILE             Print the content digest of a document or envelope body.
- export FILE           Wrap a document in an envelope and save it.
- import FILE           Unwrap, migrate, and normalize an envelope into the draft store.
- resolve FILE --page   Print the page-effective layout structure.
- tokens FILE           Show a layout's design tokens as a table or a CSS :root block.

Exit codes: 0 success, 1 contract/IO/settings failure, 2 usage error.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Mapping
from typing import Any

import polars as pl

from .core.cascade import resolve_page_layout
from .core.envelope import LEGACY_META_KEY, UnwrappedContract, unwrap, validate_structure, wrap
from .core.errors import ContractError, VersionMismatch
from .core.grammar import ContractSchema, schema_from_value
from .core.hashing import digest
from .core.migrations import migrate
from .core.registry import component_names, normalize
from .core.serde import json_dumps_pretty, json_loads
from .core.tokens import build_root_block
from .core.versioning import SchemaVersion, is_compatible
from .io.catalog import token_frame
from .io.config import OrquiSettings
from .io.errors import IoError
from .io.fs import write_text_atomic
from .io.store import ContractRepository, FileStore

logger = logging.getLogger("orqui.cli")


def _print_head(df: pl.DataFrame, n: int = 20) -> None:
    """Print the first n rows of a token frame.

    Args:
        df: Frame built by orqui.io.catalog.token_frame.
        n: Number of rows to print.
    """
    with pl.Config(tbl_rows=n, fmt_str_lengths=60):
        print(df.head(n))


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", type=str, default=None, help="Explicit TOML settings file.")


def _setup(args: argparse.Namespace) -> OrquiSettings:
    settings = OrquiSettings.load(args.config)
    logging.basicConfig(level=settings.log_level, format="[%(levelname)s] %(name)s: %(message)s")
    return settings


def _read_json(path: str) -> Any:
    with open(path, "rb") as fh:
        return json_loads(fh.read())


def _is_envelope(obj: Any) -> bool:
    return isinstance(obj, Mapping) and ("schema" in obj or isinstance(obj.get(LEGACY_META_KEY), Mapping))


def _load(path: str, *, verify: bool = False) -> tuple[dict[str, Any], UnwrappedContract | None]:
    """Return (document, unwrapped) for an envelope, or (document, None) for a bare document."""
    obj = _read_json(path)
    if _is_envelope(obj):
        contract = unwrap(obj, verify=verify)
        return contract.document, contract
    if not isinstance(obj, Mapping):
        raise ContractError(f"{path}: expected a JSON object")
    return dict(obj), None


def _warn(warnings: list[Any]) -> None:
    for w in warnings:
        logger.warning("%s", w)


def _cmd_hash(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="hash", description="Print the sha256 digest of a contract body.")
    p.add_argument("file", type=str, help="Document or envelope JSON.")
    p.add_argument("--verify", action="store_true", help="Fail if an envelope's recorded hash differs.")
    _add_common(p)
    args = p.parse_args(argv)
    _setup(args)

    try:
        document, contract = _load(args.file, verify=args.verify)
    except (ContractError, OSError) as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1
    if args.verify and contract is None:
        print(f"[ERROR] {args.file}: --verify needs a contract envelope", file=sys.stderr)
        return 1
    print(digest(document))
    return 0


def _cmd_export(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="export", description="Wrap a document in a contract envelope.")
    p.add_argument("file", type=str, help="Editable document JSON.")
    p.add_argument(
        "--schema",
        type=str,
        default=ContractSchema.LAYOUT_CONTRACT.value,
        choices=[s.value for s in ContractSchema],
        help="Contract schema of the document.",
    )
    p.add_argument("--version", type=str, default=None, help="Version to stamp (default from settings).")
    p.add_argument("--out", type=str, default=None, help="Write here instead of the contracts directory.")
    _add_common(p)
    args = p.parse_args(argv)
    settings = _setup(args)

    schema = schema_from_value(args.schema)
    try:
        document, _ = _load(args.file)
        if schema is ContractSchema.UI_REGISTRY_CONTRACT:
            document = normalize(document)
        _warn(validate_structure(document, schema))
        envelope = wrap(document, schema, args.version or settings.version_for(schema))
    except (ContractError, ValueError, OSError) as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    if args.out:
        try:
            write_text_atomic(args.out, json_dumps_pretty(envelope, indent=settings.indent))
        except IoError as exc:
            print(f"[ERROR] {exc}", file=sys.stderr)
            return 1
        target = args.out
    else:
        result = ContractRepository(settings).save_contract(envelope)
        if not result.ok:
            print(f"[ERROR] save failed: {result.error}", file=sys.stderr)
            return 1
        target = result.path
    print(f"[INFO] Wrote {schema.value} {envelope['version']} to {target}")
    print(envelope["hash"])
    return 0


def _cmd_import(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="import", description="Import a contract envelope into the draft store.")
    p.add_argument("file", type=str, help="Contract envelope JSON.")
    p.add_argument("--verify", action="store_true", help="Recompute and compare the envelope hash.")
    p.add_argument("--dry-run", action="store_true", help="Do not write the draft.")
    _add_common(p)
    args = p.parse_args(argv)
    settings = _setup(args)

    try:
        contract = unwrap(_read_json(args.file), verify=args.verify or settings.verify_hash_on_import)
    except (ContractError, OSError) as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    schema = contract.schema
    document = contract.document
    if contract.meta.version:
        try:
            version = SchemaVersion.parse(contract.meta.version)
            if not is_compatible(version, schema):
                result = migrate(document, schema, version)
                for line in result.log:
                    logger.info("migration: %s", line)
                document = result.document
        except (VersionMismatch, ValueError) as exc:
            print(f"[ERROR] {exc}", file=sys.stderr)
            return 1
    if schema is ContractSchema.UI_REGISTRY_CONTRACT:
        document = normalize(document)
    _warn(validate_structure(document, schema))

    if not args.dry_run:
        try:
            FileStore(settings.drafts_dir, indent=settings.indent).set(schema.value, document)
        except IoError as exc:
            print(f"[ERROR] {exc}", file=sys.stderr)
            return 1

    print(f"[INFO] Imported {schema.value} {contract.meta.version or '(unversioned)'}")
    if schema is ContractSchema.UI_REGISTRY_CONTRACT:
        print(f"[INFO] components: {', '.join(component_names(document)) or '(none)'}")
    return 0


def _cmd_resolve(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="resolve", description="Print the effective layout for a page.")
    p.add_argument("file", type=str, help="Layout document or envelope JSON.")
    p.add_argument("--page", type=str, default=None, help="Page id under structure.pages.")
    _add_common(p)
    args = p.parse_args(argv)
    settings = _setup(args)

    try:
        document, _ = _load(args.file)
    except (ContractError, OSError) as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1
    resolved = resolve_page_layout(document, args.page)
    print(json_dumps_pretty(resolved.get("structure", {}), indent=settings.indent), end="")
    return 0


def _cmd_tokens(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="tokens", description="Show a layout's design tokens.")
    p.add_argument("file", type=str, help="Layout document or envelope JSON.")
    p.add_argument("--css", action="store_true", help="Print a CSS :root block instead of a table.")
    p.add_argument("--n", type=int, default=20, help="Rows to display.")
    _add_common(p)
    args = p.parse_args(argv)
    _setup(args)

    try:
        document, _ = _load(args.file)
    except (ContractError, OSError) as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1
    tokens = document.get("tokens")
    if args.css:
        print(build_root_block(tokens))
    else:
        _print_head(token_frame(tokens), n=args.n)
    return 0


_COMMANDS = {
    "hash": _cmd_hash,
    "export": _cmd_export,
    "import": _cmd_import,
    "resolve": _cmd_resolve,
    "tokens": _cmd_tokens,
}


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="orqui", description="Layout/UI registry contract utilities.")
    sub = p.add_subparsers(dest="cmd", required=True)
    for name in _COMMANDS:
        sub.add_parser(name)
    return p


def main(argv: list[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        build_argparser().print_help()
        return
    cmd, rest = argv[0], argv[1:]
    handler = _COMMANDS.get(cmd)
    if handler is None:
        print(f"Unknown command: {cmd}", file=sys.stderr)
        code = 2
    else:
        try:
            code = handler(rest)
        except IoError as exc:
            print(f"[ERROR] {exc}", file=sys.stderr)
            code = 1
    raise SystemExit(code)


if __name__ == "__main__":
    main()
