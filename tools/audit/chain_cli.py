#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from jsonschema import Draft202012Validator

from infra.logging_cfg import setup_logging
from verifier.config import load_verifier_config
from verifier.contracts import Block, Status
from verifier.engine import Verifier
from verifier.errors import VerifierError

EXIT_OK = 0
EXIT_TAMPERED = 1
EXIT_MALFORMED = 2

BLOCK_ROW_SCHEMA: dict = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["index", "timestamp", "data", "previous_hash", "hash", "signature"],
    "properties": {
        "index": {"type": "integer", "minimum": 0},
        "timestamp": {"type": "string"},
        "data": {"type": "string"},
        "previous_hash": {"type": "string", "minLength": 1},
        "hash": {"type": "string"},
        "signature": {"type": "string"},
    },
}


class SchemaViolation(Exception):
    pass


class ChainFileError(Exception):
    pass


def _read_jsonl(path: Path) -> list[dict]:
    if not path.exists():
        return []
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ChainFileError(f"cannot read chain file {path}: {exc}") from exc
    out: list[dict] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            out.append(json.loads(line))
        except json.JSONDecodeError as exc:
            raise ChainFileError(f"chain file is not valid JSONL at line={lineno}: {exc}") from exc
    return out


def _write_jsonl(path: Path, rows: List[dict]) -> None:
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp, "w", encoding="utf-8") as f:
            for row in rows:
                f.write(json.dumps(row, ensure_ascii=False) + "\n")
        tmp.replace(path)
    except OSError as exc:
        raise ChainFileError(f"cannot write {path}: {exc}") from exc


def _load_blocks(path: Path) -> List[Block]:
    rows = _read_jsonl(path)
    v = Draft202012Validator(BLOCK_ROW_SCHEMA)
    blocks: List[Block] = []
    for idx, row in enumerate(rows):
        errors = sorted(v.iter_errors(row), key=lambda e: list(e.path))
        if errors:
            lines = [f"- {list(e.path)}: {e.message}" for e in errors[:5]]
            raise SchemaViolation(f"schema violation at row={idx}\n" + "\n".join(lines))
        blocks.append(Block.from_mapping(row))
    return blocks


def _build_verifier(args: argparse.Namespace) -> Verifier:
    return Verifier(load_verifier_config(args.config))


def cmd_append(args: argparse.Namespace) -> int:
    verifier = _build_verifier(args)
    path = Path(args.chain)
    blocks = _load_blocks(path)
    block = verifier.create_block(blocks[-1] if blocks else None, args.data)
    _write_jsonl(path, [b.to_dict() for b in blocks] + [block.to_dict()])
    print(f"OK: appended index={block.index} hash={block.hash}")
    return EXIT_OK


def cmd_inspect(args: argparse.Namespace) -> int:
    verifier = _build_verifier(args)
    blocks = _load_blocks(Path(args.chain))
    results = verifier.inspect(blocks)

    shown = list(reversed(results)) if args.newest_first else results
    for r in shown:
        print(f"{r.block.index:>6} {r.status.value:<9} {r.block.data}")

    if args.out:
        _write_jsonl(Path(args.out), [r.block.to_dict() for r in results])
    if args.report:
        _write_jsonl(Path(args.report), [r.to_dict() for r in results])

    summary = verifier.summarize(results)
    print("SUMMARY: " + " ".join(f"{k}={v}" for k, v in summary.items()))
    clean = all(r.status is Status.valid for r in results)
    return EXIT_OK if clean else EXIT_TAMPERED


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="chain-audit", description="Mint and inspect a JSONL block chain")
    ap.add_argument("--config", default=None, help="YAML config (else VERIFIER_CONFIG_PATH / VERIFIER_* env)")
    ap.add_argument("--log-level", default=None)
    sub = ap.add_subparsers(dest="command", required=True)

    p_append = sub.add_parser("append", help="mint a block on the chain tail")
    p_append.add_argument("--chain", required=True)
    p_append.add_argument("--data", required=True)
    p_append.set_defaults(func=cmd_append)

    p_inspect = sub.add_parser("inspect", help="classify and repair every block")
    p_inspect.add_argument("--chain", required=True)
    p_inspect.add_argument("--out", default=None, help="write the repaired chain here")
    p_inspect.add_argument("--report", default=None, help="write per-block status rows (JSONL) here")
    p_inspect.add_argument("--newest-first", action="store_true", help="display order only")
    p_inspect.set_defaults(func=cmd_inspect)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        setup_logging(level=args.log_level)
        return args.func(args)
    except SchemaViolation as exc:
        print(f"FAIL-CLOSED: {exc}", file=sys.stderr)
        return EXIT_MALFORMED
    except ChainFileError as exc:
        print(f"FAIL-CLOSED: {exc}", file=sys.stderr)
        return EXIT_MALFORMED
    except VerifierError as exc:
        print(f"FAIL-CLOSED: {exc}", file=sys.stderr)
        return EXIT_MALFORMED


if __name__ == "__main__":
    raise SystemExit(main())
