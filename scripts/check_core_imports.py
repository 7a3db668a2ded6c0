#!/usr/bin/env python3
"""
Keep redmine_mcp.core transport-agnostic.

Scans every module under src/redmine_mcp/core/ (absolute and relative
imports) and exits non-zero if any of them reaches into an MCP server/
session module or into redmine_mcp.transports. mcp.types stays allowed:
the error codes live there.
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path
from typing import Iterator

REPO_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = REPO_ROOT / "src"
CORE_DIR = SRC_DIR / "redmine_mcp" / "core"

FORBIDDEN_PREFIXES = (
    "mcp.server",
    "mcp.shared",
    "mcp.client",
    "redmine_mcp.transports",
)


def is_forbidden(module: str) -> bool:
    return any(
        module == prefix or module.startswith(prefix + ".")
        for prefix in FORBIDDEN_PREFIXES
    )


def _package_of(path: Path) -> list[str]:
    parts = list(path.relative_to(SRC_DIR).with_suffix("").parts)
    return parts if parts[-1] == "__init__" else parts[:-1]


def imported_modules(path: Path) -> Iterator[str]:
    tree = ast.parse(path.read_text())
    package = [p for p in _package_of(path) if p != "__init__"]
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield alias.name
        elif isinstance(node, ast.ImportFrom):
            if node.level:
                base = package[: len(package) - (node.level - 1)]
                yield ".".join(base + ([node.module] if node.module else []))
            elif node.module:
                yield node.module


def scan_file(path: Path) -> list[str]:
    return [
        f"{path}: forbidden import '{mod}'"
        for mod in imported_modules(path)
        if is_forbidden(mod)
    ]


def main() -> int:
    violations: list[str] = []
    for py_file in sorted(CORE_DIR.rglob("*.py")):
        violations.extend(scan_file(py_file))

    for v in violations:
        print(v, file=sys.stderr)
    return 1 if violations else 0


if __name__ == "__main__":
    sys.exit(main())
