#!/usr/bin/env python3
"""Keep requirements.txt and package imports consistent with pyproject.toml.

``requirements.txt`` pins the runtime profile (base dependencies plus the
``cli`` and ``server`` extras) scanned by CI. Every third-party module
imported under ``src/image_assemblifier`` must come from that profile.

Usage::

    uv run python scripts/sync_dependencies.py          # check only
    uv run python scripts/sync_dependencies.py --write  # regenerate requirements.txt
"""

from __future__ import annotations

import argparse
import ast
import re
import sys
import tomllib
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
PACKAGE = "image_assemblifier"
RUNTIME_EXTRAS = ("cli", "server")
# Import names whose distribution is published under another name.
IMPORT_TO_DISTRIBUTION = {
    "PIL": "pillow",
    "multipart": "python-multipart",
}
_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*")


def normalize_name(name: str) -> str:
    return re.sub(r"[-_.]+", "-", name).lower()


def runtime_requirements(root: Path = ROOT) -> list[str]:
    """Return the sorted requirement strings of the runtime profile."""
    pyproject = tomllib.loads((root / "pyproject.toml").read_text(encoding="utf-8"))
    project = pyproject["project"]
    reqs = set(project.get("dependencies", []))
    optional = project.get("optional-dependencies", {})
    for extra in RUNTIME_EXTRAS:
        reqs.update(optional.get(extra, []))
    return sorted(req.strip() for req in reqs if req.strip())


def render_requirements(reqs: list[str]) -> str:
    header = [
        f"# Generated from pyproject.toml (base + extras: {','.join(RUNTIME_EXTRAS)})",
        "# Do not edit manually; run: uv run python scripts/sync_dependencies.py --write",
        "",
    ]
    return "\n".join(header) + "\n".join(reqs) + "\n"


def third_party_imports(package_dir: Path) -> dict[str, set[Path]]:
    """Map each non-stdlib top-level import under ``package_dir`` to its files."""
    found: dict[str, set[Path]] = {}
    for path in sorted(package_dir.rglob("*.py")):
        tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                names = [alias.name for alias in node.names]
            elif isinstance(node, ast.ImportFrom) and node.level == 0 and node.module:
                names = [node.module]
            else:
                continue
            for name in names:
                top = name.split(".", 1)[0]
                if top == PACKAGE or top in sys.stdlib_module_names:
                    continue
                found.setdefault(top, set()).add(path)
    return found


def find_problems(root: Path = ROOT) -> list[str]:
    """Return human readable dependency drift problems, empty when in sync."""
    problems: list[str] = []
    expected = runtime_requirements(root)

    actual: set[str] = set()
    for line in (root / "requirements.txt").read_text(encoding="utf-8").splitlines():
        entry = line.split("#", 1)[0].strip()
        if entry:
            actual.add(entry)
    for entry in sorted(set(expected) - actual):
        problems.append(f"missing from requirements.txt: {entry}")
    for entry in sorted(actual - set(expected)):
        problems.append(f"unexpected in requirements.txt: {entry}")

    declared = {
        normalize_name(match.group(0))
        for req in expected
        if (match := _NAME_RE.match(req)) is not None
    }
    imports = third_party_imports(root / "src" / PACKAGE)
    for module, paths in sorted(imports.items()):
        distribution = normalize_name(IMPORT_TO_DISTRIBUTION.get(module, module))
        if distribution not in declared:
            where = ", ".join(str(path.relative_to(root)) for path in sorted(paths))
            problems.append(
                f"'{module}' is imported ({where}) but '{distribution}' is not declared"
            )
    return problems


def main() -> None:
    """Check (or regenerate) dependency declarations."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--write", action="store_true", help="Regenerate requirements.txt first."
    )
    args = parser.parse_args()

    if args.write:
        reqs = runtime_requirements()
        (ROOT / "requirements.txt").write_text(
            render_requirements(reqs), encoding="utf-8"
        )
        print(f"Wrote {len(reqs)} requirements to requirements.txt")

    problems = find_problems()
    if problems:
        raise SystemExit(
            "Dependency declarations are out of sync:\n"
            + "\n".join(f"- {problem}" for problem in problems)
        )
    print("Dependency sync check passed.")


if __name__ == "__main__":
    main()
