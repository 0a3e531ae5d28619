"""Discovery and import of ``component.py`` declaration modules."""

from __future__ import annotations

import importlib
from pathlib import Path

_DISCOVERY_ROOTS = ("services", "resources")


def discover_component_modules(repo_root: Path | None = None) -> tuple[str, ...]:
    """Return dotted import paths for every manifest-declaring ``component.py``."""
    root = (repo_root or default_repo_root()).resolve()
    modules: list[str] = []
    for discovery_root in _DISCOVERY_ROOTS:
        package_root = root / discovery_root
        if not package_root.exists():
            continue
        for component_file in sorted(package_root.rglob("component.py")):
            rel_component = component_file.relative_to(root)
            if "tests" in rel_component.parts:
                continue
            source = component_file.read_text(encoding="utf-8")
            if "MANIFEST" not in source or "register_component(" not in source:
                continue
            modules.append(".".join(rel_component.with_suffix("").parts))
    return tuple(modules)


def import_registered_component_modules(
    repo_root: Path | None = None,
) -> tuple[str, ...]:
    """Import every discovered component module so its manifest registers."""
    imported: list[str] = []
    for module in discover_component_modules(repo_root=repo_root):
        importlib.import_module(module)
        imported.append(module)
    return tuple(imported)


def default_repo_root() -> Path:
    """Return the repository root that holds ``services/`` and ``resources/``."""
    return Path(__file__).resolve().parents[2]
