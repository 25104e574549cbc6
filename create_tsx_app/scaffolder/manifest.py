"""Declarative description of the template assets.

Each shared asset lists the feature toggles that must be on (``requires``)
and those that must be off (``excludes``) for it to be materialised.  A single
pure function, :func:`select_assets`, evaluates the table, so the set of
files produced for any combination of toggles can be enumerated in tests.

Template sources cannot portably contain dot-files, so they are stored with a
leading underscore and renamed on the destination side.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from ..config import FeatureToggles

# Files inside a template source that are never copied verbatim.
PACKAGE_MANIFEST = "package.json"
README_FILE = "README.md"
RESERVED_FILES = frozenset({PACKAGE_MANIFEST, README_FILE})

COMMON_DIR = "common"


@dataclass(frozen=True)
class Asset:
    """A template file gated by feature toggles."""

    source: str
    destination: str
    requires: frozenset[str] = field(default_factory=frozenset)
    excludes: frozenset[str] = field(default_factory=frozenset)

    def applies(self, enabled: frozenset[str]) -> bool:
        return self.requires <= enabled and not (self.excludes & enabled)


@dataclass(frozen=True)
class PlannedFile:
    """One entry of the file plan: copy ``source`` to ``destination``."""

    source: Path
    destination: Path


COMMON_ASSETS: tuple[Asset, ...] = (
    Asset("_gitignore", ".gitignore", requires=frozenset({"git"})),
    Asset(
        "_eslint.config.js",
        "eslint.config.js",
        requires=frozenset({"lint"}),
        excludes=frozenset({"format"}),
    ),
    Asset(
        "_eslint.prettier.config.js",
        "eslint.config.js",
        requires=frozenset({"lint", "format"}),
    ),
    Asset("_prettierrc.json", ".prettierrc.json", requires=frozenset({"format"})),
    Asset("_prettierignore", ".prettierignore", requires=frozenset({"format"})),
    Asset("_env", ".env", requires=frozenset({"env"})),
    Asset("tsconfig.json", "tsconfig.json"),
)

# Source name -> destination name, for every asset in the table.
RENAME_MAP: dict[str, str] = {
    asset.source: asset.destination
    for asset in COMMON_ASSETS
    if asset.source != asset.destination
}

_ASSETS_BY_SOURCE: dict[str, Asset] = {asset.source: asset for asset in COMMON_ASSETS}


def destination_name(source_name: str) -> str:
    """Return the on-disk name for a template entry called *source_name*."""
    return RENAME_MAP.get(source_name, source_name)


def select_assets(
    assets: Iterable[Asset], features: FeatureToggles
) -> list[Asset]:
    """Return the assets enabled by *features*, in table order.

    At most one asset is kept per destination; the table is built so that
    conflicting variants (plain vs. prettier-aware ESLint config) exclude each
    other, and this is enforced here as well.
    """
    enabled = features.enabled()
    selected: list[Asset] = []
    taken: set[str] = set()
    for asset in assets:
        if not asset.applies(enabled) or asset.destination in taken:
            continue
        taken.add(asset.destination)
        selected.append(asset)
    return selected


def _entries(directory: Path) -> list[str]:
    return sorted(
        entry.name for entry in directory.iterdir() if entry.name not in RESERVED_FILES
    )


def build_file_plan(
    template_dir: Path,
    common_dir: Path,
    root: Path,
    features: FeatureToggles,
) -> list[PlannedFile]:
    """Compute the ordered ``(source, destination)`` pairs for a project.

    Template-specific entries come first, followed by the shared entries that
    survive :func:`select_assets`.  Shared entries missing from the asset
    table are copied unconditionally.  The reserved ``package.json`` and
    ``README.md`` are handled separately by the generator.
    """
    plan = [
        PlannedFile(template_dir / name, root / destination_name(name))
        for name in _entries(template_dir)
    ]

    wanted = {asset.source for asset in select_assets(COMMON_ASSETS, features)}
    for name in _entries(common_dir):
        if name in _ASSETS_BY_SOURCE and name not in wanted:
            continue
        plan.append(PlannedFile(common_dir / name, root / destination_name(name)))

    return plan
