"""Main scaffolding orchestrator.

Takes a resolved ``ScaffoldConfig`` and materialises the selected template
into the project directory: clears the directory if asked to, copies the
filtered template tree, rewrites ``package.json`` and renders the README.
"""

from __future__ import annotations

import asyncio
import json
import shutil
from pathlib import Path
from typing import Any

from ..config import FeatureToggles, OverwriteMode, ScaffoldConfig, TemplateId
from ..errors import ConfigurationError, CopyError
from .guard import empty_dir
from .manifest import (
    COMMON_DIR,
    PACKAGE_MANIFEST,
    README_FILE,
    PlannedFile,
    build_file_plan,
)

README_PLACEHOLDER = "{{PROJECT_NAME}}"

# Scripts appended to package.json for each enabled toggle, in this order.
FEATURE_SCRIPTS: dict[str, dict[str, str]] = {
    "lint": {
        "lint": "eslint src/**/*.ts",
        "lint:fix": "eslint src/**/*.ts --fix",
    },
    "format": {
        "format": "prettier --write src/**/*.ts",
        "format:check": "prettier --check src/**/*.ts",
    },
    "env": {
        "dev": "tsx watch -r dotenv/config src/index.ts",
        "start": "tsx -r dotenv/config src/index.ts",
    },
}


# ---------------------------------------------------------------------------
# Template sources
# ---------------------------------------------------------------------------


def resolve_template_sources(
    templates_dir: Path, template: TemplateId
) -> tuple[Path, Path]:
    """Return the ``(template_dir, common_dir)`` pair for *template*.

    Raises:
        ConfigurationError: If either directory or the template's
            ``package.json`` is missing from the installation.
    """
    template_dir = Path(templates_dir) / template.value
    common_dir = Path(templates_dir) / COMMON_DIR

    if not template_dir.is_dir() or not (template_dir / PACKAGE_MANIFEST).is_file():
        raise ConfigurationError(
            f'Template "{template.value}" not found.',
            hint="Please reinstall create-tsx-app.",
        )
    if not common_dir.is_dir():
        raise ConfigurationError(
            "Common template files not found.",
            hint="Please reinstall create-tsx-app.",
        )
    return template_dir, common_dir


# ---------------------------------------------------------------------------
# Copying
# ---------------------------------------------------------------------------


def copy_entry(source: Path, destination: Path) -> None:
    """Copy a file byte-for-byte, or a directory recursively.

    Raises:
        CopyError: Naming the failing entry.  Entries copied before this one
            are left in place.
    """
    try:
        if source.is_dir():
            shutil.copytree(source, destination, dirs_exist_ok=True)
        else:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, destination)
    except (OSError, shutil.Error) as exc:
        raise CopyError(source.name, str(exc)) from exc


# ---------------------------------------------------------------------------
# package.json / README
# ---------------------------------------------------------------------------


def rewrite_package_json(
    data: dict[str, Any], package_name: str, features: FeatureToggles
) -> dict[str, Any]:
    """Return a copy of *data* with the project name and feature scripts set.

    Existing keys keep their position; new scripts are appended after the
    template's own scripts, overriding same-named ones in place.
    """
    result = dict(data)
    result["name"] = package_name

    scripts = dict(result.get("scripts") or {})
    for feature in FeatureToggles.ORDER:
        if getattr(features, feature) and feature in FEATURE_SCRIPTS:
            scripts.update(FEATURE_SCRIPTS[feature])
    if scripts:
        result["scripts"] = scripts
    return result


def dump_package_json(data: dict[str, Any]) -> str:
    """Serialise *data* the way npm writes ``package.json``."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def render_readme(text: str, package_name: str) -> str:
    """Replace every README placeholder with *package_name*."""
    return text.replace(README_PLACEHOLDER, package_name)


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Materialise a template into the project directory.

    Usage::

        generator = ProjectGenerator(config, templates_dir)
        written = await generator.generate()
    """

    def __init__(self, config: ScaffoldConfig, templates_dir: Path) -> None:
        self.config = config
        self.template_dir, self.common_dir = resolve_template_sources(
            templates_dir, config.template
        )

    # -- Public API --------------------------------------------------------

    def plan(self) -> list[PlannedFile]:
        """Return the file plan for the configured template and toggles."""
        return build_file_plan(
            self.template_dir, self.common_dir, self.config.root, self.config.features
        )

    async def generate(self) -> list[Path]:
        """Write the project and return the paths written, in order.

        Raises:
            CopyError: If any template entry fails to copy, or ``package.json``
                or the README cannot be written.
        """
        root = self.config.root
        await asyncio.to_thread(self._prepare_root, root)

        written: list[Path] = []
        for planned in self.plan():
            await asyncio.to_thread(copy_entry, planned.source, planned.destination)
            written.append(planned.destination)

        written.append(await asyncio.to_thread(self._write_package_json))

        readme = await asyncio.to_thread(self._write_readme)
        if readme is not None:
            written.append(readme)

        return written

    # -- Steps -------------------------------------------------------------

    def _prepare_root(self, root: Path) -> None:
        if self.config.overwrite is OverwriteMode.REMOVE:
            empty_dir(root)
        root.mkdir(parents=True, exist_ok=True)

    def _write_package_json(self) -> Path:
        source = self.template_dir / PACKAGE_MANIFEST
        target = self.config.root / PACKAGE_MANIFEST
        try:
            data = json.loads(source.read_text(encoding="utf-8"))
            pkg = rewrite_package_json(data, self.config.package_name, self.config.features)
            target.write_text(dump_package_json(pkg), encoding="utf-8")
        except (OSError, ValueError) as exc:
            raise CopyError(PACKAGE_MANIFEST, str(exc)) from exc
        return target

    def _write_readme(self) -> Path | None:
        for directory in (self.template_dir, self.common_dir):
            source = directory / README_FILE
            if source.is_file():
                target = self.config.root / README_FILE
                try:
                    text = source.read_text(encoding="utf-8")
                    target.write_text(
                        render_readme(text, self.config.package_name), encoding="utf-8"
                    )
                except OSError as exc:
                    raise CopyError(README_FILE, str(exc)) from exc
                return target
        return None
