"""Template materialisation for create-tsx-app.

Quick usage::

    from create_tsx_app.scaffolder import ProjectGenerator

    generator = ProjectGenerator(config, templates_dir)
    written = await generator.generate()
"""

from .generator import ProjectGenerator, rewrite_package_json
from .guard import empty_dir, is_dir_empty, resolve_overwrite
from .manifest import COMMON_ASSETS, Asset, PlannedFile, build_file_plan, select_assets

__all__ = [
    "COMMON_ASSETS",
    "Asset",
    "PlannedFile",
    "ProjectGenerator",
    "build_file_plan",
    "empty_dir",
    "is_dir_empty",
    "resolve_overwrite",
    "rewrite_package_json",
    "select_assets",
]
