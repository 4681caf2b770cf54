"""Project and file-kind detection for Yii 1.1 style layouts."""

import logging
import os
from pathlib import PurePath

from yii_locator.core.actions import find_all_actions
from yii_locator.core.ports.filesystem import FileSystem
from yii_locator.core.source import SourceText
from yii_locator.core.views import split_workspace_parts
from yii_locator.models import ConventionConfig

logger = logging.getLogger(__name__)

_ENTRY_SCRIPT = "index.php"
_ENTRY_MARKERS = ("Yii", "framework")


def is_yii_project(workspace_root: str, *, config: ConventionConfig, fs: FileSystem) -> bool:
    if fs.exists(os.path.join(workspace_root, config.framework_dir, "Yii.php")):
        return True

    protected = os.path.join(workspace_root, config.protected_dir)
    if not fs.exists(protected):
        return False

    entry_script = os.path.join(workspace_root, _ENTRY_SCRIPT)
    if fs.exists(entry_script):
        try:
            content = fs.read_text(entry_script)
        except OSError:
            logger.warning("Could not read %s", entry_script)
        else:
            if any(marker in content for marker in _ENTRY_MARKERS):
                return True

    if fs.exists(os.path.join(protected, "config", "main.php")):
        return True
    return fs.exists(os.path.join(protected, config.controllers_dir))


def is_controller_file(path: str, workspace_root: str | None, config: ConventionConfig) -> bool:
    if not path.endswith(config.view_extension):
        return False
    if PurePath(path).stem.endswith(config.controller_suffix):
        return True
    _, parts = split_workspace_parts(path, workspace_root)
    return config.controllers_dir in parts[:-1]


def is_view_file(path: str, workspace_root: str | None, config: ConventionConfig) -> bool:
    if not path.endswith(config.view_extension):
        return False
    _, parts = split_workspace_parts(path, workspace_root)
    return config.views_dir in parts[:-1]


def find_controller_files(workspace_root: str, *, config: ConventionConfig, fs: FileSystem) -> list[str]:
    """Controller class files of the application and of every module."""
    suffix = config.controller_suffix + config.view_extension
    roots = [config.controllers_directory(workspace_root)]
    modules_root = os.path.join(workspace_root, config.protected_dir, config.modules_dir)
    module_names = sorted(
        {PurePath(os.path.relpath(p, modules_root)).parts[0] for p in fs.iter_files(modules_root, suffix)}
    )
    roots.extend(config.controllers_directory(workspace_root, name) for name in module_names)

    files: list[str] = []
    for root in roots:
        files.extend(fs.iter_files(root, suffix))
    return files


def count_actions(workspace_root: str, *, config: ConventionConfig, fs: FileSystem) -> int:
    total = 0
    for path in find_controller_files(workspace_root, config=config, fs=fs):
        try:
            total += len(find_all_actions(SourceText(fs.read_text(path)), config))
        except OSError:
            logger.warning("Could not read controller %s", path)
    return total
