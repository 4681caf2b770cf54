"""Locate the controller class and action that render a given view file."""

from __future__ import annotations

import logging
import os
import re
from pathlib import PurePath

from yii_locator.core.actions import action_body, find_all_actions
from yii_locator.core.ports.filesystem import FileSystem
from yii_locator.core.result import ErrorKind, Outcome
from yii_locator.core.source import SourceText
from yii_locator.core.views import (
    find_render_calls,
    last_segment_index,
    module_from_path,
    normalize_path,
    split_workspace_parts,
)
from yii_locator.models import ActionRecord, ConventionConfig, ControllerMatch

logger = logging.getLogger(__name__)

_CAPITAL = re.compile(r"(?<!^)([A-Z])")


def controller_class_name(short_name: str, lower_first: bool = False) -> str:
    """``sow_info`` -> ``SowInfo`` (or ``sowInfo`` with ``lower_first``).

    Letters after the first of each part keep their case, so ``sowInfo`` gives
    ``SowInfo`` rather than ``Sowinfo``; Yii derives class names the same way.
    """
    name = "".join(part[:1].upper() + part[1:] for part in re.split(r"[-_]", short_name) if part)
    if lower_first:
        return name[:1].lower() + name[1:]
    return name


def find_controller_file(
    controllers_dir: str, short_name: str, *, config: ConventionConfig, fs: FileSystem
) -> str | None:
    """First existing controller file for ``short_name``, trying the lower-camel spelling second."""
    suffix = config.controller_suffix + config.view_extension
    for lower_first in (False, True):
        candidate = os.path.join(controllers_dir, controller_class_name(short_name, lower_first) + suffix)
        if fs.exists(candidate):
            return candidate
        logger.debug("Controller candidate missing: %s", candidate)
    return None


def _strip_prefix(action_name: str, config: ConventionConfig) -> str:
    return action_name[len(config.action_prefix) :] if action_name.startswith(config.action_prefix) else action_name


def matches_view_name(action_name: str, view_name: str, config: ConventionConfig) -> bool:
    """Naming-convention match between an action and a view base name.

    ``actionShowAll`` matches ``showall``/``showAll`` verbatim (case-insensitive)
    and ``show_all`` via its snake_case form.
    """
    stripped = _strip_prefix(action_name, config)
    wanted = view_name.lower()
    if stripped.lower() == wanted:
        return True
    return _CAPITAL.sub(r"_\1", stripped).lower() == wanted


def _renders_view(body: str, view_name: str) -> bool:
    candidates = {view_name, f"_{view_name}"}
    return any(call.reference.raw_name in candidates for call in find_render_calls(body))


def find_action_for_view(doc: SourceText, view_name: str, config: ConventionConfig) -> str | None:
    """Name of the action that renders ``view_name``, falling back to the naming convention."""
    actions: list[ActionRecord] = find_all_actions(doc, config)
    for record in actions:
        if _renders_view(action_body(doc, record), view_name):
            return record.name
    for record in actions:
        if matches_view_name(record.name, view_name, config):
            logger.debug("Matched %s to view %s by name", record.name, view_name)
            return record.name
    return None


def find_controller_and_action(
    view_file_path: str,
    *,
    config: ConventionConfig,
    fs: FileSystem,
    workspace_root: str | None = None,
) -> Outcome[ControllerMatch]:
    """Infer the controller file and action that own ``view_file_path``.

    With ``workspace_root`` the controller is searched in the application (or
    module) controllers directory, which also covers themed views. Without it
    the directory is guessed from the path: the sibling of the right-most
    ``views`` segment, or the enclosing ``protected/modules/<name>``. Pass the
    root when the checkout itself sits under such directory names. A missing
    action is not a failure: the match then carries ``action_name=None``.
    """
    _, parts = split_workspace_parts(view_file_path, workspace_root)
    if config.views_dir not in parts[:-1]:
        return Outcome.failure(
            ErrorKind.NOT_IN_CONVENTION_DIRECTORY,
            f"View file is not in a '{config.views_dir}' directory: {view_file_path}",
        )

    views_index = last_segment_index(parts[:-1], config.views_dir)
    if views_index + 1 >= len(parts) - 1:
        return Outcome.failure(
            ErrorKind.NOT_IN_CONVENTION_DIRECTORY,
            f"Controller name could not be determined from view path: {view_file_path}",
        )
    short_name = parts[views_index + 1]

    module = module_from_path(view_file_path, workspace_root, config)
    if workspace_root:
        controllers_dir = config.controllers_directory(workspace_root, module)
    else:
        owner = parts[:views_index]
        if module is not None and module in owner:
            owner = parts[: last_segment_index(owner, module) + 1]
        controllers_dir = normalize_path(os.path.join(*owner, config.controllers_dir))

    controller_path = find_controller_file(controllers_dir, short_name, config=config, fs=fs)
    if controller_path is None:
        return Outcome.failure(
            ErrorKind.RESOURCE_NOT_FOUND,
            f"Controller not found: {controller_class_name(short_name)}{config.controller_suffix} in {controllers_dir}",
        )

    view_name = PurePath(parts[-1]).stem
    if view_name.startswith("_"):
        view_name = view_name[1:]

    try:
        doc = SourceText(fs.read_text(controller_path))
    except OSError:
        logger.warning("Could not read controller %s", controller_path)
        return Outcome.success(ControllerMatch(controller_path=controller_path))

    action_name = find_action_for_view(doc, view_name, config)
    logger.info("View %s belongs to %s (action: %s)", view_file_path, controller_path, action_name)
    return Outcome.success(ControllerMatch(controller_path=controller_path, action_name=action_name))
