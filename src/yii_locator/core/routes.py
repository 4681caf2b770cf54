"""Resolve ``createUrl`` routes (``controller/action``, ``module/controller/action``) to code."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass

from yii_locator.core.actions import find_all_actions
from yii_locator.core.controllers import controller_class_name, find_controller_file
from yii_locator.core.ports.filesystem import FileSystem
from yii_locator.core.result import ErrorKind, Outcome
from yii_locator.core.source import SourceText
from yii_locator.core.views import module_from_path
from yii_locator.models import ConventionConfig, ControllerMatch

logger = logging.getLogger(__name__)

URL_CALL_PATTERN = re.compile(
    r"""(?:->|::)\s*create(?:Absolute)?Url\s*\(\s*(?:array\s*\(\s*|\[\s*)?(['"])([^'"]+)\1"""
)


@dataclass(frozen=True)
class UrlRoute:
    route: str
    offset: int


def find_url_routes(text: str) -> list[UrlRoute]:
    return [UrlRoute(route=m.group(2), offset=m.start(2)) for m in URL_CALL_PATTERN.finditer(text)]


def _find_action_name(doc: SourceText, action: str, config: ConventionConfig) -> str | None:
    wanted = (config.action_prefix + controller_class_name(action)).lower()
    for record in find_all_actions(doc, config):
        if record.name.lower() == wanted:
            return record.name
    return None


def find_route_target(
    route: str,
    document_path: str,
    *,
    config: ConventionConfig,
    fs: FileSystem,
    workspace_root: str,
) -> Outcome[ControllerMatch]:
    """Controller file and action method behind ``route`` as seen from ``document_path``.

    Path parameters after the action segment are ignored.
    """
    parts = [part for part in route.lstrip("/").split("/") if part]
    if len(parts) < 2:
        return Outcome.failure(ErrorKind.UNRESOLVABLE_REFERENCE, f"Route needs a controller and an action: '{route}'")

    module_dir = os.path.join(workspace_root, config.protected_dir, config.modules_dir, parts[0])
    if len(parts) >= 3 and fs.exists(module_dir):
        controller, action = parts[1], parts[2]
        search_dirs = [config.controllers_directory(workspace_root, parts[0])]
    else:
        controller, action = parts[0], parts[1]
        search_dirs = [config.controllers_directory(workspace_root)]
        current_module = module_from_path(document_path, workspace_root, config)
        if current_module:
            search_dirs.insert(0, config.controllers_directory(workspace_root, current_module))

    controller_path = None
    for directory in search_dirs:
        controller_path = find_controller_file(directory, controller, config=config, fs=fs)
        if controller_path is not None:
            break
    if controller_path is None:
        return Outcome.failure(
            ErrorKind.RESOURCE_NOT_FOUND,
            f"Controller not found for route '{route}': {controller_class_name(controller)}{config.controller_suffix}",
        )

    try:
        doc = SourceText(fs.read_text(controller_path))
    except OSError:
        logger.warning("Could not read controller %s", controller_path)
        return Outcome.success(ControllerMatch(controller_path=controller_path))

    action_name = _find_action_name(doc, action, config)
    logger.info("Route %s resolved to %s (action: %s)", route, controller_path, action_name)
    return Outcome.success(ControllerMatch(controller_path=controller_path, action_name=action_name))


def route_at(text: str, offset: int) -> UrlRoute | None:
    """The ``createUrl`` route literal covering ``offset``, quotes included."""
    for url_route in find_url_routes(text):
        if url_route.offset - 1 <= offset <= url_route.offset + len(url_route.route):
            return url_route
    return None
