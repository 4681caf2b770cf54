"""View reference classification and resolution.

Follows the branch order of Yii 1.1's ``CController::resolveViewFile()``:
``//`` is rooted at the application views directory, ``/`` at the current
module's views directory, dotted names are path aliases and anything else is
relative to the controller's own view directory.

Path aliases are resolved through a static table instead of the framework's
runtime alias registry, so only the ``application``, ``zii`` and ``system``
roots are understood.
"""

from __future__ import annotations

import logging
import os
import re
from enum import Enum
from pathlib import PurePath
from typing import NamedTuple

from yii_locator.core.actions import action_body, find_action_at_position, find_action_by_name
from yii_locator.core.ports.filesystem import FileSystem
from yii_locator.core.result import ErrorKind, Outcome
from yii_locator.core.source import SourceText
from yii_locator.models import ConventionConfig, RenderCall, ResolvedView, ViewKind, ViewReference

logger = logging.getLogger(__name__)

RENDER_CALL_PATTERN = re.compile(r"""(?:->|::)\s*(render(?:Partial)?)\s*\(\s*(['"])([^'"]+)\2""")


class ProbePolicy(str, Enum):
    """How a resolved view path is turned into a file name.

    ``EXPECTED_PATH`` appends the extension and never touches the disk.
    ``PREFER_EXISTING`` probes ``_name`` then ``name`` and falls back to ``_name``.
    """

    EXPECTED_PATH = "expected_path"
    PREFER_EXISTING = "prefer_existing"

    @classmethod
    def for_partial(cls, is_partial: bool) -> ProbePolicy:
        return cls.PREFER_EXISTING if is_partial else cls.EXPECTED_PATH


class ViewDirs(NamedTuple):
    view_dir: str
    base_dir: str
    module_view_dir: str | None


def classify_view_reference(raw_name: str, is_partial: bool = False) -> ViewReference:
    if raw_name.startswith("//"):
        kind = ViewKind.ROOT_ABSOLUTE
    elif raw_name.startswith("/"):
        kind = ViewKind.ABSOLUTE
    elif raw_name.startswith(("./", "../")):
        kind = ViewKind.RELATIVE
    elif "." in raw_name:
        kind = ViewKind.DOT_NOTATION
    else:
        kind = ViewKind.BARE
    return ViewReference(raw_name=raw_name, kind=kind, is_partial=is_partial)


def normalize_path(path: str) -> str:
    return os.path.normpath(path.replace("\\", "/"))


def resolve_alias(alias: str, workspace_root: str, config: ConventionConfig) -> str | None:
    """Map a dotted alias such as ``application.views.site.index`` to a path without extension."""
    parts = [p for p in alias.split(".") if p]
    if not parts:
        return None

    root, rest = parts[0], parts[1:]
    if root == "application":
        protected = os.path.join(workspace_root, config.protected_dir)
        if rest[:1] == [config.views_dir]:
            return os.path.join(config.views_directory(workspace_root), *rest[1:])
        if len(rest) >= 3 and rest[0] == config.modules_dir and rest[2] == config.views_dir:
            return os.path.join(config.views_directory(workspace_root, rest[1]), *rest[3:])
        return os.path.join(protected, *rest)
    if root == "zii":
        return os.path.join(workspace_root, config.framework_dir, "zii", *rest)
    if root == "system":
        return os.path.join(workspace_root, config.framework_dir, *rest)
    return None


def _apply_policy(view_file: str, policy: ProbePolicy, config: ConventionConfig, fs: FileSystem) -> str:
    extension = config.view_extension
    if policy is ProbePolicy.EXPECTED_PATH:
        return view_file + extension

    directory, base_name = os.path.split(view_file)
    underscored = base_name if base_name.startswith("_") else f"_{base_name}"
    with_underscore = os.path.join(directory, underscored + extension)
    without_underscore = os.path.join(directory, base_name + extension)
    for candidate in (with_underscore, without_underscore):
        if fs.exists(candidate):
            return candidate
        logger.debug("Partial view candidate missing: %s", candidate)
    return with_underscore


def resolve_view_file(
    view_name: str,
    view_dir: str,
    base_dir: str,
    module_view_dir: str | None,
    workspace_root: str,
    is_partial: bool = False,
    *,
    config: ConventionConfig,
    fs: FileSystem,
    policy: ProbePolicy | None = None,
) -> str | None:
    """Resolve ``view_name`` to a view file path, or ``None`` for an unresolvable name.

    Full views come back as the expected path whether or not the file exists;
    partials prefer whichever of ``_name`` / ``name`` is on disk.
    """
    if not view_name:
        return None
    if module_view_dir is None:
        module_view_dir = base_dir

    reference = classify_view_reference(view_name, is_partial)
    view_file: str | None
    if reference.kind is ViewKind.ROOT_ABSOLUTE:
        view_file = base_dir + view_name
    elif reference.kind is ViewKind.ABSOLUTE:
        view_file = module_view_dir + view_name
    elif reference.kind is ViewKind.DOT_NOTATION:
        view_file = resolve_alias(view_name, workspace_root, config)
    else:
        view_file = os.path.join(view_dir, view_name)

    if view_file is None:
        logger.debug("Unrecognized alias root in view name %r", view_name)
        return None

    view_file = normalize_path(view_file)
    return _apply_policy(view_file, policy or ProbePolicy.for_partial(is_partial), config, fs)


def resolve_view_reference(
    reference: ViewReference,
    dirs: ViewDirs,
    workspace_root: str,
    *,
    config: ConventionConfig,
    fs: FileSystem,
) -> Outcome[ResolvedView]:
    if not reference.raw_name:
        return Outcome.failure(ErrorKind.UNRESOLVABLE_REFERENCE, "View name is empty")

    path = resolve_view_file(
        reference.raw_name,
        dirs.view_dir,
        dirs.base_dir,
        dirs.module_view_dir,
        workspace_root,
        reference.is_partial,
        config=config,
        fs=fs,
    )
    if path is None:
        root = reference.raw_name.split(".", 1)[0]
        return Outcome.failure(
            ErrorKind.UNRESOLVABLE_REFERENCE,
            f"Cannot resolve view '{reference.raw_name}': unknown alias root '{root}'",
        )
    return Outcome.success(ResolvedView(reference=reference, path=path, exists=fs.exists(path)))


def find_render_calls(text: str, base_offset: int = 0) -> list[RenderCall]:
    """Literal-name ``render``/``renderPartial`` calls in ``text``; offsets are shifted by ``base_offset``."""
    calls = []
    for match in RENDER_CALL_PATTERN.finditer(text):
        reference = classify_view_reference(match.group(3), is_partial=match.group(1) == "renderPartial")
        calls.append(
            RenderCall(
                reference=reference,
                offset=base_offset + match.start(),
                name_offset=base_offset + match.start(3),
            )
        )
    return calls


def split_workspace_parts(path: str, workspace_root: str | None) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Split ``path`` into (parts up to the workspace root, parts below it)."""
    pure = PurePath(normalize_path(path))
    if workspace_root:
        root = PurePath(normalize_path(workspace_root))
        if pure.is_relative_to(root):
            return root.parts, pure.relative_to(root).parts
    return (), pure.parts


def last_segment_index(parts: tuple[str, ...], name: str) -> int:
    """Index of the right-most ``name`` in ``parts``; ``name`` must be present."""
    return len(parts) - 1 - parts[::-1].index(name)


def module_from_path(path: str, workspace_root: str | None, config: ConventionConfig) -> str | None:
    """Module owning ``path``, taken from the right-most ``<protected>/<modules>/<name>`` run of segments."""
    _, parts = split_workspace_parts(path, workspace_root)
    for index in range(len(parts) - 3, 0, -1):
        if parts[index] == config.modules_dir and parts[index - 1] == config.protected_dir:
            return parts[index + 1]
    return None


def _lower_first(name: str) -> str:
    return name[:1].lower() + name[1:]


def view_dirs_for(document_path: str, workspace_root: str, config: ConventionConfig) -> ViewDirs | None:
    """Directories a ``render`` call inside ``document_path`` resolves against.

    Works for controller class files and for view files; anything else gives ``None``.
    """
    prefix, parts = split_workspace_parts(document_path, workspace_root)
    module = module_from_path(document_path, workspace_root, config)
    base_dir = config.views_directory(workspace_root)
    module_view_dir = config.views_directory(workspace_root, module) if module else None

    if config.views_dir in parts[:-1]:
        index = last_segment_index(parts[:-1], config.views_dir)
        controller_parts = parts[index + 1 : index + 2] if index + 1 < len(parts) - 1 else ()
        view_dir = os.path.join(*prefix, *parts[: index + 1], *controller_parts)
        return ViewDirs(view_dir, base_dir, module_view_dir)

    if config.controllers_dir in parts[:-1]:
        index = last_segment_index(parts[:-1], config.controllers_dir)
        stem = PurePath(parts[-1]).stem
        if not stem.endswith(config.controller_suffix) or stem == config.controller_suffix:
            return None
        controller_id = _lower_first(stem[: -len(config.controller_suffix)])
        views_root = os.path.join(*prefix, *parts[:index], config.views_dir)
        view_dir = os.path.join(views_root, *parts[index + 1 : -1], controller_id)
        return ViewDirs(view_dir, base_dir, module_view_dir)

    return None


def find_views_in_action(
    doc: SourceText,
    document_path: str,
    workspace_root: str,
    *,
    config: ConventionConfig,
    fs: FileSystem,
    action_name: str | None = None,
    offset: int | None = None,
) -> Outcome[list[ResolvedView]]:
    """Resolve every view rendered by one action, selected by name or by a cursor offset."""
    if action_name is not None:
        record = find_action_by_name(doc, action_name, config)
        if record is None:
            return Outcome.failure(ErrorKind.RESOURCE_NOT_FOUND, f"Action not found: {action_name}")
    elif offset is not None:
        record = find_action_at_position(doc, offset, config)
        if record is None:
            return Outcome.failure(ErrorKind.RESOURCE_NOT_FOUND, f"No action found at offset {offset}")
    else:
        raise ValueError("Either action_name or offset must be provided.")

    dirs = view_dirs_for(document_path, workspace_root, config)
    if dirs is None:
        return Outcome.failure(
            ErrorKind.NOT_IN_CONVENTION_DIRECTORY,
            f"{document_path} is not inside a {config.controllers_dir} or {config.views_dir} directory",
        )

    views: list[ResolvedView] = []
    seen: set[str] = set()
    for call in find_render_calls(action_body(doc, record), record.body_start_offset):
        outcome = resolve_view_reference(call.reference, dirs, workspace_root, config=config, fs=fs)
        if not outcome.ok:
            logger.debug("Skipping render call at offset %d: %s", call.offset, outcome.error)
            continue
        resolved = outcome.unwrap()
        if resolved.path not in seen:
            seen.add(resolved.path)
            views.append(resolved)

    logger.info("Action %s renders %d view(s)", record.name, len(views))
    return Outcome.success(views)
