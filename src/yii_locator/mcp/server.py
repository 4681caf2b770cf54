"""FastMCP server exposing yii-locator tools."""

from __future__ import annotations

import os
from typing import Any

from fastmcp import FastMCP

from yii_locator.core.actions import find_all_actions
from yii_locator.core.controllers import find_controller_and_action
from yii_locator.core.diagnostics import check_document
from yii_locator.core.layouts import resolve_layout
from yii_locator.core.ports.filesystem import FileSystem
from yii_locator.core.result import ErrorKind, LocatorError, Outcome
from yii_locator.core.routes import find_route_target
from yii_locator.core.source import SourceText
from yii_locator.core.views import (
    classify_view_reference,
    find_views_in_action,
    resolve_view_reference,
    view_dirs_for,
)
from yii_locator.models import ControllerMatch, ConventionConfig, ResolvedView


def _error(error: LocatorError | None) -> str:
    return f"Error: {error}"


def _view_dict(view: ResolvedView) -> dict[str, Any]:
    return {
        "view": view.reference.raw_name,
        "kind": view.reference.kind.value,
        "partial": view.reference.is_partial,
        "path": view.path,
        "exists": view.exists,
    }


def _match_dict(outcome: Outcome[ControllerMatch]) -> dict[str, Any] | str:
    if not outcome.ok:
        return _error(outcome.error)
    match = outcome.unwrap()
    return {"controller": match.controller_path, "action": match.action_name}


def _read(fs: FileSystem, path: str) -> SourceText | str:
    try:
        return SourceText(fs.read_text(path))
    except OSError as exc:
        return _error(LocatorError(ErrorKind.RESOURCE_NOT_FOUND, f"Cannot read {path}: {exc}"))


def list_actions_payload(path: str, *, config: ConventionConfig, fs: FileSystem) -> list[dict[str, Any]] | str:
    doc = _read(fs, path)
    if isinstance(doc, str):
        return doc
    return [
        {
            "name": r.name,
            "line": r.position.row + 1,
            "body_start": r.body_start_offset,
            "body_end": r.body_end_offset if r.is_bounded else None,
        }
        for r in find_all_actions(doc, config)
    ]


def find_views_payload(
    path: str,
    workspace_root: str,
    *,
    config: ConventionConfig,
    fs: FileSystem,
    action: str | None = None,
    offset: int | None = None,
) -> list[dict[str, Any]] | str:
    if action is None and offset is None:
        return "Error: either 'action' or 'offset' must be provided."
    doc = _read(fs, path)
    if isinstance(doc, str):
        return doc
    outcome = find_views_in_action(
        doc, path, workspace_root, config=config, fs=fs, action_name=action, offset=offset
    )
    if not outcome.ok:
        return _error(outcome.error)
    return [_view_dict(v) for v in outcome.unwrap()]


def resolve_view_payload(
    name: str,
    from_file: str,
    workspace_root: str,
    *,
    config: ConventionConfig,
    fs: FileSystem,
    partial: bool = False,
) -> dict[str, Any] | str:
    dirs = view_dirs_for(from_file, workspace_root, config)
    if dirs is None:
        return _error(
            LocatorError(ErrorKind.NOT_IN_CONVENTION_DIRECTORY, f"{from_file} is not a controller or view file")
        )
    outcome = resolve_view_reference(
        classify_view_reference(name, is_partial=partial), dirs, workspace_root, config=config, fs=fs
    )
    if not outcome.ok:
        return _error(outcome.error)
    return _view_dict(outcome.unwrap())


def check_view_paths_payload(
    path: str, workspace_root: str, *, config: ConventionConfig, fs: FileSystem
) -> list[dict[str, Any]] | str:
    doc = _read(fs, path)
    if isinstance(doc, str):
        return doc
    return [
        {
            "code": d.code,
            "severity": d.severity.value,
            "message": d.message,
            "line": d.start.row + 1,
            "column": d.start.column + 1,
        }
        for d in check_document(doc, path, config=config, fs=fs, workspace_root=workspace_root)
    ]


def create_mcp_server(config: ConventionConfig, fs: FileSystem, workspace_root: str = ".") -> FastMCP:
    """Create a FastMCP server bound to one workspace root."""

    default_root = os.path.abspath(workspace_root)
    mcp = FastMCP(
        "yii-locator",
        instructions="Navigate between Yii 1.1 controllers, actions, views, layouts and URL routes.",
    )

    @mcp.tool()
    async def list_actions(path: str) -> list[dict[str, Any]] | str:
        """List the action methods declared in a controller file."""
        return list_actions_payload(path, config=config, fs=fs)

    @mcp.tool()
    async def find_views(
        path: str, action: str | None = None, offset: int | None = None, root: str | None = None
    ) -> list[dict[str, Any]] | str:
        """List the views rendered by one controller action."""
        return find_views_payload(path, root or default_root, config=config, fs=fs, action=action, offset=offset)

    @mcp.tool()
    async def resolve_view(
        name: str, from_file: str, partial: bool = False, root: str | None = None
    ) -> dict[str, Any] | str:
        """Resolve a view name as written in render() to a file path."""
        return resolve_view_payload(name, from_file, root or default_root, config=config, fs=fs, partial=partial)

    @mcp.tool()
    async def find_controller(view_path: str, root: str | None = None) -> dict[str, Any] | str:
        """Find the controller file and action that render a view file."""
        outcome = find_controller_and_action(view_path, config=config, fs=fs, workspace_root=root or default_root)
        return _match_dict(outcome)

    @mcp.tool()
    async def find_route(route: str, from_file: str, root: str | None = None) -> dict[str, Any] | str:
        """Find the controller and action behind a createUrl() route."""
        outcome = find_route_target(route, from_file, config=config, fs=fs, workspace_root=root or default_root)
        return _match_dict(outcome)

    @mcp.tool()
    async def find_layout(name: str, from_file: str, root: str | None = None) -> dict[str, Any]:
        """Resolve a layout name such as column2 or //layouts/main to a file path."""
        path = resolve_layout(name, from_file, config=config, fs=fs, workspace_root=root or default_root)
        return {"path": path, "exists": fs.exists(path)}

    @mcp.tool(name="check_view_paths")
    async def check_paths(path: str, root: str | None = None) -> list[dict[str, Any]] | str:
        """Report missing render() views, broken Yii::import() paths and actions() keys without a method."""
        return check_view_paths_payload(path, root or default_root, config=config, fs=fs)

    return mcp
