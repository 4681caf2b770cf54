from pathlib import Path
from typing import Annotated

import typer

from yii_locator.cli.common import absolute, console, fail, get_filesystem, read_document, render_table
from yii_locator.config import load_convention_config
from yii_locator.core.actions import find_all_actions
from yii_locator.core.controllers import find_controller_and_action
from yii_locator.core.layouts import layout_at, resolve_layout
from yii_locator.core.result import ErrorKind, LocatorError
from yii_locator.core.routes import find_route_target, route_at
from yii_locator.core.views import (
    classify_view_reference,
    find_views_in_action,
    resolve_view_reference,
    view_dirs_for,
)

RootOption = Annotated[str, typer.Option("--root", help="Workspace root of the project.")]
FromOption = Annotated[str, typer.Option("--from", help="File the reference appears in.")]
OffsetOption = Annotated[int | None, typer.Option(help="Character offset inside the literal in the --from file.")]


def actions(
    file: Annotated[str, typer.Argument(help="Controller file to scan.")],
) -> None:
    """List the action methods of a controller."""
    doc = read_document(absolute(file))
    records = find_all_actions(doc, load_convention_config())
    render_table(
        ["name", "line", "body_start", "body_end"],
        [
            (r.name, r.position.row + 1, r.body_start_offset, r.body_end_offset if r.is_bounded else "EOF")
            for r in records
        ],
    )


def views(
    file: Annotated[str, typer.Argument(help="Controller file containing the action.")],
    action: Annotated[str | None, typer.Option(help="Action method name, e.g. actionIndex.")] = None,
    offset: Annotated[int | None, typer.Option(help="Character offset inside the action.")] = None,
    root: RootOption = ".",
) -> None:
    """List the views rendered by one action."""
    if action is None and offset is None:
        console.print("[red]Pass --action or --offset.[/red]")
        raise typer.Exit(2)

    path = absolute(file)
    outcome = find_views_in_action(
        read_document(path),
        path,
        absolute(root),
        config=load_convention_config(),
        fs=get_filesystem(),
        action_name=action,
        offset=offset,
    )
    if not outcome.ok:
        fail(outcome.error)  # type: ignore[arg-type]
    render_table(
        ["view", "kind", "partial", "path", "exists"],
        [
            (v.reference.raw_name, v.reference.kind.value, v.reference.is_partial, v.path, v.exists)
            for v in outcome.unwrap()
        ],
    )


def resolve(
    name: Annotated[str, typer.Argument(help="View name as written in render().")],
    from_file: FromOption,
    partial: Annotated[bool, typer.Option("--partial", help="Resolve as renderPartial().")] = False,
    root: RootOption = ".",
) -> None:
    """Resolve a view name to a file path."""
    config = load_convention_config()
    workspace_root = absolute(root)
    dirs = view_dirs_for(absolute(from_file), workspace_root, config)
    if dirs is None:
        fail(
            LocatorError(
                ErrorKind.NOT_IN_CONVENTION_DIRECTORY,
                f"{from_file} is not inside a {config.controllers_dir} or {config.views_dir} directory",
            )
        )

    reference = classify_view_reference(name, is_partial=partial)
    outcome = resolve_view_reference(reference, dirs, workspace_root, config=config, fs=get_filesystem())
    if not outcome.ok:
        fail(outcome.error)  # type: ignore[arg-type]
    resolved = outcome.unwrap()
    state = "[green]exists[/green]" if resolved.exists else "[yellow]missing[/yellow]"
    console.print(f"{resolved.path} ({state})")


def controller(
    view_file: Annotated[str, typer.Argument(help="View file path.")],
    root: RootOption = ".",
) -> None:
    """Find the controller and action that render a view."""
    outcome = find_controller_and_action(
        absolute(view_file),
        config=load_convention_config(),
        fs=get_filesystem(),
        workspace_root=absolute(root),
    )
    if not outcome.ok:
        fail(outcome.error)  # type: ignore[arg-type]
    match = outcome.unwrap()
    console.print(f"[green]Controller[/green] {match.controller_path}")
    console.print(f"[green]Action[/green] {match.action_name or '(not found)'}")


def _text_under_cursor(from_file: str, offset: int | None, what: str) -> tuple[str, int]:
    if offset is None:
        console.print(f"[red]Pass a {what} or --offset.[/red]")
        raise typer.Exit(2)
    return read_document(absolute(from_file)).text, offset


def _nothing_at(what: str, from_file: str, offset: int) -> LocatorError:
    return LocatorError(ErrorKind.RESOURCE_NOT_FOUND, f"No {what} literal at offset {offset} in {from_file}")


def route(
    from_file: FromOption,
    route: Annotated[str | None, typer.Argument(help="Route as passed to createUrl(), e.g. post/view.")] = None,
    offset: OffsetOption = None,
    root: RootOption = ".",
) -> None:
    """Find the controller and action behind a createUrl() route.

    Without ROUTE, the createUrl() literal at --offset in the --from file is used.
    """
    if route is None:
        text, at = _text_under_cursor(from_file, offset, "route")
        found = route_at(text, at)
        if found is None:
            fail(_nothing_at("route", from_file, at))
        route = found.route

    outcome = find_route_target(
        route,
        absolute(from_file),
        config=load_convention_config(),
        fs=get_filesystem(),
        workspace_root=absolute(root),
    )
    if not outcome.ok:
        fail(outcome.error)  # type: ignore[arg-type]
    match = outcome.unwrap()
    console.print(f"[green]Route[/green] {route}")
    console.print(f"[green]Controller[/green] {match.controller_path}")
    console.print(f"[green]Action[/green] {match.action_name or '(not found)'}")


def layout(
    from_file: FromOption,
    name: Annotated[str | None, typer.Argument(help="Layout name, e.g. column2 or //layouts/main.")] = None,
    offset: OffsetOption = None,
    root: RootOption = ".",
) -> None:
    """Resolve a layout name to a file path.

    Without NAME, the layout assignment at --offset in the --from file is used.
    """
    if name is None:
        text, at = _text_under_cursor(from_file, offset, "layout")
        assignment = layout_at(text, at)
        if assignment is None:
            fail(_nothing_at("layout", from_file, at))
        name = assignment.name

    fs = get_filesystem()
    path = resolve_layout(
        name,
        absolute(from_file),
        config=load_convention_config(),
        fs=fs,
        workspace_root=absolute(root),
    )
    state = "[green]exists[/green]" if fs.exists(path) else "[yellow]missing[/yellow]"
    console.print(f"{Path(path)} ({state})")
