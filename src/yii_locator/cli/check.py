from typing import Annotated

import typer

from yii_locator.cli.common import absolute, console, get_filesystem, read_document, render_table
from yii_locator.cli.navigate import RootOption
from yii_locator.config import load_convention_config
from yii_locator.core.diagnostics import check_document
from yii_locator.core.project import count_actions, find_controller_files, is_yii_project
from yii_locator.models import Severity

_SEVERITY_STYLE = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFORMATION: "cyan",
}


def check(
    file: Annotated[str, typer.Argument(help="Controller or view file to check.")],
    root: RootOption = ".",
) -> None:
    """Report missing views, broken Yii::import() paths and unmatched actions() keys."""
    path = absolute(file)
    diagnostics = check_document(
        read_document(path),
        path,
        config=load_convention_config(),
        fs=get_filesystem(),
        workspace_root=absolute(root),
    )
    if not diagnostics:
        console.print("[green]No problems found.[/green]")
        return

    render_table(
        ["line", "col", "severity", "code", "message"],
        [
            (
                d.start.row + 1,
                d.start.column + 1,
                f"[{_SEVERITY_STYLE[d.severity]}]{d.severity.value}[/]",
                d.code,
                d.message,
            )
            for d in diagnostics
        ],
    )
    if any(d.severity is Severity.ERROR for d in diagnostics):
        raise typer.Exit(1)


def detect(
    root: Annotated[str, typer.Argument(help="Workspace root to inspect.")] = ".",
) -> None:
    """Tell whether a directory looks like a Yii 1.1 project."""
    config = load_convention_config()
    fs = get_filesystem()
    workspace_root = absolute(root)
    if not is_yii_project(workspace_root, config=config, fs=fs):
        console.print(f"[yellow]{workspace_root} does not look like a Yii project.[/yellow]")
        raise typer.Exit(1)

    controllers = find_controller_files(workspace_root, config=config, fs=fs)
    console.print(f"[green]Yii project[/green] at {workspace_root}")
    console.print(f"  Controllers: {len(controllers)}")
    console.print(f"  Actions:     {count_actions(workspace_root, config=config, fs=fs)}")
