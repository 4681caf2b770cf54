from collections.abc import Sequence
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.table import Table

from yii_locator.core.ports.filesystem import FileSystem
from yii_locator.core.result import ErrorKind, LocatorError
from yii_locator.core.source import SourceText

console = Console()


def render_table(headers: Sequence[str], rows: Sequence[tuple[Any, ...]]) -> None:
    table = Table(show_lines=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*("" if v is None else str(v) for v in row))
    console.print(table)
    console.print(f"({len(rows)} rows)")


def get_filesystem() -> FileSystem:
    from yii_locator.fs.local import LocalFileSystem

    return LocalFileSystem()


def absolute(path: str) -> str:
    return str(Path(path).expanduser().resolve())


def fail(error: LocatorError) -> NoReturn:
    console.print(f"[red]{error.kind.value}[/red]: {error.message}")
    raise typer.Exit(1)


def read_document(path: str) -> SourceText:
    try:
        return SourceText(get_filesystem().read_text(path))
    except OSError as exc:
        fail(LocatorError(ErrorKind.RESOURCE_NOT_FOUND, f"Cannot read {path}: {exc.strerror or exc}"))
