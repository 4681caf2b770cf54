import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from yii_locator.cli.check import check, detect
from yii_locator.cli.navigate import actions, controller, layout, resolve, route, views
from yii_locator.cli.serve import serve_app

app = typer.Typer(
    name="yii-locator",
    help="Yii Locator CLI: navigate between Yii 1.1 controllers, actions and views.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def _configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log resolution details.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


app.command("actions")(actions)
app.command("views")(views)
app.command("resolve")(resolve)
app.command("controller")(controller)
app.command("route")(route)
app.command("layout")(layout)
app.command("check")(check)
app.command("detect")(detect)
app.add_typer(serve_app, name="serve")


def main() -> None:
    app()
