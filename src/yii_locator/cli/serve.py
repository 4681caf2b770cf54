import typer
from rich.console import Console

serve_app = typer.Typer(help="Start servers.")
console = Console(stderr=True)


@serve_app.command("mcp")
def mcp(
    transport: str = "stdio",
    host: str = "127.0.0.1",
    port: int = 8000,
    root: str = ".",
) -> None:
    """Start the MCP server."""
    from yii_locator.cli.common import get_filesystem
    from yii_locator.config import load_convention_config
    from yii_locator.mcp.server import create_mcp_server

    server = create_mcp_server(load_convention_config(), get_filesystem(), root)
    console.print(f"[green]Starting MCP server (transport: {transport})[/green]")
    if transport == "stdio":
        server.run(transport="stdio")
    else:
        server.run(transport=transport, host=host, port=port)  # type: ignore[arg-type]
