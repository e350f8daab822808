"""
HeyGen MCP - Main Entry Point

Serves the HeyGen MCP tools over HTTP, and lets you list or call them
locally without an MCP client.
"""

import json

import typer
import uvicorn
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from .config import config
from .registry import CallerError, ToolExecutionError, ToolValidationError
from .server import MCP_PATHS, create_app
from .tools.setup import create_registry

app = typer.Typer(name="heygen-mcp", help="HeyGen MCP - arithmetic and HeyGen video tools over MCP")
console = Console()


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Interface to bind (default from config)"),
    port: int | None = typer.Option(
        None, "--port", "-p", help="Port to listen on (default from config)"
    ),
):
    """Run the MCP server over HTTP."""
    host = host or config.server.host
    port = port or config.server.port

    key_label = "[green]set[/green]" if config.heygen.api_key else "[yellow]missing[/yellow]"
    paths = ", ".join(MCP_PATHS)
    console.print(
        Panel.fit(
            f"[bold cyan]{config.server.name}[/bold cyan] v{config.server.version}\n"
            f"Listening on http://{host}:{port} | Paths: {paths}\n"
            f"HEYGEN_API_KEY: {key_label}",
            border_style="cyan",
        )
    )

    uvicorn.run(create_app(), host=host, port=port)


@app.command()
def list_tools():
    """List available tools and their parameters."""
    registry = create_registry()

    console.print(Panel.fit("[bold]Available Tools[/bold]", border_style="cyan"))
    console.print()

    for tool in registry.list_tools():
        console.print(f"[bold cyan]{tool.name}[/bold cyan]")
        console.print(f"  {tool.description}")

        params = tool.input_schema.get("properties", {})
        required = tool.input_schema.get("required", [])

        if params:
            console.print("  [dim]Parameters:[/dim]")
            for pname in params:
                req = "\\[required]" if pname in required else "\\[optional]"
                console.print(f"    • {pname} {req}")

        console.print()


@app.command()
def call(
    name: str = typer.Argument(..., help="Tool name, e.g. 'calculate'"),
    args: str = typer.Option("{}", "--args", "-a", help="Tool arguments as a JSON object"),
):
    """
    Invoke a tool locally and print its result.

    Example: heygen-mcp call calculate --args '{"operation": "divide", "a": 1, "b": 4}'
    """
    try:
        arguments = json.loads(args)
    except ValueError as e:
        console.print(f"[red]✗ --args is not valid JSON: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    registry = create_registry()

    try:
        result = registry.invoke(name, arguments)
    except ToolValidationError as e:
        console.print(f"[red]✗ Invalid arguments for {name}[/red]")
        for err in e.errors:
            console.print(f"    • {err['field']}: {escape(err['message'])}")
        raise typer.Exit(1)
    except (CallerError, ToolExecutionError) as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(1)

    for item in result.content:
        console.print(item.text, markup=False)


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
