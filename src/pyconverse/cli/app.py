"""Main CLI application using Typer."""
import asyncio
import os

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from ..engine import BUILTIN_ENGINES, create_engine
from ..ui import ChatOptions, run_textual_tui

# Load environment variables
load_dotenv()

app = typer.Typer(
    name="pyconverse",
    help="Embeddable chat widget with a pluggable chat engine",
    no_args_is_help=True,
    add_completion=True,
)

console = Console()


@app.command()
def chat(
    engine: str = typer.Option(
        None,
        "--engine",
        "-e",
        help="Built-in engine name or package.module:attribute (env: PYCONVERSE_ENGINE)",
    ),
    log_level: str = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show the log panel at this level: debug, info, warning, error (env: PYCONVERSE_LOG_LEVEL)",
    ),
    variable: list[str] = typer.Option(
        None,
        "--variable",
        "-v",
        help="Variable offered for {{name}} insertion (repeatable)",
    ),
    no_markdown: bool = typer.Option(
        False,
        "--no-markdown",
        help="Show assistant replies as plain text",
    ),
    keep_input: bool = typer.Option(
        False,
        "--keep-input",
        help="Keep the input text after sending",
    ),
    welcome: str = typer.Option(
        None,
        "--welcome",
        help="Assistant message shown when the widget opens",
    ),
    system: str = typer.Option(
        None,
        "--system",
        "-s",
        help="System message template shown on the first send, {{message}} is the user text",
    ),
):
    """Open the chat widget against a chat engine."""
    engine_name = engine or os.getenv("PYCONVERSE_ENGINE", "echo")
    level = log_level or os.getenv("PYCONVERSE_LOG_LEVEL")

    try:
        chat_engine = create_engine(
            engine_name,
            variables=variable or None,
            system_message_template=system,
        )
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    options = ChatOptions(
        render_markdown=not no_markdown,
        clear_after_sending=not keep_input,
        welcome_message=welcome,
    )
    asyncio.run(run_textual_tui(chat_engine, options=options, log_level=level))


@app.command()
def engines():
    """List the built-in chat engines."""
    table = Table(title="Built-in engines")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for name, (_, description) in BUILTIN_ENGINES.items():
        table.add_row(name, description)
    console.print(table)


if __name__ == "__main__":
    app()
