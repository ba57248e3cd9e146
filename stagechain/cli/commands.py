"""CLI commands for stagechain."""

from __future__ import annotations

from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from stagechain import __logo__, __version__

app = typer.Typer(
    name="stagechain",
    help=f"{__logo__} stagechain - onion-style middleware chains",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"{__logo__} stagechain v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(None, "--version", "-v", callback=version_callback, is_eager=True),
) -> None:
    """stagechain - onion-style middleware chains."""
    from stagechain.utils.helpers import get_data_path

    # Precedence: existing env vars > .env file (override=False)
    load_dotenv(get_data_path() / ".env", override=False)


def _load(config_path: Path | None):
    from pydantic import ValidationError

    from stagechain.config.loader import load_config

    try:
        return load_config(config_path, strict=True)
    except (ValidationError, ValueError) as e:
        console.print(f"[red]Invalid config: {e}[/red]")
        raise typer.Exit(1) from e


@app.command()
def show(
    name: str | None = typer.Argument(None, help="Only show this chain"),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Path to config.json"),
) -> None:
    """Show configured chains in execution order."""
    config = _load(config_path)

    names = [name] if name else sorted(config.chains)
    for chain_name in names:
        chain_config = config.chain(chain_name)
        if chain_config is None:
            console.print(f"[red]Unknown chain: {chain_name}[/red]")
            raise typer.Exit(1)

        table = Table(title=f"Chain: {chain_name} (relocation={chain_config.relocation})")
        table.add_column("#", style="cyan")
        table.add_column("Stage")
        table.add_column("Placement")
        table.add_column("Arguments", style="yellow")
        table.add_column("Enabled", style="green")

        for index, stage in enumerate(chain_config.stages):
            placement = (
                f"before {stage.before}" if stage.before
                else f"after {stage.after}" if stage.after
                else "append"
            )
            arguments = [repr(a) for a in stage.args]
            arguments.extend(f"{k}={v!r}" for k, v in stage.kwargs.items())
            table.add_row(
                str(index),
                stage.stage,
                placement,
                ", ".join(arguments) or "-",
                "✓" if stage.enabled else "✗",
            )

        console.print(table)


@app.command()
def check(
    config_path: Path | None = typer.Option(None, "--config", "-c", help="Path to config.json"),
) -> None:
    """Resolve, build and instantiate every configured chain, checking each stage is callable."""
    from stagechain.core.chain import resolve_handler
    from stagechain.registry import StageLoadError, build_chain

    config = _load(config_path)

    for chain_name in sorted(config.chains):
        try:
            chain = build_chain(config.chains[chain_name])
        except StageLoadError as e:
            console.print(f"[red]✗ {chain_name}: {e}[/red]")
            raise typer.Exit(1) from e

        try:
            instances = chain.retrieve()
        except Exception as e:
            console.print(f"[red]✗ {chain_name}: stage construction failed: {e}[/red]")
            raise typer.Exit(1) from e

        for instance in instances:
            try:
                resolve_handler(instance)
            except TypeError as e:
                console.print(f"[red]✗ {chain_name}: {e}[/red]")
                raise typer.Exit(1) from e

        console.print(f"[green]✓[/green] {chain_name}: {chain!r}")
