"""
CLI interface for Storage Gas.

Inspects a cost schedule and prices individual storage operations.
"""

import sys
from enum import Enum
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.table import Table

from storage_gas.config.loader import CONFIG_ENV_VAR, resolve_cost_config
from storage_gas.core.cost_model import calculate_cost
from storage_gas.core.operations import OperationKind, OperationRecord

app = typer.Typer()
console = Console()

EXIT_CODE_OK = 0
EXIT_CODE_ERROR = 1


class CliOperation(str, Enum):
    """Operation names accepted on the command line."""
    READ = "read"
    WRITE = "write"
    REMOVE = "remove"
    ITER_NEXT = "iter-next"


_CLI_TO_KIND = {
    CliOperation.READ: OperationKind.READ,
    CliOperation.WRITE: OperationKind.WRITE,
    CliOperation.REMOVE: OperationKind.REMOVE,
    CliOperation.ITER_NEXT: OperationKind.ITER_NEXT,
}

_CONFIG_OPTION_HELP = "YAML cost schedule (defaults to the built-in schedule)"


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context):
    """Storage Gas CLI."""
    if ctx.invoked_subcommand is None:
        console.print("Storage Gas - Use --help to see available commands")


@app.command()
def schedule(
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        envvar=CONFIG_ENV_VAR,
        help=_CONFIG_OPTION_HELP
    )
):
    """Show the rates of the active cost schedule."""
    try:
        cost_config = resolve_cost_config(config)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error loading cost schedule:[/] {str(e)}")
        sys.exit(EXIT_CODE_ERROR)

    table = Table(title=f"Cost schedule ({config or 'default'})")
    table.add_column("Rate")
    table.add_column("Gas", justify="right")
    for name, rate in cost_config.as_dict().items():
        table.add_row(name, f"{rate:,}")
    console.print(table)
    sys.exit(EXIT_CODE_OK)


@app.command()
def estimate(
    operation: CliOperation = typer.Argument(..., help="Operation to price"),
    key_len: int = typer.Option(..., "--key-len", "-k", min=0, help="Key length in bytes"),
    value_len: int = typer.Option(
        0,
        "--value-len",
        "-v",
        min=0,
        help="Value length in bytes (ignored for remove)"
    ),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        envvar=CONFIG_ENV_VAR,
        help=_CONFIG_OPTION_HELP
    )
):
    """Price a single storage operation."""
    try:
        cost_config = resolve_cost_config(config)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Error loading cost schedule:[/] {str(e)}")
        sys.exit(EXIT_CODE_ERROR)

    kind = _CLI_TO_KIND[operation]
    op = OperationRecord(
        kind=kind,
        key_len=key_len,
        value_len=None if kind == OperationKind.REMOVE else value_len
    )
    gas = calculate_cost(op, cost_config)
    console.print(f"[bold]{operation.value}[/bold] key={key_len}B value={value_len}B: {gas:,} gas")
    sys.exit(EXIT_CODE_OK)


if __name__ == "__main__":
    app()
