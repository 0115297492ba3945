"""typedrest CLI."""

from __future__ import annotations

import importlib
import sys

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from typedrest.resources.api import ApiDefinition
from typedrest.settings import Settings

app = typer.Typer(help="Inspect typed REST API contracts")
console = Console()


def configure_logging(settings: Settings) -> None:
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)


def _load_api(target: str) -> ApiDefinition:
    module_name, _, attribute = target.partition(":")
    if not module_name or not attribute:
        raise typer.BadParameter("target must look like 'package.module:attribute'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise typer.BadParameter(f"Cannot import {module_name}: {exc}") from exc
    definition = getattr(module, attribute, None)
    if not isinstance(definition, ApiDefinition):
        raise typer.BadParameter(f"{target} is not an API definition")
    return definition


@app.callback()
def main() -> None:
    """Configure logging from TYPEDREST_* settings."""

    configure_logging(Settings())


@app.command("routes")
def routes(
    target: str = typer.Argument(..., help="API definition as 'package.module:attribute'"),
) -> None:
    """List every method of an API with its declared status codes."""

    definition = _load_api(target)
    table = Table(title=f"{definition.name} routes")
    table.add_column("Resource")
    table.add_column("Method")
    table.add_column("Path")
    table.add_column("Success")
    table.add_column("Error")
    for resource_name, contract in definition.iter_methods():
        table.add_row(
            resource_name,
            str(contract.http_method),
            str(contract.path),
            ", ".join(str(code) for code in sorted(contract.success.status_codes)),
            ", ".join(str(code) for code in sorted(contract.error.status_codes)),
        )
    console.print(table)


@app.command("servers")
def servers(
    target: str = typer.Argument(..., help="API definition as 'package.module:attribute'"),
) -> None:
    """List the servers an API is deployed to."""

    definition = _load_api(target)
    for name, base_url in definition.servers.items():
        console.print(f"{name} {base_url}")


if __name__ == "__main__":
    app()
