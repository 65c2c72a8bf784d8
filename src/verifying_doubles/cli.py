import importlib
from typing import List

import typer

from .errors import NotFoundError
from .logging import get_logger
from .verification.arity import accepted_range
from .verification.resolver import resolve, split_name
from .verification.surface import Surface, find_signature, public_methods

app = typer.Typer(help="verifying-doubles – inspect what a double is verified against", no_args_is_help=True)

logger = get_logger(__name__)


def _import_prefixes(name: str) -> None:
    """Import the longest importable dotted prefix of ``name``."""
    segments = split_name(name)
    for end in range(1, len(segments) + 1):
        module_name = ".".join(segments[:end])
        try:
            importlib.import_module(module_name)
        except ImportError:
            break


def _load(name: str, imports: List[str]):
    for module_name in imports:
        try:
            importlib.import_module(module_name)
        except ImportError as exc:
            logger.error(f"Cannot import {module_name}: {exc}")
            raise typer.Exit(code=2) from exc

    _import_prefixes(name)
    try:
        return resolve(name).value
    except NotFoundError as exc:
        logger.error(f"{name} is not a defined constant: {exc}")
        raise typer.Exit(code=1) from exc


def _surface(static: bool) -> Surface:
    return Surface.STATIC if static else Surface.INSTANCE


@app.command()
def surface(
    name: str = typer.Argument(..., help="Type name, e.g. 'json::JSONDecoder'"),
    static: bool = typer.Option(False, "--static/--instance", help="Class-level surface instead of instance surface"),
    imports: List[str] = typer.Option([], "--import", "-i", help="Module to import before resolving"),
) -> None:
    """
    List the public methods a double of NAME is verified against.
    """
    target = _load(name, imports)
    methods = sorted(public_methods(target, _surface(static)))
    logger.info(f"{name}: {len(methods)} public methods on the {_surface(static).value} surface")
    for method in methods:
        typer.echo(method)


@app.command()
def arity(
    name: str = typer.Argument(..., help="Type name, e.g. 'json::JSONDecoder'"),
    method: str = typer.Argument(..., help="Method name"),
    static: bool = typer.Option(False, "--static/--instance", help="Class-level surface instead of instance surface"),
    imports: List[str] = typer.Option([], "--import", "-i", help="Module to import before resolving"),
) -> None:
    """
    Show how many positional arguments NAME.METHOD accepts.
    """
    target = _load(name, imports)
    kind = _surface(static)
    if method not in public_methods(target, kind):
        logger.error(f"{name} does not implement {method} on the {kind.value} surface")
        raise typer.Exit(code=1)

    signature = find_signature(target, method, kind)
    if signature is None:
        typer.echo(f"{method}: no introspectable signature")
        return
    typer.echo(f"{method}{signature}: {accepted_range(signature).describe()}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
