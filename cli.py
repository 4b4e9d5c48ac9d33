"""
Domain Keys CLI

Generate and decode routing keys, timestamp keys and base62 numbers.

Usage:
    domain-keys rtkey
    domain-keys rtkey --count 5
    domain-keys rtkey --verbose
    domain-keys txkey --verbose
    domain-keys route YM6I7clU96YvDTCr --routes 25
    domain-keys timestamp YM6I7clU96YvDTCr
    domain-keys base62 --encode 12345
    domain-keys base62 --decode 3D7
    domain-keys base62 --timestamp
    domain-keys bench --count 100000
"""

import time
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from config import load_config
from core.errors import DomainKeyError
from keys.routing import ROUTE_KEY_SIZE, RouteKey
from keys.timestamp_key import TimeStampKey
from utils import base62 as codec
from utils.crash import configure as configure_crash, install_crash_handler
from utils.timestamp import format_timestamp, now_nanos

app = typer.Typer(
    name="domain-keys",
    help="Generate and decode base62 routing keys and timestamp keys",
    add_completion=False,
)


def fail(exc):
    """Print a domain error to stderr and exit 1."""
    message = exc.message if isinstance(exc, DomainKeyError) else str(exc)
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", help="Path to config.json"),
    ] = None,
):
    ctx.obj = load_config(config)
    configure_crash(ctx.obj.logging.crash_file)


@app.command()
def rtkey(
    count: Annotated[int, typer.Option("--count", "-c", min=1, help="Number of keys")] = 1,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show the timestamp with the key")] = False,
):
    """Generate new routing key(s). Includes the timestamp when creating a single key."""
    if count > 1:
        typer.echo(" ".join(RouteKey.create() for _ in range(count)))
        return

    key = RouteKey.create()
    if not verbose:
        typer.echo(key)
        return

    try:
        typer.echo(f"Key: {key}, TimeStamp: {RouteKey.parse_timestamp(key)}")
    except DomainKeyError:
        typer.echo(f"Key: {key}, TimeStamp: ERROR")


@app.command()
def txkey(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show the timestamp with the key")] = False,
):
    """Generate a new timestamp key: 9 chars of micros and 3 random."""
    key = TimeStampKey.create()
    if not verbose:
        typer.echo(key)
        return

    try:
        typer.echo(f"Key: {key}, TimeStamp: {TimeStampKey.parse_timestamp(key)}")
    except DomainKeyError:
        typer.echo(f"Key: {key}, TimeStamp: ERROR")


@app.command()
def route(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Routing key")],
    routes: Annotated[
        Optional[int],
        typer.Option("--routes", "-r", help="Total routes, clamped to 1..128"),
    ] = None,
):
    """Print the route number of a routing key."""
    total_routes = ctx.obj.keys.routes if routes is None else routes
    try:
        typer.echo(RouteKey.parse_route(key, total_routes))
    except DomainKeyError as exc:
        fail(exc)


@app.command()
def timestamp(
    key: Annotated[str, typer.Argument(help="Routing key or timestamp key")],
):
    """Print the embedded timestamp of a routing key or timestamp key."""
    parser = RouteKey if len(key) == ROUTE_KEY_SIZE else TimeStampKey
    try:
        micros = parser.parse_timestamp(key)
    except DomainKeyError as exc:
        fail(exc)
    typer.echo(f"{micros} {format_timestamp(micros)}")


@app.command()
def base62(
    encode: Annotated[
        Optional[int],
        typer.Option("--encode", "-e", help="Encode a u64 number, `-e 12345` -> 3D7"),
    ] = None,
    decode: Annotated[
        Optional[str],
        typer.Option("--decode", "-d", help="Decode a base62 string, `-d 3D7` -> 12345"),
    ] = None,
    now: Annotated[
        bool,
        typer.Option("--timestamp", "-t", help="Encode the current UTC nanoseconds"),
    ] = False,
):
    """Encode a u64 number to base62, or decode a base62 string to u64."""
    if encode is not None:
        try:
            typer.echo(codec.encode(encode))
        except ValueError as exc:
            fail(exc)
    elif decode is not None:
        try:
            typer.echo(codec.decode(decode))
        except DomainKeyError as exc:
            fail(exc)
    elif now:
        nanos = now_nanos()
        typer.echo(f"{nanos} -> {codec.encode(nanos)}")
    else:
        typer.echo("Error: must add switch to --encode or --decode; try base62 --help", err=True)
        raise typer.Exit(2)


@app.command()
def bench(
    count: Annotated[int, typer.Option("--count", "-c", min=1, help="Number of keys")] = 100_000,
):
    """Time routing key generation."""
    started = time.perf_counter_ns()
    for _ in range(count):
        RouteKey.create()
    elapsed = time.perf_counter_ns() - started

    typer.echo(f"keys: {count}, elapsed: {elapsed} ns, per key: {elapsed // count} ns")


def main():
    install_crash_handler()
    app()


if __name__ == "__main__":
    main()
