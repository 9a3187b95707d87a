"""Console helpers shared by the CLI commands."""

import asyncio
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any

import click


def coro[T](f: Callable[..., Awaitable[T]]) -> Callable[..., T]:
    """Let a Click command be ``async def``; each invocation gets its own loop.

    The store session bridges driver futures onto the running loop, so it
    must be started inside the command body, not at import time.
    """

    @wraps(f)
    def run(*args: Any, **kwargs: Any) -> T:
        return asyncio.run(f(*args, **kwargs))

    return run


def _echo(symbol: str, message: str, color: str, err: bool = False) -> None:
    click.secho(f"{symbol} {message}", fg=color, err=err)


def success(message: str) -> None:
    _echo("✓", message, "green")


def error(message: str) -> None:
    _echo("✗", message, "red", err=True)


def warning(message: str) -> None:
    _echo("!", message, "yellow")


def info(message: str) -> None:
    _echo("·", message, "blue")
