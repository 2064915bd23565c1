"""Helpers shared by the CLI command modules."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, NoReturn

import typer

from deckwise.application.config import AppConfig, resolve_config
from deckwise.application.deck_service import DeckService
from deckwise.application.factory import build_deck_service
from deckwise.domain.errors import (
    DeckNotFoundError,
    DeckwiseError,
    InvalidHyperparameterError,
    UnknownAlgorithmError,
    UnknownHyperparameterError,
)

logger = logging.getLogger(__name__)


def _resolve_with_overrides(ctx: typer.Context | None = None, **kwargs: Any) -> AppConfig:
    """Resolve config with the global options and the given non-None overrides."""
    overrides: dict[str, Any] = {}
    if ctx is not None and ctx.obj:
        overrides.update(ctx.obj.get("config_overrides", {}))
    overrides.update({k: v for k, v in kwargs.items() if v is not None})
    return resolve_config(overrides)


def humanize_error(exc: Exception) -> str:
    """Turn a deckwise error into a one-line message for the terminal."""
    if isinstance(exc, DeckNotFoundError):
        return f"{exc} (see 'deckwise deck list')"
    if isinstance(exc, UnknownAlgorithmError):
        return f"{exc} (see 'deckwise algorithms')"
    if isinstance(exc, (InvalidHyperparameterError, UnknownHyperparameterError)):
        return f"Setting rejected: {exc}"
    return str(exc) or type(exc).__name__


def fail(message: str) -> NoReturn:
    typer.secho(message, fg="red", err=True)
    raise typer.Exit(1)


@contextmanager
def reported_errors() -> Iterator[None]:
    """Report DeckwiseError as a red one-liner and exit with status 1."""
    try:
        yield
    except DeckwiseError as e:
        logger.debug("Command failed", exc_info=True)
        fail(humanize_error(e))


def deck_service(ctx: typer.Context) -> DeckService:
    return build_deck_service(_resolve_with_overrides(ctx))