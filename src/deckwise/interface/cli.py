"""deckwise CLI: root commands and subgroup registration."""

import json
import logging
import random
import sys
from pathlib import Path
from typing import Annotated

import typer

from deckwise.application.charts import ChartKind
from deckwise.application.config import config_file_path
from deckwise.application.factory import build_chart_service
from deckwise.application.session import SessionState
from deckwise.domain.algorithms.registry import ALGORITHMS
from deckwise.domain.constants import AVAILABLE_RANGES
from deckwise.domain.errors import InvalidButtonError
from deckwise.domain.models import RevisionMode
from deckwise.interface._common import (
    _resolve_with_overrides,
    deck_service,
    reported_errors,
)

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="deckwise: Spaced-repetition flashcards in your terminal.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

LOG_FILE_NAME = "deckwise.log"


def _attach_file_log(log_dir: Path) -> None:
    log_file = (log_dir / LOG_FILE_NAME).resolve()
    root = logging.getLogger()
    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == log_file:
            return

    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s:%(name)s:%(message)s"))
    root.addHandler(handler)


# ---------------------------------------------------------------------------
# Register subgroups
# ---------------------------------------------------------------------------

from deckwise.interface.deck_commands import card_app, deck_app, settings_app  # noqa: E402

app.add_typer(deck_app, name="deck")
app.add_typer(card_app, name="card")
app.add_typer(settings_app, name="settings")

config_app = typer.Typer(help="Manage deckwise configuration.")
app.add_typer(config_app, name="config")


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="Increase verbosity (debug logging)."),
    ] = 0,
    data_file: Annotated[
        Path | None, typer.Option("--data-file", help="JSON file holding decks and cards.")
    ] = None,
):
    """Global settings for deckwise."""
    ctx.ensure_object(dict)
    overrides = {"data_file": data_file} if data_file is not None else {}
    if verbose:
        overrides["verbose"] = 1 + verbose
    ctx.obj["config_overrides"] = overrides

    config = _resolve_with_overrides(ctx)
    logging.getLogger().setLevel(logging.DEBUG if config.verbose > 1 else logging.INFO)
    _attach_file_log(config.log_dir)


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def algorithms():
    """List revision algorithms with their hyperparameters and defaults."""
    for name, algorithm_cls in ALGORITHMS.items():
        typer.secho(name, bold=True)
        for mode, buttons in algorithm_cls.BUTTONS.items():
            typer.echo(f"  {mode.value} buttons: {', '.join(buttons)}")
        for hp in algorithm_cls.HYPERPARAMETERS:
            typer.echo(f"  {hp.name} = {hp.value_type(hp.default)} (min {hp.minimum:g})")


@app.command()
def review(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help="Deck id or name.")],
    mode: Annotated[
        RevisionMode, typer.Option("--mode", "-m", case_sensitive=False, help="Revision mode.")
    ] = RevisionMode.REGULAR,
    seed: Annotated[int | None, typer.Option(help="Seed for card selection.")] = None,
):
    """[bold green]Review[/bold green] the cards due today.

    Regular mode shows the front and asks for the back; reverse mode the other
    way round. Enter the number of an answer button, or 'q' to stop.
    """
    with reported_errors():
        service = deck_service(ctx)
        target = service.find_deck(deck)
        rng = random.Random(seed) if seed is not None else None
        session = service.start_session(target.id, mode, rng=rng)

    if session.state is SessionState.ENDED:
        typer.secho("Nothing to review today.", fg="yellow")
        return

    choices = "  ".join(f"[{i}] {b}" for i, b in enumerate(session.button_ids, start=1))
    while session.current_card is not None:
        card = session.current_card
        question, answer = (
            (card.front, card.back) if mode is RevisionMode.REGULAR else (card.back, card.front)
        )
        typer.echo("")
        typer.secho(question, bold=True)
        typer.prompt("Press Enter to reveal", default="", show_default=False)
        typer.echo(answer)

        raw = typer.prompt(f"{choices}  [q] quit").strip().lower()
        if raw == "q":
            break
        if not raw.isdigit():
            typer.secho(f"'{raw}' is not a button.", fg="yellow")
            continue
        try:
            session.answer(int(raw))
        except InvalidButtonError as e:
            typer.secho(str(e), fg="yellow")

    typer.secho(
        f"Answered {session.answered} cards; "
        f"{session.remaining_old + session.remaining_new} left today.",
        fg="green",
    )


@app.command()
def stats(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help="Deck id or name.")],
    chart: Annotated[
        ChartKind | None, typer.Option(help="Print the data of one chart instead of a summary.")
    ] = None,
    mode: Annotated[
        RevisionMode | None, typer.Option("--mode", "-m", help="Mode of a per-mode chart.")
    ] = None,
    range_days: Annotated[
        int, typer.Option("--range", help=f"Chart range in days: {AVAILABLE_RANGES}.")
    ] = AVAILABLE_RANGES[0],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show deck statistics or the data behind one chart."""
    with reported_errors():
        service = deck_service(ctx)
        target = service.find_deck(deck)

        if chart is not None:
            series = build_chart_service(service).series(target.id, chart, range_days, mode)
            if json_output:
                typer.echo(json.dumps(series))
            else:
                for offset, count in series:
                    typer.echo(f"{offset:>6}  {count}")
            return

        first_time = service.statistics.revised_for_the_first_time_counts(target.id)
        summary = {
            "deck": target.name,
            "algorithm": target.algorithm,
            "new_cards_per_day": service.statistics.get_new_cards_per_day(target.id),
            "new_available_today": service.new_count(target.id),
            "revised_for_the_first_time_today": first_time[0] if first_time else 0,
            "modes": {},
        }
        for revision_mode in service.algorithm_for(target.id).modes():
            counts = service.statistics.revision_counts(target.id, revision_mode)
            summary["modes"][revision_mode.value] = {
                "due": service.due_count(target.id, revision_mode),
                "revised_today": counts[0] if counts else 0,
            }

    if json_output:
        typer.echo(json.dumps(summary, indent=2))
        return

    typer.secho(f"{summary['deck']}  [{summary['algorithm']}]", bold=True)
    typer.echo(
        f"New today: {summary['new_available_today']} "
        f"(quota {summary['new_cards_per_day']}, "
        f"{summary['revised_for_the_first_time_today']} already introduced)"
    )
    for name, counts in summary["modes"].items():
        typer.echo(f"{name}: {counts['due']} due, {counts['revised_today']} revised today")


@app.command()
def logs(ctx: typer.Context):
    """Print the log file location."""
    config = _resolve_with_overrides(ctx)
    typer.echo(str(config.log_dir / LOG_FILE_NAME))


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _resolve_with_overrides(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))


@config_app.command("path")
def config_path():
    """Print the location of the config file."""
    typer.echo(str(config_file_path()))
