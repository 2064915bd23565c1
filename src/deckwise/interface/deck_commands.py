"""Deck, card and settings subgroups of the deckwise CLI."""

import json
from typing import Annotated

import typer

from deckwise.interface._common import deck_service, fail, reported_errors

deck_app = typer.Typer(help="Create, list and remove decks.", no_args_is_help=True)
card_app = typer.Typer(help="Add and remove cards.", no_args_is_help=True)
settings_app = typer.Typer(help="Inspect and change deck settings.", no_args_is_help=True)

NEW_CARDS_PER_DAY = "new_cards_per_day"


# ---------------------------------------------------------------------------
# Decks
# ---------------------------------------------------------------------------


@deck_app.command("create")
def deck_create(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Deck name.")],
    algorithm: Annotated[
        str | None, typer.Option("--algorithm", "-a", help="Revision algorithm.")
    ] = None,
    new_per_day: Annotated[
        int | None, typer.Option("--new-per-day", help="New cards introduced per day.")
    ] = None,
):
    """[bold green]Create[/bold green] a new deck."""
    with reported_errors():
        deck = deck_service(ctx).create_deck(
            name, algorithm=algorithm, new_cards_per_day=new_per_day
        )
    typer.secho(f"Created deck '{deck.name}' ({deck.algorithm})", fg="green")
    typer.echo(deck.id)


@deck_app.command("list")
def deck_list(
    ctx: typer.Context,
    trash: Annotated[bool, typer.Option("--trash", help="List decks in the trash.")] = False,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List decks with today's due and new counts."""
    with reported_errors():
        service = deck_service(ctx)
        rows = []
        for deck in service.list_decks(only_deleted=trash):
            modes = service.algorithm_for(deck.id).modes()
            rows.append(
                {
                    "id": deck.id,
                    "name": deck.name,
                    "algorithm": deck.algorithm,
                    "due": {mode.value: service.due_count(deck.id, mode) for mode in modes},
                    "new": service.new_count(deck.id),
                }
            )

    if json_output:
        typer.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        typer.secho("Trash is empty." if trash else "No decks yet.", fg="yellow")
        return

    for row in rows:
        due = "  ".join(f"{mode}: {count}" for mode, count in row["due"].items())
        typer.echo(f"{row['name']}  [{row['algorithm']}]  {due}  new: {row['new']}  ({row['id']})")


@deck_app.command("delete")
def deck_delete(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help="Deck id or name.")],
):
    """Move a deck to the trash."""
    with reported_errors():
        service = deck_service(ctx)
        service.delete_deck(service.find_deck(deck).id)
    typer.secho(f"Moved '{deck}' to the trash.", fg="yellow")


@deck_app.command("restore")
def deck_restore(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help="Deck id or name.")],
):
    """Restore a deck from the trash."""
    with reported_errors():
        service = deck_service(ctx)
        service.restore_deck(service.find_deck(deck).id)
    typer.secho(f"Restored '{deck}'.", fg="green")


@deck_app.command("remove")
def deck_remove(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help="Deck id or name.")],
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Bypass confirmation for destructive actions.")
    ] = False,
):
    """Permanently remove a deck, its cards and its statistics."""
    with reported_errors():
        service = deck_service(ctx)
        target = service.find_deck(deck)
        if not force:
            typer.confirm(
                f"Permanently remove '{target.name}' and all of its cards?", abort=True
            )
        removed = service.remove_deck(target.id)
    typer.secho(f"Removed '{target.name}' ({removed} cards).", fg="green")


# ---------------------------------------------------------------------------
# Cards
# ---------------------------------------------------------------------------


@card_app.command("add")
def card_add(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help="Deck id or name.")],
    front: Annotated[str, typer.Argument(help="Front side.")],
    back: Annotated[str, typer.Argument(help="Back side.")],
):
    """Add a card to a deck."""
    with reported_errors():
        service = deck_service(ctx)
        card = service.add_card(service.find_deck(deck).id, front, back)
    if card is None:
        fail(f"A card with front '{front}' already exists in '{deck}'.")
    typer.echo(card.id)


@card_app.command("edit")
def card_edit(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="Card id.")],
    front: Annotated[str, typer.Argument(help="New front side.")],
    back: Annotated[str, typer.Argument(help="New back side.")],
):
    """Change the text of a card without touching its schedule."""
    with reported_errors():
        card = deck_service(ctx).edit_card(card_id, front, back)
    if card is None:
        fail(f"Another card with front '{front}' already exists in the deck.")
    typer.secho(f"Updated {card.id}: {card.front} -> {card.back}", fg="green")


@card_app.command("search")
def card_search(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help="Deck id or name.")],
    front: Annotated[str, typer.Option("--front", help="Phrase the front must contain.")] = "",
    back: Annotated[str, typer.Option("--back", help="Phrase the back must contain.")] = "",
):
    """Find cards of a deck by phrases in their front and back."""
    with reported_errors():
        service = deck_service(ctx)
        cards = service.search_cards(service.find_deck(deck).id, front, back)

    if not cards:
        typer.secho("No matching cards.", fg="yellow")
        return
    for card in cards:
        typer.echo(f"{card.id}  {card.front} -> {card.back}")


@card_app.command("list")
def card_list(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help="Deck id or name.")],
):
    """List the cards of a deck with their next revision dates."""
    with reported_errors():
        service = deck_service(ctx)
        cards = service.cards(service.find_deck(deck).id)

    for card in cards:
        status = "new" if card.is_new else (
            f"regular {card.next_regular_revision_date}, "
            f"reverse {card.next_reverse_revision_date}"
        )
        typer.echo(f"{card.id}  {card.front} -> {card.back}  ({status})")


@card_app.command("remove")
def card_remove(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="Card id.")],
):
    """Remove a card and its revision history."""
    with reported_errors():
        deck_service(ctx).remove_card(card_id)
    typer.secho(f"Removed {card_id}.", fg="green")


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@settings_app.command("show")
def settings_show(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help="Deck id or name.")],
):
    """Display the deck's algorithm hyperparameters and new-card quota."""
    with reported_errors():
        service = deck_service(ctx)
        target = service.find_deck(deck)
        algorithm = service.algorithm_for(target.id)
        settings = {
            "algorithm": algorithm.name,
            NEW_CARDS_PER_DAY: service.statistics.get_new_cards_per_day(target.id),
            "hyperparameters": algorithm.hyperparameters(),
        }
    typer.echo(json.dumps(settings, indent=2))


@settings_app.command("set", context_settings={"ignore_unknown_options": True})
def settings_set(
    ctx: typer.Context,
    deck: Annotated[str, typer.Argument(help="Deck id or name.")],
    name: Annotated[str, typer.Argument(help=f"Hyperparameter name, or '{NEW_CARDS_PER_DAY}'.")],
    value: Annotated[str, typer.Argument(help="New value.")],
):
    """Change one hyperparameter (or the new-card quota) of a deck."""
    with reported_errors():
        service = deck_service(ctx)
        target = service.find_deck(deck)
        if name == NEW_CARDS_PER_DAY:
            try:
                quota = int(value)
            except ValueError:
                fail(f"'{value}' is not a whole number.")
            if not service.set_new_cards_per_day(target.id, quota):
                fail(f"Deck '{deck}' has no statistics to hold the quota.")
            accepted: int | float = quota
        else:
            accepted = service.set_hyperparameter(target.id, name, value)
    typer.secho(f"{name} = {accepted}", fg="green")
