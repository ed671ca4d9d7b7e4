# (Functional) **Command-line interface** (Typer app) standing in for the camera's menu UI.

"""
Command-line front end for the trail camera simulator.

Each command opens the persisted settings, performs one operator action
through the validated write path and reports the outcome. ``run`` keeps a
live session open so the simulated clock ticks in real time.
"""
import asyncio
from typing import Any

import typer
from rich.console import Console
from rich.table import Table
from typing_extensions import Annotated

from trailcam_sim.application.session import (
    DELETE_ALL_DONE,
    FIRMWARE_UP_TO_DATE,
    TrailCamSession,
)
from trailcam_sim.application.sd_card import SimulatedSdCard
from trailcam_sim.application.store import ConfigurationStore
from trailcam_sim.config import settings
from trailcam_sim.domain import constraints
from trailcam_sim.domain.constraints import ApplicabilityPolicy
from trailcam_sim.domain.dashboard import DisplayModel, project
from trailcam_sim.domain.outcomes import Accepted
from trailcam_sim.domain.persistence import SettingsGateway
from trailcam_sim.domain.record import FIELD_SPECS_BY_ID, FieldId, FieldKind
from trailcam_sim.infrastructure import log_utils
from trailcam_sim.infrastructure.settings_storage import JsonFileSettingsGateway

_TRUE_WORDS = {"on", "true", "yes", "1"}
_FALSE_WORDS = {"off", "false", "no", "0"}

console = Console()

app = typer.Typer(
    add_completion=False,
    help="Trail camera settings simulator.",
    no_args_is_help=True,
)


def _build_gateway() -> SettingsGateway:
    return JsonFileSettingsGateway(settings.TRAILCAM_STATE_PATH)


def _open_store() -> ConfigurationStore:
    return ConfigurationStore.open(
        _build_gateway(),
        settings.TRAILCAM_RECORD_KEY,
        policy=ApplicabilityPolicy(settings.TRAILCAM_APPLICABILITY_POLICY),
    )


def _sd_card() -> SimulatedSdCard:
    return SimulatedSdCard(settings.TRAILCAM_SD_USED, settings.TRAILCAM_SD_CAPACITY)


def parse_cli_value(field: str, raw: str) -> Any:
    """Turn command-line text into the typed value the store expects.

    Only boolean fields need conversion; everything else is validated as
    text by the constraint engine.
    """
    field_id = FieldId.parse(field)
    spec = FIELD_SPECS_BY_ID.get(field_id) if field_id is not None else None
    if spec is not None and spec.kind is FieldKind.BOOLEAN:
        word = raw.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    return raw


def render_dashboard(model: DisplayModel, *, show_all: bool = False) -> None:
    console.print(f"SD: {model.storage_text}   {model.date_text} {model.time_text}   Battery: {model.battery_text}")
    if model.motion_alert:
        console.print("[bold red]Motion detected![/bold red]")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Setting")
    table.add_column("Field")
    table.add_column("Value")
    for entry in model.fields:
        if entry.field_id is FieldId.CURRENT_DEVICE_TIME:
            continue
        if not entry.applicable and not show_all:
            continue
        value = entry.display_value if entry.applicable else f"[dim]{entry.display_value} (n/a)[/dim]"
        table.add_row(entry.label, entry.field_id.value, value)
    console.print(table)


@app.command()
def show(
    show_all: Annotated[bool, typer.Option("--all", help="Include settings that do not apply right now.")] = False,
) -> None:
    """Show the dashboard for the stored settings."""
    store = _open_store()
    render_dashboard(project(store.current(), store.applicability(), storage=_sd_card().usage()), show_all=show_all)


@app.command("set")
def set_field(
    field: Annotated[str, typer.Argument(help="Field id, e.g. videoLength.")],
    value: Annotated[str, typer.Argument(help="New value label, e.g. 2min or ON.")],
) -> None:
    """Change one setting."""
    store = _open_store()
    outcome = store.apply(field, parse_cli_value(field, value))
    if not isinstance(outcome, Accepted):
        typer.echo(f"Rejected ({outcome.reason.value}): {outcome.message}")
        raise typer.Exit(code=1)
    typer.echo(f"{field} set to {value}.")


@app.command("set-time")
def set_time(
    year: int,
    month: int,
    day: int,
    hour: int,
    minute: int,
) -> None:
    """Confirm a new device date and time."""
    store = _open_store()
    outcome = store.confirm_time(year, month, day, hour, minute)
    if not isinstance(outcome, Accepted):
        typer.echo(f"Rejected ({outcome.reason.value}): {outcome.message}")
        raise typer.Exit(code=1)
    model = project(outcome.value, store.applicability())
    typer.echo(f"Time updated: {model.date_text} {model.time_text}")


@app.command()
def reset(
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip the confirmation prompt.")] = False,
) -> None:
    """Restore factory default settings."""
    if not yes:
        typer.confirm("Restore all default settings?", abort=True)
    _open_store().reset_to_default()
    typer.echo("Settings restored to defaults.")


@app.command()
def options(field: Annotated[str, typer.Argument(help="Field id to list values for.")]) -> None:
    """List the legal values of a setting."""
    if FieldId.parse(field) is None:
        typer.echo(f"Unknown setting '{field}'.")
        raise typer.Exit(code=1)
    values = constraints.options_for(field)
    if not values:
        typer.echo(f"{field} cannot be changed directly.")
        raise typer.Exit(code=1)
    for label in values:
        typer.echo(label)


@app.command("delete-all")
def delete_all(
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip the confirmation prompt.")] = False,
) -> None:
    """Delete every picture and format the simulated SD card."""
    if not yes:
        typer.confirm("Delete all pictures and format the SD card? This cannot be undone.", abort=True)
    card = _sd_card()
    card.erase()
    log_utils.info("Delete-all requested from the command line.")
    typer.echo(DELETE_ALL_DONE)
    typer.echo(f"SD: {card.usage().text}")


@app.command("firmware-upgrade")
def firmware_upgrade() -> None:
    """Check for a firmware upgrade."""
    typer.echo(FIRMWARE_UP_TO_DATE)


async def _run_session(seconds: float) -> DisplayModel:
    session = TrailCamSession.from_settings(settings, gateway=_build_gateway())
    try:
        await asyncio.sleep(seconds)
        return session.get_display_model()
    finally:
        await session.close(flush=True)


@app.command()
def run(
    seconds: Annotated[float, typer.Option("--seconds", "-s", min=0.0, help="How long to let the clock run.")] = 5.0,
    show_all: Annotated[bool, typer.Option("--all", help="Include settings that do not apply right now.")] = False,
) -> None:
    """Run a live session so the device clock ticks, then show the dashboard."""
    model = asyncio.run(_run_session(seconds))
    render_dashboard(model, show_all=show_all)


if __name__ == "__main__":  # pragma: no cover
    app()
