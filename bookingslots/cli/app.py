"""
Main CLI application using Typer.
"""

import logging
from datetime import date
from pathlib import Path
from typing import List, NoReturn, Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..adapters.json_store import JsonScheduleStore
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import BookingSlotsError
from ..domain.models import AvailabilityEntry
from ..domain.slot_generator import SlotGenerator
from ..services.availability import AvailabilityService
from ..services.booking import (
    BOOKING_STATUSES,
    CANCELLED,
    PROVIDER_ASSISTED,
    SELF_SERVICE,
    BookingService,
)

app = typer.Typer(
    name="bookingslots",
    help="List free appointment slots and book providers",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]
DateOption = Annotated[
    Optional[str],
    typer.Option("--date", help="Day (YYYY-MM-DD). Defaults to today.")
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Appointment slots for doctors and barbers.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def _build_store(config: AppConfig) -> JsonScheduleStore:
    return JsonScheduleStore(
        providers=config.get_domain_providers(),
        services=config.get_domain_services(),
        data_file=config.data_file
    )


def _resolve_date(date_option: Optional[str], tz: str) -> date:
    """Parse ``--date`` or fall back to today in the configured timezone."""
    if not date_option:
        return pendulum.now(tz).date()
    try:
        return pendulum.from_format(date_option, "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        raise ValueError(f"Invalid date '{date_option}', expected YYYY-MM-DD") from e


def _fail(message: object) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {escape(str(message))}")
    raise typer.Exit(1)


def _entry_status(entry: AvailabilityEntry) -> str:
    if entry.is_available:
        return "[green]free[/green]"
    if entry.is_blocked:
        return "[red]blocked[/red]"
    return "[yellow]booked[/yellow]"


@app.command()
def providers(config_file: ConfigOption = None):
    """
    List all configured providers.
    """
    try:
        providers_list = _build_store(_load_config(config_file)).list_providers()
    except (BookingSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if not providers_list:
        console.print("[yellow]No providers defined in the config file.[/yellow]")
        return

    table = Table(title="Providers", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="bold yellow")
    table.add_column("Name")
    table.add_column("E-Mail", style="dim")
    table.add_column("Services")

    for provider in providers_list:
        table.add_row(provider.id, provider.name, provider.email, ", ".join(provider.service_ids))

    console.print()
    console.print(table)
    console.print()


@app.command()
def hours(
    provider_id: Annotated[str, typer.Argument(help="Provider ID")],
    config_file: ConfigOption = None,
):
    """
    Show a provider's weekly working hours.
    """
    try:
        config = _load_config(config_file)
        provider = _build_store(config).get_provider(provider_id)
    except (BookingSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if provider is None:
        _fail(f"Provider not found: {provider_id}")

    table = Table(title=f"Working hours - {provider.name}", show_header=True, header_style="bold cyan")
    table.add_column("Day", style="bold")
    table.add_column("Hours")

    for weekday, window in provider.schedule.items():
        hours_text = str(window) if window.is_open else "[dim]closed[/dim]"
        table.add_row(weekday.name.capitalize(), hours_text)

    console.print()
    console.print(table)
    console.print()


@app.command()
def availability(
    provider_id: Annotated[str, typer.Argument(help="Provider ID")],
    day: DateOption = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Slot length in minutes")] = None,
    free_only: Annotated[bool, typer.Option("--free-only", help="Only list bookable slots.")] = False,
    config_file: ConfigOption = None,
):
    """
    Show a provider's slots for one day.

    Examples:

        bookingslots availability dr-meyer --date 2024-11-25
        bookingslots availability dr-meyer --free-only
    """
    try:
        config = _load_config(config_file)
        target_day = _resolve_date(day, config.timezone)
        service = AvailabilityService(
            repository=_build_store(config),
            slot_generator=SlotGenerator(config.defaults.slot_duration_minutes)
        )
        result = service.get_availability(provider_id, target_day, duration)
    except (BookingSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(
        f"\n[bold cyan]{escape(provider_id)}[/bold cyan] on {target_day.isoformat()} "
        f"(working hours: {result.working_window})\n"
    )

    entries = [entry for entry in result.entries if entry.is_available or not free_only]
    if not entries:
        console.print("[yellow]⚠ No slots available on this day.[/yellow]\n")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Time", style="bold")
    table.add_column("Status")
    table.add_column("Booking", style="dim")

    for entry in entries:
        table.add_row(str(entry.slot), _entry_status(entry), entry.booking_id or "")

    console.print(table)
    console.print(f"\n[bold green]✓ {result.available_count} free slot(s)[/bold green]\n")


@app.command()
def book(
    provider_id: Annotated[str, typer.Argument(help="Provider ID")],
    start: Annotated[str, typer.Argument(help="Start time (HH:MM)")],
    service_ids: Annotated[List[str], typer.Option("--service", "-s", help="Service ID (repeatable)")],
    customer: Annotated[str, typer.Option("--customer", "-u", help="Customer ID")],
    day: DateOption = None,
    assisted: Annotated[bool, typer.Option("--assisted", help="Booking made by the provider for the customer.")] = False,
    config_file: ConfigOption = None,
):
    """
    Book one or more services starting at START.

    Examples:

        bookingslots book dr-meyer 10:30 -s checkup -u patient-17 --date 2024-11-25
    """
    try:
        config = _load_config(config_file)
        target_day = _resolve_date(day, config.timezone)
        service = BookingService(repository=_build_store(config))
        booking = service.create_booking(
            provider_id=provider_id,
            day=target_day,
            start_time=start,
            service_ids=service_ids,
            customer_id=customer,
            source=PROVIDER_ASSISTED if assisted else SELF_SERVICE,
        )
    except (BookingSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(f"\n[bold green]✓ Booking created:[/bold green] {booking.format_display()}")
    console.print(f"   ID: {booking.id}")
    console.print(f"   Total: {booking.total_price:.2f}\n")


@app.command()
def block(
    provider_id: Annotated[str, typer.Argument(help="Provider ID")],
    start: Annotated[str, typer.Argument(help="Start time (HH:MM)")],
    end: Annotated[str, typer.Argument(help="End time (HH:MM)")],
    day: DateOption = None,
    unblock: Annotated[bool, typer.Option("--unblock", help="Release a previously blocked range.")] = False,
    config_file: ConfigOption = None,
):
    """
    Block a time range so it cannot be booked.
    """
    try:
        config = _load_config(config_file)
        target_day = _resolve_date(day, config.timezone)
        service = BookingService(repository=_build_store(config))
        record = service.set_slot_blocked(
            provider_id=provider_id,
            day=target_day,
            start_time=start,
            end_time=end,
            blocked=not unblock,
        )
    except (BookingSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    action = "Blocked" if record.is_blocked else "Unblocked"
    console.print(f"\n[green]✓ {action} {record.slot} on {target_day.isoformat()}.[/green]\n")


@app.command()
def bookings(
    provider_id: Annotated[str, typer.Argument(help="Provider ID")],
    day: Annotated[Optional[str], typer.Option("--date", help="Only bookings on this day (YYYY-MM-DD).")] = None,
    config_file: ConfigOption = None,
):
    """
    List a provider's bookings.
    """
    try:
        config = _load_config(config_file)
        store = _build_store(config)
        target_day = _resolve_date(day, config.timezone) if day else None
        provider = store.get_provider(provider_id)
        bookings_list = store.list_bookings(provider_id, target_day)
    except (BookingSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    if provider is None:
        _fail(f"Provider not found: {provider_id}")

    if not bookings_list:
        console.print("[yellow]No bookings found.[/yellow]")
        return

    table = Table(title=f"Bookings - {provider_id}", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Date")
    table.add_column("Time", style="bold")
    table.add_column("Customer")
    table.add_column("Services")
    table.add_column("Status")
    table.add_column("Total", justify="right")

    for booking in bookings_list:
        status_text = f"[dim]{booking.status}[/dim]" if booking.status == CANCELLED else booking.status
        table.add_row(
            booking.id,
            booking.date.isoformat(),
            str(booking.slot),
            escape(booking.customer_id),
            escape(", ".join(booking.service_ids)),
            status_text,
            f"{booking.total_price:.2f}",
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def cancel(
    booking_id: Annotated[str, typer.Argument(help="Booking ID")],
    config_file: ConfigOption = None,
):
    """
    Cancel a booking and free its time range.
    """
    try:
        service = BookingService(repository=_build_store(_load_config(config_file)))
        booking = service.cancel_booking(booking_id)
    except (BookingSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(f"\n[green]✓ Booking cancelled:[/green] {booking.format_display()}\n")


@app.command()
def status(
    booking_id: Annotated[str, typer.Argument(help="Booking ID")],
    new_status: Annotated[str, typer.Argument(help=f"New status ({', '.join(BOOKING_STATUSES)})")],
    config_file: ConfigOption = None,
):
    """
    Change a booking's status.
    """
    try:
        service = BookingService(repository=_build_store(_load_config(config_file)))
        booking = service.update_status(booking_id, new_status)
    except (BookingSlotsError, FileNotFoundError, ValueError) as e:
        _fail(e)

    console.print(f"\n[green]✓ Booking updated:[/green] {booking.format_display()}\n")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]bookingslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
