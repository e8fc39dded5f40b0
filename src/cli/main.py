"""CLI principal (Typer).

Por qué la CLI es delgada:
- Mezcla fichero + flags + keyring en un `SyncOptions` y delega todo el
  trabajo en `core.services.route_reconciler`.
- Es el único lugar que imprime y que decide el exit code (1 en fallos
  fatales, 0 en el resto, incluido `--version`).
"""

from __future__ import annotations

from typing import NoReturn, Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from adapters.credentials import get_password, save_password
from adapters.dns_resolver import DnsResolver
from adapters.route_repository import RouterOSRouteRepository
from adapters.routeros_session import connect_router
from cli.ui_components import build_routes_table, format_outcome, format_report_summary
from core.config import (
    APP_NAME,
    APP_VERSION,
    AppSettings,
    SyncOptions,
    get_user_config_file,
    load_user_config,
    write_user_config,
)
from core.domain.errors import (
    ConfigFileError,
    CredentialStoreError,
    QueryError,
    ResolutionError,
    RouterConnectionError,
)
from core.domain.models import ActionOutcome
from core.services.route_reconciler import (
    ReconcileHooks,
    list_managed_routes,
    reconcile_domain,
)

app = typer.Typer(
    name=APP_NAME,
    add_completion=False,
    help="Keep MikroTik /ip/route entries in sync with the DNS resolution of a domain.",
)

_console = Console()


def _fail(message: str) -> NoReturn:
    _console.print(message, style="red", markup=False, highlight=False)
    raise typer.Exit(code=1)


def _warn(message: str) -> None:
    _console.print(message, style="yellow", markup=False, highlight=False)


def _print_outcome(outcome: ActionOutcome) -> None:
    _console.print(format_outcome(outcome), highlight=False)


def _load_options(
    *,
    settings: AppSettings,
    domain: str | None,
    address: str | None,
    username: str | None,
    password: str | None,
    gateway: str | None,
    list_routes: bool,
    update: bool,
    dry_run: bool,
) -> SyncOptions:
    config_file = get_user_config_file()
    _console.print(f"Looking for config in: {config_file}", style="dim", markup=False, highlight=False)
    try:
        stored = load_user_config(config_file)
    except ConfigFileError as exc:
        _warn(str(exc))
        stored = {}

    options = SyncOptions.from_sources(
        stored,
        domain=domain,
        address=address,
        username=username,
        password=password,
        gateway=gateway,
        list_routes=list_routes,
        update=update,
        dry_run=dry_run,
    )

    if not options.password and options.address and options.username:
        try:
            saved = get_password(options.address, options.username, settings=settings)
        except CredentialStoreError as exc:
            _fail(f"Failed to get password from keychain: {exc}")
        if saved:
            options = options.with_password(saved)

    missing = options.missing_parameters()
    if missing:
        _fail(f"Missing required parameters: {', '.join(missing)}")
    return options


def _persist(options: SyncOptions, settings: AppSettings) -> None:
    try:
        write_user_config(options.persisted_values())
    except ConfigFileError as exc:
        _warn(str(exc))
    try:
        save_password(options.address, options.username, options.password, settings=settings)
    except CredentialStoreError as exc:
        _warn(str(exc))


@app.command()
def sync(
    domain: Optional[str] = typer.Option(None, "--domain", help="Domain name to resolve and route."),
    address: Optional[str] = typer.Option(None, "--address", help="MikroTik RouterOS device address (host[:port])."),
    username: Optional[str] = typer.Option(None, "--username", help="Username for MikroTik RouterOS."),
    password: Optional[str] = typer.Option(None, "--password", help="Password for MikroTik RouterOS."),
    gateway: Optional[str] = typer.Option(None, "--gateway", help="Gateway IP address or interface for the new routes."),
    list_routes: bool = typer.Option(False, "--list", help="List existing routes with a domain comment on the gateway."),
    update: bool = typer.Option(False, "--update", help="Re-resolve listed routes and update them (implies --list)."),
    dry_run: bool = typer.Option(False, "--dry", help="Simulate the actions without making any changes."),
    version: bool = typer.Option(False, "--version", help="Print the version of the application and exit."),
) -> None:
    """Resolve a domain and replace its host routes on the router."""

    if version:
        _console.print(APP_VERSION, markup=False, highlight=False)
        raise typer.Exit()

    try:
        settings = AppSettings()
    except ValidationError as exc:
        _fail(f"Invalid ROUTESYNC_* settings: {exc}")
    options = _load_options(
        settings=settings,
        domain=domain,
        address=address,
        username=username,
        password=password,
        gateway=gateway,
        list_routes=list_routes,
        update=update,
        dry_run=dry_run,
    )

    try:
        session = connect_router(options.address, options.username, options.password, settings=settings)
    except RouterConnectionError as exc:
        _fail(f"Failed to connect to RouterOS: {exc}")

    with session:
        _persist(options, settings)

        repository = RouterOSRouteRepository(session.api)
        resolver = DnsResolver(settings)
        hooks = ReconcileHooks(outcome=_print_outcome, warning=_warn)

        if options.list_routes:
            try:
                listing = list_managed_routes(
                    repository=repository,
                    resolver=resolver,
                    gateway=options.gateway,
                    refresh=options.update,
                    dry_run=options.dry_run,
                    hooks=hooks,
                )
            except QueryError as exc:
                _fail(f"Failed to list routes: {exc}")

            _console.print(build_routes_table(listing.routes, gateway=options.gateway))
            for refreshed in listing.refreshed:
                _console.print(format_report_summary(refreshed), highlight=False)
            return

        try:
            report = reconcile_domain(
                repository=repository,
                resolver=resolver,
                domain=options.domain,
                gateway=options.gateway,
                dry_run=options.dry_run,
                hooks=hooks,
            )
        except ResolutionError as exc:
            _fail(f"Failed to resolve domain {options.domain}: {exc}")

        _console.print(format_report_summary(report), highlight=False)
        if not options.dry_run:
            _console.print("Routes updated successfully.", style="green")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
