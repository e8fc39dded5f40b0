"""Route reconciliation against live DNS state.

The CLI delegates all router/DNS orchestration to these helpers, which keeps
side-effects (printing, tables) out of the core logic. Sweeps are best-effort:
every item produces an `ActionOutcome`, failures included, so callers and
tests can assert on exactly which items failed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from core.domain.errors import InvalidArgumentError, QueryError, ResolutionError
from core.domain.hostnames import is_managed_comment
from core.domain.models import (
    ActionOutcome,
    ListReport,
    ReconcileReport,
    RouteAction,
    RouteRecord,
)
from core.interfaces.router import DomainResolver, RouteRepository


@dataclass
class ReconcileHooks:
    """Optional callbacks for UI layers (progress, warnings)."""

    outcome: Callable[[ActionOutcome], None] | None = None
    warning: Callable[[str], None] | None = None


def _record(
    report: ReconcileReport,
    hooks: ReconcileHooks,
    outcome: ActionOutcome,
) -> None:
    report.outcomes.append(outcome)
    if hooks.outcome:
        hooks.outcome(outcome)


def _remove_existing(
    *,
    repository: RouteRepository,
    report: ReconcileReport,
    hooks: ReconcileHooks,
    dry_run: bool,
) -> None:
    try:
        existing = repository.list_routes(comment=report.domain)
    except QueryError as exc:
        _record(
            report,
            hooks,
            ActionOutcome(
                action=RouteAction.REMOVE,
                target=report.domain,
                ok=False,
                dry_run=dry_run,
                detail=f"Failed to list existing routes: {exc}",
            ),
        )
        return

    for route in existing:
        try:
            detail = repository.remove_route(route.id, dry_run=dry_run)
        except (QueryError, InvalidArgumentError) as exc:
            _record(
                report,
                hooks,
                ActionOutcome(
                    action=RouteAction.REMOVE,
                    target=route.id,
                    ok=False,
                    dry_run=dry_run,
                    detail=str(exc),
                ),
            )
            continue
        _record(
            report,
            hooks,
            ActionOutcome(action=RouteAction.REMOVE, target=route.id, dry_run=dry_run, detail=detail),
        )


def reconcile_domain(
    *,
    repository: RouteRepository,
    resolver: DomainResolver,
    domain: str,
    gateway: str,
    dry_run: bool = False,
    hooks: ReconcileHooks | None = None,
) -> ReconcileReport:
    """Replace the router's routes for `domain` with one host route per address.

    Order: remove existing -> resolve -> add. A `ResolutionError` aborts after
    the removals already happened; the partial report travels on `exc.report`.
    """

    hooks = hooks or ReconcileHooks()
    report = ReconcileReport(domain=domain, gateway=gateway)

    _remove_existing(repository=repository, report=report, hooks=hooks, dry_run=dry_run)

    try:
        addresses = resolver.resolve(domain)
    except ResolutionError as exc:
        _record(
            report,
            hooks,
            ActionOutcome(
                action=RouteAction.RESOLVE,
                target=domain,
                ok=False,
                dry_run=dry_run,
                detail=str(exc),
            ),
        )
        exc.report = report
        raise

    report.addresses = list(addresses)

    for address in addresses:
        try:
            detail = repository.add_route(address, gateway, domain, dry_run=dry_run)
        except (QueryError, InvalidArgumentError) as exc:
            _record(
                report,
                hooks,
                ActionOutcome(
                    action=RouteAction.ADD,
                    target=str(address),
                    ok=False,
                    dry_run=dry_run,
                    detail=f"Failed to add route for IP {address}: {exc}",
                ),
            )
            continue
        _record(
            report,
            hooks,
            ActionOutcome(action=RouteAction.ADD, target=str(address), dry_run=dry_run, detail=detail),
        )

    return report


def filter_managed_routes(routes: list[RouteRecord], gateway: str) -> list[RouteRecord]:
    """Routes on `gateway` whose comment looks like a hostname."""

    return [
        route
        for route in routes
        if route.gateway == gateway and is_managed_comment(route.comment)
    ]


def list_managed_routes(
    *,
    repository: RouteRepository,
    resolver: DomainResolver,
    gateway: str,
    refresh: bool = False,
    dry_run: bool = False,
    hooks: ReconcileHooks | None = None,
) -> ListReport:
    """List managed routes and optionally re-resolve each of them.

    The refresh sweep walks the frozen pre-refresh snapshot: refreshing route N
    does not see routes added or removed while refreshing route N-1. A failing
    full listing raises `QueryError`.
    """

    hooks = hooks or ReconcileHooks()
    routes = filter_managed_routes(repository.list_routes(), gateway)
    result = ListReport(gateway=gateway, routes=routes)

    if not refresh or dry_run:
        return result

    for route in routes:
        try:
            refreshed = reconcile_domain(
                repository=repository,
                resolver=resolver,
                domain=route.comment,
                gateway=route.gateway,
                dry_run=False,
                hooks=hooks,
            )
        except ResolutionError as exc:
            message = f"Failed to resolve domain {route.comment} for route ID {route.id}: {exc}"
            result.refresh_errors.append(
                ActionOutcome(
                    action=RouteAction.RESOLVE,
                    target=route.comment,
                    ok=False,
                    detail=message,
                )
            )
            if exc.report is not None:
                result.refreshed.append(exc.report)
            if hooks.warning:
                hooks.warning(message)
            continue
        result.refreshed.append(refreshed)

    return result
