"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/líneas en listado, refresco y reconcile.
"""

from __future__ import annotations

from rich.table import Table
from rich.text import Text

from core.domain.models import ActionOutcome, ReconcileReport, RouteRecord


def build_routes_table(routes: list[RouteRecord], *, gateway: str) -> Table:
    """Tabla de rutas gestionadas para un gateway."""

    table = Table(title=f"Managed routes via {gateway or '-'}")
    table.add_column("Route ID", style="cyan", no_wrap=True)
    table.add_column("Dst Address", style="white")
    table.add_column("Gateway", style="magenta")
    table.add_column("Comment", style="green")
    for route in routes:
        table.add_row(route.id, route.destination, route.gateway, route.comment)
    return table


def format_outcome(outcome: ActionOutcome) -> Text:
    """Una línea por paso: comando emitido, simulado o error."""

    if not outcome.ok:
        return Text(outcome.detail or f"{outcome.action.value} {outcome.target} failed", style="red")
    if outcome.dry_run:
        return Text.assemble(("[dry-run] ", "yellow"), (outcome.detail, "dim"))
    return Text(outcome.detail)


def format_report_summary(report: ReconcileReport) -> Text:
    addresses = ", ".join(str(a) for a in report.addresses) or "-"
    body = Text()
    body.append(f"{report.domain}", style="bold")
    body.append(f" -> {addresses} via {report.gateway}")
    if report.failures:
        body.append(f" ({len(report.failures)} failed)", style="red")
    return body
