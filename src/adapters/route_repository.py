"""Repositorio de rutas sobre `/ip/route` (routeros_api).

Responsabilidad:
- Emitir print/add/remove contra el router y mapear filas a `RouteRecord`.
- Describir cada comando en formato de la API (`/ip/route/add =k=v ...`)
  tanto si se ejecuta como si estamos en modo dry-run.
- Traducir errores del SDK a `QueryError` / `InvalidArgumentError`.
"""

from __future__ import annotations

from ipaddress import IPv6Address, ip_address
from typing import Any

from routeros_api.exceptions import RouterOsApiError

from core.domain.errors import InvalidArgumentError, QueryError
from core.domain.hostnames import sanitize_domain
from core.domain.models import IPAddress, RouteRecord
from core.interfaces.router import RouteRepository

ROUTE_PATH = "/ip/route"


def is_ip_literal(value: str) -> bool:
    try:
        ip_address(value)
    except ValueError:
        return False
    return True


def host_destination(address: IPAddress) -> str:
    """Destino de ruta de host: /32 para IPv4, /128 para IPv6."""

    prefix = 128 if isinstance(address, IPv6Address) else 32
    return f"{address}/{prefix}"


def describe_command(command: str, params: dict[str, str]) -> str:
    words = [f"{ROUTE_PATH}/{command}"]
    words.extend(f"={key}={value}" for key, value in params.items())
    return " ".join(words)


class RouterOSRouteRepository(RouteRepository):
    """Implementación de `RouteRepository` sobre una API abierta de RouterOS."""

    def __init__(self, api: Any) -> None:
        self._api = api

    def _resource(self) -> Any:
        return self._api.get_resource(ROUTE_PATH)

    def list_routes(self, comment: str | None = None) -> list[RouteRecord]:
        queries: dict[str, str] = {}
        if comment is not None:
            queries["comment"] = comment

        try:
            rows = self._resource().get(**queries)
        except (RouterOsApiError, OSError) as exc:
            raise QueryError(f"{ROUTE_PATH}/print failed: {exc}") from exc

        return [RouteRecord.from_router_row(row) for row in rows or []]

    def add_route(
        self,
        destination: IPAddress | None,
        gateway: str,
        comment: str,
        *,
        dry_run: bool = False,
    ) -> str:
        if destination is None:
            raise InvalidArgumentError("invalid IP address")
        if not gateway:
            raise InvalidArgumentError("gateway is required")

        params: dict[str, str] = {
            "dst-address": host_destination(destination),
            "gateway": gateway,
            "comment": sanitize_domain(comment),
        }
        # check-gateway=arp solo aplica a siguientes saltos con IP.
        if is_ip_literal(gateway):
            params["check-gateway"] = "arp"

        description = describe_command("add", params)
        if dry_run:
            return description

        try:
            self._resource().add(**{key.replace("-", "_"): value for key, value in params.items()})
        except (RouterOsApiError, OSError) as exc:
            raise QueryError(f"{description} failed: {exc}") from exc
        return description

    def remove_route(self, route_id: str, *, dry_run: bool = False) -> str:
        if not route_id:
            raise InvalidArgumentError("route id is required")

        description = describe_command("remove", {"numbers": route_id})
        if dry_run:
            return description

        try:
            self._resource().remove(id=route_id)
        except (RouterOsApiError, OSError) as exc:
            raise QueryError(f"{description} failed: {exc}") from exc
        return description
