"""Contratos de acceso a rutas y a DNS.

Por qué Protocol:
- Define contratos estructurales (duck typing) sin herencia rígida.
- El reconciliador depende de estas abstracciones; los tests inyectan
  repositorios y resolvers en memoria sin tocar un router real.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import IPAddress, RouteRecord


@runtime_checkable
class RouteRepository(Protocol):
    """Operaciones mínimas sobre la tabla de rutas del router.

    Reglas de diseño:
    - Las mutaciones devuelven una descripción legible del comando.
    - Con `dry_run=True` no se muta nada y la llamada siempre tiene éxito.
    """

    def list_routes(self, comment: str | None = None) -> list[RouteRecord]:
        ...

    def add_route(
        self,
        destination: IPAddress | None,
        gateway: str,
        comment: str,
        *,
        dry_run: bool = False,
    ) -> str:
        ...

    def remove_route(self, route_id: str, *, dry_run: bool = False) -> str:
        ...


@runtime_checkable
class DomainResolver(Protocol):
    """Resuelve un nombre a un conjunto (ordenado, sin duplicados) de IPs."""

    def resolve(self, name: str) -> list[IPAddress]:
        ...
