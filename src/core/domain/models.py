"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta y documentación autocontenida (Field) sin acoplar el
  Core a librerías de I/O.
- Normaliza las filas de RouterOS (claves con guiones, `.id`) en un único
  modelo tipado.

Nota:
- Estos modelos describen *qué* es una ruta o un resultado, no *cómo* se
  obtiene del router.
"""

from __future__ import annotations

from enum import Enum
from ipaddress import IPv4Address, IPv6Address
from typing import Any, Mapping

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

IPAddress = IPv4Address | IPv6Address


class RouteRecord(BaseModel):
    """Una entrada de `/ip/route` relevante para la herramienta.

    Por qué `comment`:
    - RouterOS no ofrece metadatos extensibles en rutas; el comentario guarda
      el dominio que originó la ruta y actúa como clave de unión.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(
        default="",
        alias=".id",
        description="Identificador opaco asignado por el router (p.ej. '*1A').",
    )
    destination: str = Field(
        default="",
        alias="dst-address",
        description="Destino en formato CIDR (típicamente un /32).",
    )
    gateway: str = Field(
        default="",
        description="Siguiente salto: IP o nombre de interfaz.",
    )
    comment: str = Field(
        default="",
        description="Dominio que originó la ruta.",
    )

    @classmethod
    def from_router_row(cls, row: Mapping[str, Any]) -> "RouteRecord":
        """Construye el registro desde una fila de respuesta de RouterOS.

        `routeros_api` entrega `.id` como `id` y puede normalizar guiones a
        guiones bajos; aceptamos ambas formas. Campos ausentes -> "".
        """

        def field(*names: str) -> str:
            for name in names:
                value = row.get(name)
                if value is not None:
                    return str(value)
            return ""

        return cls(
            id=field(".id", "id"),
            destination=field("dst-address", "dst_address"),
            gateway=field("gateway"),
            comment=field("comment"),
        )


class RouteAction(str, Enum):
    REMOVE = "remove"
    ADD = "add"
    RESOLVE = "resolve"


class ActionOutcome(BaseModel):
    """Resultado de un paso individual dentro de un barrido best-effort."""

    action: RouteAction
    target: str = Field(
        ...,
        description="Id de ruta, dirección IP o dominio sobre el que se actuó.",
    )
    ok: bool = True
    dry_run: bool = False
    detail: str = Field(
        default="",
        description="Comando emitido (o descrito) si ok; texto del error si no.",
    )


class ReconcileReport(BaseModel):
    """Resultado de sincronizar un dominio contra el router."""

    domain: str
    gateway: str
    addresses: list[IPAddress] = Field(
        default_factory=list,
        description="Direcciones resueltas en esta ejecución.",
    )
    outcomes: list[ActionOutcome] = Field(default_factory=list)

    @property
    def failures(self) -> list[ActionOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def ok(self) -> bool:
        return not self.failures


class ListReport(BaseModel):
    """Rutas gestionadas de un gateway y, si se pidió, el refresco de cada una."""

    gateway: str
    routes: list[RouteRecord] = Field(
        default_factory=list,
        description="Snapshot filtrado previo al refresco.",
    )
    refreshed: list[ReconcileReport] = Field(default_factory=list)
    refresh_errors: list[ActionOutcome] = Field(default_factory=list)
