"""Jerarquía de errores del dominio.

Por qué aquí:
- Los adaptadores traducen excepciones de librerías (routeros_api, dnspython,
  keyring, PyYAML) a estos tipos, así el Core y la CLI no conocen los SDKs.
- Un único tipo base permite a la CLI mapear cualquier fallo fatal a exit 1.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.domain.models import ReconcileReport


class RouteSyncError(Exception):
    """Base de todos los errores propios de la herramienta."""


class RouterConnectionError(RouteSyncError):
    """No se pudo interpretar la dirección o abrir la sesión con el router."""


class QueryError(RouteSyncError):
    """Fallo de transporte/protocolo al ejecutar un comando en el router."""


class InvalidArgumentError(RouteSyncError):
    """Argumentos inválidos para una operación de rutas."""


class CredentialStoreError(RouteSyncError):
    """Fallo del backend de credenciales (keyring)."""


class ResolutionError(RouteSyncError):
    """La resolución DNS de un dominio falló.

    `not_found` distingue "el nombre no existe / no tiene registros" de un fallo
    de transporte (timeout, sin nameservers). `report` se rellena cuando el
    error aborta un reconcile a mitad de camino.
    """

    def __init__(self, name: str, message: str, *, not_found: bool = False) -> None:
        super().__init__(message)
        self.name = name
        self.not_found = not_found
        self.report: ReconcileReport | None = None


class ConfigFileError(RouteSyncError):
    """El fichero YAML de configuración existe pero no se pudo leer/escribir."""
