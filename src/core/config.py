"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Persiste en YAML los valores que el usuario reutiliza entre invocaciones
  (gateway, address, username). La contraseña nunca se escribe aquí: va al
  keyring del sistema (ver `adapters.credentials`).
- `SyncOptions` es la configuración explícita de una ejecución: se construye
  una sola vez mezclando fichero + flags y se pasa a los servicios.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, Field
from pydantic.config import ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.errors import ConfigFileError

APP_NAME = "routesync"
APP_VERSION = "0.1.0"

DEFAULT_ROUTEROS_PORT = 8728

PERSISTED_KEYS: tuple[str, ...] = ("gateway", "address", "username")


def get_user_config_file() -> Path:
    """Ruta del YAML de usuario: `<base de la plataforma>/routesync/config.yaml`.

    Base: `%APPDATA%` en Windows, `Application Support` en macOS y
    `$XDG_CONFIG_HOME` (o `~/.config`) en el resto.
    """

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA") or Path.home())
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
    return base / APP_NAME / "config.yaml"


def load_user_config(path: Path | None = None) -> dict[str, Any]:
    """Lee el YAML de usuario.

    Reglas:
    - Si no existe, devuelve `{}` (primera ejecución).
    - Si existe pero no se puede leer o no es un mapping, `ConfigFileError`.
    """

    config_path = path or get_user_config_file()
    if not config_path.exists():
        return {}

    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigFileError(f"Error reading config file {config_path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(f"Config file {config_path} must contain a mapping")
    return data


def write_user_config(values: Mapping[str, Any], path: Path | None = None) -> Path:
    """Escribe/actualiza claves en el YAML de usuario conservando las demás."""

    config_path = path or get_user_config_file()

    existing: dict[str, Any] = {}
    try:
        existing = load_user_config(config_path)
    except ConfigFileError:
        existing = {}

    existing.update({k: v for k, v in values.items() if v is not None})

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(
            yaml.safe_dump(existing, default_flow_style=False, sort_keys=True),
            encoding="utf-8",
        )
    except OSError as exc:
        raise ConfigFileError(f"Error writing config file {config_path}: {exc}") from exc
    return config_path


class AppSettings(BaseSettings):
    """Ajustes de entorno de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core.
    - Un único contrato de configuración para CLI y adaptadores.
    """

    model_config = SettingsConfigDict(
        env_prefix="ROUTESYNC_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    default_port: int = Field(
        default=DEFAULT_ROUTEROS_PORT,
        ge=1,
        le=65535,
        description="Puerto de la API RouterOS cuando la dirección no lo indica.",
    )
    plaintext_login: bool = Field(
        default=True,
        description="Login en texto plano (RouterOS >= 6.43).",
    )
    dns_lifetime_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Tiempo máximo por consulta DNS (segundos).",
    )
    keyring_service_prefix: str = Field(
        default="",
        description="Prefijo opcional para el nombre de servicio en el keyring.",
    )


class SyncOptions(BaseModel):
    """Parámetros de una ejecución, mezclados desde fichero y flags."""

    model_config = ConfigDict(frozen=True)

    domain: str = ""
    address: str = ""
    username: str = ""
    password: str = Field(default="", repr=False)
    gateway: str = ""
    list_routes: bool = False
    update: bool = False
    dry_run: bool = False

    @classmethod
    def from_sources(
        cls,
        stored: Mapping[str, Any],
        *,
        domain: str | None = None,
        address: str | None = None,
        username: str | None = None,
        password: str | None = None,
        gateway: str | None = None,
        list_routes: bool = False,
        update: bool = False,
        dry_run: bool = False,
    ) -> "SyncOptions":
        """Un flag explícito (aunque sea "") gana al valor guardado.

        `update` implica `list_routes`.
        """

        def pick(flag: str | None, key: str) -> str:
            if flag is not None:
                return flag
            value = stored.get(key)
            return "" if value is None else str(value)

        return cls(
            domain=domain or "",
            address=pick(address, "address"),
            username=pick(username, "username"),
            password=password or "",
            gateway=pick(gateway, "gateway"),
            list_routes=list_routes or update,
            update=update,
            dry_run=dry_run,
        )

    def with_password(self, password: str) -> "SyncOptions":
        return self.model_copy(update={"password": password})

    def missing_parameters(self) -> list[str]:
        missing: list[str] = []
        if not self.domain and not self.list_routes:
            missing.append("domain")
        if not self.address:
            missing.append("address")
        if not self.username:
            missing.append("username")
        if not self.password:
            missing.append("password")
        if not self.gateway and not self.list_routes:
            missing.append("gateway")
        return missing

    def persisted_values(self) -> dict[str, str]:
        return {key: getattr(self, key) for key in PERSISTED_KEYS}
