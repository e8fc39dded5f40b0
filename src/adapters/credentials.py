"""Almacén de contraseñas del router (keyring del sistema).

Clave: servicio = dirección del router, usuario = username. Un secreto
inexistente no es un error (devuelve `None`); un fallo del backend sí.
"""

from __future__ import annotations

import keyring
from keyring.errors import KeyringError

from core.config import AppSettings
from core.domain.errors import CredentialStoreError


def _service_name(address: str, settings: AppSettings | None) -> str:
    settings = settings or AppSettings()
    return f"{settings.keyring_service_prefix}{address}"


def get_password(address: str, username: str, *, settings: AppSettings | None = None) -> str | None:
    try:
        return keyring.get_password(_service_name(address, settings), username)
    except KeyringError as exc:
        raise CredentialStoreError(f"Error loading credentials from keychain: {exc}") from exc


def save_password(
    address: str,
    username: str,
    password: str,
    *,
    settings: AppSettings | None = None,
) -> None:
    try:
        keyring.set_password(_service_name(address, settings), username, password)
    except KeyringError as exc:
        raise CredentialStoreError(f"Error saving credentials to keychain: {exc}") from exc
