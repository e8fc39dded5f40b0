"""Sesión con la API de RouterOS (routeros_api).

Por qué un wrapper:
- Normaliza `host[:port]` (puerto por defecto 8728) antes de abrir el pool.
- Garantiza que el pool se libera exactamente una vez (context manager).
- Traduce excepciones del SDK a `RouterConnectionError`.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any

from routeros_api import RouterOsApiPool
from routeros_api.exceptions import RouterOsApiError

from core.config import AppSettings
from core.domain.errors import RouterConnectionError


def split_router_address(address: str, default_port: int) -> tuple[str, int]:
    """Separa `host[:port]`; `[v6]:port` para IPv6 literal.

    Sin puerto (o con puerto vacío) se usa `default_port`. Cualquier otra
    forma mal construida lanza `RouterConnectionError`.
    """

    value = address.strip()
    if not value:
        raise RouterConnectionError("Router address is empty")

    if value.startswith("["):
        end = value.find("]")
        if end < 0:
            raise RouterConnectionError(f"Missing ']' in address: {address}")
        host = value[1:end]
        rest = value[end + 1 :]
        if rest and not rest.startswith(":"):
            raise RouterConnectionError(f"Unexpected characters after ']' in address: {address}")
        port_text = rest[1:]
    elif value.count(":") > 1:
        raise RouterConnectionError(f"Too many colons in address: {address}")
    elif ":" in value:
        host, port_text = value.split(":", 1)
    else:
        host, port_text = value, ""

    if not host or "[" in host or "]" in host:
        raise RouterConnectionError(f"Invalid host in address: {address}")

    if not port_text:
        return host, default_port
    if not port_text.isdigit() or not 0 < int(port_text) <= 65535:
        raise RouterConnectionError(f"Invalid port in address: {address}")
    return host, int(port_text)


class RouterSession:
    """Sesión autenticada y exclusiva con un router."""

    def __init__(self, pool: RouterOsApiPool, api: Any, *, host: str, port: int) -> None:
        self._pool = pool
        self._api = api
        self.host = host
        self.port = port
        self._closed = False

    @property
    def api(self) -> Any:
        if self._closed:
            raise RouterConnectionError("Router session already closed")
        return self._api

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._pool.disconnect()
        except (RouterOsApiError, OSError):
            # El socket puede estar ya cerrado por el router.
            pass

    def __enter__(self) -> "RouterSession":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def connect_router(
    address: str,
    username: str,
    password: str,
    *,
    settings: AppSettings | None = None,
) -> RouterSession:
    """Abre una sesión autenticada; el llamador debe cerrarla (usar `with`)."""

    settings = settings or AppSettings()
    host, port = split_router_address(address, settings.default_port)

    pool = RouterOsApiPool(
        host,
        username=username,
        password=password,
        port=port,
        plaintext_login=settings.plaintext_login,
    )
    try:
        api = pool.get_api()
    except (RouterOsApiError, OSError) as exc:
        try:
            pool.disconnect()
        except (RouterOsApiError, OSError):
            pass
        raise RouterConnectionError(f"Failed to connect to {host}:{port}: {exc}") from exc

    return RouterSession(pool, api, host=host, port=port)
