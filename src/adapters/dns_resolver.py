"""Resolver DNS (dnspython).

Por qué dnspython y no `socket.getaddrinfo`:
- Distingue NXDOMAIN / sin registros de fallos de transporte (timeout,
  nameservers caídos), que el reconciliador reporta de forma distinta.
- Permite fijar un `lifetime` por consulta desde `AppSettings`.

Por qué además el fichero hosts:
- dnspython solo habla DNS. La resolución del sistema mira primero el
  fichero hosts y devuelve los literales IP tal cual; un comentario como
  `localhost` o `10.0.0.5` tiene que seguir resolviendo o el refresco
  borraría la ruta sin volver a crearla.
"""

from __future__ import annotations

import os
import sys
from ipaddress import ip_address
from pathlib import Path

import dns.exception
import dns.resolver

from core.config import AppSettings
from core.domain.errors import ResolutionError
from core.domain.models import IPAddress
from core.interfaces.router import DomainResolver

_RECORD_TYPES: tuple[str, ...] = ("A", "AAAA")


def default_hosts_path() -> Path:
    if sys.platform.startswith("win"):
        root = os.environ.get("SystemRoot", r"C:\Windows")
        return Path(root) / "System32" / "drivers" / "etc" / "hosts"
    return Path("/etc/hosts")


def parse_hosts_file(path: Path) -> dict[str, list[IPAddress]]:
    """Nombre (en minúsculas, sin punto final) -> direcciones, en orden de aparición.

    Un fichero ausente o ilegible equivale a uno vacío.
    """

    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return {}

    entries: dict[str, list[IPAddress]] = {}
    for line in text.splitlines():
        fields = line.split("#", 1)[0].split()
        if len(fields) < 2:
            continue
        try:
            # fe80::1%eth0 -> se descarta la zona
            address = ip_address(fields[0].split("%", 1)[0])
        except ValueError:
            continue
        for host in fields[1:]:
            bucket = entries.setdefault(host.lower().rstrip("."), [])
            if address not in bucket:
                bucket.append(address)
    return entries


class DnsResolver(DomainResolver):
    """Resuelve como el sistema: literal IP, fichero hosts y luego A + AAAA."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        resolver: dns.resolver.Resolver | None = None,
        hosts_path: Path | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._resolver = resolver or dns.resolver.Resolver()
        self._hosts_path = hosts_path or default_hosts_path()

    def resolve(self, name: str) -> list[IPAddress]:
        try:
            return [ip_address(name)]
        except ValueError:
            pass

        from_hosts = parse_hosts_file(self._hosts_path).get(name.lower().rstrip("."))
        if from_hosts:
            return list(from_hosts)

        return self._query(name)

    def _query(self, name: str) -> list[IPAddress]:
        addresses: list[IPAddress] = []
        for record_type in _RECORD_TYPES:
            try:
                answer = self._resolver.resolve(
                    name,
                    record_type,
                    lifetime=self._settings.dns_lifetime_seconds,
                    search=True,
                )
            except dns.resolver.NXDOMAIN as exc:
                raise ResolutionError(name, f"{name}: no such host", not_found=True) from exc
            except dns.resolver.NoAnswer:
                continue
            except dns.exception.DNSException as exc:
                raise ResolutionError(name, f"{name}: lookup failed: {exc}") from exc

            for rdata in answer:
                address = ip_address(rdata.address)
                if address not in addresses:
                    addresses.append(address)

        if not addresses:
            raise ResolutionError(name, f"{name}: no addresses found", not_found=True)
        return addresses
