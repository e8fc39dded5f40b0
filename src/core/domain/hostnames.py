"""Reglas sobre nombres de dominio usados como comentario de ruta.

Por qué en el dominio:
- El comentario de la ruta es la única marca de "ruta gestionada"; la regla
  que lo decide debe ser una sola para listado, refresco y tests.
- El escape de `=` es puro y no depende del cliente RouterOS.
"""

from __future__ import annotations

import re

HOSTNAME_RE = re.compile(
    r"[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*",
    re.IGNORECASE,
)

# La API de RouterOS separa argumentos con `=`.
_REPLACEMENTS: dict[str, str] = {
    "=": "\\=",
}


def sanitize_domain(domain: str) -> str:
    """Escapa los caracteres que romperían un argumento `=clave=valor`.

    Nota: no es idempotente; aplicarlo dos veces escapa de nuevo.
    """

    safe = domain
    for target, replacement in _REPLACEMENTS.items():
        safe = safe.replace(target, replacement)
    return safe


def is_managed_comment(comment: str) -> bool:
    """True si el comentario tiene forma de hostname (ruta creada por nosotros)."""

    return HOSTNAME_RE.fullmatch(comment) is not None
