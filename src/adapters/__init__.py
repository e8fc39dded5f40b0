"""Adaptadores de I/O: RouterOS API, DNS y keyring.

Por qué un paquete:
- Cada módulo traduce las excepciones de su librería a `core.domain.errors`.
"""
