"""Core: dominio, contratos, servicios y configuración.

No depende de la CLI; los adaptadores concretos se inyectan desde fuera.
"""
