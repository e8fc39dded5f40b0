"""Modelos, errores y reglas puras del dominio.

Por qué:
- Aquí viven las rutas, los resultados de reconcile y la regla de hostname.
- El dominio no conoce RouterOS, DNS, keyring ni la CLI.
"""
