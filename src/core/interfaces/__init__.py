"""Contratos del Core (Protocol).

Por qué:
- El reconciliador depende de `RouteRepository` y `DomainResolver`, no de
  routeros_api ni de dnspython.
"""
