"""Servicios de orquestación (reconcile / listado de rutas)."""
