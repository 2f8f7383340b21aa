"""Herramientas de línea de comandos."""
