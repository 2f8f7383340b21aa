"""Errores de la ingesta de temperatura.

Cada error lleva el status HTTP y el mensaje que ve el cliente; main.py los
renderiza como {"error": message}.
"""

from __future__ import annotations


class IngestError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PayloadError(IngestError):
    """Payload vacío, JSON inválido o campos requeridos ausentes."""

    status_code = 400


class AuthenticationError(IngestError):
    """Sin key activa para el tenant o firma inválida."""

    status_code = 401


class AuthenticationUnavailable(IngestError):
    status_code = 503


class PersistenceError(IngestError):
    """Fallo al insertar la lectura (fatal para el request)."""

    status_code = 500
