"""Módulo de autenticación para la ingesta de temperatura.

Los dispositivos firman cada payload con el secreto de ingesta de su tenant.
"""

from .signature import (
    SIGNATURE_HEADER,
    SignatureCheck,
    compute_signature,
    verify_signature,
)

__all__ = [
    "SIGNATURE_HEADER",
    "SignatureCheck",
    "compute_signature",
    "verify_signature",
]
