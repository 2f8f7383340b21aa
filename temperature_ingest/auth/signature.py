"""Verificación de firma HMAC de los payloads de dispositivos.

FLUJO:
1. El dispositivo firma el body crudo con HMAC-SHA256 usando el secreto
   activo de su tenant y envía el hex en `x-temp-signature`
2. Recalculamos la firma sobre los mismos bytes y comparamos en tiempo constante

SEGURIDAD:
- Nunca se loguea el secreto ni la firma calculada
- El resultado no indica qué comprobación falló
"""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from typing import Optional, Union


SIGNATURE_HEADER = "x-temp-signature"


@dataclass(frozen=True)
class SignatureCheck:
    valid: bool


def _as_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8")


def compute_signature(secret: str, raw_body: Union[str, bytes]) -> str:
    """Firma hex HMAC-SHA256 de `raw_body` con `secret`."""
    return hmac.new(_as_bytes(secret), _as_bytes(raw_body), hashlib.sha256).hexdigest()


def verify_signature(
    secret: str,
    raw_body: Union[str, bytes],
    provided_signature: Optional[str],
) -> SignatureCheck:
    """Valida que el body fue firmado con el secreto del tenant.

    Args:
        secret: Secreto activo del tenant
        raw_body: Body exacto recibido (sin re-serializar)
        provided_signature: Valor del header (None si no vino)

    Returns:
        SignatureCheck(valid=...)
    """
    if not provided_signature:
        return SignatureCheck(valid=False)

    expected = compute_signature(secret, raw_body).encode("ascii")
    provided = provided_signature.encode("utf-8")

    if len(expected) != len(provided):
        return SignatureCheck(valid=False)

    return SignatureCheck(valid=hmac.compare_digest(expected, provided))
