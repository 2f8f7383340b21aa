"""CLI para firmar payloads de ingesta (integración de dispositivos).

Ejemplos:
    temp-ingest-sign payload.json --secret s3cr3t
    cat payload.json | INGEST_SECRET=s3cr3t temp-ingest-sign -
    temp-ingest-sign payload.json --secret s3cr3t --curl http://localhost:8000/ingest/temperature
"""

from __future__ import annotations

import argparse
import logging
import os
import shlex
import sys
from typing import Optional, Sequence

from ..auth import SIGNATURE_HEADER, compute_signature

logger = logging.getLogger(__name__)


def _read_body(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    with open(path, "rb") as f:
        return f.read()


def build_curl_command(url: str, body: bytes, signature: str) -> str:
    return " ".join(
        [
            "curl",
            "-X",
            "POST",
            shlex.quote(url),
            "-H",
            shlex.quote("Content-Type: application/json"),
            "-H",
            shlex.quote(f"{SIGNATURE_HEADER}: {signature}"),
            "--data-binary",
            shlex.quote(body.decode("utf-8")),
        ]
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    p = argparse.ArgumentParser(description=f"Firma un payload de ingesta ({SIGNATURE_HEADER})")
    p.add_argument("payload", help="archivo JSON con el body exacto a enviar, o '-' para stdin")
    p.add_argument("--secret", default=None, help="secreto de ingesta del tenant (default: $INGEST_SECRET)")
    p.add_argument("--curl", metavar="URL", default=None, help="imprime un comando curl listo para enviar")
    args = p.parse_args(argv)

    secret = args.secret or os.getenv("INGEST_SECRET")
    if not secret:
        logger.error("Falta el secreto: usar --secret o INGEST_SECRET")
        return 2

    try:
        body = _read_body(args.payload)
    except OSError as e:
        logger.error("No se pudo leer el payload: %s", e)
        return 2

    if not body:
        logger.error("Payload vacío")
        return 2

    signature = compute_signature(secret, body)
    if args.curl:
        print(build_curl_command(args.curl, body, signature))
    else:
        print(signature)
    return 0


if __name__ == "__main__":
    sys.exit(main())
