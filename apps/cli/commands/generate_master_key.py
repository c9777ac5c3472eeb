from __future__ import annotations

import argparse
import base64
from typing import Sequence

from burnlink.contexts.secret_messages.adapters.outbound import AesGcmSecretCipher

_MASTER_KEY_ENV_KEY = "SECRETS_MASTER_KEY_B64"


class GenerateMasterKeyCli:
    """
    GenerateMasterKeyCli — print a fresh base64 AES-256 master key for secret messages.

    Related:
      - src/burnlink/contexts/secret_messages/adapters/outbound/security/aes_gcm_secret_cipher.py
      - apps/api/wiring/modules/secret_messages.py
    """

    def run(self, argv: Sequence[str]) -> int:
        ns = _build_parser().parse_args(list(argv))

        encoded = base64.b64encode(AesGcmSecretCipher.generate_master_key()).decode("ascii")
        if ns.output_format == "env":
            print(f"{_MASTER_KEY_ENV_KEY}={encoded}")
        else:
            print(encoded)
        return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="generate-master-key")
    p.add_argument(
        "--format",
        dest="output_format",
        choices=["raw", "env"],
        default="raw",
        help="Output format: raw base64 or KEY=value line for .env files (default: raw)",
    )
    return p
