"""Opaque single-use tokens for links sent by email.

Only the SHA-256 digest of a token is ever stored; the raw value exists
in the email link alone.
"""

import hashlib
import secrets
from dataclasses import dataclass

TOKEN_BYTES = 32


def hash_one_time_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class OneTimeToken:
    raw: str
    digest: str

    @classmethod
    def generate(cls) -> "OneTimeToken":
        raw = secrets.token_urlsafe(TOKEN_BYTES)
        return cls(raw=raw, digest=hash_one_time_token(raw))
