"""Tests for single-use emailed tokens."""

import hashlib

from mathquest_auth import OneTimeToken, hash_one_time_token


class TestOneTimeToken:
    def test_digest_is_sha256_of_raw(self):
        token = OneTimeToken.generate()

        assert token.digest == hashlib.sha256(token.raw.encode()).hexdigest()
        assert hash_one_time_token(token.raw) == token.digest

    def test_raw_is_url_safe(self):
        raw = OneTimeToken.generate().raw

        assert len(raw) >= 43
        assert all(c.isalnum() or c in "-_" for c in raw)

    def test_tokens_are_unique(self):
        assert len({OneTimeToken.generate().raw for _ in range(20)}) == 20
