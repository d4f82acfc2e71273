"""Tests for request signatures."""

import hashlib
import hmac
import os
from unittest.mock import patch

import pytest

from userhub.core.signing import SignVerifier, canonicalize

SECRET = "test-sign-secret"


class TestCanonicalize:
    def test_sorted_and_joined(self):
        assert canonicalize({"usr": "alice", "id": 7}) == "id=7&usr=alice"

    def test_skips_none_and_sign(self):
        assert canonicalize({"id": 7, "name": None, "sign": "abc"}) == "id=7"

    def test_booleans_lowercase(self):
        assert canonicalize({"active": True}) == "active=true"

    def test_empty(self):
        assert canonicalize({}) == ""


class TestSignVerifier:
    def test_sign_is_hmac_sha256_hex(self):
        expected = hmac.new(SECRET.encode(), b"id=42", hashlib.sha256).hexdigest()
        assert SignVerifier(SECRET).sign({"id": 42}) == expected

    def test_verify_roundtrip(self):
        verifier = SignVerifier(SECRET)
        fields = {"usr": "alice", "pageNo": 2}
        assert verifier.verify(fields, verifier.sign(fields))

    def test_verify_accepts_uppercase_hex(self):
        verifier = SignVerifier(SECRET)
        assert verifier.verify({"id": 1}, verifier.sign({"id": 1}).upper())

    def test_tampered_field_fails(self):
        verifier = SignVerifier(SECRET)
        sig = verifier.sign({"id": 1})
        assert not verifier.verify({"id": 2}, sig)

    def test_other_secret_fails(self):
        sig = SignVerifier("other").sign({"id": 1})
        assert not SignVerifier(SECRET).verify({"id": 1}, sig)

    def test_no_secret_rejects_everything(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("USERHUB_SIGN_SECRET", None)
            verifier = SignVerifier()
            assert not verifier.verify({"id": 1}, "bad-sign")
            with pytest.raises(RuntimeError, match="USERHUB_SIGN_SECRET"):
                verifier.sign({"id": 1})

    def test_secret_read_from_env(self):
        with patch.dict(os.environ, {"USERHUB_SIGN_SECRET": SECRET}):
            sig = SignVerifier().sign({"id": 1})
        assert sig == SignVerifier(SECRET).sign({"id": 1})
