"""Tests for the validation pipeline."""

from unittest.mock import MagicMock

import pytest

from userhub.api.binding import FieldError
from userhub.api.validation import RequestValidator
from userhub.core.signing import SignVerifier
from userhub.models.user import User
from userhub.services.params import UserParam

SECRET = "test-sign-secret"


@pytest.fixture
def verifier():
    return SignVerifier(SECRET)


@pytest.fixture
def validator(verifier):
    return RequestValidator(verifier)


@pytest.fixture
def log():
    return MagicMock()


def _user() -> User:
    return User(id=1, username="admin", password_hash="x")


def _signed(verifier: SignVerifier, **fields) -> UserParam:
    param = UserParam(**fields)
    param.sign = verifier.sign(param.sign_fields())
    return param


class TestValidate:
    def test_passes(self, validator, verifier, log):
        param = _signed(verifier, usr="alice", pwd="secret1")
        assert validator.validate(param, log=log, current_user=_user()) is None
        log.info.assert_not_called()

    def test_unsigned_passes(self, validator, log):
        assert validator.validate(UserParam(usr="alice"), log=log, current_user=_user()) is None

    def test_binding_errors_first(self, validator, log):
        errors = [FieldError("pwd", "must not be blank")]
        resp = validator.validate(
            UserParam(usr="alice", sign="bad-sign"), log=log, errors=errors, current_user=None
        )
        assert resp.code == "SYS0002"
        assert resp.message == "Param error: pwd: must not be blank"
        log.info.assert_called_once()

    def test_missing_user_before_sign(self, validator, log):
        resp = validator.validate(UserParam(usr="alice", sign="bad-sign"), log=log)
        assert resp.code == "SYS0003"

    def test_bad_sign(self, validator, log):
        resp = validator.validate(
            UserParam(usr="alice", sign="bad-sign"), log=log, current_user=_user()
        )
        assert resp.code == "SYS0004"
        assert resp.status.value == "ERROR"

    def test_param_required(self, validator, log):
        with pytest.raises(ValueError, match="param"):
            validator.validate(None, log=log)


class TestValidateSign:
    def test_skips_user_check(self, validator, log):
        assert validator.validate_sign(UserParam(id=42), log=log) is None

    def test_valid_sign(self, validator, verifier, log):
        assert validator.validate_sign(_signed(verifier, id=42), log=log) is None

    def test_bad_sign(self, validator, log):
        resp = validator.validate_sign(UserParam(id=42, sign="bad-sign"), log=log)
        assert resp.code == "SYS0004"

    def test_sign_covers_every_field(self, validator, verifier, log):
        param = _signed(verifier, id=42)
        param.name = "mallory"
        assert validator.validate_sign(param, log=log).code == "SYS0004"

    def test_no_secret_configured(self, log, monkeypatch):
        monkeypatch.delenv("USERHUB_SIGN_SECRET", raising=False)
        resp = RequestValidator(SignVerifier()).validate_sign(
            UserParam(id=42, sign="bad-sign"), log=log
        )
        assert resp.code == "SYS0004"
