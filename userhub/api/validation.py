"""Validation pipeline — binding errors, current user, request signature.

Every check returns an informational :class:`ResultVO` on failure and
``None`` when the request may proceed. The first failing check wins.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from userhub.api.binding import FieldError
from userhub.api.result import info_resp
from userhub.api.schemas.result import ResultVO
from userhub.core.errors import PARAM_ERROR, SIGN_ERROR, UNAUTHORIZED
from userhub.core.signing import SignVerifier
from userhub.models.user import User
from userhub.services.params import UserParam


class RequestValidator:
    """Runs the fixed check sequence shared by all user endpoints."""

    def __init__(self, verifier: SignVerifier) -> None:
        self._verifier = verifier

    def validate(
        self,
        param: UserParam,
        *,
        log: Any,
        errors: Sequence[FieldError] = (),
        current_user: User | None = None,
    ) -> ResultVO | None:
        """Full pipeline for mutating endpoints.

        1. binding errors → SYS0002
        2. no current user → SYS0003
        3. signature mismatch → SYS0004
        """
        self._require_param(param)
        if errors:
            detail = "; ".join(str(e) for e in errors)
            return info_resp(PARAM_ERROR, PARAM_ERROR.format(detail), log=log)
        if current_user is None:
            return info_resp(UNAUTHORIZED, UNAUTHORIZED.format("current user is required"), log=log)
        return self._check_sign(param, log)

    def validate_sign(self, param: UserParam, *, log: Any) -> ResultVO | None:
        """Signature-only pipeline for anonymous-capable endpoints."""
        self._require_param(param)
        return self._check_sign(param, log)

    @staticmethod
    def _require_param(param: UserParam | None) -> None:
        if param is None:
            raise ValueError("param must not be None")

    def _check_sign(self, param: UserParam, log: Any) -> ResultVO | None:
        if not param.sign:
            return None
        if self._verifier.verify(param.sign_fields(), param.sign):
            return None
        return info_resp(SIGN_ERROR, SIGN_ERROR.format("signature mismatch"), log=log)
