"""Command parameters accepted by the user service."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserParam(BaseModel):
    """Every parameter a user endpoint may receive.

    All fields are optional; which ones are mandatory depends on the
    endpoint and is checked at binding time.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    id: int | None = None
    usr: str | None = Field(
        default=None,
        validation_alias=AliasChoices("usr", "username"),
        min_length=1,
        max_length=64,
    )
    pwd: str | None = Field(
        default=None,
        validation_alias=AliasChoices("pwd", "password"),
        min_length=6,
        max_length=128,
    )
    name: str | None = Field(default=None, max_length=64)
    email: str | None = Field(default=None, max_length=255, pattern=_EMAIL_PATTERN)
    description: str | None = Field(default=None, max_length=255)
    page_no: int | None = Field(default=None, ge=1)
    page_size: int | None = Field(default=None, ge=1, le=100)
    sort_by: str | None = None
    sign: str | None = None

    def sign_fields(self) -> dict[str, Any]:
        """Wire-named fields covered by the request signature."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"sign"})
