"""User response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict

from userhub.api.schemas.result import CamelModel


class UserVO(CamelModel):
    """Public view of a user; the password hash never leaves the service."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    name: str | None = None
    email: str | None = None
    description: str | None = None
    created_by: int | None = None
    last_modified_by: int | None = None
    created_at: datetime
    updated_at: datetime
