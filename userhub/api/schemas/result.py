"""Result envelope and page schemas."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_serializer
from pydantic.alias_generators import to_camel


class ResultStatus(str, Enum):
    OK = "OK"
    ERROR = "ERROR"


class OperationStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


class CamelModel(BaseModel):
    """Outgoing schema with camelCase wire names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResultVO(CamelModel):
    """Uniform response body for every user endpoint.

    ``code`` is always set; ``data`` is only serialized when present.
    """

    status: ResultStatus
    operation_status: OperationStatus
    code: str
    message: str
    data: Any = None

    @model_serializer(mode="wrap")
    def _drop_empty_data(self, handler):
        out = handler(self)
        if self.data is None:
            out.pop("data", None)
        return out


class PageVO(CamelModel):
    content: list[Any]
    page_no: int
    page_size: int
    total: int
    total_pages: int
