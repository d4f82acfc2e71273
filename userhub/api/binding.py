"""Request binding — raw query/body parameters → typed param + field errors."""

from __future__ import annotations

import json
from collections.abc import Callable, Coroutine, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from fastapi import Request
from pydantic import AliasChoices, BaseModel
from pydantic import ValidationError as PydanticValidationError

from userhub.services.params import UserParam

ParamT = TypeVar("ParamT", bound=BaseModel)

BLANK_MESSAGE = "must not be blank"

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


@dataclass(frozen=True)
class FieldError:
    """One field-level violation."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass
class BindingResult(Generic[ParamT]):
    """Bound param plus every violation found while binding it.

    ``param`` always exists; fields that failed validation keep their
    defaults.
    """

    param: ParamT
    errors: list[FieldError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def summary(self) -> str:
        return "; ".join(str(e) for e in self.errors)


def _wire_name(model: type[BaseModel], name: str) -> str:
    info = model.model_fields[name]
    return info.alias or name


def _input_keys(model: type[BaseModel], name: str) -> set[str]:
    """Every key under which field *name* may arrive."""
    info = model.model_fields[name]
    keys = {name}
    if info.alias:
        keys.add(info.alias)
    if isinstance(info.validation_alias, str):
        keys.add(info.validation_alias)
    elif isinstance(info.validation_alias, AliasChoices):
        keys.update(c for c in info.validation_alias.choices if isinstance(c, str))
    return keys


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def bind(
    model: type[ParamT],
    data: Mapping[str, Any],
    *,
    required: Iterable[str] = (),
    fields: Iterable[str] | None = None,
) -> BindingResult[ParamT]:
    """Validate *data* into *model*, collecting violations instead of raising.

    Blank strings count as absent. Fields that fail validation are dropped
    and the remaining ones are bound again, so the caller still gets a usable
    param. When *fields* is given, every other input key is ignored. Names in
    *required* and *fields* are Python field names.
    """
    keys = {
        key: name
        for name in (model.model_fields if fields is None else fields)
        for key in _input_keys(model, name)
    }
    present = {k: v for k, v in data.items() if k in keys and not _is_blank(v)}

    errors: list[FieldError] = []
    failed: set[str] = set()
    try:
        param = model.model_validate(present)
    except PydanticValidationError as exc:
        for err in exc.errors():
            loc = err["loc"]
            key = str(loc[0]) if loc else "body"
            failed.add(keys.get(key, key))
            errors.append(FieldError(".".join(str(part) for part in loc) or key, err["msg"]))
        clean = {k: v for k, v in present.items() if keys[k] not in failed}
        try:
            param = model.model_validate(clean)
        except PydanticValidationError:
            param = model()

    for name in required:
        if name in failed:
            continue
        if _is_blank(getattr(param, name)):
            errors.append(FieldError(_wire_name(model, name), BLANK_MESSAGE))

    return BindingResult(param=param, errors=errors)


def _media_type(request: Request) -> str:
    return request.headers.get("content-type", "").split(";", 1)[0].strip().lower()


async def _raw_params(request: Request) -> tuple[dict[str, Any], list[FieldError]]:
    """Merge query string and the form or JSON body; the body wins on key clashes."""
    data: dict[str, Any] = dict(request.query_params)
    errors: list[FieldError] = []
    if _media_type(request) in _FORM_TYPES:
        form = await request.form()
        data.update(form)
        return data, errors

    body = await request.body()
    if body:
        try:
            payload = json.loads(body)
        except ValueError:
            errors.append(FieldError("body", "invalid JSON"))
        else:
            if isinstance(payload, dict):
                data.update(payload)
            else:
                errors.append(FieldError("body", "expected a JSON object"))
    return data, errors


def param_binder(
    model: type[ParamT],
    *,
    required: Iterable[str] = (),
    fields: Iterable[str] | None = None,
) -> Callable[[Request], Coroutine[Any, Any, BindingResult[ParamT]]]:
    """Build a FastAPI dependency that binds *model* from the request."""
    required = tuple(required)
    fields = tuple(fields) if fields is not None else None

    async def _bind(request: Request) -> BindingResult[ParamT]:
        data, errors = await _raw_params(request)
        result = bind(model, data, required=required, fields=fields)
        result.errors[:0] = errors
        return result

    return _bind


bind_create_param = param_binder(UserParam, required=("usr", "pwd"))
bind_update_param = param_binder(UserParam)
# the list endpoint only reads the filter, paging and sign fields
bind_query_param = param_binder(
    UserParam, fields=("usr", "page_no", "page_size", "sort_by", "sign")
)
