"""Users router — create / list / show / update / delete.

Each handler runs: id check → validation pipeline → one service call →
envelope. ``ServiceError`` becomes an informational envelope; anything
else is logged and returned with the ``UNKNOWN`` code.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from userhub.api.binding import (
    BindingResult,
    bind_create_param,
    bind_query_param,
    bind_update_param,
)
from userhub.api.deps import get_optional_user, get_session, get_user_service, get_validator
from userhub.api.queries import AllUsers, ByUsername, list_query_from
from userhub.api.result import deleted_resp, error_resp, info_resp, success_resp
from userhub.api.schemas.result import PageVO, ResultVO
from userhub.api.schemas.user import UserVO
from userhub.api.validation import RequestValidator
from userhub.core.errors import PARAM_ERROR
from userhub.dao.base import Page
from userhub.models.user import User
from userhub.services import ServiceError, ValidationError
from userhub.services.params import UserParam
from userhub.services.user_service import UserService

router = APIRouter()

log = structlog.get_logger(__name__)

RESOURCE = "user"
ID_BLANK = PARAM_ERROR.format("id must not be blank")


def _id_blank(user_id: str | None) -> bool:
    return user_id is None or not user_id.strip()


def _page_vo(page: Page[User]) -> PageVO:
    return PageVO(
        content=[UserVO.model_validate(u) for u in page.content],
        page_no=page.page_no,
        page_size=page.page_size,
        total=page.total,
        total_pages=page.total_pages,
    )


@router.post("", response_model=ResultVO)
async def create(
    binding: BindingResult[UserParam] = Depends(bind_create_param),
    current_user: User | None = Depends(get_optional_user),
    session: AsyncSession = Depends(get_session),
    validator: RequestValidator = Depends(get_validator),
    svc: UserService = Depends(get_user_service),
) -> ResultVO:
    try:
        # binding errors, current user, sign
        rejected = validator.validate(
            binding.param, log=log, errors=binding.errors, current_user=current_user
        )
        if rejected is not None:
            return rejected
        user = await svc.create(session, binding.param, current_user)
        return success_resp(UserVO.model_validate(user))
    except ServiceError as exc:
        await session.rollback()
        return info_resp(exc.error_type, exc.message, log=log)
    except Exception as exc:
        await session.rollback()
        return error_resp(exc, log=log)


@router.get("", response_model=ResultVO)
async def show(
    binding: BindingResult[UserParam] = Depends(bind_query_param),
    session: AsyncSession = Depends(get_session),
    validator: RequestValidator = Depends(get_validator),
    svc: UserService = Depends(get_user_service),
) -> ResultVO:
    param = binding.param
    try:
        rejected = validator.validate_sign(param, log=log)
        if rejected is not None:
            return rejected
        if binding.has_errors:
            raise ValidationError(binding.summary())
        query = list_query_from(param)
        if isinstance(query, ByUsername):
            user = await svc.get_user_by_usr(session, UserParam(usr=query.username))
            return success_resp(UserVO.model_validate(user))
        if isinstance(query, AllUsers):
            users = await svc.get_all_users(session)
            return success_resp([UserVO.model_validate(u) for u in users])
        page = await svc.get_page(session, query.request)
        return success_resp(_page_vo(page))
    except ServiceError as exc:
        await session.rollback()
        return info_resp(exc.error_type, exc.message, log=log)
    except Exception as exc:
        await session.rollback()
        return error_resp(exc, log=log)


@router.get("/{user_id}", response_model=ResultVO)
async def show_by_id(
    user_id: str,
    sign: str | None = None,
    session: AsyncSession = Depends(get_session),
    validator: RequestValidator = Depends(get_validator),
    svc: UserService = Depends(get_user_service),
) -> ResultVO:
    try:
        if _id_blank(user_id):
            return info_resp(PARAM_ERROR, ID_BLANK, log=log)
        # not pre-validated: a non-numeric id ends up as UNKNOWN
        param = UserParam(id=int(user_id), sign=sign)
        rejected = validator.validate_sign(param, log=log)
        if rejected is not None:
            return rejected
        user = await svc.get_user_by_id(session, param)
        return success_resp(UserVO.model_validate(user))
    except ServiceError as exc:
        await session.rollback()
        return info_resp(exc.error_type, exc.message, log=log)
    except Exception as exc:
        await session.rollback()
        return error_resp(exc, log=log)


@router.put("/{user_id}", response_model=ResultVO)
async def update(
    user_id: str,
    binding: BindingResult[UserParam] = Depends(bind_update_param),
    current_user: User | None = Depends(get_optional_user),
    session: AsyncSession = Depends(get_session),
    validator: RequestValidator = Depends(get_validator),
    svc: UserService = Depends(get_user_service),
) -> ResultVO:
    try:
        if _id_blank(user_id):
            return info_resp(PARAM_ERROR, ID_BLANK, log=log)
        param = binding.param
        param.id = int(user_id)
        rejected = validator.validate(
            param, log=log, errors=binding.errors, current_user=current_user
        )
        if rejected is not None:
            return rejected
        user = await svc.update(session, param, current_user)
        return success_resp(UserVO.model_validate(user))
    except ServiceError as exc:
        await session.rollback()
        return info_resp(exc.error_type, exc.message, log=log)
    except Exception as exc:
        await session.rollback()
        return error_resp(exc, log=log)


@router.delete("/{user_id}", response_model=ResultVO)
async def delete(
    user_id: str,
    sign: str | None = None,
    current_user: User | None = Depends(get_optional_user),
    session: AsyncSession = Depends(get_session),
    validator: RequestValidator = Depends(get_validator),
    svc: UserService = Depends(get_user_service),
) -> ResultVO:
    try:
        if _id_blank(user_id):
            return info_resp(PARAM_ERROR, ID_BLANK, log=log)
        param = UserParam(id=int(user_id), sign=sign)
        # Signature only: unlike create/update, a missing current user is
        # not rejected here. Kept as-is; see DESIGN.md (delete asymmetry).
        rejected = validator.validate_sign(param, log=log)
        if rejected is not None:
            return rejected
        await svc.delete(session, param, current_user)
        return deleted_resp(RESOURCE)
    except ServiceError as exc:
        await session.rollback()
        return info_resp(exc.error_type, exc.message, log=log)
    except Exception as exc:
        await session.rollback()
        return error_resp(exc, log=log)
