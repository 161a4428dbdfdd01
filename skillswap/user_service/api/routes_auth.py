from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from skillswap.core.errors import raise_for_result
from skillswap.core.result import ErrorKind
from skillswap.core.security import get_current_user_id
from skillswap.db.database import get_async_session
from .. import schemas, service

router = APIRouter(tags=["Authentication"])
users_router = APIRouter(tags=["Users"])


@router.post("/register", response_model=schemas.UserOut, status_code=201)
async def register(user_data: schemas.UserCreate, db: AsyncSession = Depends(get_async_session)):
    return raise_for_result(await service.register_user(user_data, db))


@router.post("/login", response_model=schemas.Token)
async def login(form: schemas.UserLogin, db: AsyncSession = Depends(get_async_session)):
    result = await service.login_user(form, db)
    if result.kind == ErrorKind.FORBIDDEN:
        raise HTTPException(status_code=401, detail=result.message)
    return raise_for_result(result)


@router.get("/users/me", response_model=schemas.UserOut)
async def read_current_user(user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_async_session)):
    return raise_for_result(await service.get_profile(user_id, db))


@users_router.get("/", response_model=List[schemas.UserOut])
async def list_users(db: AsyncSession = Depends(get_async_session)):
    return raise_for_result(await service.list_users(db))


@users_router.get("/me", response_model=schemas.UserOut)
async def read_me(user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_async_session)):
    return raise_for_result(await service.get_profile(user_id, db))


@users_router.get("/{user_id}", response_model=schemas.UserOut)
async def get_user(user_id: int, db: AsyncSession = Depends(get_async_session)):
    return raise_for_result(await service.get_profile(user_id, db))


@users_router.patch("/me", response_model=schemas.UserOut)
async def update_me(
    data: schemas.ProfileUpdate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
):
    fields = data.model_dump(exclude_unset=True)
    return raise_for_result(await service.update_profile(user_id, fields, db))
