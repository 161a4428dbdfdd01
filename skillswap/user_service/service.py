import logging
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.core import security
from skillswap.core.result import ErrorKind, Result
from .repository import UserRepository
from .schemas import UserCreate, UserLogin

logger = logging.getLogger("user_service")


async def register_user(data: UserCreate, session: AsyncSession) -> Result:
    users = UserRepository(session)
    try:
        if await users.get_by_email(data.email):
            logger.warning(f"Registration refused, email {data.email} already registered")
            return Result.invalid("Email is already registered")
        user = await users.create(
            name=data.name.strip(),
            email=data.email,
            password_hash=security.get_password_hash(data.password),
            bio=data.bio,
            location=data.location,
            skills_have=data.skills_have,
            skills_to_learn=data.skills_to_learn,
        )
        await session.commit()
    except IntegrityError:
        await session.rollback()
        return Result.invalid("Could not register user")
    except SQLAlchemyError as e:
        await session.rollback()
        logger.exception("Error in register_user")
        return Result.backend(e)
    logger.info(f"Registered user {user.id}")
    return Result.success(user)


async def login_user(data: UserLogin, session: AsyncSession) -> Result:
    try:
        user = await UserRepository(session).get_by_email(data.email)
    except SQLAlchemyError as e:
        logger.exception("Error in login_user")
        return Result.backend(e)
    if not user or not security.verify_password(data.password, user.password_hash):
        return Result.failure(ErrorKind.FORBIDDEN, "Invalid email or password")
    token = security.create_access_token({"user_id": user.id})
    return Result.success({"access_token": token, "token_type": "bearer"})


async def get_profile(user_id: int, session: AsyncSession) -> Result:
    try:
        user = await UserRepository(session).get(user_id)
    except SQLAlchemyError as e:
        logger.exception("Error in get_profile")
        return Result.backend(e)
    if not user:
        return Result.not_found("User not found")
    return Result.success(user)


async def update_profile(user_id: int, fields: Dict[str, Any], session: AsyncSession) -> Result:
    if "name" in fields and not (fields["name"] or "").strip():
        return Result.invalid("Name must not be blank")
    try:
        user = await UserRepository(session).update(user_id, fields)
        if not user:
            return Result.not_found("User not found")
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.exception("Error in update_profile")
        return Result.backend(e)
    logger.info(f"Updated profile of user {user_id}: {sorted(fields)}")
    return Result.success(user)


async def list_users(session: AsyncSession) -> Result:
    try:
        return Result.success(await UserRepository(session).get_all())
    except SQLAlchemyError as e:
        logger.exception("Error in list_users")
        return Result.backend(e)
