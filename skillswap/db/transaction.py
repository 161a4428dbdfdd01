import functools
import logging
import traceback

from sqlalchemy.exc import SQLAlchemyError

from skillswap.core.result import Result

logger = logging.getLogger("transaction")


def transactional(func):
    """
    Run a service method as one unit of work on ``self.session``.

    A successful Result commits, a failure Result rolls back, and a database
    error rolls back and becomes a BACKEND_FAILURE result. Every write the
    method made therefore lands together or not at all.
    """
    @functools.wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            result = await func(self, *args, **kwargs)
            if result.is_success:
                await self.session.commit()
            else:
                await self.session.rollback()
            return result
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Error in {func.__qualname__}: {e}")
            logger.error(traceback.format_exc())
            return Result.backend(e)
    return wrapper
