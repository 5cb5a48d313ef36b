"""
Base service class.

Provides common functionality for all service classes including session
management, logging and helper decorators.
"""

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class BaseService:
    """
    Base service class.

    Holds the session and a logger bound to the concrete service name.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize base service.

        Args:
            session: Async database session
        """
        self.session = session
        self.logger = logger.bind(service=self.__class__.__name__)

    async def commit(self) -> None:
        """Commit current transaction."""
        await self.session.commit()

    async def rollback(self) -> None:
        """Rollback current transaction."""
        await self.session.rollback()


def transaction(func: Callable[..., T]) -> Callable[..., T]:
    """
    Run a service method as one database transaction.

    Commits on success, rolls back and re-raises on exception.

    Usage:
        @transaction
        async def invest_in_plan(self, user_id: int, plan_id: int):
            ...

    Args:
        func: Async method to wrap

    Returns:
        Wrapped async method
    """
    @functools.wraps(func)
    async def wrapper(self: BaseService, *args: Any, **kwargs: Any) -> Any:
        try:
            result = await func(self, *args, **kwargs)
            await self.commit()
            return result
        except Exception as e:
            await self.rollback()
            self.logger.warning(
                "Transaction rolled back in {}: {}",
                func.__name__,
                e,
                extra={
                    "error": str(e),
                    "function": func.__name__,
                },
            )
            raise

    return wrapper


def log_operation(func: Callable[..., T]) -> Callable[..., T]:
    """
    Log method entry and exit with timing.

    Args:
        func: Async method to wrap

    Returns:
        Wrapped async method
    """
    @functools.wraps(func)
    async def wrapper(self: BaseService, *args: Any, **kwargs: Any) -> Any:
        start_time = time.time()
        self.logger.info(
            f"Starting {func.__name__}",
            extra={"function": func.__name__},
        )

        try:
            result = await func(self, *args, **kwargs)
        except Exception as e:
            self.logger.error(
                f"Failed {func.__name__}",
                extra={
                    "function": func.__name__,
                    "duration_seconds": round(time.time() - start_time, 3),
                    "error": str(e),
                    "success": False,
                },
                exc_info=True,
            )
            raise

        self.logger.info(
            f"Completed {func.__name__}",
            extra={
                "function": func.__name__,
                "duration_seconds": round(time.time() - start_time, 3),
                "success": True,
            },
        )
        return result

    return wrapper
