"""Error boundary shared by every handler.

Domain failures become result messages; anything unexpected is logged
with its traceback and reported with a generic message, so no exception
reaches the caller.
"""

from __future__ import annotations

from typing import Awaitable, Callable

import structlog

from storefront.application.dto import UseCaseResult
from storefront.domain.exceptions import DomainException, ValidationError

logger = structlog.get_logger(__name__)


async def run_use_case(
    operation: str,
    action: Callable[[], Awaitable[UseCaseResult]],
    failure_message: str,
) -> UseCaseResult:
    try:
        return await action()
    except ValidationError as exc:
        logger.info("use_case_rejected", operation=operation, reason=str(exc))
        return UseCaseResult.invalid([str(exc)], message=str(exc))
    except DomainException as exc:
        logger.info("use_case_rejected", operation=operation, reason=str(exc))
        return UseCaseResult.fail(str(exc))
    except Exception:
        logger.exception("use_case_failed", operation=operation)
        return UseCaseResult.fail(failure_message)
