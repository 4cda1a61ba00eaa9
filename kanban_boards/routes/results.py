"""Translate service results into HTTP responses"""

import logging
from dataclasses import asdict

from fastapi import HTTPException

from kanban_boards.failures import Failure, InputError
from kanban_boards.result import Result

logger = logging.getLogger(__name__)


def failure_detail(failure: Failure) -> dict:
    detail = {"error_code": failure.error_code, "message": failure.message}
    if isinstance(failure, InputError):
        detail["violations"] = [asdict(v) for v in failure.violations]
    elif failure.context:
        detail["context"] = failure.context
    return detail


def unwrap(result: Result):
    """Return the success value or raise the matching HTTPException"""
    if result.is_success:
        return result.value
    failure = result.failure
    if failure.status_code >= 500:
        logger.error(f"Request failed: {failure.error_code}: {failure.message}")
    raise HTTPException(status_code=failure.status_code, detail=failure_detail(failure))
