"""Execution helpers shared by the application services"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, TypeVar

from kanban_boards.failures import Failure, internal_error
from kanban_boards.result import Result

logger = logging.getLogger(__name__)

T = TypeVar("T")


def best_effort(action: Callable[[], T], description: str) -> Optional[T]:
    """Run a secondary step whose failure must not fail the primary operation

    Exceptions are logged and swallowed; the step's return value, or None on
    failure, is handed back.
    """
    try:
        return action()
    except Exception as e:
        logger.error(f"Best-effort step failed ({description}): {e}", exc_info=True)
        return None


def attempt(action: Callable[[], T], error_code: str, context: Optional[dict] = None) -> Result[T]:
    """Run a repository or domain call, turning an exception into an InternalError"""
    try:
        return Result.ok(action())
    except Exception as e:
        logger.error(f"{error_code}: {e}", exc_info=True)
        return Result.fail(internal_error(str(e), error_code, context))


@dataclass(frozen=True)
class CascadeStep:
    name: str
    action: Callable[[], object]
    error_code: str = "CASCADE_STEP_FAILED"


def run_cascade(steps: List[CascadeStep]) -> Result[None]:
    """Run steps in order, stopping at the first failure

    Steps that already ran are not compensated.
    """
    for index, step in enumerate(steps):
        try:
            step.action()
        except Exception as e:
            logger.error(f"Cascade step '{step.name}' failed, skipping {len(steps) - index - 1} remaining", exc_info=True)
            failure: Failure = internal_error(str(e), step.error_code, {"step": step.name})
            return Result.fail(failure)
        logger.debug(f"Cascade step '{step.name}' done")
    return Result.ok()
