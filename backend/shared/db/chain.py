"""Ordered chains of dependent database operations.

A request's database work is a sequence of stages. Each stage submits one
operation; its callback receives the result and either ends the chain with
``Done(value)`` or continues with ``Next(operation, then)``. The chain length
can therefore depend on earlier results, e.g. only update a row when the
preceding select found one.

Stages of one chain run strictly one after another and the caller only
suspends at stage boundaries. Chains never share state, so any number of them
may run concurrently.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from collections.abc import Callable

    from shared.db.executor import AsyncQueryExecutor, Operation

logger = structlog.get_logger()


@dataclass(frozen=True)
class Done:
    """Final stage outcome; ``value`` becomes the result of the chain."""

    value: Any = None


@dataclass(frozen=True)
class Next:
    """Submit ``operation`` and hand its result to ``then``."""

    operation: Operation
    then: Stage


type Stage = Callable[[Any], Next | Done]


class ChainStateError(RuntimeError):
    """A chain was run more than once."""


class ChainState(StrEnum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class QueryChain:
    """Pending operation chain owned by a single request."""

    def __init__(self, first: Next, *, name: str = "query") -> None:
        self._first = first
        self._name = name
        self._state = ChainState.PENDING
        self._stages_run = 0

    @property
    def state(self) -> ChainState:
        return self._state

    @property
    def stages_run(self) -> int:
        return self._stages_run

    async def run(self, executor: AsyncQueryExecutor) -> Any:  # noqa: ANN401
        """Execute every stage in order and return the value of the final ``Done``.

        Database errors propagate unchanged; there is no retry.
        """
        if self._state != ChainState.PENDING:
            raise ChainStateError(f"{self._name} chain already {self._state}")
        self._state = ChainState.RUNNING

        step: Next | Done = self._first
        try:
            while isinstance(step, Next):
                result = await executor.run(step.operation)
                self._stages_run += 1
                step = step.then(result)
                if not isinstance(step, (Next, Done)):
                    raise TypeError(f"Stage must return Next or Done, got {type(step).__name__}")
        except BaseException:
            self._state = ChainState.FAILED
            raise

        self._state = ChainState.COMPLETED
        logger.debug("query chain completed", chain=self._name, stages=self._stages_run)
        return step.value
