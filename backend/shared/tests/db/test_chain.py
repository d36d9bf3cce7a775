"""Tests for QueryChain stage sequencing."""

from __future__ import annotations

import pytest

from shared.db.chain import ChainState, ChainStateError, Done, Next, QueryChain
from shared.db.executor import Execute, Query


class RecordingExecutor:
    """Records submitted operations and answers from a canned result list."""

    def __init__(self, *results):
        self.submitted = []
        self._results = list(results)

    async def run(self, operation):
        self.submitted.append(operation)
        result = self._results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


SELECT = Query("SELECT 1")
UPDATE = Execute("UPDATE t SET a = 1")


class TestQueryChain:
    async def test_single_stage_returns_done_value(self):
        executor = RecordingExecutor([{"id": 1}])
        chain = QueryChain(Next(SELECT, lambda rows: Done(len(rows))))

        assert await chain.run(executor) == 1
        assert executor.submitted == [SELECT]
        assert chain.state == ChainState.COMPLETED
        assert chain.stages_run == 1

    async def test_stages_run_in_order_and_receive_previous_result(self):
        executor = RecordingExecutor(["row"], 1)
        seen = []

        def first(rows):
            seen.append(rows)
            return Next(UPDATE, second)

        def second(rowcount):
            seen.append(rowcount)
            return Done("ticket")

        result = await QueryChain(Next(SELECT, first)).run(executor)

        assert result == "ticket"
        assert seen == [["row"], 1]
        assert executor.submitted == [SELECT, UPDATE]

    async def test_branch_can_end_early(self):
        executor = RecordingExecutor([])

        def on_rows(rows):
            if not rows:
                return Done(None)
            return Next(UPDATE, lambda _: Done("updated"))

        chain = QueryChain(Next(SELECT, on_rows))

        assert await chain.run(executor) is None
        assert executor.submitted == [SELECT]

    async def test_done_without_value(self):
        chain = QueryChain(Next(SELECT, lambda _: Done()))
        assert await chain.run(RecordingExecutor([])) is None

    async def test_chain_runs_only_once(self):
        executor = RecordingExecutor([], [])
        chain = QueryChain(Next(SELECT, lambda _: Done(True)), name="login")
        await chain.run(executor)

        with pytest.raises(ChainStateError, match="login chain already completed"):
            await chain.run(executor)
        assert executor.submitted == [SELECT]

    async def test_database_error_propagates_and_marks_failed(self):
        executor = RecordingExecutor(RuntimeError("disk I/O error"))
        chain = QueryChain(Next(SELECT, lambda _: Done(True)))

        with pytest.raises(RuntimeError, match="disk I/O error"):
            await chain.run(executor)
        assert chain.state == ChainState.FAILED
        assert chain.stages_run == 0

    async def test_failed_chain_cannot_be_rerun(self):
        chain = QueryChain(Next(SELECT, lambda _: Done(True)))
        with pytest.raises(RuntimeError):
            await chain.run(RecordingExecutor(RuntimeError("boom")))

        with pytest.raises(ChainStateError):
            await chain.run(RecordingExecutor([]))

    async def test_stage_error_propagates(self):
        def broken(_rows):
            raise KeyError("login_ticket")

        chain = QueryChain(Next(SELECT, broken))

        with pytest.raises(KeyError):
            await chain.run(RecordingExecutor([]))
        assert chain.state == ChainState.FAILED

    async def test_stage_must_return_next_or_done(self):
        chain = QueryChain(Next(SELECT, lambda rows: rows))

        with pytest.raises(TypeError, match="Stage must return Next or Done"):
            await chain.run(RecordingExecutor([]))
        assert chain.state == ChainState.FAILED

    def test_new_chain_is_pending(self):
        chain = QueryChain(Next(SELECT, lambda _: Done()))
        assert chain.state == ChainState.PENDING
        assert chain.stages_run == 0
