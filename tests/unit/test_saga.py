"""Saga runner: ordered steps, reverse compensation, failure reporting."""

from unittest.mock import AsyncMock

import pytest

from app.application.use_cases.saga import Saga
from app.domain.exceptions import WorkflowFailedException


async def test_steps_run_in_order_and_results_are_keyed_by_name() -> None:
    calls: list[str] = []

    async def first() -> str:
        calls.append("first")
        return "a"

    async def second() -> str:
        calls.append("second")
        return saga.results["first"] + "b"

    saga = Saga("demo").step("first", first).step("second", second)
    assert await saga.run() == {"first": "a", "second": "ab"}
    assert calls == ["first", "second"]


async def test_first_step_failure_reraises_original_error() -> None:
    undo = AsyncMock()
    saga = Saga("demo").step("first", AsyncMock(side_effect=KeyError("x")), undo)
    with pytest.raises(KeyError):
        await saga.run()
    undo.assert_not_awaited()


async def test_later_failure_compensates_completed_steps_in_reverse() -> None:
    order: list[str] = []

    def undo(name: str):
        async def compensate(result) -> None:
            order.append(f"{name}:{result}")

        return compensate

    saga = (
        Saga("demo")
        .step("one", AsyncMock(return_value=1), undo("one"))
        .step("two", AsyncMock(return_value=2), undo("two"))
        .step("three", AsyncMock(side_effect=RuntimeError("store down")))
    )
    with pytest.raises(WorkflowFailedException) as exc_info:
        await saga.run()
    assert order == ["two:2", "one:1"]
    details = exc_info.value.details
    assert details["workflow"] == "demo"
    assert details["step"] == "three"
    assert details["compensated"] == ["two", "one"]
    assert details["compensation_failures"] == []
    assert isinstance(exc_info.value.__cause__, RuntimeError)


async def test_failed_compensation_is_reported_and_others_still_run() -> None:
    undo_one = AsyncMock()
    saga = (
        Saga("demo")
        .step("one", AsyncMock(return_value=1), undo_one)
        .step("two", AsyncMock(return_value=2), AsyncMock(side_effect=RuntimeError("undo failed")))
        .step("three", AsyncMock(side_effect=RuntimeError("boom")))
    )
    with pytest.raises(WorkflowFailedException) as exc_info:
        await saga.run()
    undo_one.assert_awaited_once_with(1)
    assert exc_info.value.details["compensated"] == ["one"]
    assert exc_info.value.details["compensation_failures"] == ["two"]


async def test_steps_without_compensation_are_skipped_on_undo() -> None:
    saga = (
        Saga("demo")
        .step("read", AsyncMock(return_value="x"))
        .step("write", AsyncMock(side_effect=ValueError("bad")))
    )
    with pytest.raises(WorkflowFailedException) as exc_info:
        await saga.run()
    assert exc_info.value.details["compensated"] == []
