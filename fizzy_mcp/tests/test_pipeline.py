"""Tests for step pipeline sequencing."""

import asyncio
from unittest.mock import AsyncMock

from fizzy_mcp.pipeline import Sequencing, StepItem, StepPipeline


class RecordingClient:
    """Stands in for FizzyClient and records the order of events."""

    def __init__(self):
        self.events: list[tuple] = []
        self._next_id = 0

    async def add_step(self, card_number, content):
        self.events.append(("add_start", content))
        await asyncio.sleep(0)
        self._next_id += 1
        step_id = f"s{self._next_id}-{content}"
        self.events.append(("add_done", content))
        return step_id

    async def update_step(self, card_number, step_id, completed):
        self.events.append(("update", step_id, completed))


class TestPolicies:
    """Pipelines declare their sequencing."""

    def test_add_steps_is_concurrent(self):
        pipeline = StepPipeline.add_steps(["a", "b"])
        assert pipeline.policy is Sequencing.CONCURRENT
        assert pipeline.items == [StepItem("a"), StepItem("b")]

    def test_sync_todos_is_sequential(self):
        pipeline = StepPipeline.sync_todos([StepItem("a", True)])
        assert pipeline.policy is Sequencing.SEQUENTIAL


class TestSequentialRun:
    """Sequential pipelines preserve order and create before completing."""

    async def test_order_and_completion(self):
        client = RecordingClient()
        pipeline = StepPipeline.sync_todos([StepItem("a", True), StepItem("b", False)])

        step_ids = await pipeline.run(client, 7)

        assert step_ids == ["s1-a", "s2-b"]
        assert client.events == [
            ("add_start", "a"),
            ("add_done", "a"),
            ("update", "s1-a", True),
            ("add_start", "b"),
            ("add_done", "b"),
        ]

    async def test_no_update_for_incomplete_items(self):
        client = AsyncMock()
        client.add_step.return_value = "s1"

        await StepPipeline.sync_todos([StepItem("a")]).run(client, 7)

        client.add_step.assert_awaited_once_with(7, "a")
        client.update_step.assert_not_called()


class TestConcurrentRun:
    """Concurrent pipelines dispatch front-to-back without waiting."""

    async def test_dispatch_order_and_overlap(self):
        client = RecordingClient()

        step_ids = await StepPipeline.add_steps(["a", "b", "c"]).run(client, 7)

        starts = [content for event, content in client.events if event == "add_start"]
        assert starts == ["a", "b", "c"]
        # All requests are in flight before the first one completes
        assert client.events[:3] == [("add_start", "a"), ("add_start", "b"), ("add_start", "c")]
        assert len(step_ids) == 3

    async def test_completed_items_updated_after_creation(self):
        client = RecordingClient()
        pipeline = StepPipeline(Sequencing.CONCURRENT, [StepItem("a", True), StepItem("b")])

        await pipeline.run(client, 7)

        assert client.events.index(("add_done", "a")) < client.events.index(("update", "s1-a", True))
        assert not any(event[0] == "update" and event[1].endswith("-b") for event in client.events)
