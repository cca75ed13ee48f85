"""Ordered step pipelines for composite tools.

A pipeline adds a list of steps to one card. Each item is a small chain:
create the step, then mark it completed if asked. The pipeline's sequencing
policy decides how the chains relate to each other:

- SEQUENTIAL: each chain finishes before the next starts, so steps appear on
  the card in input order. Required by sync-todos, where the todo order is
  the display order.
- CONCURRENT: all chains are dispatched front-to-back at once and may finish
  in any order. Used by add-steps, whose steps carry no completion state.

Within a chain the completion update is only issued after the step exists.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum

from .client import FizzyClient

logger = logging.getLogger(__name__)


class Sequencing(Enum):
    SEQUENTIAL = "sequential"
    CONCURRENT = "concurrent"


@dataclass(frozen=True)
class StepItem:
    content: str
    completed: bool = False


@dataclass
class StepPipeline:
    """Steps to add to a card plus the policy for dispatching them."""

    policy: Sequencing
    items: list[StepItem] = field(default_factory=list)

    @classmethod
    def add_steps(cls, contents: list[str]) -> "StepPipeline":
        return cls(Sequencing.CONCURRENT, [StepItem(content) for content in contents])

    @classmethod
    def sync_todos(cls, todos: list[StepItem]) -> "StepPipeline":
        return cls(Sequencing.SEQUENTIAL, list(todos))

    async def _run_item(self, client: FizzyClient, card_number: int, item: StepItem) -> str:
        step_id = await client.add_step(card_number, item.content)
        if item.completed:
            await client.update_step(card_number, step_id, True)
        return step_id

    async def run(self, client: FizzyClient, card_number: int) -> list[str]:
        """
        Add every item to the card.

        Returns:
            Created step ids, in input order regardless of policy
        """
        logger.debug(f"Adding {len(self.items)} steps to card #{card_number} ({self.policy.value})")
        if self.policy is Sequencing.CONCURRENT:
            return list(await asyncio.gather(*(self._run_item(client, card_number, item) for item in self.items)))

        step_ids = []
        for item in self.items:
            step_ids.append(await self._run_item(client, card_number, item))
        return step_ids
