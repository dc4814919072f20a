"""
One-shot receiver for capture session outcomes
"""

import asyncio
from enum import Enum
from typing import Callable, Optional

from .errors import ReceiverCompletedError
from .models import ScanOutcome, ScanRequest


class ReceiverState(Enum):
    AWAITING = "awaiting"
    COMPLETED = "completed"


class ResultReceiver:
    """
    Accepts exactly one outcome for one launched session

    The handler runs synchronously inside deliver(). Coroutines may await
    the outcome with wait().
    """

    def __init__(self, request: ScanRequest, on_result: Callable[[ScanOutcome], None]):
        self.request = request
        self.on_result = on_result
        self.state = ReceiverState.AWAITING
        self.outcome: Optional[ScanOutcome] = None
        self._waiter: Optional[asyncio.Future] = None

    @property
    def completed(self) -> bool:
        return self.state is ReceiverState.COMPLETED

    def deliver(self, outcome: ScanOutcome):
        """
        Complete the receiver and run the handler

        Raises:
            ReceiverCompletedError: an outcome was already delivered
            ValueError: the outcome belongs to another session
        """
        if self.completed:
            raise ReceiverCompletedError(
                f"Session {self.request.request_id} already received an outcome")
        if outcome.request_id != self.request.request_id:
            raise ValueError(
                f"Outcome for session {outcome.request_id} delivered to receiver "
                f"for session {self.request.request_id}")

        self._complete(outcome)
        self.on_result(outcome)

    def cancel(self):
        """Complete with a cancelled outcome without running the handler"""
        if self.completed:
            return
        self._complete(ScanOutcome.canceled(self.request.request_id))

    async def wait(self) -> ScanOutcome:
        if self.completed:
            return self.outcome
        if self._waiter is None:
            self._waiter = asyncio.get_running_loop().create_future()
        return await asyncio.shield(self._waiter)

    def _complete(self, outcome: ScanOutcome):
        self.state = ReceiverState.COMPLETED
        self.outcome = outcome
        if self._waiter is not None and not self._waiter.done():
            self._waiter.set_result(outcome)
