"""
Starts capture sessions and hands their outcome to a fresh receiver
"""

import asyncio
from typing import Callable, Optional

from .capability import ScanningCapability
from .errors import CapabilityStartError, ScanSessionError
from .models import ScanOutcome, ScannerOptions
from .notifications import Duration, NotificationQueue
from .receiver import ResultReceiver


class ScanSessionLauncher:
    """Re-armed on every click of the scan action"""

    def __init__(self, capability: ScanningCapability, options: ScannerOptions,
                 on_result: Callable[[ScanOutcome], None],
                 notifications: NotificationQueue):
        self.capability = capability
        self.options = options
        self.on_result = on_result
        self.notifications = notifications
        self.receiver: Optional[ResultReceiver] = None
        self.busy = False

    async def launch(self) -> Optional[ScanOutcome]:
        """
        Run one capture session to completion

        Returns:
            The delivered outcome, or None if no session was started
        """
        if self.busy:
            print("A scan is already in progress")
            return None

        self.busy = True
        try:
            return await self._run_session()
        finally:
            self.busy = False

    async def _run_session(self) -> Optional[ScanOutcome]:
        try:
            request = await self.capability.start_scan_request(self.options)
        except CapabilityStartError as e:
            print(f"Could not start scanner: {e}")
            self.notifications.notify(e.user_message(), Duration.LONG)
            return None

        receiver = ResultReceiver(request, self.on_result)
        self.receiver = receiver

        try:
            outcome = await self.capability.run_session(request)
        except ScanSessionError as e:
            print(f"Scan session failed: {e}")
            outcome = ScanOutcome.canceled(request.request_id)
        except asyncio.CancelledError:
            receiver.cancel()
            raise

        try:
            receiver.deliver(outcome)
        finally:
            outcome.release()
        return outcome
