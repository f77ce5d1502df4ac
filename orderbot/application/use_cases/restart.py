from __future__ import annotations

import logging
import os
import signal
import threading
from typing import Callable


def _terminate_process() -> None:
    os.kill(os.getpid(), signal.SIGTERM)


class RestartUseCase:
    """Admin-only process restart. Relies on an external supervisor to bring the process back."""

    def __init__(
        self,
        admin_user_id: str | None,
        delay_seconds: float = 1.0,
        terminate: Callable[[], None] | None = None,
    ) -> None:
        self._admin_user_id = admin_user_id
        self._delay_seconds = delay_seconds
        self._terminate = terminate or _terminate_process
        self._logger = logging.getLogger(__name__)

    def is_authorized(self, user_id: str) -> bool:
        return bool(self._admin_user_id) and str(user_id) == str(self._admin_user_id)

    def schedule(self) -> threading.Timer:
        self._logger.warning("Restart requested, terminating in %ss", self._delay_seconds)
        timer = threading.Timer(self._delay_seconds, self._terminate)
        timer.daemon = True
        timer.start()
        return timer
