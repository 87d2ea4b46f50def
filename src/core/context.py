import threading
import time
from typing import Optional

from .models import AuditCancelledError, AuditTimeoutError


class AuditContext:
    """
    Token de cancelamento compartilhado por todos os providers de um audit.

    Os providers chamam `check()` antes de cada chamada AWS e antes de emitir
    cada record; o coordinator chama `cancel()` quando o primeiro erro chega.
    """

    def __init__(self, timeout: Optional[float] = None) -> None:
        self._event = threading.Event()
        self.deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def remaining(self) -> Optional[float]:
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def check(self) -> None:
        if self.expired:
            raise AuditTimeoutError("audit deadline exceeded")
        if self.cancelled:
            raise AuditCancelledError("audit cancelled")
