from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..common.datetime_utils import format_punch_moment, now_local
from ..common.validators import require_pin
from ..core.constants import DEFAULT_KIOSK_COOLDOWN_SECONDS, MAX_PIN_LENGTH
from ..core.enums import PunchKind
from ..core.exceptions import ValidationError
from ..employees.model import Employee
from ..punches.model import PunchRecord
from ..sync.manager import SyncManager

logger = logging.getLogger(__name__)

GREETINGS = {
    PunchKind.CLOCK_IN: "Have a good shift, {name}!",
    PunchKind.BREAK_START: "Enjoy your break, {name}!",
    PunchKind.BREAK_END: "Welcome back, {name}!",
    PunchKind.CLOCK_OUT: "See you soon, {name}!",
}


@dataclass(frozen=True)
class PunchConfirmation:
    record: PunchRecord
    message: str

    @property
    def queued(self) -> bool:
        return self.record.is_local


class KioskService:
    """Use case: an employee types a PIN on the kiosk and picks a punch kind.

    The PIN is checked against the cached employees here, before anything
    reaches the sync manager (which stores whatever it is given).
    """

    def __init__(
        self,
        manager: SyncManager,
        *,
        cooldown_seconds: float = DEFAULT_KIOSK_COOLDOWN_SECONDS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._manager = manager
        self._cooldown = timedelta(seconds=cooldown_seconds)
        self._clock = clock
        self._locked_until: Optional[datetime] = None
        self._lock = threading.Lock()

    def validate_pin(self, pin: str) -> Employee:
        pin = require_pin(pin, max_length=MAX_PIN_LENGTH)
        employee = self._manager.find_employee_by_pin(pin)
        if not employee:
            raise ValidationError("Invalid PIN")
        return employee

    def register_punch(self, pin: str, kind: str, *, now: Optional[datetime] = None) -> PunchConfirmation:
        now = now or self._clock()
        with self._lock:
            if self._locked_until and now < self._locked_until:
                raise ValidationError("Please wait a moment before registering again")

            employee = self.validate_pin(pin)
            day, moment = format_punch_moment(now)
            record = self._manager.create_punch(
                {"pin": employee.pin, "name": employee.name, "date": day, "time": moment, "kind": kind}
            )
            self._locked_until = now + self._cooldown

        message = GREETINGS[PunchKind(record.kind)].format(name=employee.name)
        logger.info("%s registered %s at %s %s%s", employee.name, record.kind, day, moment, " (queued)" if record.is_local else "")
        return PunchConfirmation(record=record, message=message)
