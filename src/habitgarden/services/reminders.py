"""Scheduled reminder dispatch across all accounts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import Optional, Protocol, Sequence

from ..core import HabitSnapshot, format_date
from ..core.reminders import build_reminder_message, format_clock, habits_to_remind
from ..core.types import ReminderMessage
from ..domain.repositories import DeviceTokenRepository, HabitRepository
from ..logging_config import get_logger
from .habits import to_snapshot

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class SendResponse:
    token: str
    success: bool
    error: Optional[str] = None


@dataclass(slots=True)
class MulticastResult:
    """Outcome of one batched send to every token of an account."""

    responses: list[SendResponse] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for response in self.responses if response.success)

    @property
    def failure_count(self) -> int:
        return sum(1 for response in self.responses if not response.success)


class PushSender(Protocol):
    """Delivery collaborator: one call sends the same message to several tokens."""

    def send_multicast(self, tokens: Sequence[str], message: ReminderMessage) -> MulticastResult:
        ...


class LoggingPushSender:
    """Sender that records reminders in the log instead of calling a push service."""

    def send_multicast(self, tokens: Sequence[str], message: ReminderMessage) -> MulticastResult:
        for token in tokens:
            logger.info("Push to %s…: %s | %s", token[:8], message.title, message.body)
        return MulticastResult(responses=[SendResponse(token=token, success=True) for token in tokens])


@dataclass(slots=True)
class DispatchReport:
    current_time: str
    today: date
    accounts_scanned: int = 0
    habits_matched: int = 0
    notifications_sent: int = 0
    failures: int = 0


def reminder_clock(now: datetime, zone: Optional[tzinfo] = None) -> tuple[str, date]:
    """Return ``("HH:MM", today)`` for ``now`` on the reminder wall clock."""

    local_now = now.astimezone(zone) if zone is not None else now
    return format_clock(local_now), local_now.date()


def _send_for_habit(
    sender: PushSender, habit: HabitSnapshot, tokens: Sequence[str], report: DispatchReport
) -> None:
    message = build_reminder_message(habit)
    try:
        result = sender.send_multicast(tokens, message)
    except Exception:
        report.failures += len(tokens)
        logger.error("Reminder send failed for habit %s", habit.id, exc_info=True)
        return

    report.notifications_sent += result.success_count
    report.failures += result.failure_count
    logger.info(
        "Reminder sent for habit %s (%d/%d delivered)",
        habit.id,
        result.success_count,
        len(tokens),
    )
    for index, response in enumerate(result.responses):
        if not response.success:
            logger.warning("Token %d failed for habit %s: %s", index, habit.id, response.error)


def dispatch_reminders(
    *,
    habit_repo: HabitRepository,
    token_repo: DeviceTokenRepository,
    sender: PushSender,
    now: datetime,
    zone: Optional[tzinfo] = None,
) -> DispatchReport:
    """Send one reminder per due habit whose reminder minute is ``now``.

    Accounts are scanned sequentially. A failure while loading one account or
    sending one habit is logged and the sweep moves on; nothing is retried,
    so a missed minute is lost.
    """

    current_time, today = reminder_clock(now, zone)
    report = DispatchReport(current_time=current_time, today=today)
    logger.info("Reminder sweep started at %s (%s)", current_time, format_date(today))

    for user_id, tokens in token_repo.tokens_by_user().items():
        report.accounts_scanned += 1
        if not tokens:
            continue
        try:
            habits = [to_snapshot(row, ()) for row in habit_repo.list_all(user_id=user_id)]
        except Exception:
            logger.error("Could not load habits for user %s", user_id, exc_info=True)
            continue

        matched = habits_to_remind(habits, current_time, today)
        logger.debug(
            "User %s: %d habit(s), %d due for reminder, %d token(s)",
            user_id,
            len(habits),
            len(matched),
            len(tokens),
        )
        report.habits_matched += len(matched)
        for habit in matched:
            _send_for_habit(sender, habit, tokens, report)

    logger.info(
        "Reminder sweep finished at %s: %d matched, %d sent, %d failed",
        current_time,
        report.habits_matched,
        report.notifications_sent,
        report.failures,
    )
    return report


__all__ = [
    "DispatchReport",
    "LoggingPushSender",
    "MulticastResult",
    "PushSender",
    "SendResponse",
    "dispatch_reminders",
    "reminder_clock",
]
