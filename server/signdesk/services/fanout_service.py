from __future__ import annotations

from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterable, List, Optional, Tuple

from signdesk.core.exceptions import ConfigError, SignDeskError
from signdesk.core.logging import get_logger
from signdesk.integrations.mail import Attachment, EmailMessage
from signdesk.schemas.receivers import DispatchMode, ReceiverEntry

logger = get_logger(__name__)

SendFn = Callable[[EmailMessage], Awaitable[None]]


@dataclass(frozen=True)
class Delivery:
    to: str
    cc: Tuple[str, ...] = ()


@dataclass(frozen=True)
class MessageTemplate:
    """Every message field except the addressing."""
    sender: str
    subject: str
    html: str
    attachment: Optional[Attachment] = None

    def address(self, delivery: Delivery) -> EmailMessage:
        return EmailMessage(
            sender=self.sender,
            to=delivery.to,
            cc=delivery.cc,
            subject=self.subject,
            html=self.html,
            attachment=self.attachment,
        )


@dataclass(frozen=True)
class DeliveryOutcome:
    delivery: Delivery
    delivered: bool
    error: Optional[str] = None


@dataclass
class FanoutReport:
    outcomes: List[DeliveryOutcome] = field(default_factory=list)

    @property
    def all_delivered(self) -> bool:
        return all(outcome.delivered for outcome in self.outcomes)

    @property
    def failed(self) -> List[DeliveryOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.delivered]


def active_receivers(entries: Iterable[ReceiverEntry]) -> List[str]:
    """Enabled, non-blank addresses in their configured order."""
    return [entry.email for entry in entries if entry.is_active]


def plan_deliveries(entries: Iterable[ReceiverEntry], mode: DispatchMode) -> List[Delivery]:
    receivers = active_receivers(entries)
    if not receivers:
        raise ConfigError("no receivers")
    if mode is DispatchMode.SINGLE and len(receivers) > 1:
        return [Delivery(to=receivers[0], cc=tuple(receivers[1:]))]
    return [Delivery(to=address) for address in receivers]


async def fan_out(
    template: MessageTemplate,
    deliveries: Iterable[Delivery],
    send: SendFn,
    *,
    stop_on_error: bool = True,
) -> FanoutReport:
    """
    Issue one send per delivery, sequentially and in order.

    With ``stop_on_error`` the first failure is re-raised and the remaining
    deliveries are skipped; sends already made stay delivered. Without it
    every delivery is attempted and failures are recorded in the report.
    """
    report = FanoutReport()
    for delivery in deliveries:
        try:
            await send(template.address(delivery))
        except SignDeskError as exc:
            logger.warning("fanout.delivery_failed", to=delivery.to, cc_count=len(delivery.cc), error=exc.message)
            if stop_on_error:
                raise
            report.outcomes.append(DeliveryOutcome(delivery=delivery, delivered=False, error=exc.message))
            continue
        report.outcomes.append(DeliveryOutcome(delivery=delivery, delivered=True))
    return report
