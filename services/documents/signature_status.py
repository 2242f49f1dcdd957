"""
Signature Status State Machine

Maps Dropbox Sign event types onto SignatureStatus and decides whether a
computed status may replace the one already stored.

    None -> pending -> partially_signed -> completed
                 \\-> declined | cancelled | expired | error

Webhooks can arrive out of order, so transitions are only applied forward:
a status never moves to a lower rank, and a terminal status never moves to
a different terminal status.
"""

from typing import Optional

from .types import SignatureEvent, SignatureStatus

CALLBACK_TEST_EVENT = 'callback_test'

EVENT_STATUS = {
    'signature_request_sent': SignatureStatus.PENDING,
    'signature_request_all_signed': SignatureStatus.COMPLETED,
    'signature_request_declined': SignatureStatus.DECLINED,
    'signature_request_canceled': SignatureStatus.CANCELLED,
    'signature_request_expired': SignatureStatus.EXPIRED,
    'signature_request_invalid': SignatureStatus.ERROR,
}

STATUS_RANK = {
    None: 0,
    SignatureStatus.PENDING: 1,
    SignatureStatus.PARTIALLY_SIGNED: 2,
    SignatureStatus.COMPLETED: 3,
    SignatureStatus.DECLINED: 3,
    SignatureStatus.CANCELLED: 3,
    SignatureStatus.EXPIRED: 3,
    SignatureStatus.ERROR: 3,
}


def status_for_event(event: SignatureEvent) -> Optional[SignatureStatus]:
    """
    Status an event implies, or None when the event leaves status unchanged
    (signature_request_viewed, callback_test, unknown types).
    """
    if event.event_type == 'signature_request_signed':
        return SignatureStatus.COMPLETED if event.is_complete else SignatureStatus.PARTIALLY_SIGNED
    return EVENT_STATUS.get(event.event_type)


def coerce_status(value) -> Optional[SignatureStatus]:
    """Read a stored status column; unknown strings are treated as never sent."""
    if value is None or isinstance(value, SignatureStatus):
        return value
    try:
        return SignatureStatus(value)
    except ValueError:
        return None


def can_transition(current, new: SignatureStatus) -> bool:
    """True when moving from current to new is a forward (or equal) step."""
    current = coerce_status(current)
    if current == new:
        return True
    if current is not None and current.is_terminal:
        return False
    return STATUS_RANK[new] >= STATUS_RANK[current]
