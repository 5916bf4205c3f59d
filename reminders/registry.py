from __future__ import annotations

import logging
from typing import List, Optional, Set

from .config import BUILTIN_SLOTS
from .models import NotificationSettings, ReminderSlot
from .quotes import Quote, quote_by_index

LOGGER = logging.getLogger(__name__)


def build_slots(settings: NotificationSettings, quote: Optional[Quote] = None) -> List[ReminderSlot]:
    """Derive every reminder slot from ``settings``.

    Built-in slots are always returned, enabled or not, followed by one slot per
    custom notification in insertion order.
    """
    quote = quote or quote_by_index(0)
    slots: List[ReminderSlot] = []
    seen: Set[str] = set()

    for identifier, toggle_field, time_field, title, body in BUILTIN_SLOTS:
        slots.append(
            ReminderSlot(
                identifier=identifier,
                enabled=bool(getattr(settings, toggle_field)),
                title=title,
                body=body if body is not None else quote.text,
                time=getattr(settings, time_field),
            )
        )
        seen.add(identifier)

    for custom in settings.custom_notifications:
        if custom.identifier in seen:
            LOGGER.warning("Skipping duplicate reminder identifier %s", custom.identifier)
            continue
        seen.add(custom.identifier)
        slots.append(
            ReminderSlot(
                identifier=custom.identifier,
                enabled=custom.enabled,
                title=custom.title,
                body=custom.body,
                time=custom.time,
            )
        )
    return slots
