"""Domain events primitives for the modular monolith."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, Type
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent:
    """Base domain event (immutable).

    Concrete subclasses register themselves by class name so that events
    stored in the outbox can be rebuilt with ``event_from_payload``.
    """

    registry: ClassVar[Dict[str, Type["DomainEvent"]]] = {}

    aggregate_id: UUID
    event_id: UUID = field(default_factory=uuid4)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_name: str = field(init=False)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        DomainEvent.registry[cls.__name__] = cls

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_name", self.__class__.__name__)

    def to_payload(self) -> Dict[str, Any]:
        """JSON-safe representation stored in ``OutboxEvent.payload``."""
        data = asdict(self)
        data["aggregate_id"] = str(self.aggregate_id)
        data["event_id"] = str(self.event_id)
        data["occurred_on"] = self.occurred_on.isoformat()
        return data


_BASE_PAYLOAD_KEYS = frozenset({"aggregate_id", "event_id", "occurred_on", "event_name"})


def event_from_payload(event_name: str, payload: Dict[str, Any]) -> DomainEvent:
    """Rebuild a registered event from its outbox payload.

    Raises ``LookupError`` for unknown event names.
    """
    try:
        event_cls = DomainEvent.registry[event_name]
    except KeyError:
        raise LookupError(f"Unknown domain event {event_name!r}.") from None
    extra = {
        key: value
        for key, value in payload.items()
        if key not in _BASE_PAYLOAD_KEYS
    }
    return event_cls(
        aggregate_id=UUID(payload["aggregate_id"]),
        event_id=UUID(payload["event_id"]),
        occurred_on=datetime.fromisoformat(payload["occurred_on"]),
        **extra,
    )


class DomainEventMixin:
    """Mixin for aggregate roots that collect domain events in memory."""

    _domain_events: list[DomainEvent]

    def add_domain_event(self, event: DomainEvent) -> None:
        if not hasattr(self, "_domain_events"):
            self._domain_events = []
        self._domain_events.append(event)

    def clear_domain_events(self) -> None:
        if hasattr(self, "_domain_events"):
            self._domain_events.clear()

    @property
    def domain_events(self) -> list[DomainEvent]:
        if not hasattr(self, "_domain_events"):
            self._domain_events = []
        return list(self._domain_events)
