"""Domain events and message envelopes whose CIDs cover only their stable payload."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, Sequence, Union

from .cid import Cid, blake3_cid
from .codecs import StandardCodec, to_dag_json

_U32_MAX = (1 << 32) - 1


@dataclass(frozen=True)
class UserCreated:
    """A user account was created."""

    username: str
    email: str

    def to_dict(self) -> dict:
        return {"type": "UserCreated", "username": self.username, "email": self.email}


@dataclass(frozen=True)
class UserUpdated:
    """Fields of a user account changed."""

    changes: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        # Sorted so that the canonical form does not depend on insertion order.
        return {
            "type": "UserUpdated",
            "changes": {key: self.changes[key] for key in sorted(self.changes)},
        }


@dataclass(frozen=True)
class OrderItem:
    """One line of an order."""

    product_id: str
    quantity: int
    price: float

    def __post_init__(self) -> None:
        if not 0 <= self.quantity <= _U32_MAX:
            raise ValueError(f"quantity out of range: {self.quantity}")

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "quantity": self.quantity,
            "price": float(self.price),
        }


@dataclass(frozen=True)
class OrderPlaced:
    """An order was placed."""

    items: list[OrderItem]
    total_amount: float

    def to_dict(self) -> dict:
        return {
            "type": "OrderPlaced",
            "items": [item.to_dict() for item in self.items],
            "total_amount": float(self.total_amount),
        }


EventPayload = Union[UserCreated, UserUpdated, OrderPlaced]


@dataclass
class EventEnvelope:
    """A domain event: per-message metadata around a stable payload."""

    CODEC: ClassVar[int] = int(StandardCodec.DAG_CBOR)
    CONTENT_TYPE: ClassVar[int] = 0x1000

    event_id: str
    timestamp: str
    event_type: str
    aggregate_id: str
    payload: EventPayload
    correlation_id: Optional[str] = None
    causation_id: Optional[str] = None

    def canonical_payload(self) -> bytes:
        """JSON of event type, aggregate id and payload; metadata is left out."""
        return to_dag_json(
            {
                "event_type": self.event_type,
                "aggregate_id": self.aggregate_id,
                "payload": self.payload.to_dict(),
            }
        )

    def calculate_cid(self) -> Cid:
        return blake3_cid(self.canonical_payload(), self.CODEC)


@dataclass
class MessageEnvelope:
    """A message whose identity is that of its content alone."""

    CODEC: ClassVar[int] = int(StandardCodec.DAG_CBOR)
    CONTENT_TYPE: ClassVar[int] = 0x2000

    message_id: str
    sent_at: str
    sender: str
    content: Any
    headers: dict[str, str] = field(default_factory=dict)

    def content_bytes(self) -> bytes:
        """The content serialized as compact JSON."""
        return to_dag_json(self.content)

    def canonical_payload(self) -> bytes:
        return self.content_bytes()

    def calculate_cid(self) -> Cid:
        return blake3_cid(self.canonical_payload(), self.CODEC)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Show that CIDs follow the payload and ignore transient metadata."""
    parser = argparse.ArgumentParser(
        prog="cim-ipld-events",
        description="Show CID calculation for domain events and message envelopes.",
    )
    parser.parse_args(argv)

    alice = UserCreated(username="alice", email="alice@example.com")
    event1 = EventEnvelope(
        event_id="evt_123",
        timestamp="2024-01-01T10:00:00Z",
        correlation_id="corr_456",
        event_type="UserCreated",
        aggregate_id="user_789",
        payload=alice,
    )
    event2 = EventEnvelope(
        event_id="evt_999",
        timestamp="2024-01-02T15:30:00Z",
        correlation_id="corr_888",
        causation_id="cause_777",
        event_type="UserCreated",
        aggregate_id="user_789",
        payload=alice,
    )
    cid1 = event1.calculate_cid()
    cid2 = event2.calculate_cid()
    print(f"Event 1 CID: {cid1}")
    print(f"Event 2 CID: {cid2}")
    print(f"CIDs are equal: {cid1 == cid2}")
    print("Same payload produces same CID despite different metadata")
    print()

    event3 = EventEnvelope(
        event_id="evt_321",
        timestamp="2024-01-01T10:00:00Z",
        event_type="UserCreated",
        aggregate_id="user_789",
        payload=UserCreated(username="bob", email="bob@example.com"),
    )
    cid3 = event3.calculate_cid()
    print(f"Event 3 CID: {cid3}")
    print(f"CID1 != CID3: {cid1 != cid3}")
    print("Different payload produces different CID")
    print()

    message1 = MessageEnvelope(
        message_id="msg_001",
        sent_at="2024-01-01T10:00:00Z",
        sender="service-a",
        headers={"trace-id": "trace_123"},
        content="Important business data",
    )
    message2 = MessageEnvelope(
        message_id="msg_002",
        sent_at="2024-01-02T15:00:00Z",
        sender="service-b",
        headers={"trace-id": "trace_999"},
        content="Important business data",
    )
    msg_cid1 = message1.calculate_cid()
    msg_cid2 = message2.calculate_cid()
    print(f"Message 1 CID: {msg_cid1}")
    print(f"Message 2 CID: {msg_cid2}")
    print(f"Message CIDs are equal: {msg_cid1 == msg_cid2}")
    print("Same content produces same CID despite different envelope metadata")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())