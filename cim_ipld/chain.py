"""Content-addressed chains of content items."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Iterator, Optional

from .cid import Cid, blake3_cid
from .errors import (
    ChainValidationError,
    InvalidCidError,
    SequenceValidationError,
    SerializationError,
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _jsonable(content: Any) -> Any:
    if dataclasses.is_dataclass(content) and not isinstance(content, type):
        return dataclasses.asdict(content)
    to_dict = getattr(content, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return content


def _dumps(value: Any) -> bytes:
    try:
        text = json.dumps(
            value, separators=(",", ":"), ensure_ascii=False, allow_nan=False
        )
    except (TypeError, ValueError) as exc:
        raise SerializationError(str(exc)) from exc
    return text.encode("utf-8")


@dataclass
class ChainedContent:
    """A content item linked to its predecessor by CID."""

    content: Any
    cid: str
    previous_cid: Optional[str]
    sequence: int
    timestamp: datetime
    codec: int

    @classmethod
    def create(
        cls, content: Any, codec: int, previous: Optional["ChainedContent"] = None
    ) -> "ChainedContent":
        """Chain `content` after `previous` and compute its CID."""
        item = cls(
            content=content,
            cid="",
            previous_cid=previous.cid if previous is not None else None,
            sequence=previous.sequence + 1 if previous is not None else 0,
            timestamp=datetime.now(timezone.utc),
            codec=codec,
        )
        item.cid = item.calculate_cid()
        return item

    def calculate_cid(self) -> str:
        """CID over content, previous CID and sequence; the timestamp is excluded."""
        chain_data = {
            "content": _jsonable(self.content),
            "previous_cid": self.previous_cid,
            "sequence": self.sequence,
        }
        return str(blake3_cid(_dumps(chain_data), self.codec))

    def validate_chain(self, previous: Optional["ChainedContent"] = None) -> None:
        """Check the link to `previous` and this item's own CID."""
        if previous is None and self.previous_cid is None:
            if self.sequence != 0:
                raise SequenceValidationError(0, self.sequence)
        elif previous is not None and self.previous_cid is not None:
            if previous.cid != self.previous_cid:
                raise ChainValidationError(previous.cid, self.previous_cid)
            if self.sequence != previous.sequence + 1:
                raise SequenceValidationError(previous.sequence + 1, self.sequence)
        else:
            raise ChainValidationError(
                previous.cid if previous is not None else "",
                self.previous_cid or "",
            )

        calculated = self.calculate_cid()
        if calculated != self.cid:
            raise InvalidCidError(
                f"CID mismatch: expected {self.cid}, calculated {calculated}"
            )

    @staticmethod
    def parse_cid(cid_str: str) -> Cid:
        """Parse a CID string."""
        return Cid.parse(cid_str)

    def to_json(self) -> str:
        """Serialize the item, timestamp included, as JSON."""
        stamp = self.timestamp
        if stamp.tzinfo is None:
            stamp = stamp.replace(tzinfo=timezone.utc)
        delta = stamp - _EPOCH
        document = {
            "content": _jsonable(self.content),
            "cid": self.cid,
            "previous_cid": self.previous_cid,
            "sequence": self.sequence,
            "timestamp": {
                "secs_since_epoch": delta.days * 86400 + delta.seconds,
                "nanos_since_epoch": delta.microseconds * 1000,
            },
        }
        return _dumps(document).decode("utf-8")

    @classmethod
    def from_json(cls, text: str, codec: int) -> "ChainedContent":
        """Rebuild an item from `to_json` output; content comes back as plain JSON data."""
        try:
            document = json.loads(text)
            stamp = document["timestamp"]
            timestamp = _EPOCH + timedelta(
                seconds=int(stamp["secs_since_epoch"]),
                microseconds=int(stamp["nanos_since_epoch"]) // 1000,
            )
            return cls(
                content=document["content"],
                cid=str(document["cid"]),
                previous_cid=document["previous_cid"],
                sequence=int(document["sequence"]),
                timestamp=timestamp,
                codec=codec,
            )
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            raise SerializationError(f"invalid chained content: {exc}") from exc


class ContentChain:
    """An append-only, validated chain of content items sharing one codec."""

    def __init__(self, codec: int) -> None:
        self.codec = codec
        self._items: list[ChainedContent] = []

    def append(self, content: Any) -> ChainedContent:
        """Add content to the end of the chain and return the new item."""
        previous = self._items[-1] if self._items else None
        chained = ChainedContent.create(content, self.codec, previous)
        chained.validate_chain(previous)
        self._items.append(chained)
        return chained

    def validate(self) -> None:
        """Validate every link in the chain."""
        previous = None
        for item in self._items:
            item.validate_chain(previous)
            previous = item

    def head(self) -> Optional[ChainedContent]:
        """The latest item, or None for an empty chain."""
        return self._items[-1] if self._items else None

    def items(self) -> tuple[ChainedContent, ...]:
        return tuple(self._items)

    def items_since(self, cid: str) -> list[ChainedContent]:
        """All items after the one with the given CID."""
        for index, item in enumerate(self._items):
            if item.cid == cid:
                return self._items[index + 1:]
        raise InvalidCidError(f"CID not found in chain: {cid}")

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ChainedContent]:
        return iter(self._items)