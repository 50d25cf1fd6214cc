"""Standard IPLD codecs and the CIM-specific JSON codec identifiers."""

from __future__ import annotations

import dataclasses
import io
import json
import math
from enum import IntEnum
from typing import Any, Optional

import cbor2

from .errors import CborError, SerializationError


class StandardCodec(IntEnum):
    """Codes from the multicodec table for the standard IPLD formats."""

    RAW = 0x55
    JSON = 0x0200
    CBOR = 0x51
    DAG_PB = 0x70
    DAG_CBOR = 0x71
    DAG_JSON = 0x0129
    LIBP2P_KEY = 0x72
    GIT_RAW = 0x78
    BITCOIN_BLOCK = 0xB0
    BITCOIN_TX = 0xB1
    ETH_BLOCK = 0x90
    ETH_TX = 0x93


class CimJsonCodec(IntEnum):
    """Codes of the CIM JSON types, inside the custom codec range."""

    ALCHEMIST = 0x340000
    WORKFLOW_GRAPH = 0x340001
    CONTEXT_GRAPH = 0x340002
    CONCEPT_SPACE = 0x340003
    DOMAIN_MODEL = 0x340004
    EVENT_STREAM = 0x340005
    COMMAND_BATCH = 0x340006
    QUERY_RESULT = 0x340007

    GRAPH_LAYOUT = 0x340100
    GRAPH_METADATA = 0x340101
    NODE_COLLECTION = 0x340102
    EDGE_COLLECTION = 0x340103

    WORKFLOW_DEFINITION = 0x340200
    WORKFLOW_STATE = 0x340201
    WORKFLOW_HISTORY = 0x340202
    WORKFLOW_TEMPLATE = 0x340203


class CimCodec:
    """A codec known by its numeric code and a human-readable name.

    Subclasses set ``code`` and ``name`` as class attributes; ad-hoc codecs
    can be made by passing both to the constructor.
    """

    code: int
    name: str

    def __init__(self, code: Optional[int] = None, name: Optional[str] = None) -> None:
        if code is not None:
            self.code = code
        if name is not None:
            self.name = name
        if not hasattr(self, "code") or not hasattr(self, "name"):
            raise TypeError("a codec needs both a code and a name")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code=0x{int(self.code):x}, name={self.name!r})"


def _plain(value: Any, *, for_json: bool) -> Any:
    """Reduce records, dataclasses and tuples to plain serializable data."""
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict) and not isinstance(value, type):
        value = to_dict()
    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = dataclasses.asdict(value)

    if isinstance(value, dict):
        return {key: _plain(item, for_json=for_json) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item, for_json=for_json) for item in value]
    if isinstance(value, (bytes, bytearray, memoryview)):
        return list(bytes(value)) if for_json else bytes(value)
    if for_json and isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def _as_bytes(data: Any) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


class DagCborCodec(CimCodec):
    """The DAG-CBOR format."""

    code = StandardCodec.DAG_CBOR
    name = "dag-cbor"

    @staticmethod
    def encode(data: Any) -> bytes:
        """Encode ``data`` as canonical CBOR."""
        try:
            return cbor2.dumps(_plain(data, for_json=False), canonical=True)
        except (cbor2.CBOREncodeError, TypeError, ValueError) as exc:
            raise CborError(str(exc)) from exc

    @staticmethod
    def decode(data: Any) -> Any:
        """Decode exactly one CBOR item; trailing bytes are an error."""
        raw = _as_bytes(data)
        stream = io.BytesIO(raw)
        try:
            value = cbor2.CBORDecoder(stream).decode()
        except (cbor2.CBORDecodeError, EOFError, ValueError) as exc:
            raise CborError(str(exc)) from exc
        if stream.tell() != len(raw):
            raise CborError("trailing data after CBOR item")
        return value


class DagJsonCodec(CimCodec):
    """The DAG-JSON format."""

    code = StandardCodec.DAG_JSON
    name = "dag-json"

    @staticmethod
    def encode(data: Any) -> bytes:
        """Encode ``data`` as compact UTF-8 JSON."""
        try:
            text = json.dumps(
                _plain(data, for_json=True),
                separators=(",", ":"),
                ensure_ascii=False,
                allow_nan=False,
            )
        except (TypeError, ValueError) as exc:
            raise SerializationError(str(exc)) from exc
        return text.encode("utf-8")

    @staticmethod
    def decode(data: Any) -> Any:
        """Decode JSON bytes."""
        try:
            return json.loads(_as_bytes(data).decode("utf-8"))
        except ValueError as exc:
            raise SerializationError(str(exc)) from exc

    @staticmethod
    def encode_pretty(data: Any) -> str:
        """Encode ``data`` as JSON indented by two spaces."""
        try:
            return json.dumps(
                _plain(data, for_json=True),
                indent=2,
                ensure_ascii=False,
                allow_nan=False,
            )
        except (TypeError, ValueError) as exc:
            raise SerializationError(str(exc)) from exc


class RawCodec(CimCodec):
    """Raw binary."""

    code = StandardCodec.RAW
    name = "raw"


class JsonCodec(CimCodec):
    """Plain JSON."""

    code = StandardCodec.JSON
    name = "json"


class AlchemistJsonCodec(CimCodec):
    """Alchemist configuration JSON."""

    code = CimJsonCodec.ALCHEMIST
    name = "cim-alchemist-json"


class WorkflowGraphJsonCodec(CimCodec):
    """Workflow graph JSON."""

    code = CimJsonCodec.WORKFLOW_GRAPH
    name = "cim-workflow-graph-json"


class ContextGraphJsonCodec(CimCodec):
    """Context graph JSON."""

    code = CimJsonCodec.CONTEXT_GRAPH
    name = "cim-context-graph-json"


class DagPbCodec(CimCodec):
    """MerkleDAG protobuf."""

    code = StandardCodec.DAG_PB
    name = "dag-pb"


class GitRawCodec(CimCodec):
    """Raw git objects."""

    code = StandardCodec.GIT_RAW
    name = "git-raw"


class Libp2pKeyCodec(CimCodec):
    """Libp2p public keys."""

    code = StandardCodec.LIBP2P_KEY
    name = "libp2p-key"


class ConceptSpaceJsonCodec(CimCodec):
    """Concept space JSON."""

    code = CimJsonCodec.CONCEPT_SPACE
    name = "cim-concept-space-json"


class DomainModelJsonCodec(CimCodec):
    """Domain model JSON."""

    code = CimJsonCodec.DOMAIN_MODEL
    name = "cim-domain-model-json"


class EventStreamJsonCodec(CimCodec):
    """Event stream JSON."""

    code = CimJsonCodec.EVENT_STREAM
    name = "cim-event-stream-json"


def register_ipld_codecs(registry: Any) -> None:
    """Register the standard IPLD codecs, bypassing the custom range check."""
    for codec_class in (
        RawCodec,
        JsonCodec,
        DagCborCodec,
        DagJsonCodec,
        DagPbCodec,
        GitRawCodec,
        Libp2pKeyCodec,
    ):
        registry.register_standard(codec_class())


def register_cim_json_codecs(registry: Any) -> None:
    """Register the CIM-specific JSON codecs."""
    for codec_class in (
        AlchemistJsonCodec,
        WorkflowGraphJsonCodec,
        ContextGraphJsonCodec,
        ConceptSpaceJsonCodec,
        DomainModelJsonCodec,
        EventStreamJsonCodec,
    ):
        registry.register(codec_class())


def to_dag_cbor(data: Any) -> bytes:
    """Encode ``data`` as DAG-CBOR."""
    return DagCborCodec.encode(data)


def to_dag_json(data: Any) -> bytes:
    """Encode ``data`` as compact DAG-JSON."""
    return DagJsonCodec.encode(data)


def to_dag_json_pretty(data: Any) -> str:
    """Encode ``data`` as indented DAG-JSON."""
    return DagJsonCodec.encode_pretty(data)