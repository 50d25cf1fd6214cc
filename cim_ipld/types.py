"""Record types for the CIM-specific JSON formats."""

import dataclasses
import types as _pytypes
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Union, get_args, get_origin

from .errors import SerializationError

_NONE_TYPE = type(None)


def _to_plain(value: Any) -> Any:
    if isinstance(value, JsonRecord):
        return value.to_dict()
    if isinstance(value, dict):
        return {key: _to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    return value


def _is_union(hint: Any) -> bool:
    origin = get_origin(hint)
    return origin is Union or origin is _pytypes.UnionType


def _is_optional(hint: Any) -> bool:
    return _is_union(hint) and _NONE_TYPE in get_args(hint)


def _type_error(path: str, expected: str, value: Any) -> SerializationError:
    return SerializationError(
        f"{path}: expected {expected}, got {type(value).__name__}"
    )


def _convert(hint: Any, value: Any, path: str) -> Any:
    if hint is Any:
        return value
    if _is_union(hint):
        if value is None and _NONE_TYPE in get_args(hint):
            return None
        options = [arg for arg in get_args(hint) if arg is not _NONE_TYPE]
        return _convert(options[0], value, path)
    if isinstance(hint, type) and issubclass(hint, JsonRecord):
        if not isinstance(value, Mapping):
            raise _type_error(path, "an object", value)
        return hint.from_dict(value)

    origin = get_origin(hint)
    if origin is list:
        if not isinstance(value, (list, tuple)):
            raise _type_error(path, "an array", value)
        (item_hint,) = get_args(hint)
        return [_convert(item_hint, item, f"{path}[{i}]") for i, item in enumerate(value)]
    if origin is tuple:
        item_hints = get_args(hint)
        if not isinstance(value, (list, tuple)):
            raise _type_error(path, "an array", value)
        if len(value) != len(item_hints):
            raise SerializationError(
                f"{path}: expected {len(item_hints)} elements, got {len(value)}"
            )
        return tuple(
            _convert(item_hint, item, f"{path}[{i}]")
            for i, (item_hint, item) in enumerate(zip(item_hints, value))
        )
    if origin is dict:
        if not isinstance(value, Mapping):
            raise _type_error(path, "an object", value)
        _, value_hint = get_args(hint)
        result = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise _type_error(f"{path} key", "a string", key)
            result[key] = _convert(value_hint, item, f"{path}.{key}")
        return result

    if hint is bool:
        if not isinstance(value, bool):
            raise _type_error(path, "a boolean", value)
        return value
    if hint is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise _type_error(path, "an integer", value)
        if value < 0 or value >= 1 << 64:
            raise SerializationError(f"{path}: {value} is not an unsigned 64-bit integer")
        return value
    if hint is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise _type_error(path, "a number", value)
        return float(value)
    if hint is str:
        if not isinstance(value, str):
            raise _type_error(path, "a string", value)
        return value
    return value


class JsonRecord:
    """Base for the dataclass records: conversion to and from plain JSON data."""

    def to_dict(self) -> dict:
        """Plain dict in field order; tuples become lists, nested records dicts."""
        return {
            item.name: _to_plain(getattr(self, item.name))
            for item in dataclasses.fields(self)
        }

    @classmethod
    def from_dict(cls, data: Any):
        """Build a record from decoded data, checking field types; extra keys are ignored."""
        if not isinstance(data, Mapping):
            raise _type_error(cls.__name__, "an object", data)
        kwargs = {}
        for item in dataclasses.fields(cls):
            hint = item.type
            path = f"{cls.__name__}.{item.name}"
            if item.name in data:
                kwargs[item.name] = _convert(hint, data[item.name], path)
            elif _is_optional(hint):
                kwargs[item.name] = None
            else:
                raise SerializationError(f"missing field {item.name!r} in {cls.__name__}")
        return cls(**kwargs)


# Alchemist configuration


@dataclass
class StorageConfig(JsonRecord):
    backend: str
    options: dict[str, Any] = field(default_factory=dict)


@dataclass
class InfrastructureConfig(JsonRecord):
    nats_url: str
    storage: StorageConfig


@dataclass
class DomainConfig(JsonRecord):
    name: str
    enabled: bool
    settings: dict[str, Any] = field(default_factory=dict)


@dataclass
class AlchemistConfig(JsonRecord):
    """Alchemist configuration format."""

    version: str
    domains: list[DomainConfig]
    infrastructure: InfrastructureConfig
    metadata: dict[str, Any] = field(default_factory=dict)


# Workflow graph


@dataclass
class Position(JsonRecord):
    x: float
    y: float
    z: Optional[float] = None


@dataclass
class WorkflowNode(JsonRecord):
    id: str
    node_type: str
    label: str
    position: Position
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class WorkflowEdge(JsonRecord):
    id: str
    source: str
    target: str
    edge_type: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class WorkflowMetadata(JsonRecord):
    created_at: int
    updated_at: int
    version: str
    tags: list[str]


@dataclass
class WorkflowGraph(JsonRecord):
    """Workflow graph format."""

    id: str
    name: str
    nodes: list[WorkflowNode]
    edges: list[WorkflowEdge]
    metadata: WorkflowMetadata


# Context graph


@dataclass
class Entity(JsonRecord):
    id: str
    entity_type: str
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass
class Relationship(JsonRecord):
    id: str
    source: str
    target: str
    relationship_type: str
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass
class ContextMetadata(JsonRecord):
    domain: str
    version: str
    created_at: int
    tags: list[str]


@dataclass
class ContextGraph(JsonRecord):
    """Context graph format."""

    id: str
    context: str
    entities: list[Entity]
    relationships: list[Relationship]
    metadata: ContextMetadata


# Concept space


@dataclass
class Dimension(JsonRecord):
    name: str
    dimension_type: str
    range: tuple[float, float]


@dataclass
class Concept(JsonRecord):
    id: str
    label: str
    coordinates: list[float]
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass
class ConceptSpaceMetadata(JsonRecord):
    created_at: int
    updated_at: int
    version: str
    algorithm: str


@dataclass
class ConceptSpace(JsonRecord):
    """Concept space format."""

    id: str
    name: str
    dimensions: list[Dimension]
    concepts: list[Concept]
    metadata: ConceptSpaceMetadata


# Domain model


@dataclass
class Property(JsonRecord):
    name: str
    property_type: str
    required: bool
    constraints: list[str]


@dataclass
class Aggregate(JsonRecord):
    id: str
    name: str
    properties: list[Property]
    invariants: list[str]


@dataclass
class DomainEvent(JsonRecord):
    id: str
    name: str
    aggregate_id: str
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass
class Command(JsonRecord):
    id: str
    name: str
    aggregate_id: str
    parameters: dict[str, Any] = field(default_factory=dict)


@dataclass
class DomainModelMetadata(JsonRecord):
    version: str
    bounded_context: str
    created_at: int
    tags: list[str]


@dataclass
class DomainModel(JsonRecord):
    """Domain model format."""

    id: str
    name: str
    aggregates: list[Aggregate]
    events: list[DomainEvent]
    commands: list[Command]
    metadata: DomainModelMetadata


# Event stream


@dataclass
class StreamEvent(JsonRecord):
    id: str
    event_type: str
    timestamp: int
    aggregate_id: str
    sequence: int
    payload: Any
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class EventStreamMetadata(JsonRecord):
    created_at: int
    last_event_at: int
    event_count: int
    stream_version: str


@dataclass
class EventStream(JsonRecord):
    """Event stream format."""

    id: str
    stream_name: str
    events: list[StreamEvent]
    metadata: EventStreamMetadata