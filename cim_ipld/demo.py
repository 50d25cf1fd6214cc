"""Command that walks through the IPLD codecs and the CIM JSON record types."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .codecs import (
    CimJsonCodec,
    DagCborCodec,
    DagJsonCodec,
    StandardCodec,
    to_dag_cbor,
    to_dag_json,
    to_dag_json_pretty,
)
from .errors import SerializationError
from .registry import CodecRegistry
from .types import (
    Aggregate,
    AlchemistConfig,
    Concept,
    ConceptSpace,
    ConceptSpaceMetadata,
    Dimension,
    DomainConfig,
    DomainModel,
    DomainModelMetadata,
    EventStream,
    EventStreamMetadata,
    InfrastructureConfig,
    Position,
    Property,
    StorageConfig,
    StreamEvent,
    WorkflowEdge,
    WorkflowGraph,
    WorkflowMetadata,
    WorkflowNode,
)

_EXCERPT_LINES = 20


def build_alchemist_config() -> AlchemistConfig:
    """A sample Alchemist configuration with two domains."""
    return AlchemistConfig(
        version="1.0.0",
        domains=[
            DomainConfig(
                name="graph",
                enabled=True,
                settings={"max_nodes": 10000, "auto_layout": True},
            ),
            DomainConfig(
                name="workflow",
                enabled=True,
                settings={"execution_mode": "async", "max_parallel": 5},
            ),
        ],
        infrastructure=InfrastructureConfig(
            nats_url="nats://localhost:4222",
            storage=StorageConfig(
                backend="jetstream",
                options={"bucket": "cim-storage", "replicas": 3},
            ),
        ),
        metadata={"environment": "production", "region": "us-west-2"},
    )


def build_workflow_graph() -> WorkflowGraph:
    """A sample four-step data processing workflow."""
    return WorkflowGraph(
        id="wf-001",
        name="Data Processing Pipeline",
        nodes=[
            WorkflowNode(
                id="start",
                node_type="trigger",
                label="Start",
                position=Position(x=0.0, y=0.0),
            ),
            WorkflowNode(
                id="validate",
                node_type="process",
                label="Validate Input",
                position=Position(x=200.0, y=0.0),
                data={"validator": "schema-v1"},
            ),
            WorkflowNode(
                id="transform",
                node_type="process",
                label="Transform Data",
                position=Position(x=400.0, y=0.0),
                data={"transformer": "etl-v2"},
            ),
            WorkflowNode(
                id="end",
                node_type="output",
                label="Complete",
                position=Position(x=600.0, y=0.0),
            ),
        ],
        edges=[
            WorkflowEdge(
                id="e1", source="start", target="validate", edge_type="sequence"
            ),
            WorkflowEdge(
                id="e2",
                source="validate",
                target="transform",
                edge_type="conditional",
                data={"condition": "valid == true"},
            ),
            WorkflowEdge(
                id="e3", source="transform", target="end", edge_type="sequence"
            ),
        ],
        metadata=WorkflowMetadata(
            created_at=1234567890,
            updated_at=1234567900,
            version="1.0.0",
            tags=["data-pipeline", "etl"],
        ),
    )


def build_concept_space() -> ConceptSpace:
    """A sample HSL colour concept space."""
    return ConceptSpace(
        id="cs-colors",
        name="Color Concept Space",
        dimensions=[
            Dimension(name="hue", dimension_type="circular", range=(0.0, 360.0)),
            Dimension(name="saturation", dimension_type="linear", range=(0.0, 100.0)),
            Dimension(name="lightness", dimension_type="linear", range=(0.0, 100.0)),
        ],
        concepts=[
            Concept(
                id="red",
                label="Red",
                coordinates=[0.0, 100.0, 50.0],
                attributes={"wavelength": "700nm", "emotion": "passion"},
            ),
            Concept(
                id="blue",
                label="Blue",
                coordinates=[240.0, 100.0, 50.0],
                attributes={"wavelength": "450nm", "emotion": "calm"},
            ),
        ],
        metadata=ConceptSpaceMetadata(
            created_at=1234567890,
            updated_at=1234567890,
            version="1.0",
            algorithm="manual-mapping",
        ),
    )


def build_domain_model() -> DomainModel:
    """A sample order management domain model."""
    return DomainModel(
        id="dm-order",
        name="Order Management Domain",
        aggregates=[
            Aggregate(
                id="order",
                name="Order",
                properties=[
                    Property(
                        name="order_id",
                        property_type="uuid",
                        required=True,
                        constraints=["unique"],
                    ),
                    Property(
                        name="customer_id",
                        property_type="uuid",
                        required=True,
                        constraints=["foreign_key:customer"],
                    ),
                    Property(
                        name="total_amount",
                        property_type="decimal",
                        required=True,
                        constraints=["min:0"],
                    ),
                ],
                invariants=[
                    "Total amount must equal sum of line items",
                    "Order must have at least one line item",
                ],
            )
        ],
        events=[],
        commands=[],
        metadata=DomainModelMetadata(
            version="2.0",
            bounded_context="order-management",
            created_at=1234567890,
            tags=["core", "ecommerce"],
        ),
    )


def build_event_stream() -> EventStream:
    """A sample stream of two order events."""
    return EventStream(
        id="es-orders-2024",
        stream_name="order-events",
        events=[
            StreamEvent(
                id="evt-001",
                event_type="OrderCreated",
                timestamp=1234567890,
                aggregate_id="order-123",
                sequence=1,
                payload={
                    "order_id": "order-123",
                    "customer_id": "cust-456",
                    "items": [
                        {"product_id": "prod-789", "quantity": 2, "price": 29.99}
                    ],
                    "total": 59.98,
                },
                metadata={"user_id": "user-001", "source": "web"},
            ),
            StreamEvent(
                id="evt-002",
                event_type="OrderShipped",
                timestamp=1234567950,
                aggregate_id="order-123",
                sequence=2,
                payload={
                    "order_id": "order-123",
                    "tracking_number": "TRACK-12345",
                    "carrier": "FedEx",
                    "estimated_delivery": "2024-01-15",
                },
                metadata={"warehouse": "warehouse-west"},
            ),
        ],
        metadata=EventStreamMetadata(
            created_at=1234567890,
            last_event_at=1234567950,
            event_count=2,
            stream_version="1.0",
        ),
    )


def _show_codecs() -> None:
    CodecRegistry()
    print("Registered standard IPLD codecs:")
    print(f"  - Raw (0x{StandardCodec.RAW:x})")
    print(f"  - JSON (0x{StandardCodec.JSON:x})")
    print(f"  - DAG-CBOR (0x{StandardCodec.DAG_CBOR:x})")
    print(f"  - DAG-JSON (0x{StandardCodec.DAG_JSON:x})")
    print()
    print("Registered CIM-specific JSON codecs:")
    print(f"  - Alchemist (0x{CimJsonCodec.ALCHEMIST:x})")
    print(f"  - Workflow Graph (0x{CimJsonCodec.WORKFLOW_GRAPH:x})")
    print(f"  - Context Graph (0x{CimJsonCodec.CONTEXT_GRAPH:x})")


def _demo_dag_cbor() -> None:
    node = {
        "id": "node-1",
        "label": "Start Node",
        "connections": ["node-2", "node-3"],
        "metadata": {"type": "process", "priority": "high"},
    }
    encoded = DagCborCodec.encode(node)
    print(f"Encoded DAG-CBOR: {len(encoded)} bytes")
    print(f"First 32 bytes: {list(encoded[:32])}")
    decoded = DagCborCodec.decode(encoded)
    print(f"Decoded: {decoded}")


def _demo_dag_json() -> None:
    data = {
        "type": "event",
        "timestamp": 1234567890,
        "payload": {
            "action": "node_added",
            "node_id": "node-42",
            "attributes": {"color": "blue", "size": 10},
        },
    }
    encoded = DagJsonCodec.encode(data)
    print(f"Encoded DAG-JSON: {len(encoded)} bytes")
    print(f"Pretty DAG-JSON:\n{DagJsonCodec.encode_pretty(data)}")
    if DagJsonCodec.decode(encoded) != data:
        raise SerializationError("DAG-JSON round trip changed the data")


def _demo_alchemist_config() -> None:
    config = build_alchemist_config()
    print(f"Alchemist Config (DAG-JSON):\n{to_dag_json_pretty(config)}")
    print()
    print(f"Alchemist Config (DAG-CBOR): {len(to_dag_cbor(config))} bytes")


def _demo_workflow_graph() -> None:
    workflow = build_workflow_graph()
    print(f"Workflow Graph (DAG-JSON):\n{to_dag_json_pretty(workflow)}")
    print()
    print(
        f"This would be stored with codec: 0x{CimJsonCodec.WORKFLOW_GRAPH:x} "
        "(cim-workflow-graph-json)"
    )


def _demo_codec_operations() -> None:
    data = [("temperature", 23.5), ("humidity", 65.0), ("pressure", 1013.25)]
    print(f"Original data: {data}")
    print()
    print(f"DAG-CBOR encoding: {len(to_dag_cbor(data))} bytes")
    json_bytes = to_dag_json(data)
    print(f"DAG-JSON encoding: {len(json_bytes)} bytes")
    print(f"DAG-JSON content: {json_bytes.decode('utf-8', errors='replace')}")
    print()
    print(f"Pretty DAG-JSON:\n{to_dag_json_pretty(data)}")


def _demo_concept_space() -> None:
    space = build_concept_space()
    print(f"Concept Space (DAG-JSON):\n{to_dag_json_pretty(space)}")
    print()
    print(
        f"This would be stored with codec: 0x{CimJsonCodec.CONCEPT_SPACE:x} "
        "(cim-concept-space-json)"
    )


def _demo_domain_model() -> None:
    model = build_domain_model()
    print(f"Domain Model (DAG-CBOR): {len(to_dag_cbor(model))} bytes")
    print()
    print("Domain Model (DAG-JSON excerpt):")
    lines = to_dag_json_pretty(model).splitlines()[:_EXCERPT_LINES]
    print("\n".join(lines))
    print("... (truncated)")
    print()
    print(
        f"This would be stored with codec: 0x{CimJsonCodec.DOMAIN_MODEL:x} "
        "(cim-domain-model-json)"
    )


def _demo_event_stream() -> None:
    stream = build_event_stream()
    print(f"Event Stream (DAG-JSON):\n{to_dag_json_pretty(stream)}")
    print()
    print(
        f"This would be stored with codec: 0x{CimJsonCodec.EVENT_STREAM:x} "
        "(cim-event-stream-json)"
    )


_SECTIONS = (
    ("Example 1: DAG-CBOR Encoding", _demo_dag_cbor),
    ("Example 2: DAG-JSON Encoding", _demo_dag_json),
    ("Example 3: CIM Alchemist Config", _demo_alchemist_config),
    ("Example 4: CIM Workflow Graph", _demo_workflow_graph),
    ("Example 5: Codec Operations", _demo_codec_operations),
    ("Example 6: CIM Concept Space", _demo_concept_space),
    ("Example 7: CIM Domain Model", _demo_domain_model),
    ("Example 8: CIM Event Stream", _demo_event_stream),
)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Print a tour of the codecs and record types; return the exit status."""
    parser = argparse.ArgumentParser(
        prog="cim-ipld-demo",
        description="Show the standard IPLD codecs and the CIM JSON record types.",
    )
    parser.parse_args(argv)

    print("=== CIM-IPLD Codec Demo ===")
    print()
    _show_codecs()
    for title, section in _SECTIONS:
        print()
        print(f"--- {title} ---")
        section()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())