import pytest

from cim_ipld.codecs import DagCborCodec, DagJsonCodec, to_dag_cbor, to_dag_json, to_dag_json_pretty
from cim_ipld.errors import SerializationError
from cim_ipld.types import (
    Aggregate,
    AlchemistConfig,
    Concept,
    ConceptSpace,
    ConceptSpaceMetadata,
    ContextGraph,
    ContextMetadata,
    Dimension,
    DomainConfig,
    DomainModel,
    DomainModelMetadata,
    Entity,
    EventStream,
    EventStreamMetadata,
    InfrastructureConfig,
    Position,
    Property,
    Relationship,
    StorageConfig,
    StreamEvent,
    WorkflowNode,
)


def _concept_space():
    return ConceptSpace(
        id="cs-001",
        name="Color Space",
        dimensions=[
            Dimension(name="hue", dimension_type="circular", range=(0.0, 360.0)),
            Dimension(name="saturation", dimension_type="linear", range=(0.0, 1.0)),
        ],
        concepts=[Concept(id="red", label="Red", coordinates=[0.0, 1.0], attributes={})],
        metadata=ConceptSpaceMetadata(
            created_at=1234567890, updated_at=1234567900, version="1.0", algorithm="t-sne"
        ),
    )


def _event_stream():
    return EventStream(
        id="es-001",
        stream_name="order-events",
        events=[
            StreamEvent(
                id="evt-001",
                event_type="OrderCreated",
                timestamp=1234567890,
                aggregate_id="order-123",
                sequence=1,
                payload={"order_id": "order-123", "customer_id": "cust-456", "total": 99.99},
                metadata={},
            )
        ],
        metadata=EventStreamMetadata(
            created_at=1234567890, last_event_at=1234567890, event_count=1, stream_version="1.0"
        ),
    )


def test_dag_json_roundtrip_workflow_node():
    node = WorkflowNode(
        id="node-1",
        node_type="process",
        label="Process Data",
        position=Position(x=100.0, y=200.0, z=None),
    )
    decoded = WorkflowNode.from_dict(DagJsonCodec.decode(DagJsonCodec.encode(node)))
    assert decoded.id == node.id
    assert decoded.label == node.label
    assert decoded == node


def test_concept_space_cbor_and_json():
    space = _concept_space()
    from_cbor = ConceptSpace.from_dict(DagCborCodec.decode(to_dag_cbor(space)))
    assert from_cbor.id == space.id
    assert len(from_cbor.dimensions) == len(space.dimensions)
    from_json = ConceptSpace.from_dict(DagJsonCodec.decode(to_dag_json(space)))
    assert from_json.id == space.id
    assert len(from_json.concepts) == len(space.concepts)
    assert from_json == space
    assert from_cbor == space


def test_domain_model_pretty_json():
    model = DomainModel(
        id="dm-001",
        name="Order Domain",
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
                    )
                ],
                invariants=["Total must be positive"],
            )
        ],
        events=[],
        commands=[],
        metadata=DomainModelMetadata(
            version="1.0", bounded_context="order-management", created_at=1234567890, tags=["core"]
        ),
    )
    text = to_dag_json_pretty(model)
    assert "Order Domain" in text
    assert "order_id" in text
    assert DomainModel.from_dict(DagJsonCodec.decode(text)) == model


def test_event_stream_cbor_roundtrip():
    stream = _event_stream()
    decoded = EventStream.from_dict(DagCborCodec.decode(to_dag_cbor(stream)))
    assert decoded.id == stream.id
    assert len(decoded.events) == len(stream.events)
    assert decoded.events[0].event_type == stream.events[0].event_type
    assert decoded.events[0].payload == stream.events[0].payload


def test_dimension_range_is_json_array():
    dim = Dimension(name="hue", dimension_type="circular", range=(0.0, 360.0))
    assert DagJsonCodec.encode(dim) == (
        b'{"name":"hue","dimension_type":"circular","range":[0.0,360.0]}'
    )
    back = Dimension.from_dict(DagJsonCodec.decode(DagJsonCodec.encode(dim)))
    assert back.range == (0.0, 360.0)


def test_position_missing_z_is_none_and_serialized_as_null():
    pos = Position.from_dict({"x": 1.5, "y": 2.5})
    assert pos == Position(x=1.5, y=2.5, z=None)
    assert b'"z":null' in DagJsonCodec.encode(pos)


def test_integer_coordinates_become_floats():
    pos = Position.from_dict({"x": 100, "y": 200})
    assert pos.x == 100.0
    assert isinstance(pos.x, float)


def test_to_dict_keeps_field_order():
    node = WorkflowNode(id="n", node_type="t", label="l", position=Position(x=0.0, y=0.0))
    assert list(node.to_dict()) == ["id", "node_type", "label", "position", "data"]
    assert node.to_dict()["position"] == {"x": 0.0, "y": 0.0, "z": None}


def test_missing_required_field_raises():
    with pytest.raises(SerializationError):
        WorkflowNode.from_dict({"id": "n", "node_type": "t", "label": "l"})


def test_wrong_type_raises():
    with pytest.raises(SerializationError):
        DomainConfig.from_dict({"name": "graph", "enabled": "yes", "settings": {}})


def test_negative_unsigned_field_raises():
    with pytest.raises(SerializationError):
        ContextMetadata.from_dict(
            {"domain": "d", "version": "1", "created_at": -1, "tags": []}
        )


def test_non_mapping_raises():
    with pytest.raises(SerializationError):
        Position.from_dict([1.0, 2.0])


def test_range_wrong_length_raises():
    with pytest.raises(SerializationError):
        Dimension.from_dict({"name": "hue", "dimension_type": "circular", "range": [0.0]})


def test_unknown_keys_are_ignored():
    entity = Entity.from_dict({"id": "e1", "entity_type": "person", "attributes": {}, "extra": 1})
    assert entity == Entity(id="e1", entity_type="person", attributes={})


def test_alchemist_config_roundtrip():
    config = AlchemistConfig(
        version="1.0.0",
        domains=[
            DomainConfig(
                name="graph",
                enabled=True,
                settings={"max_nodes": 10000, "auto_layout": True},
            )
        ],
        infrastructure=InfrastructureConfig(
            nats_url="nats://localhost:4222",
            storage=StorageConfig(
                backend="jetstream", options={"bucket": "cim-storage", "replicas": 3}
            ),
        ),
        metadata={"environment": "production", "region": {"name": "us-west-2"}},
    )
    assert AlchemistConfig.from_dict(DagJsonCodec.decode(to_dag_json(config))) == config
    assert AlchemistConfig.from_dict(DagCborCodec.decode(to_dag_cbor(config))) == config


def test_context_graph_roundtrip():
    graph = ContextGraph(
        id="cg-1",
        context="sales",
        entities=[Entity(id="a", entity_type="customer"), Entity(id="b", entity_type="order")],
        relationships=[
            Relationship(id="r1", source="a", target="b", relationship_type="placed")
        ],
        metadata=ContextMetadata(domain="sales", version="1.0", created_at=1234567890, tags=[]),
    )
    decoded = ContextGraph.from_dict(DagCborCodec.decode(to_dag_cbor(graph)))
    assert decoded == graph
    assert decoded.relationships[0].source == "a"