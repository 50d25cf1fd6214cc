import json

import pytest

from cim_ipld.codecs import (
    CimJsonCodec,
    DagCborCodec,
    DagJsonCodec,
    StandardCodec,
    to_dag_cbor,
    to_dag_json,
    to_dag_json_pretty,
)
from cim_ipld.demo import (
    build_alchemist_config,
    build_concept_space,
    build_domain_model,
    build_event_stream,
    build_workflow_graph,
    main,
)
from cim_ipld.types import (
    AlchemistConfig,
    ConceptSpace,
    DomainModel,
    EventStream,
    WorkflowGraph,
)

BUILDERS = [
    (build_alchemist_config, AlchemistConfig),
    (build_workflow_graph, WorkflowGraph),
    (build_concept_space, ConceptSpace),
    (build_domain_model, DomainModel),
    (build_event_stream, EventStream),
]


@pytest.mark.parametrize("builder, record_type", BUILDERS)
def test_records_round_trip_through_dag_json(builder, record_type):
    record = builder()
    decoded = record_type.from_dict(DagJsonCodec.decode(to_dag_json(record)))
    assert decoded == record


@pytest.mark.parametrize("builder, record_type", BUILDERS)
def test_records_round_trip_through_dag_cbor(builder, record_type):
    record = builder()
    decoded = record_type.from_dict(DagCborCodec.decode(to_dag_cbor(record)))
    assert decoded == record


@pytest.mark.parametrize("builder, record_type", BUILDERS)
def test_pretty_json_matches_compact_json(builder, record_type):
    record = builder()
    assert json.loads(to_dag_json_pretty(record)) == json.loads(to_dag_json(record))


def test_builders_are_deterministic():
    first_cbor = to_dag_cbor(build_event_stream())
    second_cbor = to_dag_cbor(build_event_stream())
    assert first_cbor == second_cbor
    decoded_stream = DagCborCodec.decode(first_cbor)
    assert decoded_stream["id"] == "es-orders-2024"
    assert decoded_stream["stream_name"] == "order-events"

    first_json = to_dag_json(build_workflow_graph())
    second_json = to_dag_json(build_workflow_graph())
    assert first_json == second_json
    decoded_workflow = json.loads(first_json)
    assert decoded_workflow["id"] == "wf-001"
    assert [node["id"] for node in decoded_workflow["nodes"]] == [
        "start",
        "validate",
        "transform",
        "end",
    ]


def test_alchemist_config_contents():
    config = build_alchemist_config()
    assert [domain.name for domain in config.domains] == ["graph", "workflow"]
    assert config.domains[0].settings["max_nodes"] == 10000
    assert config.infrastructure.storage.backend == "jetstream"
    assert config.infrastructure.storage.options["replicas"] == 3
    assert config.metadata["region"] == "us-west-2"


def test_workflow_graph_edges_connect_known_nodes():
    workflow = build_workflow_graph()
    node_ids = {node.id for node in workflow.nodes}
    assert len(workflow.nodes) == 4
    assert len(workflow.edges) == 3
    for edge in workflow.edges:
        assert edge.source in node_ids
        assert edge.target in node_ids
    assert workflow.edges[1].data["condition"] == "valid == true"
    assert workflow.metadata.tags == ["data-pipeline", "etl"]


def test_workflow_positions_have_no_z():
    workflow = build_workflow_graph()
    assert all(node.position.z is None for node in workflow.nodes)
    encoded = json.loads(to_dag_json(workflow))
    assert encoded["nodes"][0]["position"]["z"] is None


def test_concept_space_coordinates_match_dimensions():
    space = build_concept_space()
    assert space.dimensions[0].range == (0.0, 360.0)
    for concept in space.concepts:
        assert len(concept.coordinates) == len(space.dimensions)
    assert space.concepts[1].attributes["emotion"] == "calm"


def test_domain_model_json_mentions_names():
    text = to_dag_json_pretty(build_domain_model())
    assert "Order Management Domain" in text
    assert "order_id" in text
    assert "foreign_key:customer" in text


def test_event_stream_metadata_is_consistent():
    stream = build_event_stream()
    assert stream.metadata.event_count == len(stream.events)
    assert stream.metadata.last_event_at == stream.events[-1].timestamp
    assert [event.sequence for event in stream.events] == [1, 2]
    assert stream.events[1].payload["carrier"] == "FedEx"


def test_main_prints_codec_table(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert out.startswith("=== CIM-IPLD Codec Demo ===")
    assert f"Raw (0x{StandardCodec.RAW:x})" in out
    assert f"DAG-CBOR (0x{StandardCodec.DAG_CBOR:x})" in out
    assert f"Alchemist (0x{CimJsonCodec.ALCHEMIST:x})" in out
    assert f"0x{CimJsonCodec.EVENT_STREAM:x} (cim-event-stream-json)" in out


def test_main_runs_every_section(capsys):
    main([])
    out = capsys.readouterr().out
    for number in range(1, 9):
        assert f"--- Example {number}:" in out
    assert "... (truncated)" in out
    assert "Data Processing Pipeline" in out


def test_main_rejects_unknown_arguments(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--no-such-option"])
    assert excinfo.value.code == 2