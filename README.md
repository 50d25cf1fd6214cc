# cim-ipld

Content addressing for Composable Information Machines:

- **BLAKE3** (`cim_ipld.blake3`): a pure-Python incremental hasher,
  `Blake3`, with extendable output, and the one-shot `blake3(data)`.
- **CIDs** (`cim_ipld.cid`): `Multihash` and `Cid` with byte and text
  forms. Version 1 CIDs are written in base32 (`b...`); parsing also
  accepts base32 upper case, base58btc (`z...`), base16 (`f...`) and
  version 0 (`Qm...`) identifiers. `blake3_cid(payload, codec)` builds a
  CIDv1 from a BLAKE3-256 multihash; `encode_varint` and `decode_varint`
  handle unsigned LEB128 varints.
- **Content chains** (`cim_ipld.chain`): append-only sequences where every
  item is linked to the CID of the item before it, with validation that
  catches tampering, broken links and wrong sequence numbers.
- **IPLD codecs** (`cim_ipld.codecs`): DAG-CBOR and DAG-JSON encoding, the
  standard multicodec codes and the CIM-specific JSON codec codes.
- **A codec registry** (`cim_ipld.registry`) that keeps custom codecs inside
  the `0x300000`–`0x3FFFFF` range and accepts standard IPLD codecs as they
  are.
- **Typed CIM JSON records** (`cim_ipld.types`): alchemist configs, workflow
  graphs, context graphs, concept spaces, domain models and event streams.
- **Event CIDs** (`cim_ipld.events`) computed from the stable payload only,
  so transient metadata such as ids, timestamps and correlation ids never
  changes them.

## Installation

```
pip install cim-ipld
```

Python 3.10 or later is required. The only runtime dependency is `cbor2`.

## Computing CIDs

```python
from cim_ipld.blake3 import blake3
from cim_ipld.cid import Cid, blake3_cid

digest = blake3(b"hello")          # 32 bytes

cid = blake3_cid(b'{"hello": "world"}', 0x300000)
text = str(cid)                    # "b..." base32 text
assert Cid.parse(text) == cid
assert Cid.from_bytes(cid.to_bytes()) == cid
assert cid.codec == 0x300000
```

Malformed identifiers raise `InvalidCidError`; malformed multihashes raise
`MultihashError`.

## Content chains

```python
from cim_ipld.chain import ChainedContent, ContentChain

chain = ContentChain(codec=0x300000)
first = chain.append({"event_id": "event-1", "event_type": "test"})
second = chain.append({"event_id": "event-2", "event_type": "test"})

assert second.previous_cid == first.cid
assert second.sequence == 1
chain.validate()

newer = chain.items_since(first.cid)      # items after the given CID
latest = chain.head()
```

An item's CID covers its content (serialized as compact JSON), the previous
CID and the sequence number; the timestamp is left out, so the same content
at the same position always gets the same CID. Content may be plain JSON
data, a dataclass, or an object with a `to_dict()` method.

Validation failures raise exceptions from `cim_ipld.errors`:
`ChainValidationError` for a broken link, `SequenceValidationError` for a
wrong sequence number and `InvalidCidError` when an item's CID no longer
matches its content or is not found by `items_since`. All of them derive
from `IpldError`.

A chained item can be saved as JSON and read back; the content comes back as
plain JSON data:

```python
text = first.to_json()
restored = ChainedContent.from_json(text, 0x300000)
restored.validate_chain(None)
```

## Codecs

```python
from cim_ipld.codecs import DagCborCodec, DagJsonCodec, to_dag_json_pretty

data = {"name": "test", "value": 42}
assert DagCborCodec.decode(DagCborCodec.encode(data)) == data
assert DagJsonCodec.decode(DagJsonCodec.encode(data)) == data
print(to_dag_json_pretty(data))
```

DAG-CBOR output is canonical CBOR, and decoding rejects trailing bytes
(`CborError`). DAG-JSON output is compact UTF-8 JSON; `encode_pretty`
indents by two spaces. JSON failures raise `SerializationError`.
`to_dag_cbor`, `to_dag_json` and `to_dag_json_pretty` are shortcuts for the
same encoders.

Codec codes are available through `StandardCodec` (for example
`StandardCodec.DAG_CBOR`, `0x71`) and `CimJsonCodec` (for example
`CimJsonCodec.WORKFLOW_GRAPH`, `0x340001`). Each named codec class, such as
`RawCodec`, `DagPbCodec` or `EventStreamJsonCodec`, carries a `code` and a
`name`; `CimCodec(code, name)` makes an ad-hoc one.

## Codec registry

```python
from cim_ipld.codecs import CimCodec
from cim_ipld.registry import CodecRegistry

registry = CodecRegistry()
assert registry.get(0x71).name == "dag-cbor"
assert registry.contains(0x340000)

registry.register(CimCodec(0x300200, "custom-event"))
print([hex(code) for code in registry.codes()])
```

A new registry already holds the standard IPLD codecs and the CIM JSON
codecs. Registering a custom codec whose code lies outside
`0x300000`–`0x3FFFFF` raises `InvalidCodecRangeError`;
`register_standard` takes any code. Registering the same code again replaces
the earlier codec.

## CIM JSON records

`cim_ipld.types` holds dataclasses such as `AlchemistConfig`,
`WorkflowGraph`, `ContextGraph`, `ConceptSpace`, `DomainModel` and
`EventStream`, all derived from `JsonRecord`. Each converts to a plain
dictionary with `to_dict()` and back with `from_dict()`, which checks field
types and raises `SerializationError` on a mismatch or a missing field.

```python
from cim_ipld.codecs import DagCborCodec
from cim_ipld.types import Position, WorkflowNode

node = WorkflowNode(id="node-1", node_type="process", label="Process Data",
                    position=Position(x=100.0, y=200.0))
decoded = WorkflowNode.from_dict(DagCborCodec.decode(DagCborCodec.encode(node)))
assert decoded == node
```

## Event CIDs

```python
from cim_ipld.events import EventEnvelope, MessageEnvelope, UserCreated

payload = UserCreated(username="alice", email="alice@example.com")
a = EventEnvelope(event_id="evt_123", timestamp="2024-01-01T10:00:00Z",
                  event_type="UserCreated", aggregate_id="user_789",
                  payload=payload)
b = EventEnvelope(event_id="evt_999", timestamp="2024-01-02T15:30:00Z",
                  correlation_id="corr_888",
                  event_type="UserCreated", aggregate_id="user_789",
                  payload=payload)
assert a.calculate_cid() == b.calculate_cid()
```

Payloads are `UserCreated`, `UserUpdated` and `OrderPlaced` (made of
`OrderItem`s). `MessageEnvelope` does the same for arbitrary content
wrapped with message headers: only the content takes part in the CID.

## Command-line demos

```
cim-ipld-demo      # encodes the sample CIM JSON records with DAG-CBOR and DAG-JSON
cim-ipld-events    # shows that event CIDs ignore transient metadata
```

## What this package does not do

It computes identifiers and encodes data; it does not store anything. There
is no object store, no cache and no network client: the `nats_url` field of
`InfrastructureConfig` is only a string in a configuration record. Content
type detection, media transformation and search are not part of it either.

## Running the tests

```
pip install -e ".[test]"
pytest
```