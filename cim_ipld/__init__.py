"""BLAKE3 CIDs, IPLD codecs, a codec registry, CIM JSON records and content-addressed chains."""

__version__ = "0.3.0"