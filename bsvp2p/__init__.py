"""Bitcoin SV peer-to-peer primitives: hashes, merkle trees, wire encoding and peer management."""

__version__ = "0.1.0"