from __future__ import annotations

import hashlib

import pytest

from verifier.errors import ConfigError, MalformedChainError
from verifier.hasher import (
    compute_block_hash,
    encode_block_fields,
    genesis_previous_hash,
)


def _fields(**over):
    base = {"index": 3, "timestamp": "2026-01-01T00:00:00.000000Z", "data": "abc", "previous_hash": "0" * 64}
    base.update(over)
    return base


def test_block_hash_is_deterministic() -> None:
    assert compute_block_hash(**_fields()) == compute_block_hash(**_fields())


def test_block_hash_changes_with_every_field() -> None:
    h = compute_block_hash(**_fields())
    assert compute_block_hash(**_fields(index=4)) != h
    assert compute_block_hash(**_fields(timestamp="2026-01-01T00:00:01.000000Z")) != h
    assert compute_block_hash(**_fields(data="abd")) != h
    assert compute_block_hash(**_fields(previous_hash="1" * 64)) != h


def test_field_boundaries_are_unambiguous() -> None:
    # Moving characters across the data/previous_hash boundary must not collide.
    a = encode_block_fields(index=0, timestamp="t", data="ab", previous_hash="c")
    b = encode_block_fields(index=0, timestamp="t", data="a", previous_hash="bc")
    assert a != b


def test_encoding_layout_v1() -> None:
    raw = encode_block_fields(index=1, timestamp="t", data="d", previous_hash="p")
    tag = b"block.v1"
    assert raw.startswith(len(tag).to_bytes(8, "big") + tag)
    assert (8).to_bytes(8, "big") + (1).to_bytes(8, "big") in raw
    assert raw.endswith((1).to_bytes(8, "big") + b"p")


def test_sha256_hash_matches_hashlib_over_encoding() -> None:
    f = _fields()
    assert compute_block_hash(**f) == hashlib.sha256(encode_block_fields(**f)).hexdigest()


@pytest.mark.parametrize(
    "digest,width",
    [("sha256", 64), ("sha512", 128), ("blake2b", 128), ("sha3_256", 64)],
)
def test_genesis_sentinel_width_follows_digest(digest: str, width: int) -> None:
    sentinel = genesis_previous_hash(digest)
    assert sentinel == "0" * width
    assert len(compute_block_hash(**_fields(), digest=digest)) == width


def test_unsupported_digest_is_config_error() -> None:
    with pytest.raises(ConfigError):
        genesis_previous_hash("md5")


@pytest.mark.parametrize("index", [-1, True, "1"])
def test_invalid_index_is_malformed(index) -> None:
    with pytest.raises(MalformedChainError):
        encode_block_fields(index=index, timestamp="t", data="d", previous_hash="p")


def test_unknown_encoding_version() -> None:
    with pytest.raises(ConfigError):
        encode_block_fields(index=0, timestamp="t", data="d", previous_hash="p", version=99)


@pytest.mark.parametrize("field", ["timestamp", "data", "previous_hash"])
def test_non_utf8_field_is_malformed(field: str) -> None:
    with pytest.raises(MalformedChainError) as e:
        compute_block_hash(**_fields(**{field: "\ud800"}))
    assert e.value.meta == {"index": 3, "field": field}
