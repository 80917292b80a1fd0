import pytest

from sha256gc.utils import bits_to_bytes, bytes_to_bits, padded_bits, sha256_hex


def test_sha256_hex_known_vector():
    assert sha256_hex(b"abc") == (
        "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
    )


def test_sha256_hex_is_lowercase_hex_of_fixed_length():
    digest = sha256_hex(b"hello world")
    assert len(digest) == 64
    assert digest == digest.lower()
    int(digest, 16)


def test_bytes_to_bits_msb_first():
    assert bytes_to_bits(b"\x80") == [True] + [False] * 7
    assert bytes_to_bits(b"\x01") == [False] * 7 + [True]


def test_bytes_to_bits_empty():
    assert bytes_to_bits(b"") == []


@pytest.mark.parametrize("data", [b"", b"\x00", b"\xff", b"Hello, circuit!", bytes(range(256))])
def test_bits_bytes_round_trip(data):
    bits = bytes_to_bits(data)
    assert len(bits) == 8 * len(data)
    assert bits_to_bytes(bits) == data


def test_bits_to_bytes_rejects_partial_byte():
    with pytest.raises(ValueError):
        bits_to_bytes([True] * 7)


@pytest.mark.parametrize("length, blocks", [(0, 1), (55, 1), (56, 2), (64, 2), (119, 2), (120, 3)])
def test_padded_bits_block_count(length, blocks):
    bits = padded_bits(length)
    assert len(bits) % 512 == 0
    assert len(bits) // 512 == blocks


@pytest.mark.parametrize("length", [0, 1, 3, 55, 56, 100])
def test_padded_bits_structure(length):
    bits = padded_bits(length)
    message_bits = length * 8
    assert not any(bits[:message_bits])
    assert bits[message_bits] is True
    assert not any(bits[message_bits + 1:-64])
    assert int.from_bytes(bits_to_bytes(bits[-64:]), "big") == message_bits


def test_padded_bits_rejects_negative_length():
    with pytest.raises(ValueError):
        padded_bits(-1)