import random
import string

import pytest

from sha256gc.circuit import INITIAL_HASH_VALUES
from sha256gc.cli import main, random_message, run, split_secret


def write_xor_circuit(path):
    lines = ["256 1024", "2 512 256", "1 256", ""]
    lines += [f"2 1 {256 + k} {512 + k} {768 + k} XOR" for k in range(256)]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_random_message_is_letters_of_given_length():
    message = random_message(40, random.Random(1))
    assert len(message) == 40
    assert all(chr(byte) in string.ascii_letters for byte in message)


def test_random_message_rejects_negative_length():
    with pytest.raises(ValueError):
        random_message(-1, random.Random(1))


@pytest.mark.parametrize("message", [b"", b"a", b"some secret text"])
def test_split_secret_shares_xor_to_message(message):
    share0, share1 = split_secret(message, random.Random(2))
    assert len(share0) == len(share1) == len(message)
    assert bytes(a ^ b for a, b in zip(share0, share1)) == message


def test_run_with_xor_circuit(tmp_path):
    path = write_xor_circuit(tmp_path / "circuit.txt")
    message = b"abc"
    padded = (message + b"\x80").ljust(32, b"\x00")
    expected = bytes(h ^ p for h, p in zip(INITIAL_HASH_VALUES, padded))
    assert run(message, path, random.Random(3)) == expected.hex()


def test_main_without_arguments(capsys):
    assert main([]) == 1
    assert "Please input a positive integer!" in capsys.readouterr().err


@pytest.mark.parametrize("argument", ["0", "abc", "-3", "1.5"])
def test_main_rejects_invalid_length(argument, capsys):
    assert main([argument]) == 1
    assert "Please provide a valid positive integer!" in capsys.readouterr().err


def test_main_reports_missing_circuit(tmp_path, capsys):
    assert main(["4", str(tmp_path / "missing.txt")]) == 1
    assert "Failed to create circuit" in capsys.readouterr().out


def test_main_detects_wrong_result(tmp_path, capsys):
    path = write_xor_circuit(tmp_path / "circuit.txt")
    assert main(["5", str(path)]) == 1
    captured = capsys.readouterr()
    assert "The garbled result is wrong!!" in captured.err
    assert "Verify: Final garbled hash computation:" in captured.out