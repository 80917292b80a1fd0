"""Command line: hash a random message with the garbled SHA-256 circuit."""

from __future__ import annotations

import logging
import random
import re
import string
import sys
from collections.abc import Sequence
from pathlib import Path

from .circuit import DEFAULT_CIRCUIT_PATH, load_circuit
from .party import Party
from .utils import sha256_hex

logger = logging.getLogger(__name__)


def random_message(length: int, rng: random.Random | None = None) -> bytes:
    """Return ``length`` random ASCII letters, upper or lower case with equal odds."""
    if length < 0:
        raise ValueError("Message length must not be negative")
    rng = rng if rng is not None else random.SystemRandom()
    return bytes(
        ord(rng.choice(string.ascii_uppercase if rng.random() < 0.5 else string.ascii_lowercase))
        for _ in range(length)
    )


def split_secret(message: bytes, rng: random.Random | None = None) -> tuple[bytes, bytes]:
    """Split ``message`` into two random shares whose XOR is the message."""
    rng = rng if rng is not None else random.SystemRandom()
    share0 = rng.randbytes(len(message))
    share1 = bytes(m ^ s for m, s in zip(message, share0))
    return share0, share1


def run(
    message: bytes,
    circuit_path: str | Path = DEFAULT_CIRCUIT_PATH,
    rng: random.Random | None = None,
) -> str:
    """Garble and evaluate the circuit on ``message``; return the hex digest."""
    rng = rng if rng is not None else random.SystemRandom()
    circuit = load_circuit(circuit_path)
    share0, share1 = split_secret(message, rng)

    garbler = Party(0, share0, circuit, rng)
    result = garbler.start_garbling()
    logger.info("\n ................................................... \n")
    evaluator = Party(1, share1, circuit, rng)
    return evaluator.start_evaluating(result).hex()


def main(argv: Sequence[str] | None = None) -> int:
    """Hash a random message of the given length and check the result."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print("Please input a positive integer!", file=sys.stderr)
        return 1
    if not re.fullmatch(r"\+?[0-9]+", args[0]) or int(args[0]) <= 0:
        print("Please provide a valid positive integer!", file=sys.stderr)
        return 1
    length = int(args[0])
    circuit_path = Path(args[1]) if len(args) > 1 else DEFAULT_CIRCUIT_PATH

    logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stdout)

    message = random_message(length)
    desired = sha256_hex(message)
    try:
        garbled = run(message, circuit_path)
    except OSError as error:
        print(f"Failed to create circuit: {error}")
        return 1

    print(f"Input message: {message.decode('ascii')}")
    print(f"Verify: The desired   hash computation: {desired}")
    print(f"Verify: Final garbled hash computation: {garbled}")
    if garbled != desired:
        print("The garbled result is wrong!!", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())