"""The single-block SHA-256 Boolean circuit, read from a Bristol-format file."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from .utils import bytes_to_bits

INITIAL_HASH_VALUES = bytes.fromhex(
    "6a09e667bb67ae853c6ef372a54ff53a510e527f9b05688c1f83d9ab5be0cd19"
)

SINGLE_BLOCK_BITS_LEN = 512
STATE_INFO_BITS_LEN = 256
OUTPUT_BITS_LEN = 256
AND_GATES_CNT = 22573

DEFAULT_CIRCUIT_PATH = Path("data/sha256-bristol-basic.txt")


class CircuitFormatError(ValueError):
    """Raised when a circuit description cannot be parsed."""


@dataclass(frozen=True)
class Gate:
    """A two-input XOR or AND gate; inputs may be inverted."""

    input0: int
    input1: int
    output: int
    input0_flipped: bool = False
    input1_flipped: bool = False
    is_and: bool = False


@dataclass(frozen=True)
class OutputWire:
    """A circuit output wire.

    When ``should_trace`` is set the wire is produced by a NOT gate, and its
    value must be read from ``input_id`` and inverted.
    """

    id: int
    input_id: int = 0
    should_trace: bool = False


@dataclass
class Sha256Circuit:
    """Compression-function circuit with NOT gates folded into gate inputs."""

    initial_hash_bits: tuple[bool, ...]
    extra_input_wire: int
    gates: list[Gate]
    xor_count: int
    and_count: int
    inv_count: int
    output_wires: list[OutputWire]
    extra_gates: list[Gate] = field(default_factory=list)

    def initial_hash_bit(self, idx: int) -> bool:
        """Return bit ``idx`` of the (bit-reversed) initial hash state."""
        if not 0 <= idx < STATE_INFO_BITS_LEN:
            raise IndexError(f"Input index {idx} is not in range [0,{STATE_INFO_BITS_LEN})")
        return self.initial_hash_bits[idx]

    def set_input_gates(self, gates: Iterable[Gate]) -> None:
        """Set the gates to run: the given input gates followed by the circuit."""
        self.extra_gates = [*gates, *self.gates]

    def summary(self) -> str:
        """Describe the gate counts of the circuit."""
        return (
            "The single block sha256 Boolean circuit has:\n\n"
            f" {self.xor_count} XOR gates\n"
            f" {self.and_count} AND gates\n"
            f" {self.inv_count} INV gates"
        )


def _to_int(text: str, line_number: int) -> int:
    try:
        return int(text)
    except ValueError:
        raise CircuitFormatError(f"line {line_number}: {text!r} is not a wire number") from None


def _resolve(wire: int, inverters: dict[int, int]) -> tuple[int, bool]:
    """Follow a chain of NOT gates back to its source, tracking parity."""
    flipped = False
    for _ in range(len(inverters) + 1):
        if wire not in inverters:
            return wire, flipped
        wire = inverters[wire]
        flipped = not flipped
    raise CircuitFormatError(f"NOT gates form a cycle through wire {wire}")


def _fold_inverters(
    gates: Sequence[Gate], inverters: dict[int, int], output_ids: Iterable[int]
) -> tuple[list[Gate], list[OutputWire]]:
    folded = []
    for gate in gates:
        input0, flip0 = _resolve(gate.input0, inverters)
        input1, flip1 = _resolve(gate.input1, inverters)
        folded.append(
            dataclasses.replace(
                gate,
                input0=input0,
                input1=input1,
                input0_flipped=flip0,
                input1_flipped=flip1,
            )
        )

    gate_outputs = {gate.output for gate in folded}
    outputs = []
    for wire_id in output_ids:
        source = inverters.get(wire_id)
        if source is not None and source in gate_outputs:
            outputs.append(OutputWire(wire_id, input_id=source, should_trace=True))
        else:
            outputs.append(OutputWire(wire_id))
    return folded, outputs


def parse_bristol(lines: Iterable[str]) -> Sha256Circuit:
    """Build a circuit from the lines of a Bristol-format description."""
    extra_input_wire: int | None = None
    gates: list[Gate] = []
    inverters: dict[int, int] = {}
    xor_count = and_count = inv_count = 0

    for line_number, line in enumerate(lines, start=1):
        parts = line.split()
        if line_number == 1:
            if len(parts) < 2:
                raise CircuitFormatError("line 1: expected gate and wire counts")
            extra_input_wire = _to_int(parts[1], line_number)
        elif line_number >= 5 and parts:
            if len(parts) == 6:
                is_and = parts[5] == "AND"
                gates.append(
                    Gate(
                        input0=_to_int(parts[2], line_number),
                        input1=_to_int(parts[3], line_number),
                        output=_to_int(parts[4], line_number),
                        is_and=is_and,
                    )
                )
                if is_and:
                    and_count += 1
                else:
                    xor_count += 1
            elif len(parts) >= 4:
                source = _to_int(parts[2], line_number)
                target = _to_int(parts[3], line_number)
                inverters[target] = source
                inv_count += 1
            else:
                raise CircuitFormatError(f"line {line_number}: malformed gate {line.strip()!r}")

    if extra_input_wire is None:
        raise CircuitFormatError("circuit description is empty")
    if extra_input_wire < OUTPUT_BITS_LEN:
        raise CircuitFormatError(
            f"circuit has {extra_input_wire} wires, fewer than {OUTPUT_BITS_LEN} outputs"
        )

    output_ids = range(extra_input_wire - OUTPUT_BITS_LEN, extra_input_wire)
    folded, outputs = _fold_inverters(gates, inverters, output_ids)

    return Sha256Circuit(
        initial_hash_bits=tuple(reversed(bytes_to_bits(INITIAL_HASH_VALUES))),
        extra_input_wire=extra_input_wire,
        gates=folded,
        xor_count=xor_count,
        and_count=and_count,
        inv_count=inv_count,
        output_wires=outputs,
    )


def load_circuit(path: str | Path = DEFAULT_CIRCUIT_PATH) -> Sha256Circuit:
    """Read and parse a Bristol-format circuit file."""
    with open(path, encoding="utf-8") as handle:
        return parse_bristol(handle)