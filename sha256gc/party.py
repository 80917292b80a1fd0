"""The two parties of the garbled SHA-256 computation.

The garbler (role 0) and the evaluator (role 1) each hold one XOR share of
the message. The circuit first XORs the two shares together, then runs the
SHA-256 compression function once per 512-bit padded block.
"""

from __future__ import annotations

import copy
import logging
import random
from collections.abc import Iterator
from dataclasses import dataclass
from itertools import islice
from typing import TypeVar

from .circuit import (
    OUTPUT_BITS_LEN,
    SINGLE_BLOCK_BITS_LEN,
    STATE_INFO_BITS_LEN,
    Gate,
    OutputWire,
    Sha256Circuit,
    load_circuit,
)
from .gc import EvalWire, GarbledAnd, GarbledCircuit, MissingWireError, WireLabel
from .utils import bits_to_bytes, bytes_to_bits, padded_bits

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


@dataclass
class GarbleResult:
    """What the garbler hands to the evaluator."""

    p0_labels: list[WireLabel]
    """Labels for the garbler's actual input bits."""
    p1_labels: list[tuple[WireLabel, WireLabel]]
    """Oblivious-transfer pairs (zero label, one label) for the evaluator's bits."""
    garbled_and: list[GarbledAnd]
    """Garbled tables of every AND gate of every block, in order."""
    permu_bits: list[bool]
    """Permutation bits of the final output wires."""


def _output_value(labels: dict[int, _T], output: OutputWire) -> _T:
    wire_id = output.input_id if output.should_trace else output.id
    try:
        return labels[wire_id]
    except KeyError:
        raise MissingWireError(f"Output wire {wire_id} not found") from None


class Party:
    """One participant, holding a share of the message and the circuit."""

    def __init__(
        self,
        role: int,
        message: bytes,
        circuit: Sha256Circuit | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.role = role
        self.circuit = copy.copy(circuit) if circuit is not None else load_circuit()
        self.rng = rng
        self.secret_bits = bytes_to_bits(message)
        if role == 0:
            logger.info(self.circuit.summary())

    def _block_inputs(self, block: int) -> Iterator[tuple[int, int]]:
        """Yield (message bit index, circuit wire id) for the bits of one block."""
        start = block * SINGLE_BLOCK_BITS_LEN
        for j in range(start, start + SINGLE_BLOCK_BITS_LEN):
            yield j, SINGLE_BLOCK_BITS_LEN - 1 - (j % SINGLE_BLOCK_BITS_LEN)

    def _input_gate(self, j: int, wire: int) -> Gate:
        base = self.circuit.extra_input_wire + 2 * j
        return Gate(input0=base, input1=base + 1, output=wire)

    def start_garbling(self) -> GarbleResult:
        """Garble every block of the circuit for this party's share."""
        garbler = GarbledCircuit(self.rng)
        bit_count = len(self.secret_bits)

        p0_zero = [WireLabel.random(garbler.rng) for _ in range(bit_count)]
        p1_zero = [WireLabel.random(garbler.rng) for _ in range(bit_count)]
        p0_labels = [
            zero ^ garbler.global_r if bit else zero
            for zero, bit in zip(p0_zero, self.secret_bits)
        ]
        p1_labels = [(zero, zero ^ garbler.global_r) for zero in p1_zero]

        overall_bits = padded_bits(bit_count // 8)
        block_count = len(overall_bits) // SINGLE_BLOCK_BITS_LEN

        state = [
            EvalWire(WireLabel.zero(), self.circuit.initial_hash_bit(j))
            for j in range(STATE_INFO_BITS_LEN)
        ]
        tables: list[GarbledAnd] = []
        permu_bits: list[bool] = []

        for block in range(block_count):
            zero_labels: dict[int, EvalWire] = {}
            input_gates = []
            for j, wire in self._block_inputs(block):
                if j < bit_count:
                    gate = self._input_gate(j, wire)
                    zero_labels[gate.input0] = EvalWire(p0_zero[j])
                    zero_labels[gate.input1] = EvalWire(p1_zero[j])
                    input_gates.append(gate)
                else:
                    zero_labels[wire] = EvalWire(WireLabel.zero(), overall_bits[j])
            for j, wire_state in enumerate(state):
                zero_labels[SINGLE_BLOCK_BITS_LEN + j] = wire_state

            self.circuit.set_input_gates(input_gates)
            tables.extend(garbler.garble(self.circuit, zero_labels))

            outputs = [
                (output, _output_value(zero_labels, output))
                for output in self.circuit.output_wires
            ]
            if block < block_count - 1:
                state = [
                    EvalWire(wire.label, output.should_trace ^ wire.flipped)
                    for output, wire in outputs
                ]
            else:
                permu_bits = [wire.label.lsb() ^ wire.flipped for _, wire in outputs]
            logger.info("Garbler: %d/%d blocks garbled.", block + 1, block_count)

        return GarbleResult(
            p0_labels=p0_labels,
            p1_labels=p1_labels,
            garbled_and=tables,
            permu_bits=permu_bits,
        )

    def start_evaluating(self, result: GarbleResult) -> bytes:
        """Evaluate the garbled circuit and return the 32-byte digest."""
        bit_count = len(self.secret_bits)
        if len(result.p0_labels) != bit_count or len(result.p1_labels) != bit_count:
            raise ValueError(
                f"Garbled input has {len(result.p0_labels)} garbler and "
                f"{len(result.p1_labels)} evaluator labels, expected {bit_count} each"
            )
        if len(result.permu_bits) != OUTPUT_BITS_LEN:
            raise ValueError(
                f"Expected {OUTPUT_BITS_LEN} permutation bits, got {len(result.permu_bits)}"
            )

        evaluator = GarbledCircuit(self.rng)
        overall_bits = padded_bits(bit_count // 8)
        block_count = len(overall_bits) // SINGLE_BLOCK_BITS_LEN
        and_per_block = self.circuit.and_count
        if len(result.garbled_and) < and_per_block * block_count:
            raise ValueError(
                f"Expected {and_per_block * block_count} garbled AND tables, "
                f"got {len(result.garbled_and)}"
            )

        p1_labels = [pair[int(bit)] for pair, bit in zip(result.p1_labels, self.secret_bits)]
        tables = iter(result.garbled_and)
        state = [WireLabel.zero()] * STATE_INFO_BITS_LEN
        output_bits: list[bool] = []

        for block in range(block_count):
            labels: dict[int, WireLabel] = {}
            input_gates = []
            for j, wire in self._block_inputs(block):
                if j < bit_count:
                    gate = self._input_gate(j, wire)
                    labels[gate.input0] = result.p0_labels[j]
                    labels[gate.input1] = p1_labels[j]
                    input_gates.append(gate)
                else:
                    labels[wire] = WireLabel.zero()
            for j, label in enumerate(state):
                labels[SINGLE_BLOCK_BITS_LEN + j] = label

            self.circuit.set_input_gates(input_gates)
            evaluator.evaluate(self.circuit, islice(tables, and_per_block), labels)

            outputs = [_output_value(labels, output) for output in self.circuit.output_wires]
            if block < block_count - 1:
                state = outputs
            else:
                output_bits = [
                    permu ^ label.lsb() for permu, label in zip(result.permu_bits, outputs)
                ]
            logger.info("Evaluator: %d/%d blocks evaluated.", block + 1, block_count)

        return bits_to_bytes(output_bits[::-1])