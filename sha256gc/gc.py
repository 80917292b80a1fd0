"""Half-gates garbling with free XOR over the SHA-256 circuit."""

from __future__ import annotations

import random
from collections.abc import Iterable, MutableMapping
from dataclasses import dataclass
from typing import TypeVar

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .circuit import Gate, Sha256Circuit

LABEL_SECURITY_LEVEL = 16
FIXED_AES_KEY = bytes.fromhex("a54ff53a510e527f9b05688c1f83d9ab")

_T = TypeVar("_T")


class MissingWireError(LookupError):
    """Raised when a gate input has no label yet."""


@dataclass(frozen=True)
class WireLabel:
    """A 128-bit wire label, the size of one AES block."""

    data: bytes = bytes(LABEL_SECURITY_LEVEL)

    def __post_init__(self) -> None:
        if len(self.data) != LABEL_SECURITY_LEVEL:
            raise ValueError(
                f"A wire label holds {LABEL_SECURITY_LEVEL} bytes, got {len(self.data)}"
            )

    @classmethod
    def zero(cls) -> WireLabel:
        """Return the all-zero label."""
        return cls(bytes(LABEL_SECURITY_LEVEL))

    @classmethod
    def random(cls, rng: random.Random) -> WireLabel:
        """Return a label filled with bytes drawn from ``rng``."""
        return cls(rng.randbytes(LABEL_SECURITY_LEVEL))

    def with_lsb_set(self) -> WireLabel:
        """Return a copy whose least significant bit is 1."""
        return WireLabel(self.data[:-1] + bytes([self.data[-1] | 1]))

    def lsb(self) -> bool:
        """Return the least significant bit (the permutation bit)."""
        return bool(self.data[-1] & 1)

    def __xor__(self, other: WireLabel) -> WireLabel:
        if not isinstance(other, WireLabel):
            return NotImplemented
        value = int.from_bytes(self.data, "big") ^ int.from_bytes(other.data, "big")
        return WireLabel(value.to_bytes(LABEL_SECURITY_LEVEL, "big"))

    def __bytes__(self) -> bytes:
        return self.data


@dataclass(frozen=True)
class EvalWire:
    """A garbler-side wire: when ``flipped`` the zero label is ``label ^ R``."""

    label: WireLabel
    flipped: bool = False


@dataclass(frozen=True)
class GarbledAnd:
    """The two ciphertexts of a half-gates AND gate."""

    t_g: WireLabel
    t_e: WireLabel


def _fetch(mapping: MutableMapping[int, _T], wire: int, kind: str, slot: int) -> _T:
    try:
        return mapping[wire]
    except KeyError:
        raise MissingWireError(
            f"Key {wire} not found when fetch {kind} gate input{slot}"
        ) from None


class GarbledCircuit:
    """Garbles or evaluates a circuit with a fixed-key AES hash."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng if rng is not None else random.SystemRandom()
        self.global_r = WireLabel.random(self.rng).with_lsb_set()
        self._encryptor = Cipher(algorithms.AES(FIXED_AES_KEY), modes.ECB()).encryptor()
        self._counter = 0

    def _next_index(self) -> int:
        self._counter += 1
        return self._counter

    def _prf(self, label: WireLabel, tweak: int) -> WireLabel:
        tweak_bytes = tweak.to_bytes(8, "little")
        head, tail = label.data[:8], label.data[8:]
        block = head + bytes(a ^ b for a, b in zip(tail, tweak_bytes))
        return WireLabel(self._encryptor.update(block))

    def _label_pair(self, wire: EvalWire, inverted: bool) -> tuple[WireLabel, WireLabel]:
        if wire.flipped ^ inverted:
            one = wire.label
            return one ^ self.global_r, one
        zero = wire.label
        return zero, zero ^ self.global_r

    def _garble_and(self, gate: Gate, zero_labels: MutableMapping[int, EvalWire]) -> GarbledAnd:
        wire_a = _fetch(zero_labels, gate.input0, "AND", 0)
        wire_b = _fetch(zero_labels, gate.input1, "AND", 1)
        wa_0, wa_1 = self._label_pair(wire_a, gate.input0_flipped)
        wb_0, wb_1 = self._label_pair(wire_b, gate.input1_flipped)

        j = self._next_index()
        j_prime = self._next_index()
        p_a = wa_0.lsb()
        p_b = wb_0.lsb()

        wa_0_enc = self._prf(wa_0, j)
        t_g = wa_0_enc ^ self._prf(wa_1, j)
        if p_b:
            t_g ^= self.global_r
        wg_0 = wa_0_enc ^ t_g if p_a else wa_0_enc

        wb_0_enc = self._prf(wb_0, j_prime)
        t_e = wb_0_enc ^ self._prf(wb_1, j_prime) ^ wa_0
        we_0 = wb_0_enc ^ wa_0 ^ t_e if p_b else wb_0_enc

        zero_labels[gate.output] = EvalWire(wg_0 ^ we_0, flipped=False)
        return GarbledAnd(t_g, t_e)

    @staticmethod
    def _garble_xor(gate: Gate, zero_labels: MutableMapping[int, EvalWire]) -> None:
        wire_a = _fetch(zero_labels, gate.input0, "XOR", 0)
        wire_b = _fetch(zero_labels, gate.input1, "XOR", 1)
        flipped = wire_a.flipped ^ gate.input0_flipped ^ wire_b.flipped ^ gate.input1_flipped
        zero_labels[gate.output] = EvalWire(wire_a.label ^ wire_b.label, flipped)

    def garble(
        self, circuit: Sha256Circuit, zero_labels: MutableMapping[int, EvalWire]
    ) -> list[GarbledAnd]:
        """Garble ``circuit.extra_gates``, filling ``zero_labels`` with every wire.

        Returns the garbled tables of the AND gates in gate order.
        """
        tables = []
        for gate in circuit.extra_gates:
            if gate.is_and:
                tables.append(self._garble_and(gate, zero_labels))
            else:
                self._garble_xor(gate, zero_labels)
        return tables

    def evaluate(
        self,
        circuit: Sha256Circuit,
        garbled_gates: Iterable[GarbledAnd],
        labels: MutableMapping[int, WireLabel],
    ) -> None:
        """Evaluate ``circuit.extra_gates`` on active labels, filling ``labels``."""
        tables = iter(garbled_gates)
        for gate in circuit.extra_gates:
            if gate.is_and:
                wa = _fetch(labels, gate.input0, "AND", 0)
                wb = _fetch(labels, gate.input1, "AND", 1)
                garbled = next(tables, None)
                if garbled is None:
                    raise ValueError(f"No garbled table left for AND gate {gate.output}")
                j = self._next_index()
                j_prime = self._next_index()
                wg = self._prf(wa, j)
                if wa.lsb():
                    wg ^= garbled.t_g
                we = self._prf(wb, j_prime)
                if wb.lsb():
                    we ^= wa ^ garbled.t_e
                labels[gate.output] = wg ^ we
            else:
                wa = _fetch(labels, gate.input0, "XOR", 0)
                wb = _fetch(labels, gate.input1, "XOR", 1)
                labels[gate.output] = wa ^ wb