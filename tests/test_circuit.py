import pytest

from sha256gc.circuit import (
    INITIAL_HASH_VALUES,
    OUTPUT_BITS_LEN,
    CircuitFormatError,
    Gate,
    OutputWire,
    load_circuit,
    parse_bristol,
)
from sha256gc.utils import bytes_to_bits

SAMPLE = """\
7 300
2 512 256
1 256

2 1 0 1 2 XOR
1 1 0 3 INV
1 1 3 5 INV
2 1 3 1 4 AND
2 1 5 2 6 AND
2 1 0 1 298 XOR
1 1 298 299 INV
"""


@pytest.fixture
def circuit():
    return parse_bristol(SAMPLE.splitlines())


def test_gate_counts(circuit):
    assert (circuit.xor_count, circuit.and_count, circuit.inv_count) == (2, 2, 3)
    assert len(circuit.gates) == 4
    assert circuit.extra_input_wire == 300


def test_not_gates_are_folded_into_inputs(circuit):
    assert circuit.gates[0] == Gate(0, 1, 2)
    assert circuit.gates[1] == Gate(0, 1, 4, input0_flipped=True, is_and=True)
    assert circuit.gates[2] == Gate(0, 2, 6, is_and=True)


def test_output_wires(circuit):
    assert len(circuit.output_wires) == OUTPUT_BITS_LEN
    assert [w.id for w in circuit.output_wires] == list(range(44, 300))
    assert circuit.output_wires[-1] == OutputWire(299, input_id=298, should_trace=True)
    assert circuit.output_wires[-2] == OutputWire(298)
    assert sum(w.should_trace for w in circuit.output_wires) == 1


def test_initial_hash_bits_are_reversed_state(circuit):
    bits = [circuit.initial_hash_bit(i) for i in range(256)]
    assert list(reversed(bits)) == bytes_to_bits(INITIAL_HASH_VALUES)


@pytest.mark.parametrize("idx", [-1, 256])
def test_initial_hash_bit_out_of_range(circuit, idx):
    with pytest.raises(IndexError):
        circuit.initial_hash_bit(idx)


def test_set_input_gates_prepends(circuit):
    extra = [Gate(1000, 1001, 511), Gate(1002, 1003, 510)]
    circuit.set_input_gates(extra)
    assert circuit.extra_gates == extra + circuit.gates
    circuit.set_input_gates([])
    assert circuit.extra_gates == circuit.gates


def test_summary_mentions_counts(circuit):
    text = circuit.summary()
    assert " 2 XOR gates" in text
    assert " 2 AND gates" in text
    assert " 3 INV gates" in text


def test_load_circuit_from_file(tmp_path, circuit):
    path = tmp_path / "circuit.txt"
    path.write_text(SAMPLE, encoding="utf-8")
    loaded = load_circuit(path)
    assert loaded.gates == circuit.gates
    assert loaded.output_wires == circuit.output_wires


def test_load_circuit_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_circuit(tmp_path / "absent.txt")


def test_empty_description_rejected():
    with pytest.raises(CircuitFormatError):
        parse_bristol([])


def test_too_few_wires_rejected():
    with pytest.raises(CircuitFormatError):
        parse_bristol(["1 10", "", "", "", "2 1 0 1 2 XOR"])


def test_bad_wire_number_rejected():
    with pytest.raises(CircuitFormatError):
        parse_bristol(["1 300", "", "", "", "2 1 a 1 2 XOR"])


def test_inverter_cycle_rejected():
    lines = ["3 300", "", "", "", "1 1 7 8 INV", "1 1 8 7 INV", "2 1 7 1 9 AND"]
    with pytest.raises(CircuitFormatError):
        parse_bristol(lines)