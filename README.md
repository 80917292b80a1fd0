# sha256gc

Computes the SHA-256 digest of a message that is secret-shared between two
parties. The message is split into two XOR shares; one party garbles a
single-block SHA-256 Boolean circuit (Bristol format) with free-XOR and
half-gate AND garbling, and the other party evaluates it and decodes the
digest. Messages of any length are handled block by block, with the chaining
state carried between blocks as wire labels.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## The circuit file

The package reads a single-block SHA-256 compression circuit in Bristol
format, with XOR, AND and INV gates. INV gates are folded into the inputs of
the gates that consume them. By default the file is looked for at
`data/sha256-bristol-basic.txt`, relative to the working directory. The
circuit file itself is not part of the package; it must be supplied.

## Command line

```
sha256gc 100
```

This makes a random 100-letter message, splits it into two random shares,
runs the garbler and the evaluator, and prints the message, the expected
digest and the digest obtained from the garbled computation, along with
progress lines for each block. A second argument gives another path for the
circuit file:

```
sha256gc 100 path/to/sha256-circuit.txt
```

The command exits with status 1 if no positive integer is given, if the
circuit file cannot be read, or if the two digests differ.

## Library use

```python
import random

from sha256gc.circuit import load_circuit
from sha256gc.party import Party
from sha256gc.cli import split_secret
from sha256gc.utils import sha256_hex

rng = random.Random()
message = b"hello garbled world"
share0, share1 = split_secret(message, rng)

circuit = load_circuit("data/sha256-bristol-basic.txt")

garbler = Party(0, share0, circuit, rng)
result = garbler.start_garbling()

evaluator = Party(1, share1, circuit, rng)
digest = evaluator.start_evaluating(result)

assert digest.hex() == sha256_hex(message)
```

`sha256gc.cli.run(message, circuit_path, rng)` does the same in one call and
returns the hex digest. `Party` loads the circuit from the default path when
no circuit is passed.

Other parts of the package:

- `sha256gc.utils`: `bytes_to_bits`, `bits_to_bytes`, `padded_bits`,
  `sha256_hex`.
- `sha256gc.circuit`: `parse_bristol`, `load_circuit`, the `Sha256Circuit`,
  `Gate` and `OutputWire` types, and `CircuitFormatError` for malformed
  circuit files.
- `sha256gc.gc`: `WireLabel`, `EvalWire`, `GarbledAnd`, and
  `GarbledCircuit` with `garble` and `evaluate`; `MissingWireError` is
  raised when a gate input has no label.
- `sha256gc.party`: `Party` and `GarbleResult`.
- `sha256gc.cli`: `random_message`, `split_secret`, `run`, `main`.

## What it does not do

This is a protocol demonstration. Both parties run in one process and hand
each other Python objects: there is no network transport between them, and
the oblivious transfer of the evaluator's input labels is simulated (the
evaluator picks its labels from both pairs directly) rather than carried out.