"""Two-party SHA-256 over a garbled Boolean circuit with half-gates and free-XOR."""

__version__ = "0.1.0"