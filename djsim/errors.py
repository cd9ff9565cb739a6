"""Exceptions raised by the simulator.

Every error here signals a programming defect (a bad qubit index, an empty
register, an ancilla left dirty) rather than an environmental fault, so they
are raised at the offending call and never retried.
"""

from typing import Optional


class QuantumSimError(Exception):
    def __init__(self, message: str, qubit: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.qubit = qubit

    def __str__(self):
        if self.qubit is None:
            return self.message
        return f"{self.message} (qubit {self.qubit})"


class InvalidIndex(QuantumSimError, IndexError):
    """Qubit index outside the current register."""


class InvalidRegisterSize(QuantumSimError, ValueError):
    """Register allocated with zero or negative qubits."""


class UnreleasedResource(QuantumSimError, RuntimeError):
    """Ancilla released while not in the ``|0>`` state."""
