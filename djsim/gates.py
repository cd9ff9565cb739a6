"""Named gates and the scoped ``within`` transform.

Oracles and the classifier go through these helpers instead of writing
matrices inline.
"""

import math
from contextlib import contextmanager
from typing import Callable, Iterator, Sequence

from .quantum_sim import StateVector, adjoint, is_unitary

# Standard gates
I = [[1, 0], [0, 1]]
X = [[0, 1], [1, 0]]
H = [[1 / math.sqrt(2), 1 / math.sqrt(2)], [1 / math.sqrt(2), -1 / math.sqrt(2)]]

for gate in [I, X, H]:
    assert is_unitary(gate)


def h(state: StateVector, qubit: int):
    state.apply_single_qubit_gate(qubit, H, name="H")


def x(state: StateVector, qubit: int):
    state.apply_single_qubit_gate(qubit, X, name="X")


def cnot(state: StateVector, control: int, target: int):
    state.apply_controlled_x(control, target)


def h_all(state: StateVector, qubits: Sequence[int]):
    """Hadamard on each of ``qubits``; its own inverse."""
    for q in qubits:
        h(state, q)


def unapply(state: StateVector, qubit: int, matrix: Sequence[Sequence[complex]], name: str = "U"):
    """Apply the inverse of a single-qubit unitary."""
    state.apply_single_qubit_gate(qubit, adjoint(matrix), name=f"{name}†")


@contextmanager
def within(outer: Callable[[], None], outer_adjoint: Callable[[], None]) -> Iterator[None]:
    """Run ``outer``, the body, then ``outer_adjoint``.

    This is the conjugation ``U† V U`` pattern: the body sees the transformed
    basis and the transform is undone once it finishes, whether the body
    returns or raises.

    >>> with within(lambda: h_all(sv, qs), lambda: h_all(sv, qs)):
    ...     oracle.apply(sv, qs)
    """
    outer()
    try:
        yield
    finally:
        outer_adjoint()
