# Simple quantum state vector simulator without external dependencies
"""State vector core.

This module holds the joint state of a small qubit register as a flat list of
``2**n`` complex amplitudes.  Qubits are numbered little-endian: qubit ``q`` is
bit ``q`` of a basis index, so index ``0b10`` in a two qubit register is the
state with qubit ``1`` set and qubit ``0`` clear.

All linear algebra is written in plain Python.  The simulator only needs to
run the Deutsch–Jozsa algorithm, so the supported operations are a general
2×2 unitary on one qubit, a controlled NOT, and allocation of ancilla qubits
above the register.  Each operation is appended to :attr:`StateVector.history`
which doubles as the operation trace returned by the execution backend.

Example::

    >>> from djsim.quantum_sim import StateVector
    >>> from djsim.gates import H
    >>> sv = StateVector(2)
    >>> sv.apply_single_qubit_gate(0, H, name="H")
    >>> sv.apply_controlled_x(0, 1)
    >>> [round(abs(a) ** 2, 3) for a in sv.amplitudes]
    [0.5, 0.0, 0.0, 0.5]
"""

import math
from contextlib import contextmanager
from typing import Iterator, List, Sequence, Tuple

from .config import DEFAULT_TOLERANCE
from .errors import InvalidIndex, InvalidRegisterSize, UnreleasedResource
from .logging_utils import get_logger
from .sampler import RandomSource, sample_measurement

logger = get_logger(__name__)

# Utility checks

def is_unitary(matrix: Sequence[Sequence[complex]], tol: float = DEFAULT_TOLERANCE) -> bool:
    """Return ``True`` if ``matrix`` is unitary.

    A matrix ``U`` is unitary when ``U† U = I``.  The product is formed
    explicitly, which is fine for the 2×2 matrices used here.
    """
    size = len(matrix)
    if any(len(row) != size for row in matrix):
        return False
    for i in range(size):
        for j in range(size):
            val = sum(complex(matrix[k][i]).conjugate() * matrix[k][j] for k in range(size))
            if i == j:
                if abs(val - 1) > tol:
                    return False
            else:
                if abs(val) > tol:
                    return False
    return True


def adjoint(matrix: Sequence[Sequence[complex]]) -> List[List[complex]]:
    """Return the conjugate transpose of ``matrix``."""
    size = len(matrix)
    return [[complex(matrix[j][i]).conjugate() for j in range(size)] for i in range(size)]


def normalize_state(state: Sequence[complex]) -> List[complex]:
    """Return the given state vector normalised to unit length."""
    norm = math.sqrt(sum(abs(a) ** 2 for a in state))
    if norm == 0:
        raise ValueError("Zero norm state")
    return [a / norm for a in state]


def apply_single_qubit_gate(state: Sequence[complex], gate: Sequence[Sequence[complex]], qubit: int) -> List[complex]:
    """Apply a single-qubit ``gate`` to ``qubit`` in ``state``.

    Parameters
    ----------
    state:
        Current state vector encoded as a list of complex amplitudes.
    gate:
        ``2x2`` unitary matrix to apply.
    qubit:
        Index of the qubit to operate on with ``0`` being the least significant
        qubit.
    """
    step = 1 << qubit
    new_state = [0j] * len(state)
    for i in range(0, len(state), 2 * step):
        for j in range(step):
            idx0 = i + j
            idx1 = idx0 + step
            a0 = state[idx0]
            a1 = state[idx1]
            new_state[idx0] = gate[0][0] * a0 + gate[0][1] * a1
            new_state[idx1] = gate[1][0] * a0 + gate[1][1] * a1
    return new_state


class StateVector:
    """Pure state of an ``n_qubits`` register plus any borrowed ancillas.

    ``n_qubits`` is the size of the register and never changes.  Ancillas
    allocated with :meth:`allocate_qubit` sit above it, at indices
    ``n_qubits``, ``n_qubits + 1`` and so on, and must be released in reverse
    order of allocation.
    """

    def __init__(self, n_qubits: int, tol: float = DEFAULT_TOLERANCE):
        if isinstance(n_qubits, bool) or not isinstance(n_qubits, int) or n_qubits <= 0:
            raise InvalidRegisterSize(f"register needs at least one qubit, got {n_qubits!r}")
        self.n_qubits = n_qubits
        self.tol = tol
        self.amplitudes: List[complex] = [0j] * (1 << n_qubits)
        self.amplitudes[0] = 1 + 0j
        self.history: List[str] = []
        self._ancillas: List[int] = []

    @property
    def width(self) -> int:
        """Number of qubits currently held, ancillas included."""
        return self.n_qubits + len(self._ancillas)

    @property
    def ancillas(self) -> Tuple[int, ...]:
        return tuple(self._ancillas)

    def check_qubit(self, qubit: int):
        if isinstance(qubit, bool) or not isinstance(qubit, int) or not 0 <= qubit < self.width:
            raise InvalidIndex(f"index out of range for {self.width} qubit state", qubit)

    def apply_single_qubit_gate(self, qubit: int, matrix: Sequence[Sequence[complex]], name: str = "U"):
        """Apply the 2×2 unitary ``matrix`` to ``qubit``."""
        self.check_qubit(qubit)
        if len(matrix) != 2 or not is_unitary(matrix, self.tol):
            raise ValueError(f"{name} is not a 2x2 unitary")
        self.amplitudes = apply_single_qubit_gate(self.amplitudes, matrix, qubit)
        self.history.append(f"{name} {qubit}")

    def apply_controlled_x(self, control: int, target: int):
        """Flip ``target`` on every basis state where ``control`` is set."""
        self.check_qubit(control)
        self.check_qubit(target)
        if control == target:
            raise ValueError("controlled X needs distinct qubits")
        cmask = 1 << control
        tmask = 1 << target
        amps = self.amplitudes
        for i in range(len(amps)):
            if i & cmask and not i & tmask:
                j = i | tmask
                amps[i], amps[j] = amps[j], amps[i]
        self.history.append(f"CNOT {control} {target}")

    def probability_of_zero_state(self) -> float:
        return abs(self.amplitudes[0]) ** 2

    def qubit_probability(self, qubit: int) -> float:
        """Probability of reading ``1`` on ``qubit``."""
        self.check_qubit(qubit)
        mask = 1 << qubit
        return sum(abs(a) ** 2 for i, a in enumerate(self.amplitudes) if i & mask)

    def sample_measurement(self, rng: RandomSource) -> Tuple[int, ...]:
        """Measure all qubits, collapse, and return the bits by qubit index."""
        return sample_measurement(self, rng)

    def allocate_qubit(self) -> int:
        """Append a fresh qubit in ``|0>`` and return its index."""
        qubit = self.width
        self.amplitudes.extend([0j] * len(self.amplitudes))
        self._ancillas.append(qubit)
        self.history.append(f"alloc {qubit}")
        return qubit

    def release_qubit(self, qubit: int):
        """Factor out the most recently allocated ancilla.

        The ancilla must be back in ``|0>``.  If it is not, it is forced there
        by projection, removed anyway, and :class:`UnreleasedResource` is
        raised so the caller's bug surfaces.
        """
        if not self._ancillas or qubit != self._ancillas[-1]:
            raise InvalidIndex("only the most recently allocated ancilla can be released", qubit)
        half = len(self.amplitudes) // 2
        low, high = self.amplitudes[:half], self.amplitudes[half:]
        p1 = sum(abs(a) ** 2 for a in high)
        dirty = p1 > self.tol
        if dirty:
            p0 = sum(abs(a) ** 2 for a in low)
            # keep whichever branch survives the projection back onto |0>
            self.amplitudes = normalize_state(low if p0 > self.tol else high)
        else:
            self.amplitudes = low
        self._ancillas.pop()
        self.history.append(f"release {qubit}")
        if dirty:
            raise UnreleasedResource(f"ancilla released with P(1) = {p1:.3g}", qubit)


@contextmanager
def borrowed_ancilla(state: StateVector) -> Iterator[int]:
    """Lend one ``|0>`` ancilla for the duration of a ``with`` block.

    The ancilla is released on every exit path.  On a normal exit a dirty
    ancilla raises :class:`UnreleasedResource`; when the block itself failed
    the original exception wins and the forced reset is only logged.
    """
    qubit = state.allocate_qubit()
    try:
        yield qubit
    except BaseException:
        try:
            state.release_qubit(qubit)
        except UnreleasedResource as exc:
            logger.error("forced reset of ancilla after failure: %s", exc)
        raise
    state.release_qubit(qubit)
