"""Oracles for Boolean functions ``f: {0,1}^n -> {0,1}``.

Two shapes are supported:

``PhaseOracle``
    ``|x> -> (-1)^f(x) |x>`` acting on the input register alone.
``MarkingOracle``
    ``|x>|y> -> |x>|y xor f(x)>`` flipping an ancilla ``y``.

A marking oracle becomes a phase oracle by phase kickback: with the ancilla in
``|->`` the flip multiplies the amplitude of every marked ``x`` by ``-1`` and
the ancilla returns to ``|->`` untouched, so it can be rotated back to
``|0>`` and released.  :func:`as_phase_oracle` wraps any marking oracle this
way.

Oracles are frozen dataclasses carrying only their configuration, so they can
be passed around and reused freely between runs.
"""

from dataclasses import dataclass
from typing import Sequence, Union

from . import gates
from .errors import InvalidIndex
from .quantum_sim import StateVector, borrowed_ancilla


class PhaseOracle:
    def apply(self, state: StateVector, inputs: Sequence[int]):
        raise NotImplementedError

    def evaluate(self, x: int) -> int:
        """Classical value of the function on basis input ``x``."""
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError


class MarkingOracle:
    def apply(self, state: StateVector, inputs: Sequence[int], target: int):
        raise NotImplementedError

    def evaluate(self, x: int) -> int:
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class PhaseOracleConstantZero(PhaseOracle):
    """``f(x) = 0``: the identity."""

    def apply(self, state: StateVector, inputs: Sequence[int]):
        for q in inputs:
            state.check_qubit(q)

    def evaluate(self, x: int) -> int:
        return 0

    def describe(self) -> str:
        return "f(x) = 0"


@dataclass(frozen=True)
class MarkingOracleKthBit(MarkingOracle):
    """``f(x) = x_k``, balanced for every register wider than ``k``."""

    k: int

    def __post_init__(self):
        if isinstance(self.k, bool) or not isinstance(self.k, int) or self.k < 0:
            raise InvalidIndex("bit index must be a non-negative integer", self.k)

    def apply(self, state: StateVector, inputs: Sequence[int], target: int):
        if self.k >= len(inputs):
            raise InvalidIndex(f"bit index outside {len(inputs)} qubit input", self.k)
        gates.cnot(state, inputs[self.k], target)

    def evaluate(self, x: int) -> int:
        return (x >> self.k) & 1

    def describe(self) -> str:
        return f"f(x) = x{self.k}"


@dataclass(frozen=True)
class MarkingOracleConstantOne(MarkingOracle):
    """``f(x) = 1``: flips the target unconditionally."""

    def apply(self, state: StateVector, inputs: Sequence[int], target: int):
        for q in inputs:
            state.check_qubit(q)
        gates.x(state, target)

    def evaluate(self, x: int) -> int:
        return 1

    def describe(self) -> str:
        return "f(x) = 1"


def apply_marking_oracle_as_phase_oracle(marking: MarkingOracle, state: StateVector, inputs: Sequence[int]):
    """Apply ``marking`` as a phase oracle on ``inputs`` via phase kickback.

    One ancilla is borrowed for the call.  It is prepared in ``|->`` (X then
    H), used as the marking target, then rotated back (H then X) so it is
    released in ``|0>``.  The ancilla is released even if the oracle raises.
    """
    with borrowed_ancilla(state) as ancilla:
        gates.x(state, ancilla)
        gates.h(state, ancilla)
        marking.apply(state, inputs, ancilla)
        gates.h(state, ancilla)
        gates.x(state, ancilla)


@dataclass(frozen=True)
class MarkingAsPhaseOracle(PhaseOracle):
    """Phase oracle obtained from a marking oracle by phase kickback."""

    marking: MarkingOracle

    def apply(self, state: StateVector, inputs: Sequence[int]):
        apply_marking_oracle_as_phase_oracle(self.marking, state, inputs)

    def evaluate(self, x: int) -> int:
        return self.marking.evaluate(x)

    def describe(self) -> str:
        return self.marking.describe()


def as_phase_oracle(oracle: Union[PhaseOracle, MarkingOracle]) -> PhaseOracle:
    """Return ``oracle`` in phase form, converting marking oracles."""
    if isinstance(oracle, PhaseOracle):
        return oracle
    if isinstance(oracle, MarkingOracle):
        return MarkingAsPhaseOracle(oracle)
    raise TypeError(f"not an oracle: {oracle!r}")
