"""Deutsch–Jozsa classification of constant and balanced functions.

Given a phase oracle for ``f: {0,1}^n -> {0,1}`` that is promised to be
either constant or balanced, one query decides which:

1. start in ``|0...0>``;
2. Hadamard every qubit;
3. apply the phase oracle;
4. Hadamard every qubit again;
5. measure.

The amplitude of ``|0...0>`` after step 4 is ``(1/2^n) sum_x (-1)^f(x)``,
which has modulus one for a constant function and is zero for a balanced
one, so "all zeros" means constant and anything else means balanced.

Example
-------
>>> from djsim.oracles import MarkingOracleKthBit, PhaseOracleConstantZero
>>> classify(PhaseOracleConstantZero(), 3)
<Verdict.CONSTANT: 'constant'>
>>> classify(MarkingOracleKthBit(1), 2)
<Verdict.BALANCED: 'balanced'>
"""

import random
from enum import Enum
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel

from . import gates
from .config import get_settings
from .errors import InvalidRegisterSize
from .gates import h_all, within
from .logging_utils import get_logger
from .oracles import MarkingOracle, MarkingOracleKthBit, PhaseOracle, as_phase_oracle
from .quantum_sim import StateVector
from .sampler import RandomSource, index_to_bits, measure_qubit

logger = get_logger(__name__)

Oracle = Union[PhaseOracle, MarkingOracle]


class Verdict(str, Enum):
    CONSTANT = "constant"
    BALANCED = "balanced"


class Stage(Enum):
    INIT = "init"
    SUPERPOSED = "superposed"
    ORACLE_APPLIED = "oracle_applied"
    UNCOMPUTED = "uncomputed"
    MEASURED = "measured"
    CLASSIFIED = "classified"


class RunReport(BaseModel):
    n_qubits: int
    oracle: str
    outcome: Tuple[int, ...]
    verdict: Verdict
    trace: List[str]


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Randomness source seeded from ``seed`` or the ``DJSIM_SEED`` setting."""
    if seed is None:
        seed = get_settings().seed
    return random.Random(seed)


class DeutschJozsaRun:
    """A single pass of the algorithm over a fresh register.

    The run walks ``INIT -> SUPERPOSED -> ORACLE_APPLIED -> UNCOMPUTED ->
    MEASURED -> CLASSIFIED`` once.  Calling a step out of order raises
    ``RuntimeError``.
    """

    def __init__(self, oracle: Oracle, n_qubits: int, rng: Optional[RandomSource] = None):
        self.oracle = as_phase_oracle(oracle)
        self.state = StateVector(n_qubits, tol=get_settings().tolerance)
        self.register = list(range(n_qubits))
        self.rng = rng if rng is not None else make_rng()
        self.stage = Stage.INIT
        self.outcome: Optional[Tuple[int, ...]] = None
        self.verdict: Optional[Verdict] = None

    def _advance(self, expected: Stage, new: Stage):
        if self.stage is not expected:
            raise RuntimeError(f"cannot enter {new.value} from {self.stage.value}")
        logger.debug("%s -> %s", self.stage.value, new.value)
        self.stage = new

    def superpose(self):
        self._advance(Stage.INIT, Stage.SUPERPOSED)
        h_all(self.state, self.register)

    def apply_oracle(self):
        self._advance(Stage.SUPERPOSED, Stage.ORACLE_APPLIED)
        self.oracle.apply(self.state, self.register)

    def uncompute(self):
        self._advance(Stage.ORACLE_APPLIED, Stage.UNCOMPUTED)
        h_all(self.state, self.register)

    def measure(self) -> Tuple[int, ...]:
        self._advance(Stage.UNCOMPUTED, Stage.MEASURED)
        self.outcome = self.state.sample_measurement(self.rng)
        return self.outcome

    def classify(self) -> Verdict:
        self._advance(Stage.MEASURED, Stage.CLASSIFIED)
        # only "any one" versus "all zero" matters, not the bit pattern
        if any(bit == 1 for bit in self.outcome):
            self.verdict = Verdict.BALANCED
        else:
            self.verdict = Verdict.CONSTANT
        return self.verdict

    def run(self) -> Verdict:
        with within(self.superpose, self.uncompute):
            self.apply_oracle()
        self.measure()
        verdict = self.classify()
        logger.info("%s classified as %s", self.oracle.describe(), verdict.value)
        return verdict

    def report(self) -> RunReport:
        if self.stage is not Stage.CLASSIFIED:
            raise RuntimeError("run has not been classified yet")
        return RunReport(
            n_qubits=len(self.register),
            oracle=self.oracle.describe(),
            outcome=self.outcome,
            verdict=self.verdict,
            trace=list(self.state.history),
        )


def run_classifier(oracle: Oracle, n_qubits: int, rng: Optional[RandomSource] = None) -> RunReport:
    """Run the algorithm once and return the full :class:`RunReport`."""
    dj = DeutschJozsaRun(oracle, n_qubits, rng)
    dj.run()
    return dj.report()


def classify(oracle: Oracle, n_qubits: int, rng: Optional[RandomSource] = None) -> Verdict:
    return DeutschJozsaRun(oracle, n_qubits, rng).run()


def is_function_constant(oracle: Oracle, n_qubits: int, rng: Optional[RandomSource] = None) -> bool:
    """Return ``True`` if ``oracle`` is constant and ``False`` if balanced."""
    return classify(oracle, n_qubits, rng) is Verdict.CONSTANT


def classify_by_marking(marking: MarkingOracle, n_qubits: int, rng: Optional[RandomSource] = None) -> Verdict:
    """Classify ``marking`` by querying it on every basis input.

    For each ``x`` the register is prepared in ``|x>``, the oracle flips a
    fresh ancilla, and the ancilla is measured to read ``f(x)``.  This takes
    ``2^n`` queries instead of one and serves as a cross-check of the phase
    kickback route.
    """
    if isinstance(n_qubits, bool) or not isinstance(n_qubits, int) or n_qubits <= 0:
        raise InvalidRegisterSize(f"register needs at least one qubit, got {n_qubits!r}")
    rng = rng if rng is not None else make_rng()
    tol = get_settings().tolerance
    values = set()
    for value in range(1 << n_qubits):
        state = StateVector(n_qubits + 1, tol=tol)
        register = list(range(n_qubits))
        for q, bit in zip(register, index_to_bits(value, n_qubits)):
            if bit:
                gates.x(state, q)
        marking.apply(state, register, n_qubits)
        values.add(measure_qubit(state, n_qubits, rng))
        if len(values) > 1:
            return Verdict.BALANCED
    return Verdict.CONSTANT


def summary_message(verdict: Verdict) -> str:
    return f"f(x) = xk classified as {verdict.value}"


def run_deutsch_jozsa_algorithm() -> str:
    """Classify ``f(x) = x_1`` on two qubits and return the summary line."""
    verdict = classify(MarkingOracleKthBit(1), 2)
    message = summary_message(verdict)
    print(message)
    return message
