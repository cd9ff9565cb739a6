"""Deutsch–Jozsa algorithm on a small pure-Python state vector simulator."""

from .classifier import (
    Verdict,
    classify,
    classify_by_marking,
    is_function_constant,
    run_classifier,
    run_deutsch_jozsa_algorithm,
)
from .errors import InvalidIndex, InvalidRegisterSize, QuantumSimError, UnreleasedResource
from .oracles import (
    MarkingOracleConstantOne,
    MarkingOracleKthBit,
    PhaseOracleConstantZero,
    apply_marking_oracle_as_phase_oracle,
    as_phase_oracle,
)
from .quantum_sim import StateVector

__version__ = "0.1.0"
