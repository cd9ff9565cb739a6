"""Local execution backend.

Operations are registered by name and run against a fresh simulator with a
randomness source seeded from the settings.  :meth:`LocalSimulator.simulate`
returns the run report and :meth:`LocalSimulator.trace` the list of gates,
allocations and measurements that the run performed, in order.
"""

import random
from typing import Any, Callable, Dict, List, Optional

from .classifier import RunReport, run_classifier
from .config import SimulatorSettings, get_settings
from .logging_utils import configure_logging, get_logger
from .oracles import MarkingOracleConstantOne, MarkingOracleKthBit, PhaseOracleConstantZero

logger = get_logger(__name__)

# operations registry
OPERATIONS: Dict[str, Callable[..., RunReport]] = {}


def register_operation(name: str):
    """Decorator to register a runnable operation under ``name``."""

    def decorator(fn):
        OPERATIONS[name] = fn
        return fn

    return decorator


@register_operation("RunDeutschJozsaAlgorithm")
def run_deutsch_jozsa_action(rng: random.Random) -> RunReport:
    return run_classifier(MarkingOracleKthBit(1), 2, rng)


@register_operation("ConstantZero")
def constant_zero_action(rng: random.Random, n_qubits: int = 1) -> RunReport:
    return run_classifier(PhaseOracleConstantZero(), n_qubits, rng)


@register_operation("ConstantOne")
def constant_one_action(rng: random.Random, n_qubits: int = 1) -> RunReport:
    return run_classifier(MarkingOracleConstantOne(), n_qubits, rng)


@register_operation("KthBit")
def kth_bit_action(rng: random.Random, n_qubits: int = 2, k: int = 1) -> RunReport:
    return run_classifier(MarkingOracleKthBit(k), n_qubits, rng)


class LocalSimulator:
    def __init__(self, settings: Optional[SimulatorSettings] = None):
        self.settings = settings or get_settings()
        configure_logging()

    def operations(self) -> List[str]:
        return sorted(OPERATIONS)

    def simulate(self, name: str, **params: Any) -> RunReport:
        """Run the operation registered as ``name`` and return its report."""
        if name not in OPERATIONS:
            raise KeyError(f"unknown operation {name}")
        rng = random.Random(self.settings.seed)
        logger.debug("simulating %s with %s", name, params)
        return OPERATIONS[name](rng, **params)

    def trace(self, name: str, **params: Any) -> List[str]:
        return self.simulate(name, **params).trace
