"""Born-rule sampling of computational basis measurements.

Both routines mutate only the state vector they are handed: the amplitudes
collapse onto the observed outcome and are renormalised.  Probabilities below
the state's tolerance are treated as exact zeros before sampling, which makes
a measurement of a state holding all of its mass on one basis vector return
that basis vector for any randomness source, including one that always
returns values arbitrarily close to ``1``.
"""

import math
from typing import List, Protocol, Sequence, Tuple


class RandomSource(Protocol):
    def random(self) -> float: ...


def _pick(weights: Sequence[float], rng: RandomSource) -> int:
    """Return an index drawn with probability proportional to ``weights``."""
    total = sum(weights)
    if total <= 0:
        raise ValueError("Zero norm state")
    r = rng.random() * total
    last = 0
    acc = 0.0
    for idx, w in enumerate(weights):
        if w <= 0:
            continue
        last = idx
        acc += w
        if r < acc:
            return idx
    # r landed on the upper edge through rounding
    return last


def _probabilities(amplitudes: Sequence[complex], tol: float) -> List[float]:
    probs = [abs(a) ** 2 for a in amplitudes]
    return [p if p > tol else 0.0 for p in probs]


def index_to_bits(index: int, width: int) -> Tuple[int, ...]:
    """Little-endian bits of ``index``: position ``q`` holds qubit ``q``."""
    return tuple((index >> q) & 1 for q in range(width))


def sample_measurement(state, rng: RandomSource) -> Tuple[int, ...]:
    """Measure every qubit of ``state`` and collapse it.

    Returns the observed bits ordered by qubit index.  The surviving amplitude
    keeps its phase and is scaled to unit modulus.
    """
    amplitudes = state.amplitudes
    index = _pick(_probabilities(amplitudes, state.tol), rng)
    kept = amplitudes[index]
    collapsed = [0j] * len(amplitudes)
    collapsed[index] = kept / abs(kept)
    state.amplitudes = collapsed
    bits = index_to_bits(index, state.width)
    state.history.append("measure -> " + "".join(str(b) for b in bits))
    return bits


def measure_qubit(state, qubit: int, rng: RandomSource) -> int:
    """Measure a single ``qubit`` of ``state`` and collapse the rest."""
    state.check_qubit(qubit)
    amplitudes = state.amplitudes
    mask = 1 << qubit
    p1 = sum(abs(a) ** 2 for i, a in enumerate(amplitudes) if i & mask)
    p0 = sum(abs(a) ** 2 for i, a in enumerate(amplitudes) if not i & mask)
    weights = [p if p > state.tol else 0.0 for p in (p0, p1)]
    outcome = _pick(weights, rng)
    norm = math.sqrt(p1 if outcome else p0)
    state.amplitudes = [
        (a / norm if bool(i & mask) == bool(outcome) else 0j)
        for i, a in enumerate(amplitudes)
    ]
    state.history.append(f"measure {qubit} -> {outcome}")
    return outcome
