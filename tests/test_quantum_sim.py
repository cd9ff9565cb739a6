import os
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
import cmath
import math

import pytest

from djsim.errors import InvalidIndex, InvalidRegisterSize, UnreleasedResource
from djsim.gates import H, I, X, cnot, h, h_all, unapply, within, x
from djsim.quantum_sim import StateVector, adjoint, borrowed_ancilla, is_unitary


def general_unitary(theta, phi, lam):
    c = math.cos(theta / 2)
    s = math.sin(theta / 2)
    return [
        [c, -cmath.exp(1j * lam) * s],
        [cmath.exp(1j * phi) * s, cmath.exp(1j * (phi + lam)) * c],
    ]


def test_gate_unitarity():
    for gate in [I, H, X, general_unitary(0.3, 1.1, -0.7)]:
        assert is_unitary(gate)
    assert not is_unitary([[1, 1], [0, 1]])


@pytest.mark.parametrize("n", [1, 2, 3, 5])
def test_initial_state_is_all_zero(n):
    sv = StateVector(n)
    assert len(sv.amplitudes) == 1 << n
    assert abs(sv.amplitudes[0]) == 1
    assert all(a == 0 for a in sv.amplitudes[1:])
    assert sv.probability_of_zero_state() == 1


@pytest.mark.parametrize("n", [0, -1])
def test_register_size_must_be_positive(n):
    with pytest.raises(InvalidRegisterSize):
        StateVector(n)


def test_state_normalization_after_gates():
    sv = StateVector(2)
    h(sv, 0)
    cnot(sv, 0, 1)
    norm = sum(abs(a) ** 2 for a in sv.amplitudes)
    assert abs(norm - 1.0) < 1e-12
    assert abs(sv.amplitudes[0] - 1 / math.sqrt(2)) < 1e-12
    assert abs(sv.amplitudes[3] - 1 / math.sqrt(2)) < 1e-12


@pytest.mark.parametrize("qubit", [0, 1, 2])
@pytest.mark.parametrize("angles", [(0.0, 0.0, 0.0), (0.4, 1.3, -2.0), (math.pi, 0.5, 0.25), (2.2, -1.0, 3.0)])
def test_gate_then_inverse_restores_state(qubit, angles):
    sv = StateVector(3)
    h_all(sv, [0, 1, 2])
    sv.apply_single_qubit_gate(1, general_unitary(0.9, 0.2, 0.1))
    cnot(sv, 1, 2)
    before = list(sv.amplitudes)
    U = general_unitary(*angles)
    sv.apply_single_qubit_gate(qubit, U)
    unapply(sv, qubit, U)
    for a, b in zip(before, sv.amplitudes):
        assert abs(a - b) < 1e-12


def test_adjoint_is_inverse():
    U = general_unitary(0.7, 0.3, 1.9)
    Ud = adjoint(U)
    for i in range(2):
        for j in range(2):
            val = sum(Ud[i][k] * U[k][j] for k in range(2))
            assert abs(val - (1 if i == j else 0)) < 1e-12


def test_non_unitary_gate_rejected():
    sv = StateVector(1)
    with pytest.raises(ValueError):
        sv.apply_single_qubit_gate(0, [[1, 1], [0, 1]])


def test_non_adjacent_cnot():
    sv = StateVector(3)
    x(sv, 0)
    cnot(sv, 0, 2)
    assert abs(sv.amplitudes[0b101] - 1) < 1e-12
    cnot(sv, 1, 2)
    assert abs(sv.amplitudes[0b101] - 1) < 1e-12


@pytest.mark.parametrize("qubit", [2, 5, -1])
def test_gate_on_invalid_index(qubit):
    sv = StateVector(2)
    with pytest.raises(InvalidIndex):
        sv.apply_single_qubit_gate(qubit, H)
    with pytest.raises(InvalidIndex):
        sv.apply_controlled_x(0, qubit)
    with pytest.raises(InvalidIndex):
        sv.apply_controlled_x(qubit, 0)


def test_cnot_needs_distinct_qubits():
    sv = StateVector(2)
    with pytest.raises(ValueError):
        cnot(sv, 1, 1)


def test_allocate_and_release_ancilla():
    sv = StateVector(2)
    h(sv, 0)
    a = sv.allocate_qubit()
    assert a == 2
    assert sv.width == 3
    assert len(sv.amplitudes) == 8
    h(sv, a)
    h(sv, a)
    sv.release_qubit(a)
    assert sv.width == 2
    assert sv.n_qubits == 2
    assert abs(sv.amplitudes[0] - 1 / math.sqrt(2)) < 1e-12
    assert abs(sv.amplitudes[1] - 1 / math.sqrt(2)) < 1e-12
    assert sv.history == ["H 0", "alloc 2", "H 2", "H 2", "release 2"]


def test_release_order_enforced():
    sv = StateVector(1)
    a = sv.allocate_qubit()
    b = sv.allocate_qubit()
    with pytest.raises(InvalidIndex):
        sv.release_qubit(a)
    with pytest.raises(InvalidIndex):
        sv.release_qubit(0)
    sv.release_qubit(b)
    sv.release_qubit(a)
    assert sv.width == 1


def test_dirty_release_raises_and_still_frees():
    sv = StateVector(1)
    a = sv.allocate_qubit()
    x(sv, a)
    with pytest.raises(UnreleasedResource):
        sv.release_qubit(a)
    assert sv.width == 1
    assert sv.amplitudes == [1 + 0j, 0j]


def test_borrowed_ancilla_dirty_on_normal_exit():
    sv = StateVector(1)
    with pytest.raises(UnreleasedResource):
        with borrowed_ancilla(sv) as a:
            x(sv, a)
    assert sv.width == 1


def test_borrowed_ancilla_released_on_failure():
    sv = StateVector(1)
    with pytest.raises(KeyError):
        with borrowed_ancilla(sv) as a:
            h(sv, a)
            raise KeyError("boom")
    assert sv.width == 1
    assert abs(sum(abs(v) ** 2 for v in sv.amplitudes) - 1) < 1e-12


def test_within_runs_adjoint_after_body():
    sv = StateVector(1)
    calls = []
    with within(lambda: calls.append("outer"), lambda: calls.append("adjoint")):
        calls.append("body")
    assert calls == ["outer", "body", "adjoint"]
    with pytest.raises(RuntimeError):
        with within(lambda: h(sv, 0), lambda: h(sv, 0)):
            raise RuntimeError("stop")
    assert sv.history == ["H 0", "H 0"]
    assert abs(sv.amplitudes[0] - 1) < 1e-12


def test_within_runs_adjoint_when_body_raises():
    calls = []
    with pytest.raises(KeyError):
        with within(lambda: calls.append("outer"), lambda: calls.append("adjoint")):
            calls.append("body")
            raise KeyError("stop")
    assert calls == ["outer", "body", "adjoint"]
