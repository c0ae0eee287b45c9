# tests/test_operations.py
import numpy as np
import pytest

from qstatesim.errors import (
    GateArityMismatch,
    IndexOutOfRange,
    InvalidQubitPair,
    QubitCountMismatch,
    TargetCountMismatch,
    UnsupportedGateArity,
)
from qstatesim.gates import CNOT, HADAMARD, PAULI_X, PAULI_Y, PAULI_Z, QuantumGate
from qstatesim.operations import (
    apply_gate,
    apply_single_qubit_gate,
    apply_two_qubit_gate,
    calculate_fidelity,
)
from qstatesim.state import QuantumState

SQ = 1 / np.sqrt(2)
TOL = 1e-9


def amps(state: QuantumState) -> np.ndarray:
    return state.amplitudes


# ---------- single-qubit gates ----------
def test_hadamard_on_zero_and_one():
    plus = apply_gate(QuantumState(1), HADAMARD, [0])
    assert np.allclose(amps(plus), [SQ, SQ])

    minus = apply_gate(QuantumState.basis_state(1, 1), HADAMARD, [0])
    assert np.allclose(amps(minus), [SQ, -SQ])


def test_pauli_x_flips_zero():
    assert np.allclose(amps(apply_gate(QuantumState(1), PAULI_X, [0])), [0, 1])


def test_pauli_y_on_zero_gives_i():
    out = apply_gate(QuantumState(1), PAULI_Y, [0])
    a1 = out.get_amplitude(1)
    assert a1.real == pytest.approx(0.0, abs=TOL)
    assert a1.imag == pytest.approx(1.0, abs=TOL)
    assert abs(out.get_amplitude(0)) == pytest.approx(0.0, abs=TOL)


def test_pauli_z_on_plus():
    out = apply_gate(QuantumState(1, [SQ, SQ]), PAULI_Z, [0])
    assert np.allclose(amps(out), [SQ, -SQ])


def test_single_gate_targets_correct_qubit():
    # X on qubit 1 of |00⟩ -> |01⟩ (index 1), on qubit 0 -> |10⟩ (index 2)
    assert np.allclose(amps(apply_gate(QuantumState(2), PAULI_X, [1])), [0, 1, 0, 0])
    assert np.allclose(amps(apply_gate(QuantumState(2), PAULI_X, [0])), [0, 0, 1, 0])


@pytest.mark.parametrize("gate", [PAULI_X, HADAMARD, PAULI_Y, PAULI_Z], ids=lambda g: g.symbol)
def test_self_inverse_gates(gate):
    st = QuantumState(1, [0.6, 0.8j])
    twice = apply_gate(apply_gate(st, gate, [0]), gate, [0])
    assert twice.allclose(st)


def test_input_state_is_not_mutated():
    st = QuantumState(2)
    before = st.amplitudes
    apply_gate(st, HADAMARD, [0])
    assert np.array_equal(st.amplitudes, before)


def test_single_qubit_gate_rejects_two_qubit_gate():
    with pytest.raises(GateArityMismatch):
        apply_single_qubit_gate(QuantumState(2), CNOT, 0)


def test_single_qubit_target_out_of_range():
    with pytest.raises(IndexOutOfRange):
        apply_gate(QuantumState(2), PAULI_X, [2])


# ---------- two-qubit gates ----------
@pytest.mark.parametrize(
    "start, expected",
    [(0b00, 0b00), (0b01, 0b01), (0b10, 0b11), (0b11, 0b10)],
)
def test_cnot_truth_table(start: int, expected: int):
    out = apply_gate(QuantumState.basis_state(2, start), CNOT, [0, 1])
    assert out.get_measurement_probability(expected) == pytest.approx(1.0, abs=TOL)


def test_cnot_reversed_control():
    # control q1, target q0: |01⟩ -> |11⟩
    out = apply_gate(QuantumState.basis_state(2, 0b01), CNOT, [1, 0])
    assert out.get_measurement_probability(0b11) == pytest.approx(1.0, abs=TOL)


@pytest.mark.parametrize("control, target", [(0, 2), (2, 0), (1, 2), (2, 1), (0, 1), (1, 0)])
def test_cnot_non_adjacent_pairs_in_three_qubits(control: int, target: int):
    for start in range(8):
        bits = [(start >> (2 - q)) & 1 for q in range(3)]
        if bits[control]:
            bits[target] ^= 1
        expected = (bits[0] << 2) | (bits[1] << 1) | bits[2]
        out = apply_gate(QuantumState.basis_state(3, start), CNOT, [control, target])
        assert out.get_measurement_probability(expected) == pytest.approx(1.0, abs=TOL)


def test_bell_state():
    st = apply_gate(apply_gate(QuantumState(2), HADAMARD, [0]), CNOT, [0, 1])
    probs = st.get_measurement_probabilities()
    assert probs == pytest.approx([0.5, 0.0, 0.0, 0.5], abs=TOL)


def test_two_qubit_gate_rejects_same_qubits():
    with pytest.raises(InvalidQubitPair):
        apply_two_qubit_gate(QuantumState(2), CNOT, 1, 1)


def test_two_qubit_gate_rejects_single_gate():
    with pytest.raises(GateArityMismatch):
        apply_two_qubit_gate(QuantumState(2), HADAMARD, 0, 1)


def test_two_qubit_gate_out_of_range():
    with pytest.raises(IndexOutOfRange):
        apply_gate(QuantumState(2), CNOT, [0, 3])


# ---------- dispatch ----------
def test_target_count_mismatch_message():
    with pytest.raises(TargetCountMismatch, match="requires 2 target qubits, but 1 provided"):
        apply_gate(QuantumState(2), CNOT, [0])


def test_unsupported_arity():
    toffoli_like = QuantumGate(name="CCX", symbol="CCX", qubits=3, matrix=np.eye(8))
    with pytest.raises(UnsupportedGateArity):
        apply_gate(QuantumState(3), toffoli_like, [0, 1, 2])


@pytest.mark.parametrize("seed", range(5))
def test_normalization_preserved_over_random_sequences(seed: int):
    rng = np.random.default_rng(seed)
    st = QuantumState(3)
    singles = [HADAMARD, PAULI_X, PAULI_Y, PAULI_Z]
    for _ in range(40):
        if rng.random() < 0.3:
            c, t = rng.choice(3, size=2, replace=False)
            st = apply_gate(st, CNOT, [int(c), int(t)])
        else:
            st = apply_gate(st, singles[int(rng.integers(4))], [int(rng.integers(3))])
        assert st.get_measurement_probabilities().sum() == pytest.approx(1.0, abs=TOL)


# ---------- fidelity ----------
def test_fidelity_bounds():
    zero = QuantumState(1)
    one = QuantumState.basis_state(1, 1)
    plus = QuantumState(1, [SQ, SQ])
    assert calculate_fidelity(plus, plus) == pytest.approx(1.0)
    assert calculate_fidelity(zero, one) == pytest.approx(0.0)
    assert calculate_fidelity(zero, plus) == pytest.approx(0.5)


def test_fidelity_ignores_global_phase():
    st = QuantumState(1, [0.6, 0.8j])
    phased = QuantumState(1, 1j * st.amplitudes)
    assert calculate_fidelity(st, phased) == pytest.approx(1.0)


def test_fidelity_qubit_count_mismatch():
    with pytest.raises(QubitCountMismatch):
        calculate_fidelity(QuantumState(1), QuantumState(2))
