# qstatesim/operations.py
"""
Gate application, measurement and fidelity on QuantumState snapshots.

Every routine is pure with respect to its input state: a new QuantumState is
returned and the argument is left untouched. Gates act through bit-masking on
basis indices, so the full 2**n x 2**n operator is never built.
"""
from __future__ import annotations

import logging
from typing import List, NamedTuple, Optional, Protocol, Sequence

import numpy as np

from qstatesim.errors import (
    GateArityMismatch,
    InvalidQubitPair,
    QubitCountMismatch,
    TargetCountMismatch,
    UnsupportedGateArity,
)
from qstatesim.gates import QuantumGate, SingleQubitGate, TwoQubitGate
from qstatesim.state import QuantumState

log = logging.getLogger(__name__)


class RandomSource(Protocol):
    """Uniform sampler on [0, 1). `numpy.random.Generator` satisfies this."""

    def random(self) -> float: ...


class QubitMeasurement(NamedTuple):
    result: int
    new_state: QuantumState
    probability: float


class RegisterMeasurement(NamedTuple):
    results: List[int]
    probabilities: np.ndarray
    basis_index: int


def _default_rng(rng: Optional[RandomSource]) -> RandomSource:
    return rng if rng is not None else np.random.default_rng()


# ---------- gates ----------
def apply_single_qubit_gate(state: QuantumState, gate: QuantumGate, target_qubit: int) -> QuantumState:
    """
    Apply a 2x2 gate to `target_qubit`, i.e. I⊗...⊗G⊗...⊗I.

    For each basis index i with target bit b, the new amplitude is
    G[b,0]·ψ[i with bit 0] + G[b,1]·ψ[i with bit 1].

    Raises
    ------
    GateArityMismatch
        If `gate` is not a single-qubit gate.
    IndexOutOfRange
        If `target_qubit` is outside [0, n).
    """
    if gate.qubits != 1:
        raise GateArityMismatch(f"Gate {gate.name} must be a single-qubit gate, acts on {gate.qubits}")
    mask = state.qubit_mask(target_qubit)

    amps = state.amplitudes
    idx = np.arange(state.dimension)
    row = ((idx & mask) != 0).astype(int)
    i0 = idx & ~mask
    i1 = idx | mask

    m = gate.matrix
    new = m[row, 0] * amps[i0] + m[row, 1] * amps[i1]
    return QuantumState(state.num_qubits, new)


def apply_two_qubit_gate(
    state: QuantumState, gate: QuantumGate, control_qubit: int, target_qubit: int
) -> QuantumState:
    """
    Apply a 4x4 gate to the (control, target) pair.

    For each basis index the 2-bit sub-index s = (control bit << 1) | target bit
    selects row s of the gate; the four amplitudes sharing every other bit but
    varying (control, target) over 00, 01, 10, 11 are combined with that row.

    Raises
    ------
    GateArityMismatch
        If `gate` is not a two-qubit gate.
    IndexOutOfRange
        If either qubit is outside [0, n).
    InvalidQubitPair
        If control and target coincide.
    """
    if gate.qubits != 2:
        raise GateArityMismatch(f"Gate {gate.name} must be a two-qubit gate, acts on {gate.qubits}")
    cmask = state.qubit_mask(control_qubit)
    tmask = state.qubit_mask(target_qubit)
    if cmask == tmask:
        raise InvalidQubitPair(f"Control and target qubits must be different, got {control_qubit} for both")

    amps = state.amplitudes
    idx = np.arange(state.dimension)
    sub = (((idx & cmask) != 0).astype(int) << 1) | ((idx & tmask) != 0).astype(int)

    base = idx & ~(cmask | tmask)
    partners = (base, base | tmask, base | cmask, base | cmask | tmask)

    m = gate.matrix
    new = np.zeros(state.dimension, dtype=np.complex128)
    for j, p in enumerate(partners):
        new += m[sub, j] * amps[p]
    return QuantumState(state.num_qubits, new)


def apply_gate(state: QuantumState, gate: QuantumGate, target_qubits: Sequence[int]) -> QuantumState:
    """
    Apply `gate` to `target_qubits`, dispatching on the gate's arity.

    For two-qubit gates `target_qubits` is (control, target).

    Raises
    ------
    TargetCountMismatch
        If the number of targets differs from the gate arity.
    UnsupportedGateArity
        If the gate is neither a single- nor a two-qubit gate.
    """
    targets = list(target_qubits)
    if len(targets) != gate.qubits:
        raise TargetCountMismatch(
            f"Gate {gate.name} requires {gate.qubits} target qubits, but {len(targets)} provided"
        )

    if isinstance(gate, SingleQubitGate) or gate.qubits == 1:
        return apply_single_qubit_gate(state, gate, targets[0])
    if isinstance(gate, TwoQubitGate) or gate.qubits == 2:
        return apply_two_qubit_gate(state, gate, targets[0], targets[1])
    raise UnsupportedGateArity(f"Gates with {gate.qubits} qubits not supported")


# ---------- measurement ----------
def measure_qubit(state: QuantumState, qubit_index: int, rng: Optional[RandomSource] = None) -> QubitMeasurement:
    """
    Projectively measure one qubit in the Z basis.

    Outcome 0 is chosen when the sample is strictly below prob0. Amplitudes
    inconsistent with the outcome are zeroed and the rest rescaled by
    1/√p(outcome).

    Returns
    -------
    QubitMeasurement
        (result, new_state, probability of the observed outcome).
    """
    prob0, prob1 = state.get_qubit_measurement_probabilities(qubit_index)
    sample = float(_default_rng(rng).random())
    # a sample of exactly prob0 goes to outcome 1, unless outcome 1 is impossible
    result = 0 if sample < prob0 or prob1 <= 0.0 else 1
    prob = prob0 if result == 0 else prob1

    mask = state.qubit_mask(qubit_index)
    idx = np.arange(state.dimension)
    keep = ((idx & mask) != 0) == bool(result)

    new = np.where(keep, state.amplitudes / np.sqrt(prob), 0.0)
    log.debug(f"measure_qubit q{qubit_index}: sample={sample:.6f} p0={prob0:.6f} -> {result}")
    return QubitMeasurement(result, QuantumState(state.num_qubits, new), prob)


def measure_all(state: QuantumState, rng: Optional[RandomSource] = None) -> RegisterMeasurement:
    """
    Sample a full-register outcome without collapsing `state`.

    Walks basis indices in order, accumulating probability, and picks the first
    index whose cumulative sum meets or exceeds the sample. Zero-probability
    basis states are never selected.

    Returns
    -------
    RegisterMeasurement
        (per-qubit bits with qubit 0 first, pre-collapse probability vector,
        selected basis index).
    """
    probs = state.get_measurement_probabilities()
    sample = float(_default_rng(rng).random())

    chosen = None
    cumulative = 0.0
    for i, p in enumerate(probs):
        if p <= 0.0:
            continue
        cumulative += p
        chosen = i
        if cumulative >= sample:
            break
    # chosen is the last non-zero index if rounding left cumulative < sample

    n = state.num_qubits
    results = [(chosen >> (n - 1 - q)) & 1 for q in range(n)]
    log.debug(f"measure_all: sample={sample:.6f} -> |{state.basis_state_to_string(chosen)}⟩")
    return RegisterMeasurement(results, probs, chosen)


# ---------- comparison ----------
def calculate_fidelity(state_a: QuantumState, state_b: QuantumState) -> float:
    """
    Return |⟨a|b⟩|², 1 for states equal up to global phase, 0 for orthogonal.

    Raises
    ------
    QubitCountMismatch
        If the states have different register sizes.
    """
    if state_a.num_qubits != state_b.num_qubits:
        raise QubitCountMismatch(
            f"States must have the same number of qubits, got {state_a.num_qubits} and {state_b.num_qubits}"
        )
    overlap = np.vdot(state_a.amplitudes, state_b.amplitudes)
    return float(min(1.0, abs(overlap) ** 2))
