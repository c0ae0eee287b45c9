# qstatesim/simulator.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, NamedTuple, Optional, Sequence

import numpy as np

from qstatesim import operations
from qstatesim.bloch import BlochVector, qubit_bloch_vector
from qstatesim.circuit import CircuitElement, sort_circuit
from qstatesim.errors import DimensionMismatch, QuantumError
from qstatesim.gates import GateName, QuantumGate, get_gate
from qstatesim.operations import RandomSource, RegisterMeasurement
from qstatesim.settings import get_settings
from qstatesim.state import NEGLIGIBLE, QuantumState, validate_qubit_count

log = logging.getLogger(__name__)


class ProbabilityEntry(NamedTuple):
    state: str  # basis label, qubit 0 first
    probability: float


class QubitProbabilities(NamedTuple):
    qubit: int
    prob0: float
    prob1: float


class MeasurementResult(NamedTuple):
    qubit_index: int
    result: int
    probability: float


def probability_table(state: QuantumState, cutoff: float = NEGLIGIBLE) -> List[ProbabilityEntry]:
    """(basis label, probability) pairs with probability above `cutoff`."""
    return [
        ProbabilityEntry(state.basis_state_to_string(i), float(p))
        for i, p in enumerate(state.get_measurement_probabilities())
        if p > cutoff
    ]


@dataclass
class SimulationResult:
    """
    Outcome of `QuantumSimulator.execute_circuit`.

    All members are copies: mutating them does not affect the simulator.
    """

    final_state: QuantumState
    measurement_probabilities: np.ndarray  # full vector, one entry per basis index
    state_history: List[QuantumState]
    execution_log: List[str]

    def probability_table(self, cutoff: float = NEGLIGIBLE) -> List[ProbabilityEntry]:
        return probability_table(self.final_state, cutoff)


class QuantumSimulator:
    """
    Stateful session over a fixed-size register.

    Responsibilities:
    - Hold the current state and replace it on every gate or measurement.
    - Keep the snapshot history (index 0 = initial state) and a parallel,
      human-readable execution log.
    - Execute circuits in position order.

    History and log always have the same length. A failed operation appends an
    error line to the log together with an unchanged snapshot, then re-raises.
    """

    def __init__(self, num_qubits: int, rng: Optional[RandomSource] = None):
        self._n = validate_qubit_count(num_qubits)
        self._rng: RandomSource = rng if rng is not None else np.random.default_rng(get_settings().SEED)
        self._state: QuantumState
        self._history: List[QuantumState]
        self._log: List[str]
        self.reset()
        log.debug(f"Created simulator with {self._n} qubits")

    # ---------- session bookkeeping ----------
    def _restart(self, state: QuantumState, message: str) -> None:
        self._state = state
        self._history = [state.clone()]
        self._log = [message]

    def _record(self, state: QuantumState, message: str) -> None:
        self._state = state
        self._history.append(state.clone())
        self._log.append(message)

    def _record_failure(self, message: str) -> None:
        log.warning(message)
        self._record(self._state, message)

    def reset(self) -> None:
        """Return to |0...0⟩ with a one-entry history and log."""
        self._restart(
            QuantumState(self._n),
            f"Initialized {self._n}-qubit system in |{'0' * self._n}⟩ state",
        )

    def set_initial_state(self, amplitudes: Sequence[complex]) -> None:
        """
        Replace the current state with `amplitudes` (renormalized) and restart history.

        Raises
        ------
        DimensionMismatch
            If `amplitudes` does not have exactly 2**n entries.
        """
        dim = 1 << self._n
        if len(amplitudes) != dim:
            raise DimensionMismatch(f"Initial state must have {dim} amplitudes, got {len(amplitudes)}")
        self._restart(QuantumState(self._n, amplitudes), "Set custom initial state")

    def create_superposition(self) -> None:
        """Restart from the equal superposition of all 2**n basis states."""
        self._restart(QuantumState.uniform(self._n), "Created equal superposition state")

    # ---------- accessors ----------
    @property
    def num_qubits(self) -> int:
        return self._n

    @property
    def current_state(self) -> QuantumState:
        return self._state.clone()

    @property
    def state_history(self) -> List[QuantumState]:
        return [s.clone() for s in self._history]

    @property
    def execution_log(self) -> List[str]:
        return list(self._log)

    # ---------- gates ----------
    def apply_gate(self, gate: QuantumGate | GateName | str, target_qubits: Sequence[int]) -> None:
        """
        Apply one gate to the current state and record it.

        Parameters
        ----------
        gate : QuantumGate | GateName | str
            Gate object, or a catalog name/symbol ("Hadamard", "CX", ...).
        target_qubits : Sequence[int]
            Target indices, (control, target) for two-qubit gates.

        Raises
        ------
        QuantumError
            Any validation failure from the operations layer, re-raised after
            the failure has been logged.
        """
        targets = list(target_qubits)
        label = gate.name if isinstance(gate, QuantumGate) else str(gate)
        try:
            resolved = get_gate(gate)
            new_state = operations.apply_gate(self._state, resolved, targets)
        except QuantumError as e:
            self._record_failure(f"Error applying {label} gate: {e}")
            raise

        qubit_string = ", ".join(f"q{q}" for q in targets)
        self._record(new_state, f"Applied {resolved.name} gate to qubit(s): {qubit_string}")
        log.debug(self._log[-1])

    def execute_circuit(self, circuit: Iterable[CircuitElement]) -> SimulationResult:
        """
        Apply every element in ascending `position` order (ties keep input order).

        Execution stops at the first invalid element; its error is re-raised and
        the gates before it remain applied.
        """
        for element in sort_circuit(circuit):
            self.apply_gate(element.gate, element.target_qubits)

        return SimulationResult(
            final_state=self._state.clone(),
            measurement_probabilities=self._state.get_measurement_probabilities(),
            state_history=self.state_history,
            execution_log=self.execution_log,
        )

    # ---------- measurement ----------
    def measure_qubit(self, qubit_index: int) -> MeasurementResult:
        """Measure one qubit, collapse the current state and record the outcome."""
        try:
            outcome = operations.measure_qubit(self._state, qubit_index, self._rng)
        except QuantumError as e:
            self._record_failure(f"Error measuring qubit {qubit_index}: {e}")
            raise

        self._record(
            outcome.new_state,
            f"Measured qubit {qubit_index}: {outcome.result} (probability: {outcome.probability:.4f})",
        )
        return MeasurementResult(qubit_index, outcome.result, outcome.probability)

    def measure_all(self) -> RegisterMeasurement:
        """Measure every qubit and collapse to the observed basis state."""
        outcome = operations.measure_all(self._state, self._rng)
        label = "".join(str(b) for b in outcome.results)
        prob = float(outcome.probabilities[outcome.basis_index])

        self._record(
            QuantumState.basis_state(self._n, outcome.basis_index),
            f"Measured all qubits: |{label}⟩ (probability: {prob:.4f})",
        )
        return outcome

    # ---------- queries ----------
    def get_measurement_probabilities(self) -> List[ProbabilityEntry]:
        """Non-negligible (basis label, probability) pairs of the current state."""
        return probability_table(self._state, get_settings().PROBABILITY_CUTOFF)

    def get_qubit_probabilities(self) -> List[QubitProbabilities]:
        return [QubitProbabilities(q, *self._state.get_qubit_measurement_probabilities(q)) for q in range(self._n)]

    def get_expectation_value_z(self, qubit_index: int) -> float:
        """⟨Z⟩ = prob0 - prob1 for one qubit, in [-1, 1]."""
        prob0, prob1 = self._state.get_qubit_measurement_probabilities(qubit_index)
        return prob0 - prob1

    def get_bloch_vector(self, qubit_index: int) -> BlochVector:
        return qubit_bloch_vector(self._state, qubit_index)

    def get_state_string(self) -> str:
        return str(self._state)

    def calculate_fidelity(self, other: QuantumState) -> float:
        return operations.calculate_fidelity(self._state, other)

    def export_simulation_data(self) -> dict:
        """Plain-dict snapshot of the session for rendering or persistence."""
        return {
            "numQubits": self._n,
            "finalState": self.get_state_string(),
            "measurementProbabilities": [
                {"state": e.state, "probability": e.probability} for e in self.get_measurement_probabilities()
            ],
            "executionLog": self.execution_log,
        }
