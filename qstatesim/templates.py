# qstatesim/templates.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Dict, List, Optional, Sequence, Tuple

from qstatesim.circuit import CircuitElement
from qstatesim.gates import CNOT, HADAMARD, PAULI_X, PAULI_Z, QuantumGate
from qstatesim.operations import RandomSource
from qstatesim.simulator import QuantumSimulator, SimulationResult


class Category(StrEnum):
    ENTANGLEMENT = "entanglement"
    COMMUNICATION = "communication"
    SEARCH = "search"
    TRANSFORM = "transform"


class Difficulty(StrEnum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


@dataclass(frozen=True)
class AlgorithmStep:
    """
    One teaching step. `gates` holds only the gates this step adds; earlier
    steps' gates are implied.
    """

    title: str
    description: str
    gates: Tuple[CircuitElement, ...] = ()
    expected_outcome: Optional[str] = None


@dataclass(frozen=True)
class AlgorithmTemplate:
    id: str
    name: str
    description: str
    category: Category
    difficulty: Difficulty
    qubits_required: int
    steps: Tuple[AlgorithmStep, ...] = field(default=())

    def circuit_through(self, step_index: int) -> List[CircuitElement]:
        """Cumulative circuit after steps 0..step_index (inclusive)."""
        if not 0 <= step_index < len(self.steps):
            raise IndexError(f"Step {step_index} out of range for '{self.id}' ({len(self.steps)} steps)")
        out: List[CircuitElement] = []
        for step in self.steps[: step_index + 1]:
            out.extend(step.gates)
        return out

    def full_circuit(self) -> List[CircuitElement]:
        return self.circuit_through(len(self.steps) - 1) if self.steps else []

    def summary(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category.value,
            "difficulty": self.difficulty.value,
            "qubitsRequired": self.qubits_required,
            "steps": [s.title for s in self.steps],
        }


def _layer(gate: QuantumGate, qubits: Sequence[int], position: int) -> Tuple[CircuitElement, ...]:
    """Same single-qubit gate on several qubits, all at one position."""
    return tuple(CircuitElement(gate, (q,), position) for q in qubits)


BELL_STATE = AlgorithmTemplate(
    id="bell-state",
    name="Bell State Preparation",
    description="Create the maximally entangled two-qubit Bell state (|00⟩ + |11⟩)/√2",
    category=Category.ENTANGLEMENT,
    difficulty=Difficulty.BEGINNER,
    qubits_required=2,
    steps=(
        AlgorithmStep(
            "Initialize Qubits",
            "Start with two qubits in the |00⟩ state",
            expected_outcome="Separable state with no entanglement.",
        ),
        AlgorithmStep(
            "Create Superposition",
            "Apply a Hadamard gate to the first qubit",
            _layer(HADAMARD, [0], 0),
            expected_outcome="(|00⟩ + |10⟩)/√2, still separable.",
        ),
        AlgorithmStep(
            "Create Entanglement",
            "Apply CNOT with the first qubit as control and the second as target",
            (CircuitElement(CNOT, (0, 1), 1),),
            expected_outcome="Bell state |Φ⁺⟩ = (|00⟩ + |11⟩)/√2.",
        ),
    ),
)

TELEPORTATION = AlgorithmTemplate(
    id="quantum-teleportation",
    name="Quantum Teleportation",
    description="Transfer the state of qubit 0 to qubit 2 using a shared Bell pair",
    category=Category.COMMUNICATION,
    difficulty=Difficulty.INTERMEDIATE,
    qubits_required=3,
    steps=(
        AlgorithmStep(
            "Prepare Unknown State",
            "Qubit 0 holds the state |ψ⟩ to be teleported",
        ),
        AlgorithmStep(
            "Create Bell Pair",
            "Entangle qubits 1 and 2 with H and CNOT",
            (CircuitElement(HADAMARD, (1,), 0), CircuitElement(CNOT, (1, 2), 1)),
            expected_outcome="|ψ⟩₀ ⊗ |Φ⁺⟩₁₂",
        ),
        AlgorithmStep(
            "Bell State Measurement",
            "Rotate qubits 0 and 1 into the Bell basis with CNOT(0,1) then H(0)",
            (CircuitElement(CNOT, (0, 1), 2), CircuitElement(HADAMARD, (0,), 3)),
            expected_outcome="Measuring qubits 0,1 leaves qubit 2 in |ψ⟩ up to X/Z corrections.",
        ),
    ),
)

GROVER_SEARCH = AlgorithmTemplate(
    id="grovers-search",
    name="Grover's Search Algorithm",
    description="One iteration sketch of Grover's search over 3 qubits",
    category=Category.SEARCH,
    difficulty=Difficulty.INTERMEDIATE,
    qubits_required=3,
    steps=(
        AlgorithmStep(
            "Initialize Superposition",
            "Apply Hadamard to every qubit",
            _layer(HADAMARD, [0, 1, 2], 0),
            expected_outcome="Uniform superposition over all 8 basis states.",
        ),
        AlgorithmStep(
            "Oracle",
            "Phase-flip marked states with Z on qubits 0 and 2",
            _layer(PAULI_Z, [0, 2], 1),
        ),
        AlgorithmStep(
            "Diffusion",
            "Hadamard layer followed by an X layer",
            _layer(HADAMARD, [0, 1, 2], 2) + _layer(PAULI_X, [0, 1, 2], 3),
        ),
    ),
)

QFT = AlgorithmTemplate(
    id="quantum-fourier-transform",
    name="Quantum Fourier Transform",
    description="Simplified 3-qubit QFT: the Hadamard skeleton without controlled phases",
    category=Category.TRANSFORM,
    difficulty=Difficulty.ADVANCED,
    qubits_required=3,
    steps=(
        AlgorithmStep("Most Significant Qubit", "Hadamard on qubit 2", _layer(HADAMARD, [2], 0)),
        AlgorithmStep("Middle Qubit", "Hadamard on qubit 1", _layer(HADAMARD, [1], 1)),
        AlgorithmStep("Least Significant Qubit", "Hadamard on qubit 0", _layer(HADAMARD, [0], 2)),
    ),
)

TEMPLATES: Tuple[AlgorithmTemplate, ...] = (BELL_STATE, TELEPORTATION, GROVER_SEARCH, QFT)
_BY_ID: Dict[str, AlgorithmTemplate] = {t.id: t for t in TEMPLATES}


def get_template(template_id: str) -> AlgorithmTemplate:
    try:
        return _BY_ID[template_id]
    except KeyError:
        raise KeyError(f"Unknown algorithm template: {template_id}") from None


def run(
    template: AlgorithmTemplate,
    step_index: Optional[int] = None,
    rng: Optional[RandomSource] = None,
) -> SimulationResult:
    """Execute a template (optionally only up to `step_index`) on a fresh simulator."""
    circuit = template.full_circuit() if step_index is None else template.circuit_through(step_index)
    sim = QuantumSimulator(template.qubits_required, rng=rng)
    return sim.execute_circuit(circuit)
