# qstatesim/circuit.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from pydantic import BaseModel, ConfigDict, Field

from qstatesim.gates import QuantumGate, get_gate


@dataclass(frozen=True)
class CircuitElement:
    """
    One scheduled gate.

    Attributes
    ----------
    gate : QuantumGate
        Operator to apply.
    target_qubits : Tuple[int, ...]
        Qubits it acts on, (control, target) for two-qubit gates. The count is
        validated against the gate arity when the element is executed.
    position : int
        Ordering key; need not be contiguous. Ties keep input order.
    """

    gate: QuantumGate
    target_qubits: Tuple[int, ...]
    position: int = 0

    def __post_init__(self):
        object.__setattr__(self, "target_qubits", tuple(int(q) for q in self.target_qubits))


def sort_circuit(circuit: Iterable[CircuitElement]) -> List[CircuitElement]:
    """Return elements in execution order (stable sort by position)."""
    return sorted(circuit, key=lambda e: e.position)


# ---------- export format ----------
class PlacedGate(BaseModel):
    """JSON shape of one placed gate: {gateName, position, targetQubits}."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    gate_name: str = Field(alias="gateName")
    position: int
    target_qubits: List[int] = Field(alias="targetQubits")

    def to_element(self) -> CircuitElement:
        return CircuitElement(get_gate(self.gate_name), tuple(self.target_qubits), self.position)


class CircuitExport(BaseModel):
    """
    Serialized circuit: {"numQubits": n, "gates": [...]}.

    Register size and target counts are not validated here; the simulator
    rejects invalid circuits when they run.
    """

    model_config = ConfigDict(populate_by_name=True)

    num_qubits: int = Field(alias="numQubits")
    gates: List[PlacedGate] = Field(default_factory=list)

    def to_elements(self) -> List[CircuitElement]:
        """Resolve gate names through the catalog (raises UnknownGate)."""
        return [g.to_element() for g in self.gates]

    @classmethod
    def from_elements(cls, num_qubits: int, elements: Iterable[CircuitElement]) -> CircuitExport:
        return cls(
            num_qubits=num_qubits,
            gates=[
                PlacedGate(gate_name=e.gate.name, position=e.position, target_qubits=list(e.target_qubits))
                for e in elements
            ],
        )

    def to_json(self, **kwargs) -> str:
        return self.model_dump_json(by_alias=True, **kwargs)

    @classmethod
    def from_json(cls, data: str | bytes) -> CircuitExport:
        return cls.model_validate_json(data)
