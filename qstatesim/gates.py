# qstatesim/gates.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Dict, List, Tuple

import numpy as np

from qstatesim.errors import UnknownGate


class GateName(StrEnum):
    """
    Symbols of the built-in gate catalog.
    """

    # Single-qubit
    H = "H"
    X = "X"
    Y = "Y"
    Z = "Z"

    # Two-qubit
    CX = "CX"


@dataclass(frozen=True, eq=False, kw_only=True)
class QuantumGate:
    """
    Immutable named unitary operator.

    Attributes
    ----------
    name : str
        Display name, e.g. "Hadamard".
    symbol : str
        Short label used in circuit diagrams, e.g. "H".
    qubits : int
        Arity of the operator.
    matrix : np.ndarray
        Read-only (2**qubits, 2**qubits) complex unitary. For two-qubit gates
        the basis order is control⊗target: 00, 01, 10, 11.
    """

    name: str
    symbol: str
    qubits: int
    matrix: np.ndarray = field(repr=False)

    def __post_init__(self):
        mat = np.array(self.matrix, dtype=np.complex128)
        dim = 1 << self.qubits
        if mat.shape != (dim, dim):
            raise ValueError(f"Gate {self.name} on {self.qubits} qubit(s) needs a {dim}x{dim} matrix, got {mat.shape}")
        if not np.allclose(mat.conj().T @ mat, np.eye(dim), atol=1e-9):
            raise ValueError(f"Gate {self.name} matrix is not unitary")
        mat.flags.writeable = False
        object.__setattr__(self, "matrix", mat)

    def to_dict(self) -> dict:
        """Catalog entry for palettes: name, symbol, arity and [re, im] matrix entries."""
        return {
            "name": self.name,
            "symbol": self.symbol,
            "qubits": self.qubits,
            "matrix": [[[float(z.real), float(z.imag)] for z in row] for row in self.matrix],
        }


@dataclass(frozen=True, eq=False, kw_only=True)
class SingleQubitGate(QuantumGate):
    qubits: int = 1

    def __post_init__(self):
        if self.qubits != 1:
            raise ValueError("SingleQubitGate must act on exactly 1 qubit")
        super().__post_init__()


@dataclass(frozen=True, eq=False, kw_only=True)
class TwoQubitGate(QuantumGate):
    qubits: int = 2

    def __post_init__(self):
        if self.qubits != 2:
            raise ValueError("TwoQubitGate must act on exactly 2 qubits")
        super().__post_init__()


_W = 1 / np.sqrt(2)

HADAMARD = SingleQubitGate(
    name="Hadamard",
    symbol=GateName.H.value,
    matrix=[[_W, _W], [_W, -_W]],
)

PAULI_X = SingleQubitGate(
    name="Pauli-X",
    symbol=GateName.X.value,
    matrix=[[0, 1], [1, 0]],
)

PAULI_Y = SingleQubitGate(
    name="Pauli-Y",
    symbol=GateName.Y.value,
    matrix=[[0, -1j], [1j, 0]],
)

PAULI_Z = SingleQubitGate(
    name="Pauli-Z",
    symbol=GateName.Z.value,
    matrix=[[1, 0], [0, -1]],
)

CNOT = TwoQubitGate(
    name="CNOT",
    symbol=GateName.CX.value,
    matrix=[
        [1, 0, 0, 0],
        [0, 1, 0, 0],
        [0, 0, 0, 1],
        [0, 0, 1, 0],
    ],
)

AVAILABLE_GATES: Tuple[QuantumGate, ...] = (HADAMARD, PAULI_X, PAULI_Y, PAULI_Z, CNOT)

# name and symbol aliases, upper-cased
_LOOKUP: Dict[str, QuantumGate] = {}
for _g in AVAILABLE_GATES:
    _LOOKUP[_g.name.upper()] = _g
    _LOOKUP[_g.symbol.upper()] = _g


def get_gate(name: str | GateName | QuantumGate) -> QuantumGate:
    """
    Resolve a catalog gate by display name or symbol (case-insensitive).

    Parameters
    ----------
    name : str | GateName | QuantumGate
        "Hadamard", "h", GateName.CX, ... A QuantumGate is returned unchanged.

    Raises
    ------
    UnknownGate
        If the name is not in the catalog.
    """
    if isinstance(name, QuantumGate):
        return name
    try:
        return _LOOKUP[str(name).strip().upper()]
    except KeyError:
        raise UnknownGate(f"Unsupported gate: {name}") from None


def gate_catalog() -> List[dict]:
    """Read-only catalog (plain dicts) for gate palettes and pickers."""
    return [g.to_dict() for g in AVAILABLE_GATES]
