# qstatesim/state.py
from __future__ import annotations

import operator
from typing import Optional, Sequence, Tuple

import numpy as np

from qstatesim.errors import (
    DimensionMismatch,
    IndexOutOfRange,
    InvalidQubitCount,
    ZeroStateError,
)

MIN_QUBITS = 1
MAX_QUBITS = 5

# Amplitudes / probabilities at or below this are treated as zero for display.
NEGLIGIBLE = 1e-10


def validate_qubit_count(num_qubits: int) -> int:
    """Return `num_qubits` as an int, or raise InvalidQubitCount outside [1, 5]."""
    n = operator.index(num_qubits)
    if not MIN_QUBITS <= n <= MAX_QUBITS:
        raise InvalidQubitCount(f"Number of qubits must be between {MIN_QUBITS} and {MAX_QUBITS}, got {n}")
    return n


class QuantumState:
    """
    Normalized dense state vector of an n-qubit register.

    Basis index `i` encodes qubit `q` as bit `n-1-q` of `i`, i.e. qubit 0 is the
    most significant bit and |q0 q1 ... q(n-1)⟩ reads left to right.

    Instances are snapshots: the amplitude buffer is read-only and every
    "update" (`with_amplitude`, gate application, measurement) returns a new
    QuantumState.

    Parameters
    ----------
    num_qubits : int
        Register size, 1 ≤ n ≤ 5.
    amplitudes : Sequence[complex], optional
        Exactly 2**n amplitudes. Defaults to |0...0⟩. Always renormalized.

    Raises
    ------
    InvalidQubitCount
        If `num_qubits` is outside [1, 5].
    DimensionMismatch
        If `amplitudes` does not have exactly 2**n entries.
    ZeroStateError
        If every amplitude is zero.
    """

    __slots__ = ("_n", "_amps")

    def __init__(self, num_qubits: int, amplitudes: Optional[Sequence[complex]] = None):
        self._n = validate_qubit_count(num_qubits)
        dim = 1 << self._n

        if amplitudes is None:
            vec = np.zeros(dim, dtype=np.complex128)
            vec[0] = 1.0
        else:
            vec = np.array(amplitudes, dtype=np.complex128)
            if vec.ndim != 1 or vec.shape[0] != dim:
                raise DimensionMismatch(
                    f"Initial state must have {dim} amplitudes for {self._n} qubits, got shape {vec.shape}"
                )
            if not np.all(np.isfinite(vec)):
                raise ValueError("Amplitudes must be finite complex numbers")

        self._amps = self._normalized(vec)
        self._amps.flags.writeable = False

    # ---------- constructors ----------
    @classmethod
    def basis_state(cls, num_qubits: int, index: int) -> QuantumState:
        """Return the computational basis state |index⟩."""
        n = validate_qubit_count(num_qubits)
        dim = 1 << n
        idx = operator.index(index)
        if not 0 <= idx < dim:
            raise IndexOutOfRange(f"Basis state {idx} out of range [0, {dim})")
        vec = np.zeros(dim, dtype=np.complex128)
        vec[idx] = 1.0
        return cls(n, vec)

    @classmethod
    def uniform(cls, num_qubits: int) -> QuantumState:
        """Return the equal superposition with amplitude 1/√(2**n) everywhere."""
        n = validate_qubit_count(num_qubits)
        dim = 1 << n
        return cls(n, np.full(dim, 1.0 / np.sqrt(dim), dtype=np.complex128))

    # ---------- internals ----------
    @staticmethod
    def _normalized(vec: np.ndarray) -> np.ndarray:
        norm = float(np.linalg.norm(vec))
        if norm == 0.0:
            raise ZeroStateError("Cannot normalize zero state")
        return vec / norm

    def _check_basis_index(self, index: int) -> int:
        idx = operator.index(index)
        if not 0 <= idx < self._amps.shape[0]:
            raise IndexOutOfRange(f"Basis state {idx} out of range [0, {self._amps.shape[0]})")
        return idx

    def check_qubit(self, qubit: int) -> int:
        """Return `qubit` as an int, or raise IndexOutOfRange outside [0, n)."""
        q = operator.index(qubit)
        if not 0 <= q < self._n:
            raise IndexOutOfRange(f"Qubit index {q} out of range [0, {self._n})")
        return q

    def qubit_mask(self, qubit: int) -> int:
        """Bit mask selecting `qubit` inside a basis index (qubit 0 = MSB)."""
        return 1 << (self._n - 1 - self.check_qubit(qubit))

    # ---------- accessors ----------
    @property
    def num_qubits(self) -> int:
        return self._n

    @property
    def dimension(self) -> int:
        return self._amps.shape[0]

    @property
    def amplitudes(self) -> np.ndarray:
        """Return a writable copy of the state vector."""
        return self._amps.copy()

    def get_amplitude(self, index: int) -> complex:
        return complex(self._amps[self._check_basis_index(index)])

    def with_amplitude(self, index: int, value: complex) -> QuantumState:
        """
        Return a copy with amplitude `index` replaced by `value`, renormalized.

        Only the global norm is corrected: the other amplitudes keep their
        relative magnitudes and phases.
        """
        idx = self._check_basis_index(index)
        vec = self._amps.copy()
        vec[idx] = complex(value)
        return QuantumState(self._n, vec)

    # ---------- probabilities ----------
    def get_measurement_probabilities(self) -> np.ndarray:
        """Return |amplitude|² for every basis index (sums to 1)."""
        return np.abs(self._amps) ** 2

    def get_measurement_probability(self, index: int) -> float:
        return float(abs(self._amps[self._check_basis_index(index)]) ** 2)

    def get_qubit_measurement_probabilities(self, qubit: int) -> Tuple[float, float]:
        """
        Marginal (prob0, prob1) for measuring `qubit` alone.

        Sums the full-register probabilities over every basis state whose bit
        for `qubit` is 0 (resp. 1).
        """
        mask = self.qubit_mask(qubit)
        probs = self.get_measurement_probabilities()
        ones = (np.arange(self.dimension) & mask) != 0
        prob1 = float(probs[ones].sum())
        prob0 = float(probs[~ones].sum())
        return prob0, prob1

    # ---------- formatting ----------
    def basis_state_to_string(self, index: int) -> str:
        """Binary label of `index`, zero-padded to n digits (qubit 0 first)."""
        return format(operator.index(index), f"0{self._n}b")

    def to_string(self, precision: int = 4) -> str:
        """Sum-of-terms form, e.g. ``(0.7071+0.0000j)|00⟩ + (0.7071+0.0000j)|11⟩``."""
        terms = []
        for i, amp in enumerate(self._amps):
            if abs(amp) > NEGLIGIBLE:
                terms.append(f"({amp:.{precision}f})|{self.basis_state_to_string(i)}⟩")
        return " + ".join(terms) or "0"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"QuantumState(num_qubits={self._n}, amplitudes={self._amps.tolist()!r})"

    # ---------- comparison / copy ----------
    def allclose(self, other: QuantumState, atol: float = 1e-9) -> bool:
        """Amplitude-wise equality within `atol` (global phase is significant)."""
        return self._n == other._n and bool(np.allclose(self._amps, other._amps, atol=atol, rtol=0.0))

    def clone(self) -> QuantumState:
        """Return an independent copy sharing no storage with this state."""
        return QuantumState(self._n, self._amps.copy())
