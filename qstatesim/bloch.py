# qstatesim/bloch.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np

from qstatesim.state import QuantumState


@dataclass(frozen=True)
class BlochVector:
    x: float
    y: float
    z: float

    @property
    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class SphericalCoordinates:
    theta: float  # polar angle, [0, π]
    phi: float  # azimuth, (-π, π]
    r: float  # 1 for pure states


COMMON_STATES: Dict[str, BlochVector] = {
    "|0⟩": BlochVector(0.0, 0.0, 1.0),
    "|1⟩": BlochVector(0.0, 0.0, -1.0),
    "|+⟩": BlochVector(1.0, 0.0, 0.0),
    "|-⟩": BlochVector(-1.0, 0.0, 0.0),
    "|+i⟩": BlochVector(0.0, 1.0, 0.0),
    "|-i⟩": BlochVector(0.0, -1.0, 0.0),
}


# ---------- state -> vector ----------
def state_to_bloch_vector(state: QuantumState) -> BlochVector:
    """
    Bloch vector of a single-qubit state a|0⟩ + b|1⟩:
    x = 2 Re(a* b), y = 2 Im(a* b), z = |a|² - |b|².
    """
    if state.num_qubits != 1:
        raise ValueError("Bloch sphere visualization only supports single-qubit states")
    return qubit_bloch_vector(state, 0)


def qubit_bloch_vector(state: QuantumState, qubit: int) -> BlochVector:
    """
    Reduced Bloch vector of one qubit of an n-qubit register.

    Traces out the other qubits; the vector is shorter than 1 when the qubit
    is entangled with the rest of the register.
    """
    mask = state.qubit_mask(qubit)
    amps = state.amplitudes
    idx = np.arange(state.dimension)
    zeros = idx[(idx & mask) == 0]

    a = amps[zeros]
    b = amps[zeros | mask]
    coherence = complex(np.vdot(a, b))  # Σ a* b
    prob0, prob1 = state.get_qubit_measurement_probabilities(qubit)
    return BlochVector(2.0 * coherence.real, 2.0 * coherence.imag, prob0 - prob1)


# ---------- coordinate conversions ----------
def to_spherical(vector: BlochVector) -> SphericalCoordinates:
    r = vector.length
    if r == 0.0:
        return SphericalCoordinates(0.0, 0.0, 0.0)
    theta = math.acos(max(-1.0, min(1.0, vector.z / r)))
    phi = math.atan2(vector.y, vector.x)
    return SphericalCoordinates(theta, phi, r)


def from_spherical(coords: SphericalCoordinates) -> BlochVector:
    return BlochVector(
        coords.r * math.sin(coords.theta) * math.cos(coords.phi),
        coords.r * math.sin(coords.theta) * math.sin(coords.phi),
        coords.r * math.cos(coords.theta),
    )


def bloch_vector_to_state(vector: BlochVector) -> QuantumState:
    """Pure single-qubit state cos(θ/2)|0⟩ + e^{iφ} sin(θ/2)|1⟩ pointing along `vector`."""
    sph = to_spherical(vector)
    alpha = math.cos(sph.theta / 2)
    beta = complex(math.sin(sph.theta / 2) * math.cos(sph.phi), math.sin(sph.theta / 2) * math.sin(sph.phi))
    return QuantumState(1, [alpha, beta])


# ---------- geometry ----------
def rotation_between(start: BlochVector, end: BlochVector) -> Tuple[BlochVector, float]:
    """Return (unit axis, angle) of the rotation carrying `start` onto `end`."""
    a = np.array(start.as_tuple())
    b = np.array(end.as_tuple())
    axis = np.cross(a, b)
    norm = float(np.linalg.norm(axis))
    if norm > 0:
        axis = axis / norm

    denom = float(np.linalg.norm(a) * np.linalg.norm(b))
    cos_angle = float(np.dot(a, b)) / denom if denom > 0 else 1.0
    angle = math.acos(max(-1.0, min(1.0, cos_angle)))
    return BlochVector(*map(float, axis)), angle


def slerp(start: BlochVector, end: BlochVector, t: float) -> BlochVector:
    """Spherical interpolation for animating a state between two vectors."""
    axis, angle = rotation_between(start, end)
    if angle < 1e-3:
        return BlochVector(
            start.x + (end.x - start.x) * t,
            start.y + (end.y - start.y) * t,
            start.z + (end.z - start.z) * t,
        )

    # Rodrigues' rotation formula
    k = np.array(axis.as_tuple())
    v = np.array(start.as_tuple())
    theta = angle * t
    rotated = v * math.cos(theta) + np.cross(k, v) * math.sin(theta) + k * np.dot(k, v) * (1 - math.cos(theta))
    return BlochVector(*map(float, rotated))


def measurement_probability(vector: BlochVector, axis: BlochVector) -> Tuple[float, float]:
    """(p_up, p_down) for measuring along `axis` (need not be unit length)."""
    length = axis.length
    if length == 0.0:
        raise ValueError("Measurement axis must be non-zero")
    projection = (vector.x * axis.x + vector.y * axis.y + vector.z * axis.z) / length
    return (1 + projection) / 2, (1 - projection) / 2
