# qstatesim/errors.py
from __future__ import annotations


class QuantumError(Exception):
    """Base class for every validation failure raised by the simulator core."""


# ---------- construction ----------
class InvalidQubitCount(QuantumError, ValueError):
    pass


class DimensionMismatch(QuantumError, ValueError):
    pass


class ZeroStateError(QuantumError, ValueError):
    pass


# ---------- indexing ----------
class IndexOutOfRange(QuantumError, IndexError):
    pass


# ---------- gate application ----------
class GateArityMismatch(QuantumError, ValueError):
    pass


class InvalidQubitPair(QuantumError, ValueError):
    pass


class TargetCountMismatch(QuantumError, ValueError):
    pass


class UnsupportedGateArity(QuantumError, ValueError):
    pass


class UnknownGate(QuantumError, KeyError):
    """Raised by the gate catalog lookup for names it does not know."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


# ---------- cross-state ----------
class QubitCountMismatch(QuantumError, ValueError):
    pass
