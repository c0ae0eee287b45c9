# qstatesim/__init__.py
import importlib.metadata

from .state import QuantumState
from .gates import QuantumGate, SingleQubitGate, TwoQubitGate, GateName, AVAILABLE_GATES, get_gate
from .circuit import CircuitElement, CircuitExport, PlacedGate
from .simulator import QuantumSimulator, SimulationResult, MeasurementResult

__version__ = importlib.metadata.version("qstatesim")
