# tests/test_exports.py
import json

import pytest
from pydantic import ValidationError

from qstatesim.circuit import CircuitElement, CircuitExport, PlacedGate
from qstatesim.errors import UnknownGate
from qstatesim.gates import CNOT, HADAMARD
from qstatesim.simulator import QuantumSimulator

BELL_JSON = json.dumps(
    {
        "numQubits": 2,
        "gates": [
            {"gateName": "CNOT", "position": 1, "targetQubits": [0, 1]},
            {"gateName": "Hadamard", "position": 0, "targetQubits": [0]},
        ],
    }
)


def test_parse_export_and_run():
    export = CircuitExport.from_json(BELL_JSON)
    assert export.num_qubits == 2
    elements = export.to_elements()
    assert elements[0].gate is CNOT
    assert elements[1].target_qubits == (0,)

    result = QuantumSimulator(export.num_qubits).execute_circuit(elements)
    assert [e.state for e in result.probability_table()] == ["00", "11"]


def test_export_uses_camel_case_keys():
    elements = [CircuitElement(HADAMARD, [0], 0), CircuitElement(CNOT, [0, 1], 3)]
    data = json.loads(CircuitExport.from_elements(2, elements).to_json())
    assert data == {
        "numQubits": 2,
        "gates": [
            {"gateName": "Hadamard", "position": 0, "targetQubits": [0]},
            {"gateName": "CNOT", "position": 3, "targetQubits": [0, 1]},
        ],
    }


def test_snake_case_population_is_accepted():
    g = PlacedGate(gate_name="X", position=2, target_qubits=[1])
    el = g.to_element()
    assert el.gate.symbol == "X"
    assert el.position == 2


def test_unknown_gate_name_fails_on_resolution():
    export = CircuitExport.model_validate({"numQubits": 1, "gates": [{"gateName": "T", "position": 0, "targetQubits": [0]}]})
    with pytest.raises(UnknownGate):
        export.to_elements()


def test_malformed_export_is_rejected():
    with pytest.raises(ValidationError):
        CircuitExport.from_json('{"gates": []}')


def test_circuit_element_normalizes_targets():
    el = CircuitElement(CNOT, [1, 0], 4)
    assert el.target_qubits == (1, 0)
