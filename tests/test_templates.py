# tests/test_templates.py
import pytest

from qstatesim import templates
from qstatesim.templates import TEMPLATES, get_template


@pytest.mark.parametrize("tpl", TEMPLATES, ids=lambda t: t.id)
def test_templates_run_and_stay_normalized(tpl):
    result = templates.run(tpl)
    assert result.final_state.num_qubits == tpl.qubits_required
    assert result.measurement_probabilities.sum() == pytest.approx(1.0, abs=1e-9)
    assert len(result.execution_log) == len(tpl.full_circuit()) + 1


def test_bell_template_final_state():
    result = templates.run(get_template("bell-state"))
    assert [e.state for e in result.probability_table()] == ["00", "11"]


def test_circuit_through_is_cumulative():
    bell = get_template("bell-state")
    assert bell.circuit_through(0) == []
    assert len(bell.circuit_through(1)) == 1
    assert len(bell.circuit_through(2)) == 2
    with pytest.raises(IndexError):
        bell.circuit_through(3)


def test_partial_run_of_bell_template():
    result = templates.run(get_template("bell-state"), step_index=1)
    assert [e.state for e in result.probability_table()] == ["00", "10"]


def test_grover_superposition_step():
    result = templates.run(get_template("grovers-search"), step_index=0)
    assert result.measurement_probabilities == pytest.approx([1 / 8] * 8)


def test_unknown_template():
    with pytest.raises(KeyError):
        get_template("shor")


def test_summary_shape():
    s = get_template("quantum-teleportation").summary()
    assert s["qubitsRequired"] == 3
    assert s["category"] == "communication"
