# tests/test_cli.py
import json

from typer.testing import CliRunner

from qstatesim.__main__ import app

runner = CliRunner()


def write_circuit(tmp_path, data) -> str:
    path = tmp_path / "circuit.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_gates_command_lists_catalog():
    result = runner.invoke(app, ["gates"])
    assert result.exit_code == 0
    assert "Hadamard" in result.output
    assert "CNOT" in result.output


def test_run_json_output(tmp_path):
    path = write_circuit(
        tmp_path,
        {
            "numQubits": 2,
            "gates": [
                {"gateName": "CNOT", "position": 1, "targetQubits": [0, 1]},
                {"gateName": "Hadamard", "position": 0, "targetQubits": [0]},
            ],
        },
    )
    result = runner.invoke(app, ["run", path, "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert [p["state"] for p in data["measurementProbabilities"]] == ["00", "11"]
    assert len(data["executionLog"]) == 3


def test_run_reports_invalid_circuit(tmp_path):
    path = write_circuit(
        tmp_path, {"numQubits": 2, "gates": [{"gateName": "CX", "position": 0, "targetQubits": [1, 1]}]}
    )
    result = runner.invoke(app, ["run", path])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_template_command():
    result = runner.invoke(app, ["template", "bell-state"])
    assert result.exit_code == 0
    assert "Bell State Preparation" in result.output


def test_template_unknown():
    result = runner.invoke(app, ["template", "shor"])
    assert result.exit_code != 0


def test_run_measures_selected_qubits(tmp_path):
    path = write_circuit(
        tmp_path, {"numQubits": 2, "gates": [{"gateName": "X", "position": 0, "targetQubits": [1]}]}
    )
    result = runner.invoke(app, ["run", path, "--qubit", "0", "-q", "1", "--json"])
    assert result.exit_code == 0, result.output
    log = json.loads(result.output)["executionLog"]
    assert log[-2:] == [
        "Measured qubit 0: 0 (probability: 1.0000)",
        "Measured qubit 1: 1 (probability: 1.0000)",
    ]

    result = runner.invoke(app, ["run", path, "--qubit", "1"])
    assert result.exit_code == 0, result.output
    assert "Qubit measurements" in result.output
    assert "q1 → 1" in result.output


def test_run_rejects_out_of_range_qubit(tmp_path):
    path = write_circuit(tmp_path, {"numQubits": 2, "gates": []})
    result = runner.invoke(app, ["run", path, "--qubit", "5"])
    assert result.exit_code == 1
    assert "Error" in result.output
