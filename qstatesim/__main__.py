# qstatesim/__main__.py
from __future__ import annotations

import json
from pathlib import Path
from typing import NoReturn

import numpy as np
import typer
import uvicorn
from pydantic import ValidationError

from qstatesim.circuit import CircuitExport
from qstatesim.errors import QuantumError
from qstatesim.gates import AVAILABLE_GATES
from qstatesim.logging_config import setup_logging
from qstatesim.settings import get_settings
from qstatesim.simulator import QuantumSimulator
from qstatesim.templates import TEMPLATES, get_template
from qstatesim.textUI import console, render_gates, render_measurements, render_result, render_templates

# Initialize logging once (uvicorn still prints its own access logs)
setup_logging()

app = typer.Typer(help="Quantum state-vector simulator CLI")


def _rng(seed: int | None):
    chosen = seed if seed is not None else get_settings().SEED
    return np.random.default_rng(chosen)


def _fail(err: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {err}")
    raise typer.Exit(code=1)


@app.command()
def gates():
    """List the built-in gate catalog."""
    render_gates(AVAILABLE_GATES)


@app.command()
def templates():
    """List the algorithm templates."""
    render_templates(TEMPLATES)


@app.command()
def run(
    circuit: Path = typer.Argument(..., exists=True, dir_okay=False, help="Circuit export JSON file"),
    qubit: list[int] | None = typer.Option(None, "--qubit", "-q", help="Measure this qubit after the circuit (repeatable)"),
    measure: bool = typer.Option(False, help="Measure every qubit after the circuit"),
    seed: int | None = typer.Option(None, help="Seed for measurement sampling"),
    as_json: bool = typer.Option(False, "--json", help="Print the simulation data as JSON"),
):
    """
    Execute a circuit saved in the export format
    {"numQubits": n, "gates": [{"gateName", "position", "targetQubits"}]}.
    """
    try:
        export = CircuitExport.from_json(circuit.read_text(encoding="utf-8"))
        sim = QuantumSimulator(export.num_qubits, rng=_rng(seed))
        result = sim.execute_circuit(export.to_elements())
        measurements = [sim.measure_qubit(q) for q in qubit or []]
        outcome = sim.measure_all() if measure else None
    except (QuantumError, ValidationError) as e:
        _fail(e)

    if as_json:
        typer.echo(json.dumps(sim.export_simulation_data(), ensure_ascii=False, indent=2))
        return

    render_result(result, sim)
    if measurements:
        console.print("\n[bold]Qubit measurements[/bold]")
        render_measurements(measurements)
    if outcome is not None:
        label = "".join(str(b) for b in outcome.results)
        console.print(f"\n[bold green]Measured:[/bold green] |{label}⟩")


@app.command()
def template(
    template_id: str = typer.Argument(..., help="Template id, see `templates`"),
    step: int | None = typer.Option(None, help="Stop after this step (0-based)"),
):
    """Run an algorithm template and show its final state."""
    try:
        tpl = get_template(template_id)
        circuit = tpl.full_circuit() if step is None else tpl.circuit_through(step)
    except (KeyError, IndexError) as e:
        raise typer.BadParameter(str(e.args[0]))

    sim = QuantumSimulator(tpl.qubits_required)
    console.print(f"[bold magenta]{tpl.name}[/bold magenta]: {tpl.description}\n")
    render_result(sim.execute_circuit(circuit), sim)


@app.command()
def webui(
    host: str | None = typer.Option(None, help="Bind host (default: settings.HOST)"),
    port: int | None = typer.Option(None, help="Port (default: settings.PORT)"),
    reload: bool = typer.Option(False, help="Auto-reload (default: False)"),
):
    """
    Run the HTTP API used by circuit-builder front ends.
    """
    settings = get_settings()
    uvicorn.run(
        "qstatesim.webapp:app",
        host=host or settings.HOST,
        port=port or settings.PORT,
        reload=reload,
    )


if __name__ == "__main__":
    app()
