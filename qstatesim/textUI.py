# qstatesim/textUI.py
from __future__ import annotations

from typing import Iterable, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from qstatesim.gates import QuantumGate
from qstatesim.simulator import MeasurementResult, QuantumSimulator, SimulationResult
from qstatesim.templates import AlgorithmTemplate

console = Console()


# ---------- Coloring helper for probabilities ----------
def prob_style(p: float) -> str:
    v = min(max(p, 0.0), 1.0)
    r = int(255 * (1 - v))
    g = int(255 * v)
    return f"rgb({r},{g},0)"


def _bar(p: float, width: int = 24) -> Text:
    filled = int(round(p * width))
    return Text("█" * filled + "·" * (width - filled), style=prob_style(p))


def render_gates(gates: Iterable[QuantumGate]) -> None:
    table = Table(title="Gate catalog", header_style="bold cyan")
    table.add_column("Symbol", justify="center")
    table.add_column("Name")
    table.add_column("Qubits", justify="right")
    for g in gates:
        table.add_row(g.symbol, g.name, str(g.qubits))
    console.print(table)


def render_templates(templates: Sequence[AlgorithmTemplate]) -> None:
    table = Table(title="Algorithm templates", header_style="bold cyan")
    table.add_column("Id")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Difficulty")
    table.add_column("Qubits", justify="right")
    for t in templates:
        table.add_row(t.id, t.name, t.category.value, t.difficulty.value, str(t.qubits_required))
    console.print(table)


def render_result(result: SimulationResult, sim: QuantumSimulator | None = None, prec: int = 4) -> None:
    """Print the final state, a probability bar chart and the execution log."""
    console.print(f"[bold magenta]|ψ⟩ =[/bold magenta] {result.final_state.to_string(prec)}\n")

    table = Table(show_header=True, header_style="bold cyan", box=None, padding=(0, 1))
    table.add_column("State", justify="right")
    table.add_column("P", justify="right")
    table.add_column("")
    for entry in result.probability_table():
        table.add_row(f"|{entry.state}⟩", f"{entry.probability:.{prec}f}", _bar(entry.probability))
    console.print(table)

    if sim is not None:
        console.print()
        qtable = Table(show_header=True, header_style="bold cyan", box=None, padding=(0, 1))
        qtable.add_column("Qubit", justify="right")
        qtable.add_column("P(0)", justify="right")
        qtable.add_column("P(1)", justify="right")
        qtable.add_column("⟨Z⟩", justify="right")
        for q in sim.get_qubit_probabilities():
            qtable.add_row(f"q{q.qubit}", f"{q.prob0:.{prec}f}", f"{q.prob1:.{prec}f}", f"{q.prob0 - q.prob1:+.{prec}f}")
        console.print(qtable)

    console.print("\n[bold]Execution log[/bold]")
    for i, line in enumerate(result.execution_log):
        style = "red" if line.startswith("Error") else ""
        console.print(Text(f"{i:3d}  {line}", style=style))


def render_measurements(measurements: Sequence[MeasurementResult]) -> None:
    for m in measurements:
        console.print(f"[bold]q{m.qubit_index}[/bold] → {m.result}  (p = {m.probability:.4f})")
