# qstatesim/webapp.py
from __future__ import annotations

import logging
from typing import Optional

import numpy as np
from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from qstatesim import __version__
from qstatesim.circuit import CircuitExport
from qstatesim.errors import QuantumError
from qstatesim.gates import gate_catalog
from qstatesim.logging_config import setup_logging
from qstatesim.settings import get_settings
from qstatesim.simulator import QuantumSimulator
from qstatesim.templates import TEMPLATES

# --------- Logging ---------
setup_logging()
log = logging.getLogger("qstatesim.web")

# --------- Settings ---------
settings = get_settings()

# --------- App ---------
app = FastAPI(title="qstatesim", version=__version__)


@app.exception_handler(QuantumError)
async def quantum_error_handler(request: Request, exc: QuantumError) -> JSONResponse:
    log.info(f"Rejected {request.url.path}: {type(exc).__name__}: {exc}")
    return JSONResponse(status_code=400, content={"error": type(exc).__name__, "detail": str(exc)})


# --------- Helpers ---------
def _amplitude_pairs(sim: QuantumSimulator) -> list[list[float]]:
    return [[float(a.real), float(a.imag)] for a in sim.current_state.amplitudes]


# --------- Routes ---------
@app.get("/health")
def health() -> dict:
    return {"status": "ok", "version": __version__}


@app.get("/gates")
def gates() -> list[dict]:
    return gate_catalog()


@app.get("/templates")
def templates() -> list[dict]:
    return [t.summary() for t in TEMPLATES]


@app.post("/simulate")
def simulate(
    circuit: CircuitExport,
    measure: bool = Query(False, description="Measure every qubit after the circuit"),
    seed: Optional[int] = Query(None, description="Seed for measurement sampling"),
) -> dict:
    """
    Execute a circuit in the export format and return everything a front end
    renders: final state, probabilities, per-qubit marginals, Bloch vectors and
    the execution log.
    """
    rng = np.random.default_rng(seed if seed is not None else settings.SEED)
    sim = QuantumSimulator(circuit.num_qubits, rng=rng)
    result = sim.execute_circuit(circuit.to_elements())

    measured = None
    if measure:
        outcome = sim.measure_all()
        measured = outcome.results

    log.info(f"simulate n={circuit.num_qubits} gates={len(circuit.gates)} measure={measure}")
    return {
        "numQubits": sim.num_qubits,
        "finalState": sim.get_state_string(),
        "amplitudes": _amplitude_pairs(sim),
        "measurementProbabilities": [
            {"state": e.state, "probability": e.probability} for e in sim.get_measurement_probabilities()
        ],
        "qubitProbabilities": [q._asdict() for q in sim.get_qubit_probabilities()],
        "blochVectors": [list(sim.get_bloch_vector(q).as_tuple()) for q in range(sim.num_qubits)],
        "measured": measured,
        "executionLog": sim.execution_log,
        "steps": len(result.state_history),
    }
