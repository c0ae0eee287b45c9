# qstatesim/cli.py
from qstatesim.__main__ import app as _typer_app
from qstatesim.logging_config import setup_logging


def main():
    """Console script entrypoint for the qstatesim CLI."""
    setup_logging()
    _typer_app()
