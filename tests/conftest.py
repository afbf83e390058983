from pathlib import Path

import pytest

from rox.interpreter import Interpreter, run_source

EXAMPLES_DIR = Path(__file__).resolve().parent.parent / 'examples'


@pytest.fixture
def examples_dir() -> Path:
    return EXAMPLES_DIR


@pytest.fixture
def run(capsys):
    """Run a source buffer on a fresh interpreter and return its printed lines."""
    def _run(source: str):
        interp = Interpreter()
        run_source(source, interp)
        return capsys.readouterr().out.splitlines()
    return _run
