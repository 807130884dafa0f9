import pytest

from midval.config import ParserConfig
from midval.peg import PegProgram, PegRunner


@pytest.fixture
def runner_for():
    """Build a runner for a grammar written in PEG notation."""
    def _make(src: str, **config) -> PegRunner:
        return PegRunner(PegProgram.from_source(src), ParserConfig(**config))
    return _make
