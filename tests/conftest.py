import os
from typing import Any

import pytest

from monkey.monkey_ast import Program
from monkey.monkey_parser import parse

# Monkeypatch coverage to bypass teardown crash in act/docker
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()

    import coverage.collector

    def safe_stop(self: Any) -> None:
        if self in getattr(self, "_collectors", []):
            self._collectors.remove(self)

    coverage.collector.Collector.stop = safe_stop


@pytest.fixture
def parse_ok() -> Any:
    """Parses source and fails the test if any diagnostic was recorded."""

    def _parse(source: str) -> Program:
        program, diagnostics = parse(source)
        assert diagnostics == [], f"parser had {len(diagnostics)} errors: {diagnostics}"
        return program

    return _parse
