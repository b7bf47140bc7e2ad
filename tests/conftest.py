from __future__ import annotations

from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _clean_action_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # CI runners export these, keep tests independent of the host
    for name in (
        "GITHUB_STEP_SUMMARY",
        "INPUT_MODULEDIRECTORY",
        "INPUT_FROMJSONFILE",
        "INPUT_STDERRFILE",
        "INPUT_OMIT",
        "INPUT_OMITUNTESTEDPACKAGES",
        "INPUT_OMITSUCCESSFULPACKAGES",
        "INPUT_OMITPIE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def gotest_stdout() -> str:
    return (FIXTURES / "gotestoutput.txt").read_text(encoding="utf-8")
