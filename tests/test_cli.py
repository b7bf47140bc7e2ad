from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from gotestreport.cli import run_cli

FIXTURE = Path(__file__).parent / "fixtures" / "gotestoutput.txt"
MODULE = "github.com/robherley/go-test-example"


def _write_gomod(directory: Path) -> Path:
    (directory / "go.mod").write_text(f"module {MODULE}\n\ngo 1.18\n", encoding="utf-8")
    return directory


def test_summary_prints_markdown(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    code = run_cli(
        [
            "summary",
            "--from-json-file",
            str(FIXTURE),
            "--module-directory",
            str(_write_gomod(tmp_path)),
        ]
    )
    out = capsys.readouterr().out

    assert code == 0
    assert out.startswith("## 📝 Test results")
    assert f"<h3><code>{MODULE}</code></h3>" in out
    assert "8 tests (6 passed, 1 failed, 1 skipped)" in out


def test_summary_appends_to_summary_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    summary_file = tmp_path / "summary.md"

    code = run_cli(
        [
            "summary",
            "--from-json-file",
            str(FIXTURE),
            "--summary-file",
            str(summary_file),
            "--omit",
            "pie",
            "stderr",
        ]
    )

    assert code == 0
    assert capsys.readouterr().out == ""
    text = summary_file.read_text(encoding="utf-8")
    assert "## 📝 Test results" in text
    assert "mermaid" not in text


def test_summary_uses_step_summary_env(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    summary_file = tmp_path / "step-summary.md"
    monkeypatch.setenv("GITHUB_STEP_SUMMARY", str(summary_file))
    monkeypatch.setenv("INPUT_FROMJSONFILE", str(FIXTURE))
    monkeypatch.setenv("INPUT_OMIT", "pkg-output")

    code = run_cli(["summary"])

    assert code == 0
    text = summary_file.read_text(encoding="utf-8")
    assert "🧪 Tests" in text
    assert "🖨️ Output" not in text


def test_summary_reads_config_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    stderr_file = tmp_path / "stderr.txt"
    stderr_file.write_text("go: warning from the toolchain", encoding="utf-8")
    cfg = tmp_path / "gotestreport.json"
    cfg.write_text(
        json.dumps(
            {
                "from_json_file": str(FIXTURE),
                "stderr_file": str(stderr_file),
                "omit": ["successful"],
            }
        ),
        encoding="utf-8",
    )

    code = run_cli(["--config", str(cfg), "summary"])
    out = capsys.readouterr().out

    assert code == 0
    assert "go: warning from the toolchain" in out
    assert f"{MODULE}/fail" in out
    assert f"{MODULE}/success" not in out


def test_summary_reads_stdin(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    stream = "\n".join(
        [
            '{"Action":"pass","Package":"p","Test":"T"}',
            '{"Action":"fail","Package":"p","Test":"T/S1"}',
            '{"Action":"pass","Package":"p"}',
        ]
    )
    monkeypatch.setattr("sys.stdin", io.StringIO(stream))

    code = run_cli(["summary", "--from-json-file", "-"])
    out = capsys.readouterr().out

    assert code == 0
    assert "2 tests (1 passed, 1 failed)" in out
    assert "<code>T/S1</code>" in out


def test_undecodable_stderr_bytes_are_replaced(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    stderr_file = tmp_path / "stderr.txt"
    stderr_file.write_bytes(b"# pkg\n\xff\xfe bad bytes\n")

    code = run_cli(
        [
            "summary",
            "--from-json-file",
            str(FIXTURE),
            "--stderr-file",
            str(stderr_file),
        ]
    )
    out = capsys.readouterr().out

    assert code == 0
    assert "\ufffd\ufffd bad bytes" in out


def test_undecodable_event_bytes_do_not_drop_valid_lines(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    stream = tmp_path / "events.jsonl"
    stream.write_bytes(
        b'{"Action":"output","Package":"p","Output":"\xff\xfe"}\n'
        b'{"Action":"pass","Package":"p","Test":"T"}\n'
        b'{"Action":"pass","Package":"p"}\n'
    )

    code = run_cli(["packages", "--from-json-file", str(stream)])

    assert code == 0
    assert capsys.readouterr().out.splitlines()[0] == (
        "PASS p, 1 passed, 0 failed, 0 skipped, 0ms"
    )


def test_undecodable_stdin_returns_2(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    stdin = io.TextIOWrapper(io.BytesIO(b"\xff\xfe\n"), encoding="utf-8")
    monkeypatch.setattr("sys.stdin", stdin)

    code = run_cli(["summary"])

    assert code == 2
    assert capsys.readouterr().err != ""


def test_summary_with_nothing_to_render_prints_nothing(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(""))

    code = run_cli(["summary"])

    assert code == 0
    assert capsys.readouterr().out == ""


def test_packages_lists_results_and_fails(capsys: pytest.CaptureFixture[str]) -> None:
    code = run_cli(["packages", "--from-json-file", str(FIXTURE)])
    out = capsys.readouterr().out.splitlines()

    assert code == 1
    assert out == [
        f"PASS {MODULE}/cached, 1 passed, 0 failed, 0 skipped, 0ms",
        f"FAIL {MODULE}/fail, 1 passed, 1 failed, 0 skipped, 215ms",
        f"SKIP {MODULE}/notests, 0 passed, 0 failed, 0 skipped, 0ms",
        f"PASS {MODULE}/skip, 0 passed, 0 failed, 1 skipped, 101ms",
        f"PASS {MODULE}/success, 4 passed, 0 failed, 0 skipped, 123ms",
        "TOTAL 8 tests, 6 passed, 1 failed, 1 skipped",
    ]


def test_packages_returns_0_without_failures(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    stream = tmp_path / "ok.jsonl"
    stream.write_text(
        '{"Action":"pass","Package":"p","Elapsed":0.5}\n', encoding="utf-8"
    )

    code = run_cli(["packages", "--from-json-file", str(stream)])

    assert code == 0
    first = capsys.readouterr().out.splitlines()[0]
    assert first == "PASS p, 0 passed, 0 failed, 0 skipped, 500ms"


def test_missing_input_file_returns_2(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    code = run_cli(["packages", "--from-json-file", str(tmp_path / "missing.jsonl")])
    captured = capsys.readouterr()

    assert code == 2
    assert captured.err != ""


def test_invalid_config_path_returns_2(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    code = run_cli(["--config", str(tmp_path / "missing.yaml"), "summary"])
    captured = capsys.readouterr()

    assert code == 2
    assert captured.err != ""


def test_invalid_env_boolean_returns_2(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("INPUT_OMITPIE", "maybe")

    code = run_cli(["summary", "--from-json-file", str(FIXTURE)])

    assert code == 2
    assert "INPUT_OMITPIE" in capsys.readouterr().err


def test_unknown_omit_option_is_rejected_by_parser() -> None:
    with pytest.raises(SystemExit):
        run_cli(["summary", "--omit", "charts"])
