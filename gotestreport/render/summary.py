from __future__ import annotations

import html
import json
import sys
from pathlib import Path

from gotestreport.config import Inputs, OmitOption
from gotestreport.events import CONCLUSIONS
from gotestreport.logging import get_logger
from gotestreport.results import (
    PackageResult,
    Summary,
    effective_conclusion,
    sorted_subtests,
    sorted_tests,
)

logger = get_logger(__name__)

HEADERS = ("📦 Package", "🟢 Passed", "🔴 Failed", "🟡 Skipped", "⏳ Duration")

_EMOJI = {"pass": "🟢", "fail": "🔴", "skip": "🟡"}

_PIE_KEYS = {
    "pass": ("Passed", "#2da44e"),
    "fail": ("Failed", "#cf222e"),
    "skip": ("Skipped", "#dbab0a"),
}


def emoji_for(action: str | None) -> str:
    return _EMOJI.get(action or "", "❓")


class SummaryRenderer:
    """Render aggregated results as a GitHub job summary (Markdown with inline HTML)."""

    def __init__(
        self,
        summary: Summary,
        inputs: Inputs | None = None,
        module_name: str | None = None,
        stderr: str = "",
    ):
        self.summary = summary
        self.inputs = inputs or Inputs()
        self.module_name = module_name
        self.stderr = stderr

    def packages_to_render(self) -> list[PackageResult]:
        results = []
        for result in self.summary:
            if self.inputs.omits(OmitOption.SKIPPED) and not result.has_tests():
                continue
            if self.inputs.omits(OmitOption.SUCCESSFUL) and _is_successful(result):
                continue
            results.append(result)
        return results

    def render(self) -> str:
        results = self.packages_to_render()
        if not results:
            logger.debug("no packages to render, skipping summary")
            return ""

        rows = [_header_row()]
        for result in results:
            rows.extend(self.render_package_rows(result))

        parts = [
            "## 📝 Test results\n",
            '<div align="center">',
            f"<h3><code>{html.escape(self.module_name or 'go test')}</code></h3>",
            self.render_summary_text(),
            self.render_pie(),
            "<table>" + "".join(rows) + "</table>",
            "</div>",
            self.render_stderr(),
        ]
        return "\n".join(part for part in parts if part) + "\n"

    def render_summary_text(self) -> str:
        """Totals line, e.g. ``4 tests (2 passed, 1 failed, 1 skipped)``."""
        totals = self.summary.totals
        count = self.summary.test_count()

        text = f"{count} test{'' if count == 1 else 's'}"

        parts = [
            f"{totals[c]} {'skipp' if c == 'skip' else c}ed"
            for c in CONCLUSIONS
            if totals[c]
        ]
        if parts:
            text += f" ({', '.join(parts)})"

        return text

    def render_package_rows(self, result: PackageResult) -> list[str]:
        event = result.package_event

        name = result.package
        if name == self.module_name:
            name += " (main)"
        if result.cached:
            name += " (cached)"

        duration = f"{(event.elapsed or 0) * 1000:.0f}ms"
        cells = [
            f"{emoji_for(event.action)} <code>{html.escape(name)}</code>",
            str(result.conclusions["pass"]),
            str(result.conclusions["fail"]),
            str(result.conclusions["skip"]),
            duration,
        ]
        rows = ["<tr>" + "".join(f"<td>{c}</td>" for c in cells) + "</tr>"]

        details = ""
        if not self.inputs.omits(OmitOption.PACKAGE_TESTS):
            details += (
                f"<details><summary>🧪 Tests</summary>"
                f"{self.render_test_list(result) or '(none)'}</details>"
            )
        if not self.inputs.omits(OmitOption.PACKAGE_OUTPUT):
            output = html.escape(result.output()) or "(none)"
            details += (
                f"<details><summary>🖨️ Output</summary>"
                f"<pre><code>{output}</code></pre></details>"
            )
        if details:
            rows.append(f'<tr><td colspan="{len(HEADERS)}">{details}</td></tr>')

        return rows

    def render_test_list(self, result: PackageResult) -> str:
        items = []
        for name, test in sorted_tests(result):
            item = _list_item(effective_conclusion(test), name)
            if test.subtests:
                item += "<ul>"
                for sub_name, sub in sorted_subtests(test):
                    item += _list_item(sub.conclusion, sub_name)
                item += "</ul>"
            items.append(item)

        if not items:
            return ""
        return "<ul>" + "".join(items) + "</ul>"

    def render_pie(self) -> str:
        """Mermaid pie chart of the non-zero totals."""
        if self.inputs.omits(OmitOption.PIE):
            return "<br><br>"

        config: dict = {
            "theme": "base",
            "themeVariables": {
                "fontFamily": "monospace",
                "pieSectionTextSize": "24px",
                "darkMode": True,
            },
        }

        data = ""
        index = 1
        for conclusion in CONCLUSIONS:
            count = self.summary.totals[conclusion]
            if not count:
                continue
            word, color = _PIE_KEYS[conclusion]
            config["themeVariables"][f"pie{index}"] = color
            index += 1
            data += f'"{word}" : {count}\n'

        return (
            "\n```mermaid\n"
            f"%%{{init: {json.dumps(config)}}}%%\n"
            "pie showData\n"
            f"{data}"
            "```\n"
        )

    def render_stderr(self) -> str:
        if not self.stderr or self.inputs.omits(OmitOption.STDERR):
            return ""

        return (
            "<details>\n"
            "<summary>🚨 Standard Error Output</summary>\n\n"
            f"```\n{self.stderr}\n```\n\n"
            "</details>"
        )


def write_summary(markdown: str, path: str | Path | None = None) -> None:
    """Append the summary to ``path`` (a job summary file) or print it."""
    if path is None:
        sys.stdout.write(markdown)
        return

    with Path(path).open("a", encoding="utf-8") as fh:
        fh.write(markdown)


def _header_row() -> str:
    return "<tr>" + "".join(f"<th>{h}</th>" for h in HEADERS) + "</tr>"


def _list_item(conclusion: str | None, name: str) -> str:
    return f"<li>{emoji_for(conclusion)}<code>{html.escape(name)}</code></li>"


def _is_successful(result: PackageResult) -> bool:
    return result.package_event.action != "fail" and result.only_successful_tests()
