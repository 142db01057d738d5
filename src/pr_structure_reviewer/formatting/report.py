"""
Report Renderer

Renders aggregate reports as markdown for the console and for GitHub PR
comments. Rendering is pure: the same report always gives the same text.
"""

import logging
from pathlib import PurePath
from typing import Dict, List, Optional, Sequence

from ..models.analysis import AggregateReport, Finding, Severity
from ..models.webhook import PullRequestData


logger = logging.getLogger(__name__)

REPORT_HEADER = "🤖 **Code Structure Review**"

FAILED_MARKER = "❌"
WARNING_MARKER = "⚠️"
PASSED_MARKER = "✅"
SUGGESTION_MARKER = "💡"

GENERAL_RECOMMENDATIONS = [
    "Keep your .gitignore file updated",
    "Never commit environment files (.env)",
    "Exclude dependency folders (node_modules, .venv)",
    "Use .env.example to document required environment variables",
]

FALLBACK_BANNER = (
    "> ℹ️ **Limited analysis**: the changed files of this pull request could not be read, "
    "so these results are keyword heuristics from the title and description only. "
    "Check the GitHub App permissions to enable the full file analysis."
)

MANUAL_CHECKLIST = [
    "**Files that should NOT be in the repository:**",
    "- [ ] `.env`, `.env.local`, `.env.production`",
    "- [ ] `node_modules/` folder",
    "- [ ] `.venv/` or `venv/` folders (Python)",
    "- [ ] IDE settings (`.vscode/`, `.idea/`)",
    "",
    "**Recommended structure:**",
    "- [ ] `.gitignore` present and configured",
    "- [ ] Code organized inside `src/`",
    "- [ ] `README.md` with documentation",
    "- [ ] `.env.example` documenting required variables",
]

FOOTER = "🤖 *Automated review by PR Structure Reviewer*"
MAX_LISTED_FILES = 5
MAX_COMMENT_LENGTH = 65536  # GitHub's comment limit


class ReportRenderer:
    """
    Formats AggregateReports.

    Section order is fixed: issues, warnings, good practices, then general
    recommendations when anything failed or warned.
    """

    def generate_report(self, report: AggregateReport) -> str:
        """
        Render a local project report.

        Args:
            report: Report to render

        Returns:
            Markdown text
        """
        lines = [
            REPORT_HEADER,
            "",
            f"📁 Project: {PurePath(report.project_path).name or report.project_path}",
            f"🔧 Type: {report.project_type}",
            f"📊 Summary: {self._summary_text(report)}",
            "",
        ]
        lines.extend(self._render_sections(report))
        return self._finish(lines)

    def render_pull_request_report(
        self,
        report: AggregateReport,
        pull_request: PullRequestData,
        files: Sequence[Dict],
    ) -> str:
        """Render a full pull request report with the commit footer."""
        lines = [
            REPORT_HEADER,
            "",
            f"📋 **PR:** {pull_request.title}",
            f"📁 **Files changed:** {len(files)}",
            f"🔧 **Project type:** {report.project_type}",
            f"📊 **Summary:** {self._summary_text(report)}",
            "",
        ]
        lines.extend(self._render_sections(report))

        names = [f.get('filename', '') for f in files][:MAX_LISTED_FILES]
        more = "..." if len(files) > MAX_LISTED_FILES else ""
        lines.extend([
            "---",
            FOOTER,
            f"🔄 Commit: `{pull_request.short_sha}`",
            f"📝 Files reviewed: {', '.join(names)}{more}",
        ])
        return self._finish(lines)

    def render_fallback_report(self, report: AggregateReport, pull_request: PullRequestData) -> str:
        """Render a heuristic report. Always carries the limited-analysis banner."""
        lines = [
            f"{REPORT_HEADER} (Limited Analysis)",
            "",
            f"📋 **PR:** {pull_request.title}",
            f"📊 **Heuristic summary:** {self._summary_text(report)}",
            "",
            FALLBACK_BANNER,
            "",
        ]
        lines.extend(self._render_sections(report))
        lines.append("## 📋 Manual Checklist")
        lines.append("")
        lines.extend(MANUAL_CHECKLIST)
        lines.extend([
            "",
            "---",
            FOOTER,
            f"🔄 Commit: `{pull_request.short_sha}`",
        ])
        return self._finish(lines)

    def render_failure_report(self, error_text: str) -> str:
        """
        Static comment for when every analysis path failed.

        The error text is included verbatim.
        """
        # TODO: redact error text for public repositories before posting
        lines = [
            REPORT_HEADER,
            "",
            f"{FAILED_MARKER} **Analysis Failed**",
            "",
            "```",
            error_text,
            "```",
            "",
            "---",
            "🔧 *This is likely a configuration issue. Please check the GitHub App permissions "
            "and the service logs.*",
        ]
        return self._finish(lines)

    def _summary_text(self, report: AggregateReport) -> str:
        summary = report.summary
        return f"{summary.passed} passed, {summary.failed} failed, {summary.warnings} warnings"

    def _render_sections(self, report: AggregateReport) -> List[str]:
        failed = report.all_findings(Severity.FAILED)
        warned = report.all_findings(Severity.WARNING)

        issues = []
        for result in report.errored_analyzers:
            issues.append(f"{FAILED_MARKER} **{result.analyzer}**: {result.error}")
        issues.extend(self._render_findings(FAILED_MARKER, failed))

        warnings = self._render_findings(WARNING_MARKER, warned)
        passed = self._render_findings(PASSED_MARKER, report.all_findings(Severity.PASSED), emphasize=False)

        lines = []
        if issues:
            lines.extend([f"## {FAILED_MARKER} Issues Found"] + issues + [""])
        if warnings:
            lines.extend([f"## {WARNING_MARKER} Warnings"] + warnings + [""])
        if passed:
            lines.extend([f"## {PASSED_MARKER} Good Practices Found"] + passed + [""])

        if failed or warned:
            lines.append("## 📚 General Recommendations")
            lines.extend(f"- {item}" for item in GENERAL_RECOMMENDATIONS)
            lines.append("")

        return lines

    def _render_findings(self, marker: str, findings: List[Finding], emphasize: bool = True) -> List[str]:
        lines = []
        for finding in findings:
            message = f"**{finding.message}**" if emphasize else finding.message
            lines.append(f"{marker} {message}")
            if finding.suggestion:
                lines.append(f"   {SUGGESTION_MARKER} *{finding.suggestion}*")
        return lines

    def _finish(self, lines: List[str]) -> str:
        text = "\n".join(lines).rstrip("\n") + "\n"
        if len(text) > MAX_COMMENT_LENGTH:
            logger.warning(f"Report truncated from {len(text)} characters")
            text = self._truncate(text)
        return text

    def _truncate(self, text: str, limit: Optional[int] = None) -> str:
        limit = limit or MAX_COMMENT_LENGTH
        truncate_at = limit - 200  # Leave room for truncation message
        truncated = text[:truncate_at]
        last_newline = truncated.rfind("\n")
        if last_newline > truncate_at - 500:
            truncated = truncated[:last_newline]
        return truncated + "\n\n---\n*⚠️ Report truncated due to length limit.*\n"
