"""
Unit tests for ReportRenderer.
"""

from datetime import datetime, timezone

from pr_structure_reviewer.formatting.report import (
    FALLBACK_BANNER,
    MAX_COMMENT_LENGTH,
    REPORT_HEADER,
    ReportRenderer,
)
from pr_structure_reviewer.models.analysis import AggregateReport, AnalysisResult
from pr_structure_reviewer.models.webhook import PullRequestData


FIXED_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def build_report(*results, project_path="/srv/demo-app", project_type="nodejs"):
    return AggregateReport.create(project_path, project_type, list(results), timestamp=FIXED_TIME)


def mixed_result():
    result = AnalysisResult(analyzer="Mixed")
    result.add_failed("env-file-committed", "Environment file found: .env", "Remove .env")
    result.add_warning("lockfile-recommended", "No lockfile found")
    result.add_passed("gitignore-exists", ".gitignore file found")
    return result


def pull_request():
    return PullRequestData.model_validate({
        'number': 7,
        'title': 'Add user service',
        'head': {'sha': 'abcdef1234567890'},
    })


class TestGenerateReport:
    """Test local report rendering."""

    def test_sections_in_order(self):
        text = ReportRenderer().generate_report(build_report(mixed_result()))

        issues = text.index("## ❌ Issues Found")
        warnings = text.index("## ⚠️ Warnings")
        passed = text.index("## ✅ Good Practices Found")
        recommendations = text.index("## 📚 General Recommendations")
        assert issues < warnings < passed < recommendations

    def test_header_and_summary(self):
        text = ReportRenderer().generate_report(build_report(mixed_result()))

        assert text.startswith(REPORT_HEADER)
        assert "📁 Project: demo-app" in text
        assert "🔧 Type: nodejs" in text
        assert "📊 Summary: 1 passed, 1 failed, 1 warnings" in text

    def test_suggestion_line(self):
        text = ReportRenderer().generate_report(build_report(mixed_result()))
        assert "❌ **Environment file found: .env**\n   💡 *Remove .env*" in text

    def test_clean_report_has_no_recommendations(self):
        result = AnalysisResult(analyzer="Clean")
        result.add_passed("ok", "Everything fine")

        text = ReportRenderer().generate_report(build_report(result))

        assert "Issues Found" not in text
        assert "Warnings" not in text
        assert "General Recommendations" not in text
        assert "✅ Everything fine" in text

    def test_errored_analyzer_listed_as_issue(self):
        text = ReportRenderer().generate_report(build_report(AnalysisResult.from_error("Broken", "kaboom")))

        assert "## ❌ Issues Found" in text
        assert "❌ **Broken**: kaboom" in text
        assert "General Recommendations" not in text

    def test_rendering_is_deterministic(self):
        report = build_report(mixed_result())
        renderer = ReportRenderer()
        assert renderer.generate_report(report) == renderer.generate_report(report)


class TestPullRequestReports:
    """Test PR comment rendering."""

    def test_full_report_footer(self):
        files = [{'filename': f"src/file{i}.js"} for i in range(7)]
        text = ReportRenderer().render_pull_request_report(build_report(mixed_result()), pull_request(), files)

        assert "📋 **PR:** Add user service" in text
        assert "📁 **Files changed:** 7" in text
        assert "🔄 Commit: `abcdef1`" in text
        assert "src/file4.js..." in text
        assert "src/file5.js" not in text

    def test_fallback_report_has_banner(self):
        result = AnalysisResult(analyzer="Heuristics")
        result.add_passed("testing-mentioned", "Tests are mentioned")

        text = ReportRenderer().render_fallback_report(build_report(result), pull_request())

        assert "(Limited Analysis)" in text.splitlines()[0]
        assert FALLBACK_BANNER in text
        assert "## 📋 Manual Checklist" in text

    def test_failure_report_contains_error(self):
        text = ReportRenderer().render_failure_report("404 Not Found\nboom")

        assert "**Analysis Failed**" in text
        assert "```\n404 Not Found\nboom\n```" in text


def test_long_report_truncated():
    result = AnalysisResult(analyzer="Noisy")
    for i in range(3000):
        result.add_warning(f"w{i}", f"Warning number {i} " + "x" * 20)

    text = ReportRenderer().generate_report(build_report(result))

    assert len(text) <= MAX_COMMENT_LENGTH
    assert "Report truncated" in text
