"""
Review Pipeline

Pull request review flow:
1. Fetch the changed files and classify them (full analysis)
2. On failure, fall back to keyword heuristics over the PR text
3. If that fails too, post a static "analysis failed" comment
4. Create or update the bot comment
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .formatting.report import ReportRenderer
from .github.comments import CommentResult, PRCommentManager
from .models.analysis import AggregateReport
from .models.webhook import PullRequestData, PullRequestEventPayload, PullRequestIdentity
from .review.classifier import PullRequestFileClassifier
from .review.fallback import HeuristicFallbackAnalyzer
from .rules.loader import RuleLoader, detect_project_type_from_names


logger = logging.getLogger(__name__)


@dataclass
class PipelineOutcome:
    """Result of one pipeline run."""
    pr: PullRequestIdentity
    mode: str  # 'full', 'fallback', 'failed'
    comment: CommentResult
    report: Optional[AggregateReport] = None
    files_analyzed: int = 0

    def __post_init__(self):
        """데이터 검증"""
        if self.mode not in {'full', 'fallback', 'failed'}:
            raise ValueError(f"Invalid mode: {self.mode}")


class ReviewPipeline:
    """
    Wires file retrieval, classification, rendering and commenting.

    Holds no per-PR state; one instance serves every delivery.
    """

    def __init__(
        self,
        github_client,
        comment_manager: Optional[PRCommentManager] = None,
        rule_loader: Optional[RuleLoader] = None,
        classifier: Optional[PullRequestFileClassifier] = None,
        fallback_analyzer: Optional[HeuristicFallbackAnalyzer] = None,
        renderer: Optional[ReportRenderer] = None,
    ):
        self.github_client = github_client
        self.comment_manager = comment_manager or PRCommentManager(github_client)
        self.rule_loader = rule_loader or RuleLoader()
        self.classifier = classifier or PullRequestFileClassifier()
        self.fallback_analyzer = fallback_analyzer or HeuristicFallbackAnalyzer()
        self.renderer = renderer or ReportRenderer()

    def handle_pull_request(self, payload: PullRequestEventPayload) -> PipelineOutcome:
        """
        Review a pull request from a webhook payload.

        Args:
            payload: Validated pull_request event payload

        Returns:
            PipelineOutcome

        Raises:
            GitHubAPIError: If the comment cannot be written
        """
        pr = payload.identity
        pull_request = payload.pull_request
        logger.info(f"Analyzing PR {pr.key}")

        try:
            report, files = self.analyze_files(pr)
            body = self.renderer.render_pull_request_report(report, pull_request, files)
            mode = 'full'
        except Exception as e:
            logger.error(f"Full analysis failed for {pr.key}, using fallback: {e}")
            files = []
            report, body, mode = self._fallback(pr, pull_request, e)

        comment = self.comment_manager.upsert_comment(pr, body)
        logger.info(f"Review for {pr.key} posted ({mode}, comment {comment.action})")

        return PipelineOutcome(
            pr=pr,
            mode=mode,
            comment=comment,
            report=report,
            files_analyzed=len(files),
        )

    def analyze_files(self, pr: PullRequestIdentity) -> Tuple[AggregateReport, List[Dict]]:
        """
        Full analysis from the PR's changed-file list.

        Raises:
            GitHubAPIError: If the files cannot be fetched
        """
        files = self.github_client.get_pull_request_files(pr.owner, pr.repo, pr.number)
        logger.info(f"PR {pr.key} contains {len(files)} files")

        top_level = [f.get('filename', '') for f in files if '/' not in f.get('filename', '')]
        project_type = detect_project_type_from_names(top_level)
        rules = self.rule_loader.load_rules(project_type)

        report = self.classifier.classify(files, rules, project_type, pr.full_name)
        return report, files

    def _fallback(
        self,
        pr: PullRequestIdentity,
        pull_request: PullRequestData,
        error: Exception,
    ) -> Tuple[Optional[AggregateReport], str, str]:
        try:
            report = self.fallback_analyzer.analyze(pull_request.title, pull_request.body, pr.full_name)
            return report, self.renderer.render_fallback_report(report, pull_request), 'fallback'
        except Exception as fallback_error:
            logger.exception(f"Fallback analysis failed for {pr.key}: {fallback_error}")
            error_text = f"{error}\n{fallback_error}"
            return None, self.renderer.render_failure_report(error_text), 'failed'

    def analyze_pull_request(self, owner: str, repo: str, pr_number: int) -> Dict[str, Any]:
        """
        Manual review of a pull request (no fallback).

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            Dict with success flag, analysis and file count
        """
        pr = PullRequestIdentity(owner=owner, repo=repo, number=pr_number)
        logger.info(f"Starting manual analysis: {pr.key}")

        pr_data = self.github_client.get_pull_request(owner, repo, pr_number)
        pull_request = PullRequestData.model_validate(pr_data)

        report, files = self.analyze_files(pr)
        body = self.renderer.render_pull_request_report(report, pull_request, files)
        comment = self.comment_manager.upsert_comment(pr, body)

        return {
            'success': True,
            'pr': pr.key,
            'analysis': report.to_dict(),
            'filesAnalyzed': len(files),
            'comment': {'id': comment.comment_id, 'action': comment.action},
        }
