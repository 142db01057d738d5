"""
Structure Reviewer API

Main interface that receives webhook deliveries and manual analysis
requests and hands them to the review components.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError

from .config import AppConfig
from .dispatch import ReviewDispatcher
from .errors import ProjectPathNotFoundError, SignatureInvalidError
from .formatting.report import ReportRenderer
from .github.client import GitHubClient
from .github.comments import PRCommentManager
from .github.webhook import PULL_REQUEST_EVENT, WebhookGate
from .models.webhook import AnalyzeRequest, PullRequestEventPayload
from .pipeline import ReviewPipeline
from .review.orchestrator import ProjectReviewer
from .rules.loader import RuleLoader


logger = logging.getLogger(__name__)

Response = Tuple[int, Dict[str, Any]]


class StructureReviewerAPI:
    """
    Main Structure Reviewer API interface.

    Handles:
    1. Webhook deliveries: verify, filter, acknowledge, review in background
    2. Manual analysis of a pull request or a local directory
    3. Health reporting without exposing credentials
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        github_client: Optional[GitHubClient] = None,
        dispatcher: Optional[ReviewDispatcher] = None,
    ):
        """
        Initialize Structure Reviewer API.

        Args:
            config: Application configuration (default: from environment)
            github_client: GitHub client (default: built from config)
            dispatcher: Background job runner (default: built from config)
        """
        self.config = config or AppConfig.from_env()

        logger.info("Initializing Structure Reviewer API components...")

        self.github_client = github_client or GitHubClient(
            token=self.config.github.token,
            base_url=self.config.github.api_base_url,
            timeout_seconds=self.config.github.timeout_seconds,
        )
        self.gate = WebhookGate(
            secret=self.config.webhook.secret,
            relevant_actions=self.config.webhook.relevant_actions,
        )

        rule_loader = RuleLoader(self.config.rules.rules_dir)
        self.renderer = ReportRenderer()
        self.reviewer = ProjectReviewer(rule_loader=rule_loader)
        self.comment_manager = PRCommentManager(self.github_client)
        self.pipeline = ReviewPipeline(
            self.github_client,
            comment_manager=self.comment_manager,
            rule_loader=rule_loader,
            renderer=self.renderer,
        )
        self.dispatcher = dispatcher or ReviewDispatcher.from_config(self.config.dispatch)

        logger.info("Structure Reviewer API initialized successfully")

    def handle_webhook(
        self,
        event_type: Optional[str],
        raw_body: bytes,
        signature: Optional[str],
    ) -> Response:
        """
        Handle one webhook delivery.

        Args:
            event_type: X-GitHub-Event header value
            raw_body: Raw request body
            signature: X-Hub-Signature-256 header value

        Returns:
            (HTTP status, response body)
        """
        try:
            self.gate.authenticate(raw_body, signature)
        except SignatureInvalidError:
            return 401, {'error': 'Invalid signature'}

        logger.info(f"Webhook received: {event_type}")

        # Other event types may use form-encoded bodies, so they are not decoded
        if not self.gate.is_relevant_event(event_type):
            logger.info(f"Skipping event: {event_type}")
            return 200, {'message': 'Event ignored', 'event': event_type}

        try:
            event = self.gate.decode_event(event_type, raw_body, signature)
        except ValueError as e:
            logger.warning(f"Malformed webhook payload: {e}")
            return 400, {'error': 'Malformed payload'}

        if not self.gate.should_process(event.event_type, event.action):
            logger.info(f"Skipping event: {event_type} ({event.action})")
            return 200, {'message': 'Event ignored', 'event': event_type, 'action': event.action}

        try:
            payload = PullRequestEventPayload.model_validate(event.payload)
        except ValidationError as e:
            logger.warning(f"Invalid {PULL_REQUEST_EVENT} payload: {e}")
            return 400, {'error': 'Invalid pull_request payload'}

        self.dispatcher.submit(payload.identity.key, self.pipeline.handle_pull_request, payload)

        return 200, {'message': 'Webhook accepted', 'pr': payload.identity.key}

    def analyze(self, data: Any) -> Response:
        """
        Manual analysis endpoint logic.

        Accepts ``{owner, repo, pr_number}`` or ``{projectPath}``.
        """
        try:
            request = AnalyzeRequest.model_validate(data if isinstance(data, dict) else {})
        except ValidationError as e:
            messages = "; ".join(err.get('msg', '') for err in e.errors())
            return 400, {'error': messages or 'Invalid request'}

        try:
            if request.is_local:
                return 200, self.analyze_local(request.project_path, request.project_type)

            return 200, self.pipeline.analyze_pull_request(request.owner, request.repo, request.pr_number)

        except ProjectPathNotFoundError as e:
            return 404, {'error': str(e)}
        except Exception as e:
            logger.exception(f"Manual analysis error: {e}")
            return 500, {'error': str(e)}

    def analyze_local(self, project_path: str, project_type: Optional[str] = None) -> Dict[str, Any]:
        """Analyze a local directory and render its report."""
        report = self.reviewer.analyze_project(project_path, project_type)
        return {
            'success': True,
            'analysis': report.to_dict(),
            'report': self.renderer.generate_report(report),
        }

    def get_system_health(self) -> Dict[str, Any]:
        """Get system health status. Reports flags only, never credentials."""
        return {
            'status': 'ok',
            'service': 'pr-structure-reviewer',
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'webhook': {'signatureVerification': self.gate.verification_enabled},
            'github': {'authenticated': self.github_client.is_authenticated},
            'analyzers': len(self.reviewer.analyzers),
        }

    def cleanup_resources(self):
        """Stop background workers."""
        logger.info("Shutting down Structure Reviewer API")
        self.dispatcher.shutdown(wait=True)

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit with cleanup."""
        self.cleanup_resources()
