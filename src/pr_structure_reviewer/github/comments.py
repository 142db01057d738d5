"""
PR Comment Manager

Keeps a single bot-owned comment per pull request, created on the first
run and edited in place afterwards.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Optional

from ..models.webhook import PullRequestIdentity


logger = logging.getLogger(__name__)

BOT_MARKER = "<!-- pr-structure-reviewer -->"
LOCK_STRIPES = 64


@dataclass(frozen=True)
class CommentResult:
    """Upsert 결과"""
    comment_id: int
    action: str  # 'created', 'updated'
    url: Optional[str] = None

    def __post_init__(self):
        """데이터 검증"""
        if self.action not in {'created', 'updated'}:
            raise ValueError(f"Invalid action: {self.action}")


class PRCommentManager:
    """
    Creates or updates the bot comment on a pull request.

    Upserts for the same pull request are serialized by one of a fixed set
    of striped locks, so concurrent deliveries inside one process cannot
    both create a comment. Separate processes can still race.
    """

    def __init__(self, client, marker: str = BOT_MARKER, lock_stripes: int = LOCK_STRIPES):
        """
        Initialize comment manager.

        Args:
            client: GitHub client (list/create/update issue comments)
            marker: Leading marker identifying bot comments
            lock_stripes: Number of locks shared by all pull requests
        """
        self.client = client
        self.marker = marker
        self._locks = [threading.Lock() for _ in range(max(1, lock_stripes))]

    def _lock_for(self, pr: PullRequestIdentity) -> threading.Lock:
        return self._locks[hash(pr.key) % len(self._locks)]

    def with_marker(self, body: str) -> str:
        if body.startswith(self.marker):
            return body
        return f"{self.marker}\n{body}"

    def find_bot_comment(self, pr: PullRequestIdentity) -> Optional[Dict]:
        """First comment whose body starts with the marker, if any."""
        comments = self.client.list_issue_comments(pr.owner, pr.repo, pr.number)
        for comment in comments:
            if (comment.get('body') or '').startswith(self.marker):
                return comment
        return None

    def upsert_comment(self, pr: PullRequestIdentity, body: str) -> CommentResult:
        """
        Create the bot comment or update the existing one.

        Args:
            pr: Pull request to comment on
            body: Comment body (the marker is prepended when missing)

        Returns:
            CommentResult describing what was written

        Raises:
            GitHubAPIError: If listing or writing comments fails
        """
        full_body = self.with_marker(body)

        with self._lock_for(pr):
            try:
                existing = self.find_bot_comment(pr)

                if existing:
                    comment = self.client.update_issue_comment(pr.owner, pr.repo, existing['id'], full_body)
                    logger.info(f"Updated existing comment {existing['id']} on {pr.key}")
                    return CommentResult(existing['id'], 'updated', comment.get('html_url'))

                comment = self.client.create_issue_comment(pr.owner, pr.repo, pr.number, full_body)
                logger.info(f"Created new comment {comment.get('id')} on {pr.key}")
                return CommentResult(comment['id'], 'created', comment.get('html_url'))

            except Exception as e:
                logger.error(f"Failed to comment on {pr.key}: {e}")
                raise
