"""
Unit tests for PRCommentManager.
"""

import threading
import time

import pytest

from pr_structure_reviewer.github.client import GitHubAPIError
from pr_structure_reviewer.github.comments import BOT_MARKER, LOCK_STRIPES, CommentResult, PRCommentManager
from pr_structure_reviewer.models.webhook import PullRequestIdentity


PR = PullRequestIdentity("octo", "app", 7)


class TestPRCommentManager:
    """Test comment upsert behaviour."""

    def test_first_upsert_creates(self, fake_github):
        result = PRCommentManager(fake_github).upsert_comment(PR, "report v1")

        assert result.action == "created"
        assert fake_github.bodies() == [f"{BOT_MARKER}\nreport v1"]

    def test_second_upsert_updates_same_comment(self, fake_github):
        manager = PRCommentManager(fake_github)

        first = manager.upsert_comment(PR, "report v1")
        second = manager.upsert_comment(PR, "report v2")

        assert second == CommentResult(first.comment_id, "updated", "https://github.com/c")
        assert fake_github.bodies() == [f"{BOT_MARKER}\nreport v2"]

    def test_other_comments_are_untouched(self, fake_github):
        fake_github.create_issue_comment("octo", "app", 7, "LGTM, but mentions <!-- pr-structure-reviewer -->")

        PRCommentManager(fake_github).upsert_comment(PR, "report")

        bodies = fake_github.bodies()
        assert len(bodies) == 2
        assert bodies[0].startswith("LGTM")

    def test_marker_not_duplicated(self, fake_github):
        manager = PRCommentManager(fake_github)
        assert manager.with_marker(f"{BOT_MARKER}\nbody") == f"{BOT_MARKER}\nbody"

    def test_prs_are_independent(self, fake_github):
        manager = PRCommentManager(fake_github)
        manager.upsert_comment(PR, "a")
        manager.upsert_comment(PullRequestIdentity("octo", "app", 8), "b")

        assert fake_github.create_calls == 2

    def test_write_errors_propagate(self, fake_github):
        fake_github.create_error = GitHubAPIError("GitHub API error: 403 - Forbidden", status_code=403)

        with pytest.raises(GitHubAPIError):
            PRCommentManager(fake_github).upsert_comment(PR, "report")

    def test_lock_count_stays_fixed_across_many_prs(self, fake_github):
        manager = PRCommentManager(fake_github)

        for number in range(1, 501):
            manager.upsert_comment(PullRequestIdentity("octo", "app", number), "report")

        assert len(manager._locks) == LOCK_STRIPES
        assert manager._lock_for(PR) is manager._lock_for(PullRequestIdentity("octo", "app", 7))

    def test_single_stripe_serves_every_pr(self, fake_github):
        manager = PRCommentManager(fake_github, lock_stripes=1)

        manager.upsert_comment(PR, "report")
        result = manager.upsert_comment(PullRequestIdentity("octo", "app", 8), "report")

        assert result.action == "created"
        assert len(manager._locks) == 1

    def test_concurrent_upserts_leave_one_comment(self, fake_github):
        original_list = fake_github.list_issue_comments

        def slow_list(*args):
            comments = original_list(*args)
            time.sleep(0.01)
            return comments

        fake_github.list_issue_comments = slow_list
        manager = PRCommentManager(fake_github)

        threads = [
            threading.Thread(target=manager.upsert_comment, args=(PR, f"report {i}"))
            for i in range(8)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert fake_github.create_calls == 1
        assert fake_github.update_calls == 7
        assert len(fake_github.bodies()) == 1
