"""
Shared fixtures for structure reviewer tests.
"""

import itertools
import json
import threading
from typing import Dict, List, Optional

import pytest

from pr_structure_reviewer.github.client import GitHubAPIError


class FakeGitHubClient:
    """In-memory stand-in for GitHubClient (issue comments and PR files)."""

    def __init__(self, files: Optional[List[Dict]] = None, pull_request: Optional[Dict] = None):
        self.files = files if files is not None else []
        self.pull_request = pull_request
        self.comments: Dict[str, List[Dict]] = {}
        self.files_error: Optional[Exception] = None
        self.create_error: Optional[Exception] = None
        self.token = "test-token"
        self.create_calls = 0
        self.update_calls = 0
        self._ids = itertools.count(1000)
        self._lock = threading.Lock()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def _key(self, owner, repo, number):
        return f"{owner}/{repo}#{number}"

    def get_pull_request(self, owner, repo, pr_number):
        if self.pull_request is None:
            raise GitHubAPIError("GitHub API error: 404 - Not Found", status_code=404)
        return self.pull_request

    def get_pull_request_files(self, owner, repo, pr_number):
        if self.files_error is not None:
            raise self.files_error
        return list(self.files)

    def list_issue_comments(self, owner, repo, issue_number):
        with self._lock:
            return [dict(c) for c in self.comments.get(self._key(owner, repo, issue_number), [])]

    def create_issue_comment(self, owner, repo, issue_number, body):
        if self.create_error is not None:
            raise self.create_error
        with self._lock:
            self.create_calls += 1
            comment = {'id': next(self._ids), 'body': body, 'html_url': 'https://github.com/c'}
            self.comments.setdefault(self._key(owner, repo, issue_number), []).append(comment)
            return dict(comment)

    def update_issue_comment(self, owner, repo, comment_id, body):
        with self._lock:
            self.update_calls += 1
            for comments in self.comments.values():
                for comment in comments:
                    if comment['id'] == comment_id:
                        comment['body'] = body
                        return dict(comment)
        raise GitHubAPIError("GitHub API error: 404 - Not Found", status_code=404)

    def bodies(self, owner="octo", repo="app", number=7) -> List[str]:
        return [c['body'] for c in self.comments.get(self._key(owner, repo, number), [])]


def make_pr_event(
    action: str = "opened",
    number: int = 7,
    title: str = "Add user service",
    body: Optional[str] = None,
    owner: str = "octo",
    repo: str = "app",
    sha: str = "abcdef1234567890",
) -> Dict:
    """Minimal pull_request webhook payload."""
    return {
        'action': action,
        'pull_request': {
            'number': number,
            'title': title,
            'body': body,
            'head': {'sha': sha},
        },
        'repository': {
            'name': repo,
            'full_name': f"{owner}/{repo}",
            'owner': {'login': owner},
        },
    }


def encode(payload) -> bytes:
    return json.dumps(payload).encode('utf-8')


@pytest.fixture
def fake_github():
    return FakeGitHubClient()


@pytest.fixture
def project_dir(tmp_path):
    """Empty project directory."""
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def rules_dir(tmp_path):
    """Writable rules directory with a general rule file."""
    directory = tmp_path / "rules"
    directory.mkdir()
    (directory / "general-rules.json").write_text(json.dumps({
        "general": {
            "requiredFiles": ["README.md"],
            "prohibitedFiles": [".env"],
            "prohibitedFolders": ["node_modules", ".venv"],
        }
    }))
    return directory
