"""
GitHub API Client

REST access for the reviewer: pull request metadata, changed files and
issue comments, with rate limit tracking.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
PAGE_SIZE = 100
RATE_LIMIT_FLOOR = 10  # 남은 호출이 이 이하이면 리셋 전까지 요청 중단


class GitHubAPIError(Exception):
    """Non-success response or transport failure from the GitHub API."""
    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Optional[Dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data or {}


class RateLimitExceeded(GitHubAPIError):
    """Quota exhausted (or nearly so) until ``reset_time``."""
    def __init__(self, reset_time: datetime):
        super().__init__(f"Rate limit exceeded. Resets at {reset_time}", status_code=429)
        self.reset_time = reset_time


@dataclass
class RateLimitState:
    """Last quota reported by the X-RateLimit-* headers."""
    remaining: int = 5000
    reset_at: datetime = field(default_factory=datetime.now)

    def record(self, headers) -> None:
        if 'X-RateLimit-Remaining' in headers:
            self.remaining = int(headers['X-RateLimit-Remaining'])
        if 'X-RateLimit-Reset' in headers:
            self.reset_at = datetime.fromtimestamp(int(headers['X-RateLimit-Reset']))

    def ensure_available(self) -> None:
        """Raise instead of spending the last calls before the reset."""
        now = datetime.now()
        if self.remaining <= RATE_LIMIT_FLOOR and now < self.reset_at:
            seconds = (self.reset_at - now).total_seconds()
            logger.warning(f"Rate limit low ({self.remaining}), resets in {seconds:.1f}s")
            raise RateLimitExceeded(self.reset_at)


def _is_rate_limited(response: requests.Response) -> bool:
    if response.status_code == 429:
        return True
    return response.status_code == 403 and response.headers.get('X-RateLimit-Remaining') == '0'


def _json_object(response: requests.Response) -> Dict[str, Any]:
    """Response body as a dict, or {} when it is empty or not an object."""
    if not response.content:
        return {}
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


class GitHubClient:
    """
    Thin GitHub REST client.

    Reads are retried by the transport on 429/5xx. Writes (comment create
    and update) are sent once per call; retrying a whole review job is the
    dispatcher's concern.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = DEFAULT_API_URL,
        timeout_seconds: int = 30,
    ):
        """
        Initialize GitHub client.

        Args:
            token: Access token (anonymous requests when omitted)
            base_url: API root, for GitHub Enterprise
            timeout_seconds: Per-request timeout
        """
        self.token = token
        self.base_url = base_url.rstrip('/')
        self.timeout_seconds = timeout_seconds
        self.rate_limit = RateLimitState()
        self.session = self._build_session()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def _build_session(self) -> requests.Session:
        session = requests.Session()

        read_retries = Retry(
            total=3,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET", "HEAD"],
        )
        for prefix in ("https://", "http://"):
            session.mount(prefix, HTTPAdapter(max_retries=read_retries))

        session.headers['Accept'] = 'application/vnd.github.v3+json'
        session.headers['User-Agent'] = 'PR-Structure-Reviewer/1.0'
        if self.token:
            session.headers['Authorization'] = f'token {self.token}'

        return session

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        """
        Send one API request.

        Raises:
            RateLimitExceeded: Quota exhausted, before or after the call
            GitHubAPIError: Transport failure or non-2xx response
        """
        self.rate_limit.ensure_available()
        kwargs.setdefault('timeout', self.timeout_seconds)
        url = f"{self.base_url}/{path.lstrip('/')}"

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise GitHubAPIError(f"Request failed: {e}")

        self.rate_limit.record(response.headers)

        if _is_rate_limited(response):
            reset = int(response.headers.get('X-RateLimit-Reset', time.time() + 3600))
            raise RateLimitExceeded(datetime.fromtimestamp(reset))

        if not response.ok:
            details = _json_object(response)
            message = details.get('message', 'Unknown error')
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code} - {message}",
                status_code=response.status_code,
                response_data=details,
            )

        return response

    def _pages(self, path: str) -> Iterator[List[Dict]]:
        """Yield list pages until a short or empty page."""
        page = 1
        while True:
            items = self._request('GET', path, params={'page': page, 'per_page': PAGE_SIZE}).json()
            if not items:
                return
            yield items
            if len(items) < PAGE_SIZE:
                return
            page += 1

    def _list(self, path: str) -> List[Dict]:
        return [item for page in self._pages(path) for item in page]

    def get_pull_request(self, owner: str, repo: str, pr_number: int) -> Dict:
        """Pull request metadata (title, body, head sha, ...)."""
        logger.info(f"Fetching PR {owner}/{repo}#{pr_number}")
        return self._request('GET', f'/repos/{owner}/{repo}/pulls/{pr_number}').json()

    def get_pull_request_files(self, owner: str, repo: str, pr_number: int) -> List[Dict]:
        """
        Changed-file entries of a pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            File entries with ``filename`` and ``status``
        """
        files = self._list(f'/repos/{owner}/{repo}/pulls/{pr_number}/files')
        logger.info(f"{owner}/{repo}#{pr_number} has {len(files)} changed files")
        return files

    def list_issue_comments(self, owner: str, repo: str, issue_number: int) -> List[Dict]:
        logger.debug(f"Listing comments for {owner}/{repo}#{issue_number}")
        return self._list(f'/repos/{owner}/{repo}/issues/{issue_number}/comments')

    def create_issue_comment(self, owner: str, repo: str, issue_number: int, body: str) -> Dict:
        """Post a new comment on an issue or pull request."""
        logger.info(f"Creating comment on {owner}/{repo}#{issue_number}")
        path = f'/repos/{owner}/{repo}/issues/{issue_number}/comments'
        return self._request('POST', path, json={'body': body}).json()

    def update_issue_comment(self, owner: str, repo: str, comment_id: int, body: str) -> Dict:
        """Replace the body of an existing comment."""
        logger.info(f"Updating comment {comment_id} on {owner}/{repo}")
        path = f'/repos/{owner}/{repo}/issues/comments/{comment_id}'
        return self._request('PATCH', path, json={'body': body}).json()
