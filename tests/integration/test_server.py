"""
Integration tests for the HTTP endpoints.
"""

import pytest

from conftest import FakeGitHubClient, encode, make_pr_event
from pr_structure_reviewer.api import StructureReviewerAPI
from pr_structure_reviewer.config import AppConfig, DispatchConfig, WebhookConfig
from pr_structure_reviewer.github.webhook import compute_signature
from pr_structure_reviewer.server import create_app


SECRET = "webhook-test-secret"


@pytest.fixture
def github():
    return FakeGitHubClient(files=[
        {'filename': '.gitignore', 'status': 'added'},
        {'filename': 'README.md', 'status': 'added'},
    ])


@pytest.fixture
def api(github):
    config = AppConfig(
        webhook=WebhookConfig(secret=SECRET),
        dispatch=DispatchConfig(inline=True, max_retries=0),
    )
    reviewer_api = StructureReviewerAPI(config=config, github_client=github)
    yield reviewer_api
    reviewer_api.cleanup_resources()


@pytest.fixture
def client(api):
    app = create_app(api=api)
    app.testing = True
    return app.test_client()


def post_webhook(client, payload, event="pull_request", secret=SECRET, signature=None):
    body = encode(payload) if not isinstance(payload, bytes) else payload
    headers = {'X-GitHub-Event': event, 'Content-Type': 'application/json'}
    if signature is None and secret:
        signature = compute_signature(secret, body)
    if signature:
        headers['X-Hub-Signature-256'] = signature
    return client.post('/webhook', data=body, headers=headers)


class TestWebhookEndpoint:
    """POST /webhook"""

    def test_relevant_event_posts_comment(self, client, github):
        response = post_webhook(client, make_pr_event(action="opened"))

        assert response.status_code == 200
        assert response.get_json()['pr'] == "octo/app#7"
        assert len(github.bodies()) == 1

    def test_invalid_signature_rejected(self, client, github):
        response = post_webhook(client, make_pr_event(), signature="sha256=" + "0" * 64)

        assert response.status_code == 401
        assert github.bodies() == []

    def test_missing_signature_rejected(self, client, github):
        response = post_webhook(client, make_pr_event(), secret=None)

        assert response.status_code == 401
        assert github.bodies() == []

    def test_irrelevant_action_ignored(self, client, github):
        response = post_webhook(client, make_pr_event(action="closed"))

        assert response.status_code == 200
        assert response.get_json()['message'] == "Event ignored"
        assert github.bodies() == []

    def test_other_event_ignored(self, client, github):
        response = post_webhook(client, {'zen': 'Keep it logically awesome.'}, event="ping")

        assert response.status_code == 200
        assert github.bodies() == []

    def test_form_encoded_ping_ignored(self, client, github):
        body = b"payload=%7B%22zen%22%3A%22Keep+it+logically+awesome.%22%7D"
        headers = {
            'X-GitHub-Event': 'ping',
            'Content-Type': 'application/x-www-form-urlencoded',
            'X-Hub-Signature-256': compute_signature(SECRET, body),
        }

        response = client.post('/webhook', data=body, headers=headers)

        assert response.status_code == 200
        assert response.get_json() == {'message': 'Event ignored', 'event': 'ping'}
        assert github.bodies() == []

    def test_other_event_with_bad_signature_rejected(self, client, github):
        response = post_webhook(client, b"payload=%7B%7D", event="ping", signature="sha256=" + "0" * 64)

        assert response.status_code == 401
        assert github.bodies() == []

    def test_malformed_pull_request_payload(self, client, github):
        response = post_webhook(client, {'action': 'opened', 'pull_request': {'number': 7}})

        assert response.status_code == 400
        assert github.bodies() == []

    def test_invalid_json(self, client):
        response = post_webhook(client, b'{not json')
        assert response.status_code == 400

    def test_unsigned_accepted_without_secret(self, github):
        reviewer_api = StructureReviewerAPI(
            config=AppConfig(dispatch=DispatchConfig(inline=True)),
            github_client=github,
        )
        client = create_app(api=reviewer_api).test_client()

        response = post_webhook(client, make_pr_event(), secret=None)

        assert response.status_code == 200
        assert len(github.bodies()) == 1

    def test_unexpected_error_is_500(self, client, api, monkeypatch):
        def explode(*args, **kwargs):
            raise RuntimeError("dispatcher down")

        monkeypatch.setattr(api.dispatcher, "submit", explode)

        response = post_webhook(client, make_pr_event())

        assert response.status_code == 500


class TestAnalyzeEndpoint:
    """POST /analyze"""

    def test_local_project(self, client, project_dir):
        (project_dir / "package.json").write_text("{}")

        response = client.post('/analyze', json={'projectPath': str(project_dir)})
        data = response.get_json()

        assert response.status_code == 200
        assert data['success'] is True
        assert data['analysis']['projectType'] == 'nodejs'
        assert data['report'].startswith("🤖 **Code Structure Review**")

    def test_missing_project_path(self, client, tmp_path):
        response = client.post('/analyze', json={'projectPath': str(tmp_path / "missing")})

        assert response.status_code == 404
        assert "does not exist" in response.get_json()['error']

    def test_missing_fields(self, client):
        response = client.post('/analyze', json={'owner': 'octo'})
        assert response.status_code == 400

    def test_no_body(self, client):
        response = client.post('/analyze')
        assert response.status_code == 400

    def test_pull_request_target(self, client, github):
        github.pull_request = {'number': 7, 'title': 'T', 'head': {'sha': '1234567'}}

        response = client.post('/analyze', json={'owner': 'octo', 'repo': 'app', 'pr_number': 7})

        assert response.status_code == 200
        assert response.get_json()['filesAnalyzed'] == 2

    def test_github_failure_is_500(self, client):
        response = client.post('/analyze', json={'owner': 'octo', 'repo': 'app', 'pr_number': 7})

        assert response.status_code == 500
        assert 'error' in response.get_json()


class TestInfoEndpoints:
    """GET / and GET /health"""

    def test_health_reports_flags_only(self, client):
        response = client.get('/health')
        data = response.get_json()

        assert response.status_code == 200
        assert data['status'] == 'ok'
        assert data['webhook'] == {'signatureVerification': True}
        assert data['github'] == {'authenticated': True}
        assert data['analyzers'] == 4
        assert SECRET not in response.get_data(as_text=True)
        assert "test-token" not in response.get_data(as_text=True)

    def test_index(self, client):
        data = client.get('/').get_json()

        assert data['service'] == 'pr-structure-reviewer'
        assert 'POST /webhook' in data['endpoints'].values()
