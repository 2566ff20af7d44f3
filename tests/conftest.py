"""
Shared fixtures: an app on in-memory SQLite, a test client, tokens for both
roles and a small seeded event.
"""
import pytest

from judging import create_app
from judging.config import TestConfig
from judging.extension.extensions import db
from judging.services.auth_service import ROLE_EVALUATOR, issue_token
from judging.services.evaluator_service import create_evaluator
from judging.services.panel_service import create_panel
from judging.services.project_service import create_project
from judging.services.setting_service import update_settings

RUBRIC = [
    {"key": "problem", "label": "Problem", "maxPoints": 10},
    {"key": "design", "label": "Design", "maxPoints": 5},
]


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers(client):
    resp = client.post("/api/auth/admin-login",
                       json={"email": "admin@example.com", "password": "admin123"})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


@pytest.fixture
def eval_headers(app):
    """eval_headers("EVAL-1") -> Authorization header for that evaluator."""
    def _headers(evaluator_id):
        return {"Authorization": f"Bearer {issue_token(ROLE_EVALUATOR, evaluator_id)}"}
    return _headers


@pytest.fixture
def seeded(app):
    """
    Rubric of two items, projects PRJ-1..PRJ-4, evaluators EVAL-1..EVAL-4.
    Panel PNL-A binds EVAL-1..3 to PRJ-1 and PRJ-2; EVAL-4 sits on no panel.
    """
    update_settings({"rubric": RUBRIC})
    for i in range(1, 5):
        create_project({"id": f"PRJ-{i}", "title": f"Project {i}", "team": f"Team {i}",
                        "school": "North High", "category": "Energy"})
        create_evaluator({"id": f"EVAL-{i}", "name": f"Judge {i}",
                          "email": f"judge{i}@example.com", "code": f"00000{i}"})
    create_panel({"id": "PNL-A", "name": "Panel A",
                  "evaluatorIds": ["EVAL-1", "EVAL-2", "EVAL-3"],
                  "projectIds": ["PRJ-1", "PRJ-2"]})
    return {
        "projects": [f"PRJ-{i}" for i in range(1, 5)],
        "evaluators": [f"EVAL-{i}" for i in range(1, 5)],
        "panel": "PNL-A",
    }
