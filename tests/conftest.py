import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# 必须在导入应用之前设置，``get_settings`` 会被缓存
os.environ.setdefault("IBDP_DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("IBDP_ADMIN_USERNAMES", '["admin"]')
os.environ.pop("IBDP_AI_GATEWAY_API_KEY", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ibdp_coach.db import Base, get_db
from ibdp_coach.errors import ApiError
from ibdp_coach.main import app
from ibdp_coach.services.ai import get_ai_client
from ibdp_coach.services.rubrics import seed_preset_rubrics

# Use in-memory SQLite for testing to ensure isolation
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

COACHING_PAYLOAD = {
    "questions": [
        "What specific aspect of the text interests you most?",
        "Which authorial choices support your reading?",
        "What might a reader who disagrees argue?",
    ],
    "thesisPattern": "In [text], [author] uses [technique] to [effect], revealing [insight].",
    "evidenceChecklist": [
        "Close reading of key passages",
        "Analysis of structural choices",
        "Consideration of context",
    ],
}

EVALUATION_PAYLOAD = {
    "overallScore": 5,
    "strengths": ["Clear line of inquiry", "Relevant textual references"],
    "improvements": [
        {
            "criterion": "B",
            "issue": "Analysis drifts into summary in the second half",
            "suggestion": "Ask how each quotation supports the thesis",
            "priority": "high",
        }
    ],
    "nextSteps": [
        "Revisit paragraph three",
        "Add a counterargument",
        "Tighten the conclusion",
    ],
}


class FakeAIClient:
    """记录调用并返回预设结果的网关客户端替身。"""

    def __init__(self):
        self.calls = []
        self.responses = {
            "provide_coaching": COACHING_PAYLOAD,
            "evaluate_draft": EVALUATION_PAYLOAD,
        }
        self.error = None

    def structured_predict(self, schema, tool, system_prompt, user_prompt):
        name = tool["function"]["name"]
        self.calls.append({"tool": name, "system": system_prompt, "user": user_prompt})
        if self.error is not None:
            raise self.error
        return schema.model_validate(self.responses[name])

    def fail_with(self, error: ApiError) -> None:
        self.error = error


@pytest.fixture(scope="function")
def session():
    """
    Create a fresh database session for each test.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def ai_client():
    return FakeAIClient()


@pytest.fixture(scope="function")
def client(session, ai_client):
    """
    Create a TestClient that uses the override_get_db dependency.
    """
    def override_get_db():
        try:
            yield session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_client] = lambda: ai_client
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def register(client: TestClient, username: str, password: str = "password", role: str = "student"):
    return client.post(
        "/api/v2/auth/register",
        json={"username": username, "password": password, "full_name": username.title(), "role": role},
    )


def get_auth_headers(client: TestClient, username: str, password: str = "password"):
    response = client.post(
        "/api/v2/auth/login",
        data={"username": username, "password": password},
    )
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def student_headers(client):
    register(client, "student1")
    return get_auth_headers(client, "student1")


@pytest.fixture
def admin_headers(client):
    register(client, "admin")
    return get_auth_headers(client, "admin")


@pytest.fixture
def assignment(client, session, student_headers):
    """一份 Language A essay 作业（已初始化预置量规）。"""
    seed_preset_rubrics(session)
    response = client.post(
        "/api/v2/assignments/",
        json={
            "title": "Identity in Persepolis",
            "subject": "lang_a",
            "task_type": "essay",
            "no_ghostwriting_accepted": True,
        },
        headers=student_headers,
    )
    assert response.status_code == 201
    return response.json()
