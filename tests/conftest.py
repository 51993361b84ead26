"""
Pytest configuration and shared fixtures.

Every test gets a fresh app, with its own rate limiter, on an in-memory
SQLite database with fake AI services, so nothing leaves the process.
"""
import threading
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from storyboard.core.config import Settings
from storyboard.core.exceptions import ImageHTTPError, ScriptGenerationError
from storyboard.main import create_app
from storyboard.schemas.script import SceneDraft
from storyboard.services.image_generation import ImageGenerator
from storyboard.services.script_generation import ScriptGenerator


class FakeScriptGenerator(ScriptGenerator):
    """Returns a fixed script, deliberately out of scene_number order."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: List[str] = []

    def generate_script(self, idea: str) -> List[SceneDraft]:
        self.calls.append(idea)
        if self.fail:
            raise ScriptGenerationError("Invalid JSON from script generator")
        return [
            SceneDraft(
                scene_number=n,
                title=f"Scene {n}",
                location="Greenhouse - Night",
                description=f"Description {n}",
                action=f"Action {n}",
                mood="Hopeful",
                image_prompt=f"prompt {n}",
            )
            for n in (2, 1, 3)
        ]


class FakeImageGenerator(ImageGenerator):
    """Records prompts; raises for prompts listed in fail_prompts."""

    def __init__(self, fail_prompts: Optional[set] = None):
        self.fail_prompts = fail_prompts or set()
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def generate_image(self, prompt: str) -> str:
        with self._lock:
            self.calls.append(prompt)
        if prompt in self.fail_prompts:
            raise ImageHTTPError("Image service error 500: boom", status_code=500)
        return f"data:image/png;base64,{prompt.replace(' ', '_')}"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        SQLALCHEMY_DATABASE_URI="sqlite://",
        JWT_SECRET="test-secret",
        BCRYPT_ROUNDS=4,
        OPENAI_API_KEY="",
        HF_API_KEY="",
        LOG_DIR=None,
    )


@pytest.fixture
def script_generator() -> FakeScriptGenerator:
    return FakeScriptGenerator()


@pytest.fixture
def image_generator() -> FakeImageGenerator:
    return FakeImageGenerator()


@pytest.fixture
def app(settings, script_generator, image_generator):
    return create_app(
        settings=settings,
        script_generator=script_generator,
        image_generator=image_generator,
    )


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session(app):
    session = app.state.session_factory()
    yield session
    session.close()


def register_and_login(client: TestClient, email: str, password: str = "secret1") -> Dict[str, str]:
    resp = client.post("/api/auth/register", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


def create_project(client: TestClient, headers: Dict[str, str], title: str = "Robot", idea: str = "a robot finds a flower") -> dict:
    resp = client.post("/api/projects", json={"title": title, "input": idea}, headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


@pytest.fixture
def auth_headers(client) -> Dict[str, str]:
    return register_and_login(client, "owner@studio.io")


@pytest.fixture
def other_headers(client) -> Dict[str, str]:
    return register_and_login(client, "intruder@studio.io")
