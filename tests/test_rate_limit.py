"""Tests for the API and AI rate limits"""
from fastapi.testclient import TestClient

from storyboard.core.rate_limit import AI_LIMIT_MESSAGE, API_LIMIT_MESSAGE
from storyboard.main import create_app

from conftest import create_project, register_and_login


class TestAIRateLimit:

    def test_eleventh_ai_call_in_the_hour_is_rejected(self, client, auth_headers):
        project_id = create_project(client, auth_headers)["project"]["id"]
        url = f"/api/projects/{project_id}/generate-images"

        for _ in range(9):
            assert client.post(url, headers=auth_headers).status_code == 200

        resp = client.post(url, headers=auth_headers)
        assert resp.status_code == 200

        resp = client.post(url, headers=auth_headers)
        assert resp.status_code == 429
        error = resp.json()["error"]
        assert error["code"] == "RATE_LIMIT_EXCEEDED"
        assert error["message"] == AI_LIMIT_MESSAGE

    def test_limit_is_shared_between_ai_endpoints(self, client, auth_headers):
        for _ in range(10):
            create_project(client, auth_headers)

        resp = client.post("/api/projects", json={"title": "T", "input": "idea"}, headers=auth_headers)
        assert resp.status_code == 429

        project_id = client.get("/api/projects", headers=auth_headers).json()[0]["id"]
        resp = client.post(f"/api/projects/{project_id}/generate-images", headers=auth_headers)
        assert resp.status_code == 429

    def test_limit_is_per_user(self, client, auth_headers):
        for _ in range(10):
            create_project(client, auth_headers)
        assert client.post(
            "/api/projects", json={"title": "T", "input": "idea"}, headers=auth_headers
        ).status_code == 429

        other = register_and_login(client, "second@studio.io")
        create_project(client, other)

    def test_plain_reads_are_not_ai_limited(self, client, auth_headers):
        for _ in range(10):
            create_project(client, auth_headers)

        assert client.get("/api/projects", headers=auth_headers).status_code == 200


class TestAPIRateLimit:

    def test_hundred_and_first_request_is_rejected(self, client, auth_headers):
        for _ in range(100):
            assert client.get("/api/projects", headers=auth_headers).status_code == 200

        resp = client.get("/api/projects", headers=auth_headers)

        assert resp.status_code == 429
        assert resp.json()["error"]["message"] == API_LIMIT_MESSAGE

    def test_auth_and_health_are_not_limited(self, client, auth_headers):
        for _ in range(100):
            client.get("/api/projects", headers=auth_headers)

        assert client.get("/health").status_code == 200
        assert client.get("/api/auth/me", headers=auth_headers).status_code == 200


class TestLimitsFollowAppSettings:

    def _client(self, settings, script_generator, image_generator, **overrides):
        app = create_app(
            settings=settings.model_copy(update=overrides),
            script_generator=script_generator,
            image_generator=image_generator,
        )
        return TestClient(app)

    def test_custom_ai_limit(self, settings, script_generator, image_generator):
        with self._client(settings, script_generator, image_generator, AI_RATE_LIMIT="1 per hour") as c:
            headers = register_and_login(c, "solo@studio.io")
            create_project(c, headers)

            resp = c.post("/api/projects", json={"title": "T", "input": "idea"}, headers=headers)

        assert resp.status_code == 429
        assert resp.json()["error"]["message"] == AI_LIMIT_MESSAGE

    def test_disabled_limiter(self, settings, script_generator, image_generator):
        with self._client(
            settings, script_generator, image_generator,
            RATE_LIMIT_ENABLED=False, AI_RATE_LIMIT="1 per hour",
        ) as c:
            headers = register_and_login(c, "free@studio.io")
            statuses = [
                c.post("/api/projects", json={"title": "T", "input": "idea"}, headers=headers).status_code
                for _ in range(12)
            ]

        assert statuses == [200] * 12

    def test_apps_do_not_share_counters(self, settings, script_generator, image_generator):
        with self._client(settings, script_generator, image_generator, AI_RATE_LIMIT="1 per hour") as first:
            headers = register_and_login(first, "one@studio.io")
            create_project(first, headers)
            assert first.post(
                "/api/projects", json={"title": "T", "input": "idea"}, headers=headers
            ).status_code == 429

        with self._client(settings, script_generator, image_generator, AI_RATE_LIMIT="1 per hour") as second:
            headers = register_and_login(second, "one@studio.io")
            create_project(second, headers)
