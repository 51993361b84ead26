"""Tests for project and scene endpoints"""
import pytest

from storyboard import models

from conftest import FakeScriptGenerator, create_project


class TestCreateProject:

    def test_create_returns_project_and_sorted_scenes(self, client, auth_headers, script_generator):
        body = create_project(client, auth_headers, title="Robot", idea="a robot finds a flower")

        assert body["project"]["title"] == "Robot"
        assert body["project"]["original_input"] == "a robot finds a flower"
        assert [s["scene_number"] for s in body["scenes"]] == [1, 2, 3]
        assert all(s["image_url"] is None for s in body["scenes"])
        assert all(s["project_id"] == body["project"]["id"] for s in body["scenes"])
        assert script_generator.calls == ["a robot finds a flower"]

    def test_title_is_required(self, client, auth_headers, script_generator):
        resp = client.post("/api/projects", json={"input": "an idea"}, headers=auth_headers)

        assert resp.status_code == 422
        assert script_generator.calls == []

    def test_blank_input_rejected(self, client, auth_headers):
        resp = client.post("/api/projects", json={"title": "T", "input": "   "}, headers=auth_headers)
        assert resp.status_code == 422

    def test_requires_auth(self, client, script_generator):
        resp = client.post("/api/projects", json={"title": "T", "input": "idea"})

        assert resp.status_code == 401
        assert script_generator.calls == []

    @pytest.mark.parametrize("script_generator", [FakeScriptGenerator(fail=True)])
    def test_script_failure_writes_nothing(self, client, auth_headers, db_session, script_generator):
        resp = client.post(
            "/api/projects", json={"title": "T", "input": "idea"}, headers=auth_headers
        )

        assert resp.status_code == 500
        error = resp.json()["error"]
        assert error["code"] == "INTERNAL_ERROR"
        assert error["message"] == "Server error"
        assert "JSON" not in error["message"]
        assert db_session.query(models.Project).count() == 0
        assert db_session.query(models.Scene).count() == 0
        assert script_generator.calls == ["idea"]


class TestReadProjects:

    def test_list_only_returns_own_projects(self, client, auth_headers, other_headers):
        create_project(client, auth_headers, title="Mine")
        create_project(client, other_headers, title="Theirs")

        resp = client.get("/api/projects", headers=auth_headers)

        assert resp.status_code == 200
        assert [p["title"] for p in resp.json()] == ["Mine"]

    def test_list_is_newest_first(self, client, auth_headers):
        create_project(client, auth_headers, title="First")
        create_project(client, auth_headers, title="Second")

        titles = [p["title"] for p in client.get("/api/projects", headers=auth_headers).json()]
        assert titles == ["Second", "First"]

    def test_get_project_with_scenes(self, client, auth_headers):
        created = create_project(client, auth_headers)

        resp = client.get(f"/api/projects/{created['project']['id']}", headers=auth_headers)

        assert resp.status_code == 200
        assert resp.json() == created

    def test_foreign_project_looks_missing(self, client, auth_headers, other_headers):
        created = create_project(client, auth_headers)

        foreign = client.get(f"/api/projects/{created['project']['id']}", headers=other_headers)
        missing = client.get("/api/projects/9999", headers=other_headers)

        assert foreign.status_code == 404
        assert foreign.json() == missing.json()


class TestDeleteProject:

    def test_delete_cascades_to_scenes(self, client, auth_headers, db_session):
        created = create_project(client, auth_headers)
        project_id = created["project"]["id"]

        resp = client.delete(f"/api/projects/{project_id}", headers=auth_headers)

        assert resp.status_code == 200
        assert resp.json() == {"message": "Project deleted successfully"}
        assert db_session.query(models.Project).filter_by(id=project_id).count() == 0
        assert db_session.query(models.Scene).filter_by(project_id=project_id).count() == 0
        assert client.get(f"/api/projects/{project_id}", headers=auth_headers).status_code == 404

    def test_cannot_delete_foreign_project(self, client, auth_headers, other_headers, db_session):
        created = create_project(client, auth_headers)
        project_id = created["project"]["id"]

        resp = client.delete(f"/api/projects/{project_id}", headers=other_headers)

        assert resp.status_code == 404
        assert db_session.query(models.Scene).filter_by(project_id=project_id).count() == 3


class TestUpdateScene:

    def test_partial_update(self, client, auth_headers):
        scene = create_project(client, auth_headers)["scenes"][0]

        resp = client.put(
            f"/api/projects/scenes/{scene['id']}",
            json={"title": "Retitled", "mood": "Tense"},
            headers=auth_headers,
        )

        assert resp.status_code == 200
        updated = resp.json()
        assert updated["title"] == "Retitled"
        assert updated["mood"] == "Tense"
        assert updated["description"] == scene["description"]
        assert updated["scene_number"] == scene["scene_number"]

    def test_image_fields_are_ignored(self, client, auth_headers):
        scene = create_project(client, auth_headers)["scenes"][0]

        resp = client.put(
            f"/api/projects/scenes/{scene['id']}",
            json={"action": "Runs", "image_url": "http://evil/x.png", "image_prompt": "other"},
            headers=auth_headers,
        )

        assert resp.status_code == 200
        assert resp.json()["action"] == "Runs"
        assert resp.json()["image_url"] is None
        assert resp.json()["image_prompt"] == scene["image_prompt"]

    def test_empty_update_rejected(self, client, auth_headers):
        scene = create_project(client, auth_headers)["scenes"][0]

        resp = client.put(f"/api/projects/scenes/{scene['id']}", json={}, headers=auth_headers)

        assert resp.status_code == 400
        assert resp.json()["error"]["message"] == "No updates provided"

    def test_foreign_scene_looks_missing(self, client, auth_headers, other_headers, db_session):
        scene = create_project(client, auth_headers)["scenes"][0]

        resp = client.put(
            f"/api/projects/scenes/{scene['id']}", json={"title": "Hijacked"}, headers=other_headers
        )

        assert resp.status_code == 404
        assert db_session.get(models.Scene, scene["id"]).title == scene["title"]
