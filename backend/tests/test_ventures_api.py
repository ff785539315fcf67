from uuid import uuid4

import pytest

from venturelab.controllers.venture_controller import WELCOME_MESSAGE


class TestVentureLifecycle:
    def test_create_seeds_defaults_and_welcome_message(self, client, venture):
        assert venture["title"] == "Solar Kiosk"
        assert venture["currentStage"] == 1
        assert venture["isCompleted"] is False

        response = client.get(f"/api/ventures/{venture['id']}/stages/initialIdea/messages")
        assert response.status_code == 200
        messages = response.json()
        assert len(messages) == 1
        assert messages[0]["role"] == "assistant"
        assert messages[0]["content"] == WELCOME_MESSAGE

    def test_create_always_starts_at_first_stage(self, client):
        response = client.post(
            "/api/ventures", json={"title": "Skipper", "currentStage": 7, "isCompleted": True}
        )
        assert response.status_code == 201
        created = response.json()
        assert created["currentStage"] == 1
        assert created["isCompleted"] is False

        progress = client.get(f"/api/ventures/{created['id']}/progress").json()
        assert progress["currentStage"] == 1
        assert progress["canGenerateReport"] is False

    def test_list_and_get(self, client, venture):
        listed = client.get("/api/ventures").json()
        assert [v["id"] for v in listed] == [venture["id"]]

        fetched = client.get(f"/api/ventures/{venture['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["title"] == "Solar Kiosk"

    def test_empty_title_is_rejected(self, client):
        response = client.post("/api/ventures", json={"title": ""})
        assert response.status_code == 400
        assert "detail" in response.json()

    def test_unknown_venture_is_404(self, client):
        assert client.get(f"/api/ventures/{uuid4()}").status_code == 404

    def test_rename(self, client, venture):
        response = client.patch(f"/api/ventures/{venture['id']}", json={"title": "Solar Hub"})
        assert response.status_code == 200
        assert response.json()["title"] == "Solar Hub"

    def test_delete(self, client, venture):
        assert client.delete(f"/api/ventures/{venture['id']}").status_code == 204
        assert client.get(f"/api/ventures/{venture['id']}").status_code == 404
        assert client.delete(f"/api/ventures/{venture['id']}").status_code == 404


class TestStageNavigation:
    def test_advance_forward(self, client, venture):
        response = client.patch(f"/api/ventures/{venture['id']}", json={"currentStage": 3})
        assert response.status_code == 200
        assert response.json()["currentStage"] == 3

    def test_same_rank_is_a_no_op(self, client, venture):
        response = client.patch(f"/api/ventures/{venture['id']}", json={"currentStage": 1})
        assert response.status_code == 200
        assert response.json()["currentStage"] == 1

    def test_moving_backwards_is_refused(self, client, venture):
        client.patch(f"/api/ventures/{venture['id']}", json={"currentStage": 4})

        response = client.patch(f"/api/ventures/{venture['id']}", json={"currentStage": 2})

        assert response.status_code == 400
        assert client.get(f"/api/ventures/{venture['id']}").json()["currentStage"] == 4

    @pytest.mark.parametrize("rank", [0, 8])
    def test_out_of_range_rank_is_rejected(self, client, venture, rank):
        response = client.patch(f"/api/ventures/{venture['id']}", json={"currentStage": rank})
        assert response.status_code == 400

    def test_progress_view(self, client, venture):
        client.patch(f"/api/ventures/{venture['id']}", json={"currentStage": 2})
        client.post(f"/api/ventures/{venture['id']}/stages/initialIdea/complete", json={})

        progress = client.get(f"/api/ventures/{venture['id']}/progress").json()

        assert progress["currentStage"] == 2
        assert progress["canGenerateReport"] is False
        assert progress["missingStages"][0] == "smartRefinement"
        by_id = {stage["id"]: stage for stage in progress["stages"]}
        assert by_id["initialIdea"]["isCompleted"] is True
        assert by_id["smartRefinement"]["isReachable"] is True
        assert by_id["opportunityAnalysis"]["isReachable"] is False


class TestOwnership:
    def test_other_users_cannot_see_a_venture(self, client, venture):
        headers = {"X-User-Id": str(uuid4())}
        assert client.get(f"/api/ventures/{venture['id']}", headers=headers).status_code == 404
        assert client.get("/api/ventures", headers=headers).json() == []

    def test_user_id_in_body_sets_owner(self, client):
        owner = str(uuid4())
        response = client.post("/api/ventures", json={"title": "Owned", "userId": owner})
        assert response.status_code == 201
        assert response.json()["userId"] == owner

        listed = client.get("/api/ventures", params={"userId": owner}).json()
        assert [v["title"] for v in listed] == ["Owned"]

    def test_caller_header_outranks_user_id_in_body(self, client):
        caller, other = str(uuid4()), str(uuid4())
        response = client.post(
            "/api/ventures",
            json={"title": "Mine", "userId": other},
            headers={"X-User-Id": caller},
        )
        assert response.status_code == 201
        created = response.json()
        assert created["userId"] == caller

        assert client.get(f"/api/ventures/{created['id']}", headers={"X-User-Id": caller}).status_code == 200
        assert client.get("/api/ventures", headers={"X-User-Id": other}).json() == []

    def test_malformed_user_header(self, client):
        assert client.get("/api/ventures", headers={"X-User-Id": "not-a-uuid"}).status_code == 400


def test_health_reports_storage_backend(client, store):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "storage": store.backend_name}
