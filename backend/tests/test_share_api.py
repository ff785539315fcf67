from conftest import complete_required_stages


def _share(client, venture_id, **payload):
    return client.patch(f"/api/ventures/{venture_id}/share", json=payload)


def test_going_public_mints_a_token(client, venture):
    assert venture["shareToken"] is None

    response = _share(client, venture["id"], isPublic=True, cardStyle="gradient", cardTheme="dark")

    assert response.status_code == 200
    body = response.json()
    assert body["isPublic"] is True
    assert body["shareToken"]
    assert body["cardStyle"] == "gradient"
    assert body["cardTheme"] == "dark"


def test_token_is_stable_across_updates(client, venture):
    token = _share(client, venture["id"], isPublic=True).json()["shareToken"]

    _share(client, venture["id"], isPublic=False)
    again = _share(client, venture["id"], isPublic=True).json()

    assert again["shareToken"] == token


def test_public_card(client, venture):
    token = _share(client, venture["id"], isPublic=True, cardDescription="Power for villages").json()["shareToken"]
    complete_required_stages(client, venture["id"])
    client.post(f"/api/ventures/{venture['id']}/report")

    response = client.get(f"/api/shared/{token}")

    assert response.status_code == 200
    card = response.json()
    assert card["title"] == "Solar Kiosk"
    assert card["cardDescription"] == "Power for villages"
    assert card["isCompleted"] is True
    assert len(card["completedStages"]) == 6
    assert card["elevatorPitch"].startswith("We bring")
    assert "userId" not in card


def test_private_venture_is_hidden(client, venture):
    token = _share(client, venture["id"], isPublic=True).json()["shareToken"]
    _share(client, venture["id"], isPublic=False)

    assert client.get(f"/api/shared/{token}").status_code == 404
    assert client.get("/api/shared/unknown-token").status_code == 404


def test_invalid_card_settings_are_rejected(client, venture):
    assert _share(client, venture["id"], cardStyle="neon").status_code == 400
    assert _share(client, venture["id"], cardDescription="x" * 201).status_code == 400
