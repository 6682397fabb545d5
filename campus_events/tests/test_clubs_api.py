from __future__ import annotations


def _login(c):
    c.post("/api/auth/login", json={"username": "alex", "password": "password123"})


def _register(c, interests):
    c.post("/api/auth/register", json={
        "username": "jordan", "password": "pw", "name": "Jordan", "interests": interests,
    })


def test_list_clubs(client):
    clubs = client.get("/api/clubs").json()
    assert [c["name"] for c in clubs] == [
        "Computer Science Society",
        "Entrepreneurship Association",
        "AI Research Group",
    ]
    assert clubs[0]["followers"] == 0


def test_list_clubs_filtered(client):
    clubs = client.get("/api/clubs", params={"category": "research"}).json()
    assert [c["name"] for c in clubs] == ["AI Research Group"]


def test_get_club(client):
    assert client.get("/api/clubs/2").json()["name"] == "Entrepreneurship Association"
    assert client.get("/api/clubs/999").status_code == 404


def test_create_club(client):
    _login(client)
    resp = client.post("/api/clubs", json={
        "name": "Chess Club", "description": "Weekly games.", "categories": ["Games"],
    })
    assert resp.status_code == 201
    assert resp.json()["id"] == 4
    assert len(client.get("/api/clubs").json()) == 4


def test_recommended_clubs_for_sample_user(client):
    _login(client)
    names = [c["name"] for c in client.get("/api/clubs/recommended").json()]
    assert names == [
        "Computer Science Society",
        "Entrepreneurship Association",
        "AI Research Group",
    ]


def test_recommended_clubs_filter_by_interest(client):
    _register(client, ["business"])
    names = [c["name"] for c in client.get("/api/clubs/recommended").json()]
    assert names == ["Entrepreneurship Association"]


def test_recommended_clubs_empty_without_interests(client):
    _register(client, [])
    assert client.get("/api/clubs/recommended").json() == []


def test_follow_and_unfollow(client):
    _login(client)
    first = client.post("/api/clubs/1/follow")
    second = client.post("/api/clubs/1/follow")
    assert first.status_code == 201
    assert first.json()["id"] == second.json()["id"]
    assert first.json()["clubId"] == 1

    assert client.get("/api/clubs/1").json()["followers"] == 1
    following = client.get("/api/clubs/following").json()
    assert [c["name"] for c in following] == ["Computer Science Society"]

    assert client.delete("/api/clubs/1/follow").status_code == 200
    assert client.delete("/api/clubs/1/follow").status_code == 404
    assert client.get("/api/clubs/following").json() == []


def test_follow_unknown_club(client):
    _login(client)
    assert client.post("/api/clubs/999/follow").status_code == 404
