import random

import pytest

from groovify.core.errors import StoreError
from groovify.web_api.web_app import create_app


@pytest.fixture
def app(store):
    return create_app(store, config={"TESTING": True, "SECRET_KEY": "test"}, rng=random.Random(3))


@pytest.fixture
def client(app):
    return app.test_client()


def _register(client, username="alice", password="s3cret"):
    return client.post("/api/auth/register", json={"username": username, "password": password})


def test_health(client):
    assert client.get("/health").get_json() == {"status": "healthy"}


def test_register_logs_in_and_hides_secrets(client):
    resp = _register(client)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "registered"
    assert body["authenticated"] is True
    assert body["user"]["username"] == "alice"
    assert "password_hash" not in body["user"]
    assert "password_salt" not in body["user"]
    assert client.get("/api/auth/session").get_json()["authenticated"] is True


@pytest.mark.parametrize(
    ("payload", "status", "reason"),
    [
        ({"username": "ab", "password": "pw"}, 400, "invalid_username"),
        ({"username": "alice", "password": ""}, 400, "invalid_password"),
    ],
)
def test_register_validation_errors(client, payload, status, reason):
    resp = client.post("/api/auth/register", json=payload)
    assert resp.status_code == status
    assert resp.get_json()["reason"] == reason


def test_register_duplicate_is_conflict(client):
    _register(client)
    resp = _register(client, username="ALICE")
    assert resp.status_code == 409
    assert resp.get_json()["reason"] == "username_taken"


def test_login_logout(client):
    _register(client)
    client.post("/api/auth/logout")
    assert client.get("/api/auth/session").get_json() == {"authenticated": False, "user": None}

    bad = client.post("/api/auth/login", json={"username": "alice", "password": "nope"})
    assert bad.status_code == 401

    good = client.post("/api/auth/login", json={"username": "Alice", "password": "s3cret"})
    assert good.status_code == 200
    assert good.get_json()["status"] == "logged_in"


def test_protected_routes_require_login(client):
    for path in ("/api/profile", "/api/playlists", "/api/recommend", "/api/playlists/1/songs"):
        assert client.get(path).status_code == 401


def test_profile_update(client, genres):
    _register(client)
    resp = client.post(
        "/api/profile",
        json={"username": "alice", "description": "jazz fan", "genre_ids": [genres["Jazz"].id]},
    )
    assert resp.status_code == 200
    user = resp.get_json()["user"]
    assert user["description"] == "jazz fan"
    assert [g["name"] for g in user["genres"]] == ["Jazz"]

    profile = client.get("/api/profile").get_json()
    assert [g["name"] for g in profile["all_genres"]] == ["Jazz", "Rock"]


def test_profile_update_rejects_taken_name(app, genres):
    other = app.test_client()
    _register(other, username="bobby")
    client = app.test_client()
    _register(client)

    resp = client.post("/api/profile", json={"username": "BOBBY"})
    assert resp.status_code == 409


def test_playlist_flow(client, catalog):
    _register(client)
    created = client.post("/api/playlists/create", json={"name": "Mix"}).get_json()
    playlist_id = created["playlist"]["id"]
    song_id = catalog["Jazz"][0].id

    first = client.post("/api/playlists/add_track", json={"playlist_id": playlist_id, "song_id": song_id})
    again = client.post("/api/playlists/add_track", json={"playlist_id": playlist_id, "song_id": song_id})
    assert first.get_json() == {"status": "added", "added": True}
    assert again.get_json() == {"status": "duplicate", "added": False}

    songs = client.get(f"/api/playlists/{playlist_id}/songs").get_json()["songs"]
    assert [s["id"] for s in songs] == [song_id]

    removed = client.post("/api/playlists/remove_track", json={"playlist_id": playlist_id, "song_id": song_id})
    removed_again = client.post(
        "/api/playlists/remove_track", json={"playlist_id": playlist_id, "song_id": song_id}
    )
    assert removed.get_json() == {"status": "removed", "removed": True}
    assert removed_again.get_json() == {"status": "removed", "removed": False}

    assert client.post("/api/playlists/delete", json={"playlist_id": playlist_id}).status_code == 200
    assert client.post("/api/playlists/delete", json={"playlist_id": playlist_id}).status_code == 404


def test_playlist_input_errors(client, catalog):
    _register(client)
    assert client.post("/api/playlists/create", json={"name": "  "}).status_code == 400
    assert client.post("/api/playlists/add_track", json={"playlist_id": "x", "song_id": 1}).status_code == 400

    missing = client.post("/api/playlists/add_track", json={"playlist_id": 9999, "song_id": catalog["Rock"][0].id})
    assert missing.status_code == 404
    assert missing.get_json()["reason"] == "playlist_not_found"

    remove_missing = client.post("/api/playlists/remove_track", json={"playlist_id": 9999, "song_id": 1})
    assert remove_missing.status_code == 200


def test_foreign_playlist_is_forbidden(app, catalog):
    owner = app.test_client()
    _register(owner, username="owner")
    playlist_id = owner.post("/api/playlists/create", json={"name": "Mine"}).get_json()["playlist"]["id"]

    intruder = app.test_client()
    _register(intruder, username="intruder")
    payload = {"playlist_id": playlist_id, "song_id": catalog["Rock"][0].id}

    assert intruder.post("/api/playlists/add_track", json=payload).status_code == 403
    assert intruder.post("/api/playlists/remove_track", json=payload).status_code == 403
    assert intruder.post("/api/playlists/delete", json={"playlist_id": playlist_id}).status_code == 403
    assert intruder.get(f"/api/playlists/{playlist_id}/songs").status_code == 403


def test_recommend_and_catalog_listing(client, catalog):
    _register(client)
    recs = client.get("/api/recommend").get_json()["recommendations"]
    assert len(recs) == 5
    assert len(client.get("/api/songs").get_json()["songs"]) == 5


def test_store_error_becomes_500(client, store, monkeypatch):
    def broken(*args, **kwargs):
        raise StoreError("locked")

    monkeypatch.setattr(store, "find_all_songs", broken)
    resp = client.get("/api/songs")
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "internal error"}


def test_search(client, catalog):
    assert client.get("/api/search?query=x").status_code == 401
    _register(client)

    assert client.get("/api/search").status_code == 400

    by_genre = client.get("/api/search?query=jazz&type=genre").get_json()
    assert by_genre["type"] == "genre"
    assert {s["genre_name"] for s in by_genre["songs"]} == {"Jazz"}
    assert len(by_genre["songs"]) == 3

    by_title = client.get("/api/search", query_string={"query": "TRACK 1"}).get_json()
    assert by_title["type"] == "title"
    assert [s["title"] for s in by_title["songs"]] == ["Track 1"]


def test_song_payloads_include_genre_name(client, catalog):
    _register(client)
    songs = client.get("/api/songs").get_json()["songs"]
    assert {s["genre_name"] for s in songs} == {"Rock", "Jazz"}
    recs = client.get("/api/recommend").get_json()["recommendations"]
    assert all(s["genre_name"] in {"Rock", "Jazz"} for s in recs)


def test_profile_edit_without_genres_keeps_them(client, genres):
    _register(client)
    client.post("/api/profile", json={"username": "alice", "genre_ids": [genres["Rock"].id]})
    resp = client.post("/api/profile", json={"description": "just the bio"})
    assert [g["name"] for g in resp.get_json()["user"]["genres"]] == ["Rock"]
