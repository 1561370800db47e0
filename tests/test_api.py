"""API tests through FastAPI's TestClient."""

import json
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from backend.app import create_app


TEST_DATA_DIR = Path("data-tests")
NPC_REPLY = json.dumps({"name": "Kian", "description": "Ocultista.", "hpMax": 15, "sanMax": 9})


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app(TEST_DATA_DIR, use_env_llm=False))


@pytest.fixture
def gen_client() -> TestClient:
    return TestClient(create_app(TEST_DATA_DIR, llm=AsyncMock(return_value=NPC_REPLY)))


def _register(client: TestClient, name: str, role: str = "JOGADOR", password: str = "pw"):
    return client.post("/api/auth/register", json={
        "name": name, "password": password, "confirm_password": password, "role": role,
    })


def _login(client: TestClient, name: str, password: str = "pw"):
    return client.post("/api/auth/login", json={"name": name, "password": password})


# ── settings ─────────────────────────────────────────────


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_systems(client):
    ids = [s["id"] for s in client.get("/api/systems").json()]
    assert ids == ["ordem-paranormal", "dnd-5e"]


def test_state_hides_passwords(client):
    _register(client, "Alice")
    body = client.get("/api/state").json()
    assert body["view"] == "characters"
    assert body["canGenerate"] is False
    assert "password" not in body["state"]["currentUser"]
    assert body["state"]["users"][0]["hasPassword"] is True


def test_select_system_gm_only(client):
    _register(client, "Alice")
    assert client.put("/api/state/system", json={"system_id": "dnd-5e"}).status_code == 403
    _register(client, "Bob", "MESTRE")
    resp = client.put("/api/state/system", json={"system_id": "dnd-5e"})
    assert resp.json() == {"currentSystemId": "dnd-5e"}
    assert client.put("/api/state/system", json={"system_id": "gurps"}).status_code == 404


# ── auth ─────────────────────────────────────────────────


def test_register_and_duplicate(client):
    resp = _register(client, "Alice")
    assert resp.status_code == 201
    assert resp.json()["name"] == "Alice"
    dup = _register(client, "ALICE")
    assert dup.status_code == 409
    assert len(client.get("/api/users").json()) == 1


def test_register_mismatch(client):
    resp = client.post("/api/auth/register", json={
        "name": "Alice", "password": "a", "confirm_password": "b",
    })
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Passwords do not match."


def test_login_logout(client):
    _register(client, "Alice")
    client.post("/api/auth/logout")
    assert client.get("/api/state").json()["view"] == "profile"
    assert _login(client, "alice", "wrong").status_code == 401
    assert _login(client, "nobody").status_code == 404
    assert _login(client, "alice").json()["name"] == "Alice"


def test_list_players_gm_only(client):
    _register(client, "Alice")
    assert client.get("/api/users/players").status_code == 403
    _register(client, "Bob", "MESTRE")
    assert [u["name"] for u in client.get("/api/users/players").json()] == ["Alice"]


# ── characters ───────────────────────────────────────────


def test_characters_require_login(client):
    assert client.get("/api/characters").status_code == 401
    assert client.post("/api/characters", json={"name": "X"}).status_code == 401


def test_create_and_list_characters(client):
    _register(client, "Alice")
    resp = client.post("/api/characters", json={"name": "Arthur"})
    assert resp.status_code == 201
    char = resp.json()
    assert char["type"] == "PERSONAGEM"
    assert char["ownerName"] == "Alice"
    assert char["hp"] == {"current": 20, "max": 20}

    _register(client, "Carl")
    assert client.get("/api/characters").json() == []

    _register(client, "Bob", "MESTRE")
    assert [c["name"] for c in client.get("/api/characters").json()] == ["Arthur"]


def test_create_character_requires_name(client):
    _register(client, "Alice")
    assert client.post("/api/characters", json={"name": " "}).status_code == 400


def test_delete_character_permissions(client):
    _register(client, "Alice")
    cid = client.post("/api/characters", json={"name": "Arthur"}).json()["id"]
    _register(client, "Carl")
    assert client.delete(f"/api/characters/{cid}").status_code == 403
    _login(client, "Alice")
    assert client.delete(f"/api/characters/{cid}").json() == {"ok": True}
    assert client.delete(f"/api/characters/{cid}").status_code == 404


def test_change_owner_rules(client):
    _register(client, "Alice")
    alice_id = client.get("/api/state").json()["state"]["currentUser"]["id"]
    _register(client, "Bob", "MESTRE")
    bob_id = client.get("/api/state").json()["state"]["currentUser"]["id"]
    cid = client.post("/api/characters", json={"name": "Kian"}).json()["id"]

    resp = client.patch(f"/api/characters/{cid}/owner", json={"owner_id": alice_id})
    assert resp.json()["ownerName"] == "Alice"

    _login(client, "Alice")
    assert client.patch(f"/api/characters/{cid}/owner", json={"owner_id": bob_id}).status_code == 403
    resp = client.patch(f"/api/characters/{cid}/owner", json={"owner_id": alice_id})
    assert resp.status_code == 200

    _login(client, "Bob")
    resp = client.patch(f"/api/characters/{cid}/owner", json={"owner_id": "ghost"})
    assert resp.json()["ownerName"] == "Desconhecido"


def test_player_claims_only_gm_owned_characters(client):
    _register(client, "Alice")
    arthur = client.post("/api/characters", json={"name": "Arthur"}).json()["id"]
    _register(client, "Carl")
    carl_id = client.get("/api/state").json()["state"]["currentUser"]["id"]
    resp = client.patch(f"/api/characters/{arthur}/owner", json={"owner_id": carl_id})
    assert resp.status_code == 403

    _register(client, "Bob", "MESTRE")
    kian = client.post("/api/characters", json={"name": "Kian"}).json()["id"]
    _login(client, "Carl")
    resp = client.patch(f"/api/characters/{kian}/owner", json={"owner_id": carl_id})
    assert resp.json()["ownerName"] == "Carl"


def test_toggle_type(client):
    _register(client, "Alice")
    cid = client.post("/api/characters", json={"name": "Arthur"}).json()["id"]
    assert client.post(f"/api/characters/{cid}/toggle-type").json()["type"] == "NPC"
    assert client.post(f"/api/characters/{cid}/toggle-type").json()["type"] == "PERSONAGEM"
    assert client.post("/api/characters/missing/toggle-type").status_code == 404


def test_generate_unavailable_without_llm(client):
    _register(client, "Bob", "MESTRE")
    assert client.post("/api/characters/generate").status_code == 503


def test_generate_gm_only(gen_client):
    _register(gen_client, "Alice")
    assert gen_client.post("/api/characters/generate").status_code == 403


def test_generate_npc(gen_client):
    _register(gen_client, "Bob", "MESTRE")
    gen_client.put("/api/state/system", json={"system_id": "dnd-5e"})
    resp = gen_client.post("/api/characters/generate")
    assert resp.status_code == 201
    char = resp.json()
    assert char["name"] == "Kian"
    assert char["type"] == "NPC"
    assert char["systemId"] == "dnd-5e"
    assert char["ownerName"] == "Bob"


# ── sessions ─────────────────────────────────────────────


def test_start_session_player_forbidden(client):
    _register(client, "Alice")
    assert client.post("/api/sessions", json={"name": "Ep1"}).status_code == 403


def test_session_flow(client):
    _register(client, "Alice")
    cid = client.post("/api/characters", json={"name": "Arthur"}).json()["id"]
    _register(client, "Bob", "MESTRE")

    resp = client.post("/api/sessions", json={"name": "Ep1"})
    assert resp.status_code == 201
    session = resp.json()
    assert session["systemName"] == "Ordem Paranormal"
    assert len(session["logs"]) == 1
    assert session["logs"][0]["isSystem"] is True

    roster = client.post("/api/sessions/active/characters", json={"character_id": cid}).json()
    assert roster["activeCharacterIds"] == [cid]
    assert [c["name"] for c in roster["roster"]] == ["Arthur"]
    again = client.post("/api/sessions/active/characters", json={"character_id": cid}).json()
    assert again["activeCharacterIds"] == [cid]

    msg = client.post("/api/sessions/active/messages", json={"text": "Boa noite"}).json()
    assert msg["senderName"] == "Bob"
    assert msg["isSystem"] is False

    rolled = client.post("/api/sessions/active/roll", json={"sides": 20}).json()
    assert 1 <= rolled["result"] <= 20
    assert rolled["entry"]["text"] == f"Rolou d20: {rolled['result']}"
    assert client.post("/api/sessions/active/roll", json={"sides": 7}).status_code == 400

    active = client.get("/api/sessions/active").json()
    assert [m["text"] for m in active["logs"][:2]] == [rolled["entry"]["text"], "Boa noite"]

    assert client.post("/api/sessions/pause").json() == {"ok": True}
    assert client.get("/api/sessions/active").status_code == 404
    assert len(client.get("/api/sessions").json()) == 1

    client.put("/api/state/system", json={"system_id": "dnd-5e"})
    resumed = client.post(f"/api/sessions/{session['id']}/resume").json()
    assert resumed["id"] == session["id"]
    assert client.get("/api/state").json()["state"]["currentSystemId"] == "ordem-paranormal"

    assert client.delete(f"/api/sessions/{session['id']}").json() == {"ok": True}
    assert client.get("/api/state").json()["state"]["activeSessionId"] is None
    assert client.delete(f"/api/sessions/{session['id']}").status_code == 404


def test_resume_unknown_session(client):
    _register(client, "Bob", "MESTRE")
    assert client.post("/api/sessions/missing/resume").status_code == 404


def test_add_to_session_rejects_other_players_character(client):
    _register(client, "Alice")
    cid = client.post("/api/characters", json={"name": "Arthur"}).json()["id"]
    _register(client, "Bob", "MESTRE")
    client.post("/api/sessions", json={"name": "Ep1"})
    _register(client, "Carl")
    resp = client.post("/api/sessions/active/characters", json={"character_id": cid})
    assert resp.status_code == 403


def test_add_to_session_needs_active_session(client):
    _register(client, "Alice")
    cid = client.post("/api/characters", json={"name": "Arthur"}).json()["id"]
    resp = client.post("/api/sessions/active/characters", json={"character_id": cid})
    assert resp.status_code == 404


def test_state_persists_across_app_instances(client):
    _register(client, "Alice")
    client.post("/api/characters", json={"name": "Arthur"})
    fresh = TestClient(create_app(TEST_DATA_DIR, use_env_llm=False))
    state = fresh.get("/api/state").json()["state"]
    assert state["currentUser"]["name"] == "Alice"
    assert [c["name"] for c in state["characters"]] == ["Arthur"]
