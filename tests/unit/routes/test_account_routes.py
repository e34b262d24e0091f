from __future__ import annotations


def _sign_up(client, email, referral_code=None):
    body = {"email": email, "name": "Someone"}
    if referral_code:
        body["referral_code"] = referral_code
    return client.post("/v1/users", json=body)


def test_sign_up_and_me(client):
    resp = _sign_up(client, "me@example.com")
    assert resp.status_code == 201
    user = resp.json()
    assert user["credits"] == 100

    me = client.get("/v1/me", headers={"X-User-Id": user["id"]}).json()
    assert me["email"] == "me@example.com"


def test_duplicate_sign_up_conflicts(client):
    _sign_up(client, "me@example.com")
    assert _sign_up(client, "me@example.com").status_code == 409


def test_referral_flow(client):
    referrer = _sign_up(client, "ref@example.com").json()
    referee = _sign_up(client, "new@example.com", referrer["referral_code"]).json()
    assert referee["credits"] == 300

    headers = {"X-User-Id": referrer["id"]}
    referrals = client.get("/v1/referrals", headers=headers).json()
    assert [r["referee_id"] for r in referrals] == [referee["id"]]
    stats = client.get("/v1/referrals/stats", headers=headers).json()
    assert stats == {"total_referrals": 1, "successful_referrals": 0, "total_rewards": 0}


def test_update_profile(client, auth):
    resp = client.patch("/v1/me", json={"name": "Renamed"}, headers=auth)
    assert resp.status_code == 200
    assert resp.json()["name"] == "Renamed"


def test_api_keys_never_echo_the_secret(client, auth):
    resp = client.post("/v1/me/api-keys", json={"provider": "openai", "key": "sk-live-secret"}, headers=auth)
    assert resp.status_code == 201
    assert "sk-live-secret" not in resp.text

    keys = client.get("/v1/me/api-keys", headers=auth).json()
    assert [k["provider"] for k in keys] == ["openai"]
    assert client.get("/v1/me", headers=auth).json()["api_key_enabled"] is True


def test_unknown_provider_rejected(client, auth):
    resp = client.post("/v1/me/api-keys", json={"provider": "acme", "key": "sk-live-secret"}, headers=auth)
    assert resp.status_code == 422


def test_credit_usage_history(client, auth):
    project = client.post("/v1/projects", json={"name": "P", "type": "tailwind"}, headers=auth).json()
    session = client.post(f"/v1/editor/projects/{project['id']}/sessions", headers=auth).json()
    client.post(f"/v1/editor/sessions/{session['session_id']}/messages", json={"content": "dark mode"}, headers=auth)

    usage = client.get("/v1/me/credits", headers=auth).json()
    assert len(usage) == 1
    assert usage[0]["amount"] == 1
    assert usage[0]["project_id"] == project["id"]
    assert client.get("/v1/me", headers=auth).json()["credits"] == 99
