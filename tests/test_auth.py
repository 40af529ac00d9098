from conftest import API_KEY, PASSWORD, sign_up
from shared.security import verify_api_key


async def test_register_creates_profile(client):
    headers = await sign_up(client, "bea@sweetcrumbs.io", full_name="Bea Baker")
    profile = (await client.get("/profile", headers=headers)).json()
    assert profile["full_name"] == "Bea Baker"
    assert profile["membership_tier"] == "basic"


async def test_duplicate_email_conflicts(client):
    await sign_up(client, "bea@sweetcrumbs.io")
    resp = await client.post("/auth/register", json={"email": "BEA@sweetcrumbs.io", "password": PASSWORD})
    assert resp.status_code == 409


async def test_wrong_password(client):
    await sign_up(client, "bea@sweetcrumbs.io")
    resp = await client.post("/auth/login", json={"email": "bea@sweetcrumbs.io", "password": "not-it"})
    assert resp.status_code == 401


async def test_session_then_sign_out(client, user_headers):
    session = (await client.get("/auth/session", headers=user_headers)).json()
    assert session["user"]["email"] == "shopper@sweetcrumbs.io"
    assert session["is_admin"] is False

    assert (await client.post("/auth/logout", headers=user_headers)).status_code == 204
    assert (await client.get("/auth/session", headers=user_headers)).status_code == 401


async def test_password_reset_flow(app, client):
    await sign_up(client, "bea@sweetcrumbs.io")
    events = []
    app.state.change_feed.subscribe("auth", events.append)

    unknown = await client.post("/auth/reset-password", json={"email": "ghost@sweetcrumbs.io"})
    known = await client.post("/auth/reset-password", json={"email": "bea@sweetcrumbs.io"})
    assert unknown.status_code == known.status_code == 202
    assert unknown.json() == known.json()
    assert "recovery_token" not in known.text

    [recovery] = [e for e in events if e.event_type == "PASSWORD_RECOVERY"]
    token = recovery.record["recovery_token"]

    # a recovery token is not a bearer token
    assert (await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})).status_code == 401

    resp = await client.post("/auth/reset-password/confirm", json={"token": token, "new_password": "fresh-bread"})
    assert resp.status_code == 200
    assert events[-1].event_type == "USER_UPDATED"

    login = await client.post("/auth/login", json={"email": "bea@sweetcrumbs.io", "password": "fresh-bread"})
    assert login.status_code == 200


async def test_reset_rejects_access_token(client, user_headers):
    token = user_headers["Authorization"].removeprefix("Bearer ")
    resp = await client.post("/auth/reset-password/confirm", json={"token": token, "new_password": "fresh-bread"})
    assert resp.status_code == 400


def test_public_key_check():
    assert verify_api_key(API_KEY)
    assert not verify_api_key("someone-elses-key")
    assert not verify_api_key(None)
