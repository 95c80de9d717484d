import pytest

from accent_crm.security.auth import check_login_password, hash_password, verify_password


@pytest.fixture(autouse=True)
def _clear_password_env(monkeypatch):
    monkeypatch.delenv("CRM_PASSWORD_HASH", raising=False)
    monkeypatch.delenv("CRM_PASSWORD", raising=False)


def test_protected_pages_redirect_to_login(anon_client):
    for path in ("/", "/brands", "/brands/1", "/tasks", "/analytics", "/api/brands/"):
        r = anon_client.get(path)
        assert r.status_code == 303, path
        assert r.headers["location"] == "/login"


def test_public_paths_stay_open(anon_client):
    assert anon_client.get("/login").status_code == 200
    assert anon_client.get("/health").json() == {"status": "ok"}


def test_authenticated_user_is_sent_away_from_login(client):
    r = client.get("/login")
    assert r.status_code == 303
    assert r.headers["location"] == "/"


def test_wrong_cookie_value_is_not_enough(anon_client):
    anon_client.cookies.set("accent_auth", "yes")
    assert anon_client.get("/brands").status_code == 303


def test_login_with_plain_password_sets_cookie(anon_client, monkeypatch):
    monkeypatch.setenv("CRM_PASSWORD", "s3cret")
    r = anon_client.post("/login", data={"password": "nope"})
    assert r.status_code == 401
    assert "Invalid password" in r.text

    r = anon_client.post("/login", data={"password": "s3cret"})
    assert r.status_code == 303
    assert r.headers["location"] == "/"
    assert anon_client.cookies.get("accent_auth") == "true"
    assert anon_client.get("/brands").status_code == 200


def test_logout_clears_cookie(client):
    r = client.post("/logout")
    assert r.status_code == 303
    assert r.headers["location"] == "/login"
    set_cookie = r.headers["set-cookie"]
    assert set_cookie.startswith("accent_auth=")
    assert "Max-Age=0" in set_cookie


def test_password_hash_takes_precedence(monkeypatch):
    monkeypatch.setenv("CRM_PASSWORD_HASH", hash_password("from-hash"))
    monkeypatch.setenv("CRM_PASSWORD", "plain")
    assert check_login_password("from-hash")
    assert not check_login_password("plain")


def test_no_password_configured_refuses_login():
    assert not check_login_password("anything")


def test_verify_password_rejects_malformed_hash():
    assert not verify_password("x", "not-a-bcrypt-hash")
