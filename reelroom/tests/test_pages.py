from datetime import UTC, datetime, timedelta


def test_dashboard_redirects_anonymous_to_login(client):
    response = client.get("/dashboard", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/login?from=%2Fdashboard"


def test_dashboard_with_expired_session_redirects_to_login(client, tokens, regular_user):
    stale = tokens.issue(regular_user, now=datetime.now(UTC) - timedelta(days=2))
    client.cookies.set("auth-token", stale, path="/")

    response = client.get("/dashboard", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"].startswith("/login")


def test_dashboard_renders_for_session_user(user_client):
    client, user = user_client

    response = client.get("/dashboard", follow_redirects=False)

    assert response.status_code == 200
    assert user.username in response.text


def test_admin_page_redirects_non_admin_to_unauthorized(user_client):
    client, _ = user_client

    response = client.get("/admin", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/unauthorized"


def test_admin_page_redirects_anonymous_to_login(client):
    response = client.get("/admin", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/login?from=%2Fadmin"


def test_admin_page_renders_for_admin(admin_client):
    client, _ = admin_client

    assert client.get("/admin", follow_redirects=False).status_code == 200


def test_auth_screens_redirect_logged_in_users(user_client):
    client, _ = user_client

    for path in ("/login", "/register"):
        response = client.get(path, follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard"


def test_auth_screens_render_for_anonymous(client):
    assert client.get("/login").status_code == 200
    assert client.get("/register").status_code == 200


def test_unauthorized_page_is_403(client):
    assert client.get("/unauthorized").status_code == 403


def test_logout_page_clears_cookie_and_redirects(user_client):
    client, _ = user_client

    response = client.get("/logout", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/login"
    assert "max-age=0" in response.headers["set-cookie"].lower()


def test_stale_session_cookie_is_cleared_on_login_redirect(client, tokens, regular_user):
    stale = tokens.issue(regular_user, now=datetime.now(UTC) - timedelta(days=2))
    client.cookies.set("auth-token", stale, path="/")

    response = client.get("/dashboard", follow_redirects=False)

    assert response.status_code == 303
    set_cookie = response.headers["set-cookie"].lower()
    assert set_cookie.startswith("auth-token=")
    assert "max-age=0" in set_cookie


def test_anonymous_login_redirect_sets_no_cookie(client):
    response = client.get("/dashboard", follow_redirects=False)

    assert "set-cookie" not in response.headers
