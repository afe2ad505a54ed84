from reelroom.tests.conftest import create_user


def test_get_profile(user_client, db_session):
    client, _ = user_client
    create_user(db_session, "erin", team="Orange")

    response = client.get("/api/users/erin")

    assert response.status_code == 200
    data = response.json()
    assert data["username"] == "erin"
    assert data["team"] == "Orange"
    assert data["role"] == "user"
    assert "email" not in data


def test_get_missing_profile_is_404(user_client):
    client, _ = user_client

    assert client.get("/api/users/ghost").status_code == 404


def test_user_updates_own_team(user_client, db_session):
    client, user = user_client

    response = client.put(f"/api/users/{user.username}", json={"team": "Red"})

    assert response.status_code == 200
    assert response.json()["message"] == "Team updated successfully"
    db_session.refresh(user)
    assert user.team == "Red"


def test_user_cannot_update_someone_else(user_client, db_session):
    client, _ = user_client
    other = create_user(db_session, "erin", team="Orange")

    response = client.put("/api/users/erin", json={"team": "Red"})

    assert response.status_code == 403
    assert response.json()["detail"] == "You can only update your own profile"
    db_session.refresh(other)
    assert other.team == "Orange"


def test_update_requires_team(user_client):
    client, user = user_client

    response = client.put(f"/api/users/{user.username}", json={})

    assert response.status_code == 400
    assert response.json()["detail"] == "team is required"


def test_update_rejects_blank_team(user_client, db_session):
    client, user = user_client

    response = client.put(f"/api/users/{user.username}", json={"team": "   "})

    assert response.status_code == 400
    assert "team" in response.json()["detail"]
    db_session.refresh(user)
    assert user.team == "Blue"


def test_update_strips_team(user_client, db_session):
    client, user = user_client

    response = client.put(f"/api/users/{user.username}", json={"team": "  Red  "})

    assert response.status_code == 200
    db_session.refresh(user)
    assert user.team == "Red"
