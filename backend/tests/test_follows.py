from conftest import USER_A, USER_B, VIEWER, as_user, make_record


def test_follow_and_unfollow(client):
    r = client.post(f"/follows/{USER_A}", headers=as_user(VIEWER))
    assert r.status_code == 200
    assert r.json() == {"target_id": USER_A, "following": True, "follower_count": 1}

    status = client.get(f"/follows/{USER_A}", headers=as_user(VIEWER)).json()
    assert status["following"] is True

    r = client.delete(f"/follows/{USER_A}", headers=as_user(VIEWER))
    assert r.json() == {"target_id": USER_A, "following": False, "follower_count": 0}


def test_follow_twice_is_idempotent(client):
    client.post(f"/follows/{USER_A}", headers=as_user(VIEWER))
    r = client.post(f"/follows/{USER_A}", headers=as_user(VIEWER))
    assert r.status_code == 200
    assert r.json()["follower_count"] == 1


def test_cannot_follow_self(client):
    r = client.post(f"/follows/{VIEWER}", headers=as_user(VIEWER))
    assert r.status_code == 400


def test_unfollow_when_not_following(client):
    r = client.delete(f"/follows/{USER_A}", headers=as_user(VIEWER))
    assert r.status_code == 200
    assert r.json()["following"] is False


def test_following_changes_the_activity_feed(client, db, store):
    make_record(db, USER_A, created=1)
    make_record(db, USER_B, created=2)

    before = client.get("/feed", headers=as_user(VIEWER)).json()
    assert before["is_recommendation"] is True
    assert len(before["records"]) == 2

    client.post(f"/follows/{USER_A}", headers=as_user(VIEWER))
    # Follow edits drop the cached feed for the viewer
    assert store.snapshot(VIEWER) is None

    after = client.get("/feed", headers=as_user(VIEWER)).json()
    assert after["is_recommendation"] is False
    assert [r["user_id"] for r in after["records"]] == [USER_A]


def test_follows_require_login(client):
    assert client.post(f"/follows/{USER_A}").status_code == 401
