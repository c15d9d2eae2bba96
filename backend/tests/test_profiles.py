from conftest import USER_A, USER_B, VIEWER, as_user, make_follow, make_profile


def test_my_profile_is_created_on_first_access(client):
    r = client.get("/profiles/me", headers=as_user(VIEWER))
    assert r.status_code == 200
    data = r.json()
    assert data["profile"]["id"] == VIEWER
    assert data["profile"]["display_name"] is None
    assert data["target_schools"] == []
    assert data["follower_count"] == 0


def test_update_profile_blanks_become_null(client):
    r = client.put(
        "/profiles/me",
        json={"display_name": "たろう", "bio": "   ", "grade": "高3"},
        headers=as_user(VIEWER),
    )
    assert r.status_code == 200
    profile = r.json()
    assert profile["display_name"] == "たろう"
    assert profile["bio"] is None
    assert profile["grade"] == "高3"


def test_bio_length_limit(client):
    ok = client.put("/profiles/me", json={"bio": "あ" * 400}, headers=as_user(VIEWER))
    assert ok.status_code == 200

    too_long = client.put("/profiles/me", json={"bio": "あ" * 401}, headers=as_user(VIEWER))
    assert too_long.status_code == 422


def test_public_profile_with_counts(client, db):
    make_profile(db, USER_A, display_name="Aさん")
    make_follow(db, VIEWER, USER_A)
    make_follow(db, USER_B, USER_A)
    make_follow(db, USER_A, USER_B)

    card = client.get(f"/profiles/{USER_A}").json()
    assert card["display_name"] == "Aさん"
    assert card["follower_count"] == 2
    assert card["following_count"] == 1


def test_public_profile_404(client):
    assert client.get(f"/profiles/{USER_B}").status_code == 404


def test_search_users(client, db):
    make_profile(db, USER_A, display_name="山田太郎")
    make_profile(db, USER_B, display_name="佐藤花子")

    hits = client.get("/profiles/search", params={"q": "山田"}).json()
    assert [h["id"] for h in hits] == [USER_A]
    assert client.get("/profiles/search", params={"q": " "}).json() == []


def test_target_schools_are_capped(client):
    headers = as_user(VIEWER)
    for name in ["東京大学", "京都大学", "大阪大学"]:
        r = client.post("/profiles/me/target-schools", json={"school_name": name}, headers=headers)
        assert r.status_code == 200

    r = client.post("/profiles/me/target-schools", json={"school_name": "東北大学"}, headers=headers)
    assert r.status_code == 422
    assert r.json()["detail"] == "最大3校まで登録できます"

    listed = client.get("/profiles/me/target-schools", headers=headers).json()
    assert [s["school_name"] for s in listed] == ["東京大学", "京都大学", "大阪大学"]


def test_target_school_edit_and_delete(client):
    headers = as_user(VIEWER)
    school = client.post(
        "/profiles/me/target-schools",
        json={"school_name": "東京大学", "faculty": ""},
        headers=headers,
    ).json()
    assert school["faculty"] is None

    r = client.put(
        f"/profiles/me/target-schools/{school['id']}",
        json={"school_name": "東京大学", "faculty": "理科一類"},
        headers=headers,
    )
    assert r.json()["faculty"] == "理科一類"

    # Someone else's school is invisible
    other = client.delete(f"/profiles/me/target-schools/{school['id']}", headers=as_user(USER_A))
    assert other.status_code == 404

    assert client.delete(f"/profiles/me/target-schools/{school['id']}", headers=headers).status_code == 200
    assert client.get("/profiles/me/target-schools", headers=headers).json() == []


def test_blank_school_name_is_rejected(client):
    r = client.post(
        "/profiles/me/target-schools", json={"school_name": " "}, headers=as_user(VIEWER)
    )
    assert r.status_code == 422


def test_avatar_upload_falls_back_to_data_url(client):
    r = client.post(
        "/profiles/me/avatar",
        files={"file": ("me.png", b"\x89PNG", "image/png")},
        headers=as_user(VIEWER),
    )
    assert r.status_code == 200
    assert r.json()["avatar_url"].startswith("data:image/png;base64,")
