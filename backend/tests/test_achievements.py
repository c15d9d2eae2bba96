from conftest import USER_A, VIEWER, as_user, make_profile


def test_post_and_list_achievements(client, db):
    make_profile(db, VIEWER, display_name="たろう")

    r = client.post(
        "/achievements",
        json={"title": "模試でA判定", "description": "", "achievement_date": "2025-01-05"},
        headers=as_user(VIEWER),
    )
    assert r.status_code == 200
    created = r.json()
    assert created["description"] is None
    assert created["achievement_date"] == "2025-01-05"

    client.post("/achievements", json={"title": "英検合格"}, headers=as_user(USER_A))

    listed = client.get("/achievements").json()
    assert [a["title"] for a in listed] == ["英検合格", "模試でA判定"]
    assert listed[0]["user_display_name"] is None
    assert listed[1]["user_display_name"] == "たろう"


def test_achievement_date_defaults_to_today(client):
    r = client.post("/achievements", json={"title": "100時間達成"}, headers=as_user(VIEWER))
    assert r.status_code == 200
    assert r.json()["achievement_date"]


def test_blank_title_is_rejected(client):
    r = client.post("/achievements", json={"title": " "}, headers=as_user(VIEWER))
    assert r.status_code == 422
    assert r.json()["detail"] == "達成内容を入力してください"
