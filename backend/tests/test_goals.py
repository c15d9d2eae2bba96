from conftest import USER_A, VIEWER, as_user, make_goal


def test_goal_crud(client):
    r = client.post(
        "/goals",
        json={"title": " 英検2級 ", "description": "", "date": "2025-06-01"},
        headers=as_user(VIEWER),
    )
    assert r.status_code == 200
    goal = r.json()
    assert goal["title"] == "英検2級"
    assert goal["description"] is None
    assert goal["date"] == "2025-06-01"

    r = client.put(
        f"/goals/{goal['id']}",
        json={"date": None, "description": "過去問中心"},
        headers=as_user(VIEWER),
    )
    assert r.status_code == 200
    updated = r.json()
    assert updated["title"] == "英検2級"
    assert updated["date"] is None
    assert updated["description"] == "過去問中心"

    assert [g["id"] for g in client.get("/goals", headers=as_user(VIEWER)).json()] == [goal["id"]]

    assert client.delete(f"/goals/{goal['id']}", headers=as_user(VIEWER)).status_code == 200
    assert client.get("/goals", headers=as_user(VIEWER)).json() == []


def test_goal_without_date(client):
    r = client.post("/goals", json={"title": "毎日勉強"}, headers=as_user(VIEWER))
    assert r.status_code == 200
    assert r.json()["date"] is None


def test_blank_title_is_rejected(client):
    r = client.post("/goals", json={"title": "  "}, headers=as_user(VIEWER))
    assert r.status_code == 422
    assert r.json()["detail"] == "目標タイトルを入力してください"


def test_only_owner_can_edit_or_delete(client, db):
    goal = make_goal(db, USER_A, title="Aの目標")

    r = client.put(f"/goals/{goal.id}", json={"title": "乗っ取り"}, headers=as_user(VIEWER))
    assert r.status_code == 404
    assert client.delete(f"/goals/{goal.id}", headers=as_user(VIEWER)).status_code == 404

    listed = client.get("/goals", headers=as_user(USER_A)).json()
    assert [g["title"] for g in listed] == ["Aの目標"]


def test_list_only_shows_own_goals(client, db):
    make_goal(db, USER_A, title="A", created=1)
    make_goal(db, VIEWER, title="mine-old", created=2)
    make_goal(db, VIEWER, title="mine-new", created=3)

    listed = client.get("/goals", headers=as_user(VIEWER)).json()
    assert [g["title"] for g in listed] == ["mine-new", "mine-old"]


def test_goals_require_login(client):
    assert client.get("/goals").status_code == 401
    assert client.post("/goals", json={"title": "x"}).status_code == 401
