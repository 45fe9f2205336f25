"""User appeals against ratings, admin review, and feedback."""

from sqlalchemy import select

from campus_crush.db.database import get_db_session, fetch_one
from campus_crush.db.tables import ratings, users


def setup_rated_user(client, college_id, make_user, auth_headers, scores=(2,)):
    target = make_user(college_id=college_id, gender="female")
    rating_ids = []
    for score in scores:
        rater = make_user(college_id=college_id, gender="male")
        response = client.post("/api/ratings", headers=auth_headers(rater), json={
            "target_user_id": target["user_id"], "score": score
        })
        rating_ids.append(response.json()["rating_id"])
    return target, rating_ids


def file_appeal(client, headers, rating_id=None, reason="fake_rating"):
    return client.post("/api/appeals", headers=headers, json={
        "rating_id": rating_id, "reason": reason, "description": "This rating looks fake to me"
    })


def test_file_appeal_on_received_rating(client, college_id, make_user, auth_headers):
    target, (rating_id,) = setup_rated_user(client, college_id, make_user, auth_headers)

    response = file_appeal(client, auth_headers(target), rating_id)

    assert response.status_code == 201
    appeal = response.json()
    assert appeal["status"] == "pending"
    assert appeal["rating_id"] == rating_id
    assert appeal["user_id"] == target["user_id"]

    mine = client.get("/api/appeals", headers=auth_headers(target)).json()
    assert [a["appeal_id"] for a in mine] == [appeal["appeal_id"]]


def test_general_appeal_without_rating(client, college_id, make_user, auth_headers):
    user = make_user(college_id=college_id)

    response = file_appeal(client, auth_headers(user), reason="other")
    assert response.status_code == 201
    assert response.json()["rating_id"] is None


def test_cannot_appeal_someone_elses_rating(client, college_id, make_user, auth_headers):
    target, (rating_id,) = setup_rated_user(client, college_id, make_user, auth_headers)
    stranger = make_user(college_id=college_id, gender="female")

    response = file_appeal(client, auth_headers(stranger), rating_id)
    assert response.status_code == 404


def test_one_pending_appeal_per_rating(client, college_id, make_user, auth_headers):
    target, (rating_id,) = setup_rated_user(client, college_id, make_user, auth_headers)

    assert file_appeal(client, auth_headers(target), rating_id).status_code == 201
    assert file_appeal(client, auth_headers(target), rating_id).status_code == 409


def test_appeal_validation(client, college_id, make_user, auth_headers):
    user = make_user(college_id=college_id)

    too_short = client.post("/api/appeals", headers=auth_headers(user), json={
        "reason": "spam", "description": "short"
    })
    bad_reason = client.post("/api/appeals", headers=auth_headers(user), json={
        "reason": "dislike", "description": "I do not like this rating"
    })
    assert too_short.status_code == 422
    assert bad_reason.status_code == 422


def test_approved_appeal_removes_rating(client, college_id, make_user, auth_headers):
    admin = make_user(college_id=college_id, role="admin")
    target, (low, high) = setup_rated_user(client, college_id, make_user, auth_headers, scores=(2, 8))
    appeal = file_appeal(client, auth_headers(target), low).json()

    pending = client.get("/api/admin/appeals?status=pending", headers=auth_headers(admin)).json()
    assert [a["appeal_id"] for a in pending] == [appeal["appeal_id"]]

    response = client.put(
        f"/api/admin/appeals/{appeal['appeal_id']}", headers=auth_headers(admin), json={"status": "approved"}
    )

    assert response.status_code == 200
    reviewed = response.json()
    assert reviewed["status"] == "approved"
    assert reviewed["reviewed_by"] == admin["user_id"]
    assert reviewed["reviewed_at"] is not None

    with get_db_session() as db:
        rating = fetch_one(db, select(ratings).where(ratings.c.rating_id == low))
        stats = fetch_one(db, select(users).where(users.c.user_id == target["user_id"]))
    assert rating["status"] == "removed"
    assert stats["ratings_received"] == 1
    assert stats["average_score"] == 8.0

    received = client.get("/api/ratings/received", headers=auth_headers(target)).json()
    assert {r["rating_id"]: r["status"] for r in received} == {low: "removed", high: "active"}


def test_rejected_appeal_keeps_rating(client, college_id, make_user, auth_headers):
    admin = make_user(college_id=college_id, role="admin")
    target, (rating_id,) = setup_rated_user(client, college_id, make_user, auth_headers)
    appeal = file_appeal(client, auth_headers(target), rating_id).json()

    response = client.put(
        f"/api/admin/appeals/{appeal['appeal_id']}", headers=auth_headers(admin), json={"status": "rejected"}
    )
    assert response.json()["status"] == "rejected"

    with get_db_session() as db:
        rating = fetch_one(db, select(ratings).where(ratings.c.rating_id == rating_id))
    assert rating["status"] == "active"


def test_review_twice_conflicts(client, college_id, make_user, auth_headers):
    admin = make_user(college_id=college_id, role="admin")
    user = make_user(college_id=college_id)
    appeal = file_appeal(client, auth_headers(user), reason="other").json()
    url = f"/api/admin/appeals/{appeal['appeal_id']}"

    assert client.put(url, headers=auth_headers(admin), json={"status": "rejected"}).status_code == 200
    assert client.put(url, headers=auth_headers(admin), json={"status": "approved"}).status_code == 409
    assert client.put(url + "999", headers=auth_headers(admin), json={"status": "approved"}).status_code == 404


def test_review_requires_known_decision(client, college_id, make_user, auth_headers):
    admin = make_user(college_id=college_id, role="admin")
    user = make_user(college_id=college_id)
    appeal = file_appeal(client, auth_headers(user), reason="other").json()

    response = client.put(
        f"/api/admin/appeals/{appeal['appeal_id']}", headers=auth_headers(admin), json={"status": "pending"}
    )
    assert response.status_code == 422


def test_submit_feedback_defaults_device_info(client, college_id, make_user, auth_headers):
    user = make_user(college_id=college_id)
    headers = {**auth_headers(user), "User-Agent": "CampusCrushTest/1.0"}

    response = client.post("/api/feedback", headers=headers, json={
        "type": "bug", "title": "Upload fails", "description": "Photo upload spins forever", "rating": 3
    })

    assert response.status_code == 201
    body = response.json()
    assert body["device_info"] == "CampusCrushTest/1.0"
    assert body["status"] == "open"
    assert body["priority"] == "medium"

    mine = client.get("/api/feedback", headers=auth_headers(user)).json()
    assert [f["feedback_id"] for f in mine] == [body["feedback_id"]]


def test_feedback_validation(client, college_id, make_user, auth_headers):
    user = make_user(college_id=college_id)

    response = client.post("/api/feedback", headers=auth_headers(user), json={
        "type": "feature", "title": "Dark", "description": "Please add dark mode", "rating": 6
    })
    assert response.status_code == 422


def test_admin_lists_all_feedback(client, college_id, make_user, auth_headers):
    admin = make_user(college_id=college_id, role="admin")
    for i in range(3):
        user = make_user(college_id=college_id)
        client.post("/api/feedback", headers=auth_headers(user), json={
            "type": "improvement", "title": f"Idea number {i}", "description": "Something could be better"
        })

    assert len(client.get("/api/admin/feedback", headers=auth_headers(admin)).json()) == 3
    assert len(client.get("/api/admin/feedback?limit=2", headers=auth_headers(admin)).json()) == 2
    assert client.get("/api/admin/feedback?limit=201", headers=auth_headers(admin)).status_code == 422
