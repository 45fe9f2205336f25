"""Random discovery and name search."""

from tests.conftest import insert_college


def ids(response):
    return {p["user_id"] for p in response.json()}


def test_random_profiles_only_shows_eligible_candidates(client, college_id, make_user, auth_headers):
    viewer = make_user(college_id=college_id, gender="male")
    match = make_user(college_id=college_id, gender="female")
    make_user(college_id=college_id, gender="male")
    make_user(college_id=college_id, gender="female", verified=False)
    make_user(college_id=college_id, gender="female", is_active=False)
    other_college = insert_college(name="Other", email_domain="other.edu")
    make_user(college_id=other_college, gender="female")

    response = client.get("/api/profiles/random", headers=auth_headers(viewer))

    assert response.status_code == 200
    assert ids(response) == {match["user_id"]}


def test_public_profile_hides_private_fields(client, college_id, make_user, auth_headers):
    viewer = make_user(college_id=college_id, gender="female")
    make_user(college_id=college_id, gender="male")

    profile = client.get("/api/profiles/random", headers=auth_headers(viewer)).json()[0]

    assert "email" not in profile
    assert "average_score" not in profile
    assert "ratings_received" not in profile
    assert set(profile) == {
        "user_id", "display_name", "first_name", "bio", "profile_image_url", "gender", "college_id"
    }


def test_random_profiles_respects_limit(client, college_id, make_user, auth_headers):
    viewer = make_user(college_id=college_id, gender="male")
    for _ in range(5):
        make_user(college_id=college_id, gender="female")

    response = client.get("/api/profiles/random?limit=3", headers=auth_headers(viewer))

    assert len(response.json()) == 3
    assert client.get("/api/profiles/random?limit=0", headers=auth_headers(viewer)).status_code == 422
    assert client.get("/api/profiles/random?limit=51", headers=auth_headers(viewer)).status_code == 422


def test_random_profiles_skip_already_rated(client, college_id, make_user, auth_headers):
    viewer = make_user(college_id=college_id, gender="male")
    rated = make_user(college_id=college_id, gender="female")
    unrated = make_user(college_id=college_id, gender="female")

    client.post("/api/ratings", headers=auth_headers(viewer), json={
        "target_user_id": rated["user_id"], "score": 7
    })

    response = client.get("/api/profiles/random", headers=auth_headers(viewer))
    assert ids(response) == {unrated["user_id"]}

    response = client.get("/api/profiles/random?include_rated=true", headers=auth_headers(viewer))
    assert ids(response) == {rated["user_id"], unrated["user_id"]}


def test_gender_other_sees_nobody(client, college_id, make_user, auth_headers):
    viewer = make_user(college_id=college_id, gender="other")
    make_user(college_id=college_id, gender="female")
    make_user(college_id=college_id, gender="male")

    assert client.get("/api/profiles/random", headers=auth_headers(viewer)).json() == []
    assert client.get("/api/profiles/search?q=user", headers=auth_headers(viewer)).json() == []


def test_discovery_requires_onboarding(client, college_id, make_user, auth_headers):
    viewer = make_user(college_id=college_id, gender=None)

    response = client.get("/api/profiles/random", headers=auth_headers(viewer))

    assert response.status_code == 400
    assert response.json()["detail"] == "Please complete your profile first"


def test_search_matches_names_case_insensitively(client, college_id, make_user, auth_headers):
    viewer = make_user(college_id=college_id, gender="male")
    priya = make_user(college_id=college_id, gender="female", first_name="Priya", last_name="Patel")
    sneha = make_user(college_id=college_id, gender="female", first_name="Sneha", display_name="Pat")
    make_user(college_id=college_id, gender="female", first_name="Kavya", last_name="Reddy")

    response = client.get("/api/profiles/search?q=PAT", headers=auth_headers(viewer))

    assert response.status_code == 200
    assert [p["user_id"] for p in response.json()] == [priya["user_id"], sneha["user_id"]]


def test_search_requires_query(client, college_id, make_user, auth_headers):
    viewer = make_user(college_id=college_id, gender="male")
    assert client.get("/api/profiles/search", headers=auth_headers(viewer)).status_code == 422


def test_search_treats_wildcards_literally(client, college_id, make_user, auth_headers):
    viewer = make_user(college_id=college_id, gender="male")
    make_user(college_id=college_id, gender="female", first_name="Alice", last_name="Smith")
    percent = make_user(college_id=college_id, gender="female", first_name="Bea", display_name="100%")

    assert client.get("/api/profiles/search?q=_", headers=auth_headers(viewer)).json() == []

    response = client.get("/api/profiles/search", params={"q": "%"}, headers=auth_headers(viewer))
    assert ids(response) == {percent["user_id"]}
