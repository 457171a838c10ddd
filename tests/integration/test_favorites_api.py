def test_toggle_favorite(api, client) -> None:
    company = api.company()
    job = api.create_job(company)
    candidate = api.candidate()

    first = client.post(f"/api/jobs/{job['slug']}/favorite", headers=candidate)
    assert first.json()["data"] == {"action": "favorited"}

    listing = client.get("/api/candidate/favorites", headers=candidate).json()
    assert [row["job"]["id"] for row in listing["data"]] == [job["id"]]
    assert listing["pagination"]["limit"] == 10

    detail = client.get(f"/api/jobs/{job['slug']}", headers=candidate).json()["data"]
    assert detail["is_favorited"] is True
    assert detail["favorites_count"] == 1

    second = client.post(f"/api/jobs/{job['slug']}/favorite", headers=candidate)
    assert second.json()["data"] == {"action": "unfavorited"}
    assert client.get("/api/candidate/favorites", headers=candidate).json()["data"] == []


def test_paused_job_can_still_be_favorited(api, client) -> None:
    company = api.company()
    job = api.create_job(company)
    client.patch(f"/api/company/jobs/{job['id']}/status", json={"status": "PAUSED"}, headers=company)
    candidate = api.candidate()

    response = client.post(f"/api/jobs/{job['slug']}/favorite", headers=candidate)
    assert response.status_code == 200
    assert response.json()["data"]["action"] == "favorited"


def test_favorite_unknown_job(api, client) -> None:
    candidate = api.candidate()
    response = client.post("/api/jobs/nao-existe/favorite", headers=candidate)
    assert response.status_code == 404


def test_favorites_require_candidate(api, client) -> None:
    company = api.company()
    job = api.create_job(company)

    assert client.post(f"/api/jobs/{job['slug']}/favorite").status_code == 401
    assert client.post(f"/api/jobs/{job['slug']}/favorite", headers=company).status_code == 403
