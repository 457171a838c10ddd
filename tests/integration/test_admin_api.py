from vagasrmc.db.models import AuditLog


def _company_id(client, headers) -> int:
    return client.get("/api/company/profile", headers=headers).json()["data"]["id"]


def test_admin_routes_require_admin(api, client) -> None:
    candidate = api.candidate()
    assert client.get("/api/admin/stats").status_code == 401
    response = client.get("/api/admin/stats", headers=candidate)
    assert response.status_code == 403
    assert response.json()["error"] == "Acesso negado"


def test_stats(api, client) -> None:
    company = api.company()
    api.create_job(company)
    api.create_job(company, title="Analista de Dados", city_ids=[api.city_id("sumare")])
    api.candidate()
    admin = api.admin()

    data = client.get("/api/admin/stats", headers=admin).json()["data"]
    assert data["counts"] == {
        "users": 3,
        "candidates": 1,
        "companies": 1,
        "pending_companies": 1,
        "jobs": 2,
        "active_jobs": 2,
        "applications": 0,
    }
    assert {row["name"] for row in data["jobs_by_city"]} == {"Campinas", "Sumaré"}
    assert data["jobs_by_area"] == [{"name": "Tecnologia da Informação", "total": 2}]
    assert len(data["recent_jobs"]) == 2
    assert data["recent_companies"][0]["trade_name"] == "Acme"


def test_verify_company(api, client, db_session) -> None:
    company = api.company()
    company_id = _company_id(client, company)
    admin = api.admin()

    pending = client.get("/api/admin/companies", params={"verified": "false"}, headers=admin).json()["data"]
    assert [row["id"] for row in pending] == [company_id]

    response = client.post(f"/api/admin/companies/{company_id}/verify", headers=admin)
    assert response.status_code == 200
    assert response.json()["data"]["is_verified"] is True

    assert client.get("/api/admin/companies", params={"verified": "false"}, headers=admin).json()["data"] == []
    assert client.get("/api/company/profile", headers=company).json()["data"]["is_verified"] is True
    assert db_session.query(AuditLog).filter_by(action="VERIFY_COMPANY").count() == 1

    missing = client.post("/api/admin/companies/999/verify", headers=admin)
    assert missing.status_code == 404


def test_subscription_raises_quota_and_unlocks_highlight(api, client) -> None:
    company = api.company()
    company_id = _company_id(client, company)
    admin = api.admin()

    plain = api.create_job(company, title="Vaga Sem Destaque", is_highlighted=True)
    assert plain["is_highlighted"] is False

    response = client.post(f"/api/admin/companies/{company_id}/subscription", json={"plan": "BASIC"}, headers=admin)
    assert response.status_code == 200
    assert response.json()["data"]["plan"]["type"] == "BASIC"

    highlighted = api.create_job(company, title="Vaga Com Destaque", is_highlighted=True, is_featured=True)
    assert highlighted["is_highlighted"] is True
    assert highlighted["is_featured"] is False

    api.create_job(company, title="Terceira Vaga Ativa")
    assert client.get("/api/company/profile", headers=company).json()["data"]["plan"]["max_active_jobs"] == 5


def test_featured_jobs_are_listed_first(api, client) -> None:
    company = api.company()
    company_id = _company_id(client, company)
    admin = api.admin()
    client.post(f"/api/admin/companies/{company_id}/subscription", json={"plan": "PROFESSIONAL"}, headers=admin)

    featured = api.create_job(company, title="Vaga em Destaque", is_featured=True)
    api.create_job(company, title="Vaga Publicada Depois")

    listing = client.get("/api/jobs").json()["data"]
    assert listing[0]["id"] == featured["id"]


def test_premium_plan_is_unlimited(api, client) -> None:
    company = api.company()
    company_id = _company_id(client, company)
    admin = api.admin()
    client.post(f"/api/admin/companies/{company_id}/subscription", json={"plan": "PREMIUM"}, headers=admin)

    for index in range(6):
        api.create_job(company, title=f"Vaga Ilimitada {index}")
    assert client.get("/api/jobs").json()["pagination"]["total"] == 6


def test_unknown_plan_is_rejected(api, client) -> None:
    company = api.company()
    company_id = _company_id(client, company)
    admin = api.admin()
    response = client.post(f"/api/admin/companies/{company_id}/subscription", json={"plan": "GOLD"}, headers=admin)
    assert response.status_code == 400


def test_audit_log_listing(api, client) -> None:
    api.candidate()
    admin = api.admin()

    body = client.get("/api/admin/audit", headers=admin).json()
    assert body["pagination"]["limit"] == 50
    actions = [row["action"] for row in body["data"]]
    assert actions[0] == "LOGIN"
    assert "REGISTER" in actions

    logins = client.get("/api/admin/audit", params={"action": "LOGIN"}, headers=admin).json()["data"]
    assert {row["action"] for row in logins} == {"LOGIN"}

    clamped = client.get("/api/admin/audit", params={"limit": 1000}, headers=admin).json()
    assert clamped["pagination"]["limit"] == 200
