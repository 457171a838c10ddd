from vagasrmc.db.models import Job


def test_company_creates_active_job(api, client, db_session) -> None:
    headers = api.company()
    job = api.create_job(headers)

    assert job["slug"] == "desenvolvedor-python-pleno"
    assert job["status"] == "ACTIVE"
    assert job["published_at"] is not None
    assert job["expires_at"] is not None
    assert [city["slug"] for city in job["cities"]] == ["campinas"]

    row = db_session.get(Job, job["id"])
    assert (row.expires_at - row.published_at).days == 30


def test_slug_collision_within_company_gets_suffix(api) -> None:
    headers = api.company()
    first = api.create_job(headers)
    second = api.create_job(headers)

    assert second["slug"] != first["slug"]
    assert second["slug"].startswith(first["slug"] + "-")
    assert second["slug"].rsplit("-", 1)[1].isdigit()


def test_job_validation(api, client) -> None:
    headers = api.company()
    response = client.post("/api/company/jobs", json=api.job_payload(description="curta demais"), headers=headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Descrição deve ter pelo menos 50 caracteres"

    response = client.post("/api/company/jobs", json=api.job_payload(city_ids=[]), headers=headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Selecione pelo menos uma cidade"


def test_only_companies_can_post_jobs(api, client) -> None:
    assert client.post("/api/company/jobs", json=api.job_payload()).status_code == 401

    candidate = api.candidate()
    response = client.post("/api/company/jobs", json=api.job_payload(), headers=candidate)
    assert response.status_code == 403
    assert response.json()["error_code"] == "FORBIDDEN"


def test_free_plan_quota_blocks_third_active_job(api, client) -> None:
    headers = api.company()
    api.create_job(headers, title="Vaga Número Um")
    api.create_job(headers, title="Vaga Número Dois")

    response = client.post("/api/company/jobs", json=api.job_payload(title="Vaga Número Três"), headers=headers)
    assert response.status_code == 403
    assert response.json()["error"] == "Limite de 2 vagas ativas atingido. Atualize seu plano."
    assert response.json()["error_code"] == "QUOTA_EXCEEDED"


def test_pausing_frees_quota_and_reactivation_is_checked(api, client) -> None:
    headers = api.company()
    first = api.create_job(headers, title="Vaga Número Um")
    api.create_job(headers, title="Vaga Número Dois")

    paused = client.patch(f"/api/company/jobs/{first['id']}/status", json={"status": "PAUSED"}, headers=headers)
    assert paused.json()["data"]["status"] == "PAUSED"

    api.create_job(headers, title="Vaga Número Três")

    response = client.patch(f"/api/company/jobs/{first['id']}/status", json={"status": "ACTIVE"}, headers=headers)
    assert response.status_code == 403

    listing = client.get("/api/company/jobs", headers=headers).json()["data"]
    assert sorted(job["status"] for job in listing) == ["ACTIVE", "ACTIVE", "PAUSED"]


def test_closed_job_cannot_be_reopened(api, client) -> None:
    headers = api.company()
    job = api.create_job(headers)
    client.patch(f"/api/company/jobs/{job['id']}/status", json={"status": "CLOSED"}, headers=headers)

    response = client.patch(f"/api/company/jobs/{job['id']}/status", json={"status": "ACTIVE"}, headers=headers)
    assert response.status_code == 400


def test_company_cannot_touch_another_companys_job(api, client) -> None:
    owner = api.company()
    job = api.create_job(owner)
    other = api.company("rh@outra.com.br")

    response = client.patch(f"/api/company/jobs/{job['id']}/status", json={"status": "PAUSED"}, headers=other)
    assert response.status_code == 404


def test_search_lists_only_active_jobs(api, client) -> None:
    headers = api.company()
    visible = api.create_job(headers, title="Analista de Suporte")
    hidden = api.create_job(headers, title="Analista de Redes")
    client.patch(f"/api/company/jobs/{hidden['id']}/status", json={"status": "PAUSED"}, headers=headers)

    body = client.get("/api/jobs").json()
    assert [job["id"] for job in body["data"]] == [visible["id"]]
    assert body["pagination"] == {"page": 1, "limit": 20, "total": 1, "total_pages": 1}


def test_search_filters(api, client) -> None:
    acme = api.company()
    api.create_job(acme, title="Desenvolvedor Backend", salary_min=5000, salary_max=8000)
    api.create_job(
        acme,
        title="Operador de Empilhadeira",
        area_id=api.area_id("logistica"),
        level="JUNIOR",
        modality="ONSITE",
        contract_type="TEMPORARY",
        city_ids=[api.city_id("sumare")],
        salary_min=2000,
        salary_max=2500,
    )

    def titles(**params) -> list[str]:
        return sorted(job["title"] for job in client.get("/api/jobs", params=params).json()["data"])

    assert titles(city="sumare") == ["Operador de Empilhadeira"]
    assert titles(area="ti") == ["Desenvolvedor Backend"]
    assert titles(level="JUNIOR") == ["Operador de Empilhadeira"]
    assert titles(modality="HYBRID") == ["Desenvolvedor Backend"]
    assert titles(contractType="TEMPORARY") == ["Operador de Empilhadeira"]
    assert titles(salaryMin=4000) == ["Desenvolvedor Backend"]
    assert titles(salaryMax=3000) == ["Operador de Empilhadeira"]
    assert titles(q="empilhadeira") == ["Operador de Empilhadeira"]
    assert titles(q="acme") == ["Desenvolvedor Backend", "Operador de Empilhadeira"]
    assert titles(city="sumare", area="ti") == []


def test_pagination_limits(api, client) -> None:
    headers = api.company()
    api.create_job(headers, title="Vaga Número Um")
    api.create_job(headers, title="Vaga Número Dois")

    clamped = client.get("/api/jobs", params={"limit": 500}).json()
    assert clamped["pagination"]["limit"] == 50

    first_page = client.get("/api/jobs", params={"limit": 1, "page": 0}).json()
    assert first_page["pagination"] == {"page": 1, "limit": 1, "total": 2, "total_pages": 2}
    assert len(first_page["data"]) == 1

    beyond = client.get("/api/jobs", params={"limit": 1, "page": 5}).json()
    assert beyond["data"] == []
    assert beyond["pagination"]["total"] == 2


def test_page_far_beyond_end_is_empty(api, client) -> None:
    api.create_job(api.company())
    headers = api.candidate()

    body = client.get("/api/jobs", params={"page": 10**18}).json()
    assert body["success"] is True
    assert body["data"] == []
    assert body["pagination"]["total"] == 1

    mine = client.get("/api/candidate/applications", params={"page": 10**18}, headers=headers)
    assert mine.status_code == 200
    assert mine.json()["data"] == []


def test_job_detail_counts_views(api, client) -> None:
    headers = api.company()
    job = api.create_job(headers)

    first = client.get(f"/api/jobs/{job['slug']}").json()["data"]
    second = client.get(f"/api/jobs/{job['slug']}").json()["data"]
    assert first["view_count"] == 1
    assert second["view_count"] == 2
    assert second["has_applied"] is False
    assert second["description"].startswith("Procuramos")


def test_paused_job_detail_is_not_found(api, client) -> None:
    headers = api.company()
    job = api.create_job(headers)
    client.patch(f"/api/company/jobs/{job['id']}/status", json={"status": "PAUSED"}, headers=headers)

    response = client.get(f"/api/jobs/{job['slug']}")
    assert response.status_code == 404
    assert response.json()["error"] == "Vaga não encontrada"


def test_hidden_salary_is_not_exposed(api, client) -> None:
    headers = api.company()
    job = api.create_job(headers, hide_salary=True)
    detail = client.get(f"/api/jobs/{job['slug']}").json()["data"]
    assert detail["salary_min"] is None
    assert detail["salary_max"] is None


def test_reference_data_is_seeded(client) -> None:
    assert len(client.get("/api/cities").json()["data"]) == 18
    assert len(client.get("/api/areas").json()["data"]) == 15
    assert len(client.get("/api/segments").json()["data"]) == 12
    plans = client.get("/api/plans").json()["data"]
    assert [plan["type"] for plan in plans] == ["FREE", "BASIC", "PROFESSIONAL", "PREMIUM"]
    assert plans[-1]["max_active_jobs"] == -1


def _titles(client, **params) -> list[str]:
    return [job["title"] for job in client.get("/api/jobs", params=params).json()["data"]]


def test_order_by_salary(api, client) -> None:
    headers = api.company()
    api.create_job(headers, title="Vaga Bem Paga", salary_min=8000, salary_max=12000)
    api.create_job(headers, title="Vaga Modesta", salary_min=1500, salary_max=2000)

    assert _titles(client) == ["Vaga Modesta", "Vaga Bem Paga"]
    assert _titles(client, orderBy="salary") == ["Vaga Bem Paga", "Vaga Modesta"]


def test_order_by_applications(api, client) -> None:
    headers = api.company()
    popular = api.create_job(headers, title="Vaga Disputada")
    api.create_job(headers, title="Vaga Recente")
    candidate = api.candidate()
    client.post(f"/api/jobs/{popular['slug']}/apply", headers=candidate)

    assert _titles(client) == ["Vaga Recente", "Vaga Disputada"]
    assert _titles(client, orderBy="applications") == ["Vaga Disputada", "Vaga Recente"]


def test_featured_outranks_highlighted_which_outranks_order_key(api, client) -> None:
    headers = api.company()
    company_id = client.get("/api/company/profile", headers=headers).json()["data"]["id"]
    admin = api.admin()
    client.post(f"/api/admin/companies/{company_id}/subscription", json={"plan": "PROFESSIONAL"}, headers=admin)

    api.create_job(headers, title="Vaga em Destaque", is_featured=True, salary_max=3000)
    api.create_job(headers, title="Vaga Realcada", is_highlighted=True, salary_max=4000)
    api.create_job(headers, title="Vaga Comum", salary_max=20000)

    expected = ["Vaga em Destaque", "Vaga Realcada", "Vaga Comum"]
    assert _titles(client) == expected
    assert _titles(client, orderBy="salary") == expected


def test_search_text_is_matched_literally(api, client) -> None:
    headers = api.company()
    api.create_job(headers, title="Analista de Dados")
    api.create_job(headers, title="Bonus de 100% no primeiro mes")

    assert _titles(client, q="%") == ["Bonus de 100% no primeiro mes"]
    assert _titles(client, q="_") == []
    assert _titles(client, q="100%") == ["Bonus de 100% no primeiro mes"]
