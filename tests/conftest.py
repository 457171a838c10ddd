from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from vagasrmc.api.app import create_app
from vagasrmc.config import Settings
from vagasrmc.core.accounts import AccountService

PASSWORD = "secret123"
JOB_DESCRIPTION = (
    "Procuramos desenvolvedor Python com Django para APIs REST no time de backend em Campinas."
)
CNPJS = ["11222333000181", "11444777000161", "12345678000195"]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        app_env="test",
        secret_key="test-secret-key",
        database_url=f"sqlite:///{tmp_path / 'vagasrmc-test.db'}",
        password_hash_rounds=4,
        cors_origins="http://testserver",
        seed_on_startup=True,
    )


@pytest.fixture
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session(app, client):
    with app.state.database.session() as session:
        yield session


class ApiHelper:
    """Registers accounts and jobs through the public API."""

    def __init__(self, client: TestClient, app, settings: Settings):
        self.client = client
        self.app = app
        self.settings = settings
        self._cnpjs = iter(CNPJS)

    def city_id(self, slug: str = "campinas") -> int:
        rows = self.client.get("/api/cities").json()["data"]
        return next(row["id"] for row in rows if row["slug"] == slug)

    def area_id(self, slug: str = "ti") -> int:
        rows = self.client.get("/api/areas").json()["data"]
        return next(row["id"] for row in rows if row["slug"] == slug)

    def candidate_payload(self, email: str = "ana@example.com", **overrides) -> dict:
        payload = {
            "email": email,
            "password": PASSWORD,
            "confirm_password": PASSWORD,
            "full_name": "Ana Souza",
            "phone": "19999990000",
            "residence_city_id": self.city_id(),
            "accept_terms": True,
        }
        payload.update(overrides)
        return payload

    def company_payload(self, email: str = "rh@acme.com.br", **overrides) -> dict:
        payload = {
            "email": email,
            "password": PASSWORD,
            "confirm_password": PASSWORD,
            "legal_name": "Acme Tecnologia LTDA",
            "trade_name": "Acme",
            "cnpj": next(self._cnpjs),
            "phone": "1933330000",
            "city_ids": [self.city_id()],
            "accept_terms": True,
        }
        payload.update(overrides)
        return payload

    def login(self, email: str, password: str = PASSWORD) -> dict[str, str]:
        response = self.client.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        self.client.cookies.clear()
        return {"Authorization": f"Bearer {response.json()['data']['token']}"}

    def candidate(self, email: str = "ana@example.com", **overrides) -> dict[str, str]:
        response = self.client.post("/api/auth/register/candidate", json=self.candidate_payload(email, **overrides))
        assert response.status_code == 200, response.text
        return self.login(email)

    def company(self, email: str = "rh@acme.com.br", **overrides) -> dict[str, str]:
        response = self.client.post("/api/auth/register/company", json=self.company_payload(email, **overrides))
        assert response.status_code == 200, response.text
        return self.login(email)

    def admin(self, email: str = "admin@vagasrmc.com.br") -> dict[str, str]:
        with self.app.state.database.session() as session:
            AccountService(session, settings=self.settings).create_admin(email, PASSWORD)
        return self.login(email)

    def job_payload(self, **overrides) -> dict:
        payload = {
            "title": "Desenvolvedor Python Pleno",
            "description": JOB_DESCRIPTION,
            "area_id": self.area_id(),
            "level": "MID",
            "modality": "HYBRID",
            "contract_type": "CLT",
            "salary_min": 6000,
            "salary_max": 9000,
            "city_ids": [self.city_id()],
        }
        payload.update(overrides)
        return payload

    def create_job(self, headers: dict[str, str], **overrides) -> dict:
        response = self.client.post("/api/company/jobs", json=self.job_payload(**overrides), headers=headers)
        assert response.status_code == 200, response.text
        return response.json()["data"]

    def set_skills(self, headers: dict[str, str], skills: list[str]) -> None:
        response = self.client.patch("/api/candidate/profile", json={"skills": skills}, headers=headers)
        assert response.status_code == 200, response.text


@pytest.fixture
def api(client: TestClient, app, settings: Settings) -> ApiHelper:
    return ApiHelper(client, app, settings)
