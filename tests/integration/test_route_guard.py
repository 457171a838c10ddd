def _cookie_login(client, email: str, password: str = "secret123") -> None:
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200


def test_guard_redirects_anonymous_visitors(client) -> None:
    for path in ("/candidato", "/empresa/vagas", "/admin"):
        response = client.get(path, follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == f"/login?next={path}"


def test_guard_redirects_wrong_role(api, client) -> None:
    api.candidate()
    _cookie_login(client, "ana@example.com")

    assert client.get("/empresa", follow_redirects=False).status_code == 303
    assert client.get("/admin", follow_redirects=False).status_code == 303

    response = client.get("/candidato", follow_redirects=False)
    assert response.status_code == 200
    assert "Ana Souza" in response.text


def test_guard_leaves_public_paths_alone(client) -> None:
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/login").status_code == 200
    assert client.get("/api/jobs").status_code == 200
    assert client.get("/candidatos-destaque", follow_redirects=False).status_code == 404


def test_company_dashboard(api, client) -> None:
    headers = api.company()
    api.create_job(headers)
    _cookie_login(client, "rh@acme.com.br")

    response = client.get("/empresa")
    assert response.status_code == 200
    assert "Desenvolvedor Python Pleno" in response.text


def test_admin_dashboard(api, client) -> None:
    api.admin()
    _cookie_login(client, "admin@vagasrmc.com.br")

    response = client.get("/admin")
    assert response.status_code == 200


def test_web_login_form(api, client) -> None:
    api.candidate()

    failed = client.post("/web/login", data={"email": "ana@example.com", "password": "errada123"})
    assert failed.status_code == 401
    assert "Senha incorreta" in failed.text

    response = client.post(
        "/web/login",
        data={"email": "ana@example.com", "password": "secret123", "next": "/candidato"},
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert response.headers["location"] == "/candidato"
    assert response.cookies.get("session")


def test_web_login_ignores_foreign_next(api, client) -> None:
    api.company()
    response = client.post(
        "/web/login",
        data={"email": "rh@acme.com.br", "password": "secret123", "next": "/admin"},
        follow_redirects=False,
    )
    assert response.headers["location"] == "/empresa"
