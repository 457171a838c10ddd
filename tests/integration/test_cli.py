import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from vagasrmc.cli.app import app
from vagasrmc.config import get_settings

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_environment(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setenv("PASSWORD_HASH_ROUNDS", "4")
    monkeypatch.setenv("APP_ENV", "test")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_init_seeds_reference_data() -> None:
    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload == {"ok": True, "cities": 18, "areas": 15, "segments": 12, "plans": 4}

    again = json.loads(runner.invoke(app, ["init"]).stdout)
    assert again["cities"] == 0


def test_plans_list() -> None:
    result = runner.invoke(app, ["plans", "list"])
    assert result.exit_code == 0, result.output
    plans = json.loads(result.stdout)
    assert [plan["type"] for plan in plans] == ["FREE", "BASIC", "PROFESSIONAL", "PREMIUM"]


def test_admin_create() -> None:
    result = runner.invoke(app, ["admin", "create", "--email", "root@vagasrmc.com.br", "--password", "secret123"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["role"] == "ADMIN"

    duplicate = runner.invoke(app, ["admin", "create", "--email", "root@vagasrmc.com.br", "--password", "secret123"])
    assert duplicate.exit_code == 1
    assert "Este email já está cadastrado" in duplicate.output


def test_company_commands_report_missing_company() -> None:
    verify = runner.invoke(app, ["company", "verify", "--company-id", "42"])
    assert verify.exit_code == 1
    assert "NOT_FOUND" in verify.output

    subscribe = runner.invoke(app, ["company", "subscribe", "--company-id", "42", "--plan", "basic"])
    assert subscribe.exit_code == 1
    assert "Empresa não encontrada" in subscribe.output
