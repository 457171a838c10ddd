from __future__ import annotations

import json
from typing import NoReturn

import typer
import uvicorn

from vagasrmc.api.app import create_app
from vagasrmc.config import get_settings
from vagasrmc.core.accounts import AccountService
from vagasrmc.core.admin import AdminService
from vagasrmc.core.plans import PlanService
from vagasrmc.db.init import init_database
from vagasrmc.db.repositories import Repository
from vagasrmc.db.session import Database
from vagasrmc.errors import VagasError
from vagasrmc.logging_config import configure_logging

app = typer.Typer(help="Vagas RMC CLI")
admin_app = typer.Typer(help="Administrator accounts")
plans_app = typer.Typer(help="Subscription plans")
company_app = typer.Typer(help="Company oversight")

app.add_typer(admin_app, name="admin")
app.add_typer(plans_app, name="plans")
app.add_typer(company_app, name="company")


def _database() -> Database:
    configure_logging()
    database = Database(get_settings().database_url)
    init_database(database, seed=get_settings().seed_on_startup)
    return database


def _fail(exc: VagasError) -> NoReturn:
    typer.echo(json.dumps({"ok": False, "error": exc.message, "error_code": exc.code}, ensure_ascii=False), err=True)
    raise typer.Exit(code=1)


@app.command("init")
def init_cmd() -> None:
    """Create tables and seed cities, areas, segments and plans."""
    configure_logging()
    database = Database(get_settings().database_url)
    result = init_database(database, seed=True)
    typer.echo(json.dumps({"ok": True, **result}, indent=2))


@admin_app.command("create")
def admin_create(
    email: str = typer.Option(..., "--email"),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True),
) -> None:
    database = _database()
    with database.session() as db:
        try:
            user = AccountService(db).create_admin(email, password)
        except VagasError as exc:
            _fail(exc)
        typer.echo(json.dumps({"id": user.id, "email": user.email, "role": user.role}, indent=2))


@plans_app.command("list")
def plans_list() -> None:
    database = _database()
    with database.session() as db:
        plans = Repository(db).list_plans()
        typer.echo(
            json.dumps(
                [
                    {
                        "type": plan.type,
                        "name": plan.name,
                        "max_active_jobs": plan.max_active_jobs,
                        "max_job_days": plan.max_job_days,
                        "price_monthly": plan.price_monthly,
                    }
                    for plan in plans
                ],
                indent=2,
                ensure_ascii=False,
            )
        )


@company_app.command("subscribe")
def company_subscribe(
    company_id: int = typer.Option(..., "--company-id"),
    plan: str = typer.Option(..., "--plan"),
) -> None:
    database = _database()
    with database.session() as db:
        try:
            subscription = PlanService(db).subscribe(company_id, plan)
        except VagasError as exc:
            _fail(exc)
        typer.echo(
            json.dumps(
                {"company_id": subscription.company_id, "plan": subscription.plan.type, "status": subscription.status},
                indent=2,
            )
        )


@company_app.command("verify")
def company_verify(company_id: int = typer.Option(..., "--company-id")) -> None:
    database = _database()
    with database.session() as db:
        try:
            company = AdminService(db).verify_company(company_id)
        except VagasError as exc:
            _fail(exc)
        typer.echo(json.dumps({"id": company.id, "trade_name": company.trade_name, "is_verified": True}, indent=2))


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
) -> None:
    configure_logging()
    settings = get_settings()
    uvicorn.run(create_app(settings), host=host or settings.app_host, port=port or settings.app_port)
