from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from vagasrmc.db.models import City, JobArea, Plan, Segment

RMC_CITIES: list[dict[str, str]] = [
    {"name": "Campinas", "slug": "campinas"},
    {"name": "Americana", "slug": "americana"},
    {"name": "Sumaré", "slug": "sumare"},
    {"name": "Hortolândia", "slug": "hortolandia"},
    {"name": "Indaiatuba", "slug": "indaiatuba"},
    {"name": "Valinhos", "slug": "valinhos"},
    {"name": "Vinhedo", "slug": "vinhedo"},
    {"name": "Paulínia", "slug": "paulinia"},
    {"name": "Jaguariúna", "slug": "jaguariuna"},
    {"name": "Monte Mor", "slug": "monte-mor"},
    {"name": "Nova Odessa", "slug": "nova-odessa"},
    {"name": "Santa Bárbara d'Oeste", "slug": "santa-barbara-doeste"},
    {"name": "Pedreira", "slug": "pedreira"},
    {"name": "Holambra", "slug": "holambra"},
    {"name": "Artur Nogueira", "slug": "artur-nogueira"},
    {"name": "Cosmópolis", "slug": "cosmopolis"},
    {"name": "Engenheiro Coelho", "slug": "engenheiro-coelho"},
    {"name": "Santo Antônio de Posse", "slug": "santo-antonio-de-posse"},
]

JOB_AREAS: list[dict[str, str]] = [
    {"name": "Tecnologia da Informação", "slug": "ti"},
    {"name": "Indústria", "slug": "industria"},
    {"name": "Saúde", "slug": "saude"},
    {"name": "Administrativo", "slug": "administrativo"},
    {"name": "Comércio", "slug": "comercio"},
    {"name": "Serviços", "slug": "servicos"},
    {"name": "Logística", "slug": "logistica"},
    {"name": "Marketing", "slug": "marketing"},
    {"name": "Recursos Humanos", "slug": "rh"},
    {"name": "Financeiro", "slug": "financeiro"},
    {"name": "Engenharia", "slug": "engenharia"},
    {"name": "Educação", "slug": "educacao"},
    {"name": "Jurídico", "slug": "juridico"},
    {"name": "Construção Civil", "slug": "construcao-civil"},
    {"name": "Agronegócio", "slug": "agronegocio"},
]

SEGMENTS: list[dict[str, str]] = [
    {"name": "Tecnologia", "slug": "tecnologia"},
    {"name": "Varejo", "slug": "varejo"},
    {"name": "Indústria", "slug": "industria"},
    {"name": "Saúde", "slug": "saude"},
    {"name": "Educação", "slug": "educacao"},
    {"name": "Alimentos e Bebidas", "slug": "alimentos-bebidas"},
    {"name": "Construção", "slug": "construcao"},
    {"name": "Transporte e Logística", "slug": "transporte-logistica"},
    {"name": "Consultoria", "slug": "consultoria"},
    {"name": "Serviços Financeiros", "slug": "servicos-financeiros"},
    {"name": "Agronegócio", "slug": "agronegocio"},
    {"name": "Telecomunicações", "slug": "telecomunicacoes"},
]

PLANS: list[dict[str, Any]] = [
    {
        "name": "Gratuito",
        "type": "FREE",
        "max_active_jobs": 2,
        "max_job_days": 30,
        "can_highlight": False,
        "can_feature": False,
        "can_search_resume": False,
        "price_monthly": 0.0,
        "price_yearly": None,
    },
    {
        "name": "Básico",
        "type": "BASIC",
        "max_active_jobs": 5,
        "max_job_days": 45,
        "can_highlight": True,
        "can_feature": False,
        "can_search_resume": False,
        "price_monthly": 99.90,
        "price_yearly": 999.90,
    },
    {
        "name": "Profissional",
        "type": "PROFESSIONAL",
        "max_active_jobs": 15,
        "max_job_days": 60,
        "can_highlight": True,
        "can_feature": True,
        "can_search_resume": True,
        "price_monthly": 199.90,
        "price_yearly": 1999.90,
    },
    {
        "name": "Premium",
        "type": "PREMIUM",
        "max_active_jobs": -1,
        "max_job_days": 90,
        "can_highlight": True,
        "can_feature": True,
        "can_search_resume": True,
        "price_monthly": 399.90,
        "price_yearly": 3999.90,
    },
]


def _upsert_by_slug(session: Session, model: type, rows: list[dict[str, str]]) -> int:
    inserted = 0
    for row in rows:
        existing = session.scalar(select(model).where(model.slug == row["slug"]))
        if existing:
            continue
        session.add(model(**row))
        inserted += 1
    return inserted


def seed_plans(session: Session) -> int:
    inserted = 0
    for plan in PLANS:
        existing = session.scalar(select(Plan).where(Plan.type == plan["type"]))
        if existing:
            continue
        session.add(Plan(**plan))
        inserted += 1
    return inserted


def seed_reference_data(session: Session) -> dict[str, int]:
    result = {
        "cities": _upsert_by_slug(session, City, RMC_CITIES),
        "areas": _upsert_by_slug(session, JobArea, JOB_AREAS),
        "segments": _upsert_by_slug(session, Segment, SEGMENTS),
        "plans": seed_plans(session),
    }
    session.commit()
    return result
