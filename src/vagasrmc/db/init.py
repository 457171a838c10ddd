from __future__ import annotations

from pathlib import Path

from sqlalchemy.engine import make_url

from vagasrmc.db import models  # noqa: F401
from vagasrmc.db.base import Base
from vagasrmc.db.seed import seed_reference_data
from vagasrmc.db.session import Database


def ensure_data_directory(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return
    Path(url.database).parent.mkdir(parents=True, exist_ok=True)


def init_database(database: Database, *, seed: bool = True) -> dict[str, int]:
    ensure_data_directory(database.url)
    Base.metadata.create_all(bind=database.engine)

    if not seed:
        return {}
    with database.session() as session:
        return seed_reference_data(session)
