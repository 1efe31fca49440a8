"""Application configuration builder."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .db.db_init import init_db

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


@dataclass(slots=True)
class AppConfig:
    database_url: str
    engine: Engine
    session_factory: sessionmaker[Session]
    jwt_signing_key: str
    admin_credentials_path: Path
    admin_jwt_ttl_hours: int
    base_url: str
    templates_dir: Path


def load_config() -> AppConfig:
    """Load configuration from environment (SQLite by default)."""
    database_url = os.getenv("DATABASE_URL", "sqlite:///yacc.db")
    engine = create_engine(database_url, future=True)
    session_factory: sessionmaker[Session] = sessionmaker(bind=engine, expire_on_commit=False)

    init_db(engine)

    return AppConfig(
        database_url=database_url,
        engine=engine,
        session_factory=session_factory,
        jwt_signing_key=os.getenv("JWT_SIGNING_KEY", ""),
        admin_credentials_path=Path(
            os.getenv("ADMIN_CREDENTIALS_PATH", "secrets/runtime_credentials.json")
        ),
        admin_jwt_ttl_hours=int(os.getenv("ADMIN_JWT_TTL_HOURS", 8)),
        base_url=os.getenv("YACC_BASE_URL", "").rstrip("/"),
        templates_dir=Path(os.getenv("YACC_TEMPLATES_DIR", str(DEFAULT_TEMPLATES_DIR))),
    )
