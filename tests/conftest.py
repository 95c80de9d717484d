import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Pas de create_all sur la base par défaut pendant les tests
os.environ["SKIP_DB_INIT"] = "1"

from accent_crm.api.main import app
from accent_crm.database import get_db, init_db
from accent_crm.security.auth import AUTH_COOKIE, AUTH_COOKIE_VALUE


@pytest.fixture()
def engine():
    # Base SQLite en mémoire partagée par toutes les connexions du test
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def anon_client(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def _get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app, follow_redirects=False) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def client(anon_client):
    anon_client.cookies.set(AUTH_COOKIE, AUTH_COOKIE_VALUE)
    return anon_client
