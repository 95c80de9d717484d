import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base, Session

# Base hébergée : DATABASE_URL (MySQL via PyMySQL, PostgreSQL...) ; SQLite local par défaut
SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./accent_crm.db")

_connect_args = {"check_same_thread": False} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    pool_pre_ping=True,
    pool_recycle=3600,
    connect_args=_connect_args,
)

# Factory de sessions
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base pour les modèles ORM
Base = declarative_base()


# Dépendance FastAPI : ouverture/fermeture automatique de la session
def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    """Crée les six tables si elles n'existent pas encore."""
    from accent_crm.models import models  # noqa: F401  (enregistre les modèles)

    Base.metadata.create_all(bind=bind or engine)
