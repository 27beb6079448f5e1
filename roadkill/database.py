from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
import logging
import os
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger("roadkill-api")

# Plain local development keeps sightings in a file next to the server
DEFAULT_DATABASE_URL = "sqlite:///./roadkill.db"


def resolve_database_url() -> str:
    """
    Pick the sighting store for the local service.

    Discrete DB_* variables (Docker Postgres) win over DATABASE_URL, which wins
    over the SQLite default. A partial DB_* set is ignored with a warning.
    """
    db_user = os.getenv("DB_USER")
    db_password = os.getenv("DB_PASSWORD")
    db_host = os.getenv("DB_HOST")
    db_port = os.getenv("DB_PORT", "5432")
    db_name = os.getenv("DB_NAME")
    db_sslmode = os.getenv("DB_SSLMODE")  # e.g., require

    discrete = {"DB_USER": db_user, "DB_PASSWORD": db_password, "DB_HOST": db_host, "DB_NAME": db_name}
    if all(discrete.values()):
        url = f"postgresql+psycopg2://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"
        return f"{url}?sslmode={db_sslmode}" if db_sslmode else url
    if any(discrete.values()):
        missing = [k for k, v in discrete.items() if not v]
        logger.warning("Ignoring partial DB_* settings, missing %s", ", ".join(missing))

    return os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL


def make_engine(url: str) -> Engine:
    # SQLite connections are shared with FastAPI's threadpool workers
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args, echo=os.getenv("DB_ECHO", "").lower() == "true")


DATABASE_URL = resolve_database_url()
engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
