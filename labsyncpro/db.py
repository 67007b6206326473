import os
from sqlmodel import SQLModel, Session, create_engine
from .config import settings


def _resolve_url(url: str) -> str:
    # Anchor relative sqlite paths to the working directory so the app and
    # the seed script agree on one file.
    if url.startswith("sqlite:///") and not url.startswith("sqlite:////"):
        rel = url.split("///", 1)[-1]
        if rel and rel != ":memory:" and not os.path.isabs(rel):
            return f"sqlite:///{os.path.abspath(os.path.join(os.getcwd(), rel))}"
    return url


DATABASE_URL = _resolve_url(settings.DATABASE_URL)

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, echo=settings.SQL_ECHO, connect_args=connect_args)


def create_db_and_tables():
    from . import models  # noqa: F401  registers every table on the metadata
    SQLModel.metadata.create_all(engine)


def get_session():
    with Session(engine) as session:
        yield session
