"""
Database engine, session factory and the declarative Base.

One session per request: get_db() hands a session to the route and
closes it when the request ends.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from shortener_app.config import settings


SQLALCHEMY_DATABASE_URL = settings.sqlalchemy_database_url

connect_args = {}
if SQLALCHEMY_DATABASE_URL.startswith("sqlite"):
    # SQLite objects may only be used in the creating thread by default,
    # FastAPI runs sync routes in a threadpool
    connect_args = {"check_same_thread": False}

engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Yield a database session and close it at the end of the request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
