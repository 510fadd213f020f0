# /gradeflow/db/database.py

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from .. import config

# SQLite connections are shared with FastAPI's worker threads; other backends
# get a liveness check so a dropped connection is replaced transparently.
if config.DATABASE_URL.startswith("sqlite"):
    engine_args = {"connect_args": {"check_same_thread": False}}
else:
    engine_args = {"pool_pre_ping": True}
engine = create_engine(config.DATABASE_URL, **engine_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Request-scoped session. Transition commits and rollbacks are handled by the
# task repository, this only guarantees the session is closed.
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
