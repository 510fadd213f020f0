# /gradeflow/db/base_class.py

from sqlalchemy.orm import declarative_base, declared_attr


class CustomBase:
    """Derives the table name from the class name, e.g. `Task` -> `tasks`."""

    @declared_attr
    def __tablename__(cls) -> str:
        return f"{cls.__name__.lower()}s"


Base = declarative_base(cls=CustomBase)
