import uuid

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def new_uuid() -> str:
    return str(uuid.uuid4())


def enum_values(enum_cls):
    """Persist enum values ("pending") instead of member names ("PENDING")."""
    return [member.value for member in enum_cls]
