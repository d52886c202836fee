import enum
import uuid

from sqlalchemy import Enum
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def generate_id() -> str:
    return str(uuid.uuid4())


def enum_column_type(enum_cls: type[enum.Enum]) -> Enum:
    """Store enum members by value ("succeeded"), not by member name"""
    return Enum(
        enum_cls,
        values_callable=lambda members: [member.value for member in members],
        native_enum=False,
        length=32,
    )


class Currency(str, enum.Enum):
    BGN = "BGN"
    EUR = "EUR"
    USD = "USD"
