from sqlalchemy import Column, DateTime

from ..database import Base  # This is the same Base created by declarative_base()
from ..utils import clock


class BaseModel(Base):
    __abstract__ = True

    created_at = Column(DateTime, default=clock.column_default)
    updated_at = Column(DateTime, default=clock.column_default, onupdate=clock.column_default)
