"""
Authentication models for the login service.
"""
from sqlalchemy import Column, Integer, String, Text

from login_web.base_service import Base


class User(Base):
    """Registered user. Rows are created once and never updated here."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r}>"
