"""
SQLAlchemy ORM models for the MySQL/MariaDB database.

Purpose:
- Define the users table
- Use SQLAlchemy async-compatible models

Production notes:
- email carries a real unique index so concurrent inserts with the same
  address fail with IntegrityError instead of creating duplicates
"""

from sqlalchemy import Column, Integer, String, Date
from core.db import Base

NAME_MAX_LENGTH = 100
PHONE_MAX_LENGTH = 30


class User(Base):
    """
    A registered user.

    Columns:
    - id: generated by the database, never changed
    - name: 3-100 characters
    - email: unique
    - phone: optional, stored as typed (formatting happens on display)
    - birthdate: optional, never in the future
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    phone = Column(String(PHONE_MAX_LENGTH), nullable=True)
    birthdate = Column(Date, nullable=True)
