"""Declarative base shared by every table model."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
