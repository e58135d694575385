"""Database table definitions for saved components"""

from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import Column, DateTime, String, Text
from sqlmodel import Field, SQLModel


def _new_id() -> str:
    return str(uuid4())


class SavedComponent(SQLModel, table=True):
    """A generated component kept for reuse, with the section it was generated from"""
    __tablename__ = "saved_components"
    id: str = Field(default_factory=_new_id, sa_column=Column(String(36), primary_key=True))
    name: str = Field(..., index=True, nullable=False)
    code: str = Field(..., sa_column=Column(Text, nullable=False))
    section_label: Optional[str] = Field(default=None, nullable=True)
    original_html: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    style_variant: Optional[str] = Field(default=None, nullable=True)
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False, index=True))
