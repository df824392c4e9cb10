"""Database table definitions for articles and their persisted block structure"""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, DateTime, String, Text
from sqlmodel import Field, SQLModel


class Article(SQLModel, table=True):
    """An article body stored both as HTML and as its parsed block Structure"""
    __tablename__ = "articles"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    slug: str = Field(..., index=True, unique=True, nullable=False)
    title: str = Field(..., nullable=False)
    path: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    html: str = Field(..., sa_column=Column(Text, nullable=False))
    structure: Dict[str, Any] = Field(..., sa_column=Column(JSON, nullable=False))
    frontmatter: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    version: int = Field(default=1, nullable=False, description="Bumped on every write; used for compare-and-set edits")
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
