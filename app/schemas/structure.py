from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class SectionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class SectionUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    is_active: Optional[bool] = None


class SectionRead(BaseModel):
    id: int
    name: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ItemCreate(BaseModel):
    section_id: int
    title: str = Field(..., min_length=1, max_length=255)
    instructions: Optional[str] = None
    requires_photo: bool = False
    requires_note_on_fail: bool = True
    sort_order: int = 0
    is_active: bool = True


class ItemUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    instructions: Optional[str] = None
    requires_photo: Optional[bool] = None
    requires_note_on_fail: Optional[bool] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class ItemRead(BaseModel):
    id: int
    section_id: int
    title: str
    instructions: Optional[str]
    requires_photo: bool
    requires_note_on_fail: bool
    sort_order: int
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class StructureRead(BaseModel):
    sections: List[SectionRead]
    items: List[ItemRead]
