# app/schemas/check_run.py
from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from app.models.enums import EntryResultEnum


class RunCreate(BaseModel):
    section_id: int


class RunRead(BaseModel):
    id: int
    employee_id: int
    section_id: int
    status: str
    started_at: datetime
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[int] = None
    review_note: Optional[str] = None

    class Config:
        from_attributes = True


class RunCreateResponse(BaseModel):
    run: RunRead
    reused: bool


class RunStatusResponse(BaseModel):
    run: Optional[RunRead]


class MyRunItem(BaseModel):
    """Own run with checklist progress"""
    id: int
    section_id: int
    section_name: str
    status: str
    started_at: datetime
    submitted_at: Optional[datetime]
    reviewed_at: Optional[datetime]
    items_total: int
    entries_done: int


class RunDetailRead(RunRead):
    section_name: Optional[str]
    employee_name: Optional[str]
    employee_email: Optional[str]


class EntryRead(BaseModel):
    id: int
    run_id: int
    item_id: int
    result: EntryResultEnum
    note: Optional[str]
    photo_url: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class EntryDetailRead(EntryRead):
    """Entry joined with the owning item's metadata"""
    title: str
    instructions: Optional[str]
    requires_photo: bool
    requires_note_on_fail: bool
    sort_order: int


class RunDetailResponse(BaseModel):
    run: RunDetailRead
    entries: List[EntryDetailRead]


class EntryResponse(BaseModel):
    entry: EntryRead


class RunResponse(BaseModel):
    run: RunRead


class RunReview(BaseModel):
    review_note: Optional[str] = None


class AdminRunItem(BaseModel):
    id: int
    employee_id: int
    employee_name: str
    employee_email: str
    section_id: int
    section_name: str
    status: str
    started_at: datetime
    submitted_at: Optional[datetime]
    reviewed_at: Optional[datetime]
    review_note: Optional[str]
    reviewed_by: Optional[int]
