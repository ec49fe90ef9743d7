"""
Pydantic models for check-ins
"""
from datetime import date
from pydantic import BaseModel, Field, field_validator
from typing import Optional


def _validate_date_iso(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    try:
        date.fromisoformat(v)
    except ValueError:
        raise ValueError(f"Invalid date '{v}'. Use YYYY-MM-DD")
    if len(v) != 10:
        raise ValueError(f"Invalid date '{v}'. Use YYYY-MM-DD")
    return v


class CheckInRequest(BaseModel):
    """Request model for checking a task"""
    routine_id: str = Field(..., min_length=1, description="Routine ID")
    task_id: str = Field(..., min_length=1, description="Task ID")
    date_iso: Optional[str] = Field(None, description="Day in YYYY-MM-DD format (defaults to today)")
    note: Optional[str] = Field(None, description="Optional note, trimmed to 200 characters")

    @field_validator('date_iso')
    @classmethod
    def validate_date_iso(cls, v: Optional[str]) -> Optional[str]:
        """Validate date format is YYYY-MM-DD if provided"""
        return _validate_date_iso(v)


class UncheckRequest(BaseModel):
    """Request model for removing a check-in"""
    routine_id: str = Field(..., min_length=1, description="Routine ID")
    task_id: str = Field(..., min_length=1, description="Task ID")
    date_iso: Optional[str] = Field(None, description="Day in YYYY-MM-DD format (defaults to today)")

    @field_validator('date_iso')
    @classmethod
    def validate_date_iso(cls, v: Optional[str]) -> Optional[str]:
        return _validate_date_iso(v)
