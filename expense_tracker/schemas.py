# expense_tracker/schemas.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def _check_format(value: Optional[str], fmt: str, shape: str) -> Optional[str]:
    # empty values are left for the required-field check
    if not value:
        return value
    try:
        datetime.strptime(value, fmt)
    except ValueError:
        raise ValueError(f"must be {shape}")
    # strptime also takes '2024-3-5', month filters need the zero-padded form
    if len(value) != len(shape):
        raise ValueError(f"must be {shape}")
    return value


# Request bodies: every field optional so missing ones are reported as a 400
# with a readable message instead of a schema error.
class ExpenseIn(BaseModel):
    description: Optional[str] = None
    amount: Optional[float] = Field(default=None, allow_inf_nan=False)
    category: Optional[str] = None
    date: Optional[str] = None

    @field_validator("date")
    @classmethod
    def date_is_iso(cls, v: Optional[str]) -> Optional[str]:
        return _check_format(v, "%Y-%m-%d", "YYYY-MM-DD")

    def missing_fields(self) -> List[str]:
        return [
            name
            for name in ("description", "amount", "category", "date")
            if not getattr(self, name)
        ]


class BudgetIn(BaseModel):
    month: Optional[str] = None
    amount: Optional[float] = Field(default=None, allow_inf_nan=False)

    @field_validator("month")
    @classmethod
    def month_is_iso(cls, v: Optional[str]) -> Optional[str]:
        return _check_format(v, "%Y-%m", "YYYY-MM")


class ExpenseOut(BaseModel):
    id: int
    description: str
    amount: float
    category: str
    date: str
    created_at: Optional[datetime] = None


class BudgetOut(BaseModel):
    id: Optional[int] = None
    month: str
    amount: float
    created_at: Optional[datetime] = None


class CategoryTotal(BaseModel):
    category: str
    total: float


class MonthStats(BaseModel):
    month: str
    total: float
    budget: float
    byCategory: List[CategoryTotal]
    count: int


class CategoryOut(BaseModel):
    id: str
    name: str


class Message(BaseModel):
    message: str


class Health(BaseModel):
    status: str
    timestamp: str
