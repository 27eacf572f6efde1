# expense_tracker/models.py
from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, Index, func
from .db import Base

# Fixed category set offered by the dashboard (id, display name).
# Not enforced on write.
CATEGORIES = [
    ("alimentacao", "Alimentacao"),
    ("transporte", "Transporte"),
    ("habitacao", "Habitacao"),
    ("saude", "Saude"),
    ("lazer", "Lazer"),
    ("compras", "Compras"),
    ("contas", "Contas"),
    ("outros", "Outros"),
]


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    description = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    category = Column(String(50), nullable=False)

    # 'YYYY-MM-DD', kept as text so month filters are a prefix match on both backends
    date = Column(String(10), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_expenses_date", "date"),
        Index("idx_expenses_category", "category"),
    )


class Budget(Base):
    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # 'YYYY-MM'
    month = Column(String(7), unique=True, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (Index("idx_budgets_month", "month"),)
