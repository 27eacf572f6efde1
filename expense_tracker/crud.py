from __future__ import annotations

from typing import List, Dict, Any, Optional

from .storage import Storage


def _month_prefix(month: str) -> str:
    # dates are 'YYYY-MM-DD' text, a month is a prefix match
    return f"{month}%"


# ---------- Expenses ----------
def list_expenses(
    storage: Storage,
    month: Optional[str] = None,
    category: Optional[str] = None,
) -> List[Dict[str, Any]]:
    sql = "SELECT * FROM expenses WHERE 1=1"
    params: List[Any] = []

    if month:
        sql += " AND date LIKE ?"
        params.append(_month_prefix(month))
    if category:
        sql += " AND category = ?"
        params.append(category)

    sql += " ORDER BY date DESC, id DESC"
    return storage.query(sql, params)


def get_expense(storage: Storage, expense_id: int) -> Optional[Dict[str, Any]]:
    rows = storage.query("SELECT * FROM expenses WHERE id = ?", [expense_id])
    return rows[0] if rows else None


def expense_exists(storage: Storage, expense_id: int) -> bool:
    return bool(storage.query("SELECT id FROM expenses WHERE id = ?", [expense_id]))


def create_expense(
    storage: Storage,
    description: str,
    amount: float,
    category: str,
    date_str: str,
) -> Dict[str, Any]:
    result = storage.run(
        "INSERT INTO expenses (description, amount, category, date) VALUES (?, ?, ?, ?)",
        [description, amount, category, date_str],
    )
    return get_expense(storage, result.last_id)


def update_expense(
    storage: Storage,
    expense_id: int,
    description: str,
    amount: float,
    category: str,
    date_str: str,
) -> Optional[Dict[str, Any]]:
    """Overwrite every field of an expense. None when the id doesn't exist."""
    if not expense_exists(storage, expense_id):
        return None

    storage.run(
        "UPDATE expenses SET description = ?, amount = ?, category = ?, date = ? WHERE id = ?",
        [description, amount, category, date_str, expense_id],
    )
    return get_expense(storage, expense_id)


def delete_expense(storage: Storage, expense_id: int) -> bool:
    if not expense_exists(storage, expense_id):
        return False
    storage.run("DELETE FROM expenses WHERE id = ?", [expense_id])
    return True


# ---------- Budgets ----------
def list_budgets(storage: Storage) -> List[Dict[str, Any]]:
    return storage.query("SELECT * FROM budgets ORDER BY month DESC")


def get_budget(storage: Storage, month: str) -> Optional[Dict[str, Any]]:
    rows = storage.query("SELECT * FROM budgets WHERE month = ?", [month])
    return rows[0] if rows else None


def set_budget(storage: Storage, month: str, amount: float) -> Dict[str, Any]:
    """Create the month's budget, or overwrite its amount if one exists."""
    # single statement, so two first-time writers for a month can't both insert
    storage.run(
        "INSERT INTO budgets (month, amount) VALUES (?, ?) "
        "ON CONFLICT(month) DO UPDATE SET amount = excluded.amount",
        [month, amount],
    )
    return get_budget(storage, month)


# ---------- Stats ----------
def month_category_breakdown(storage: Storage, month: str) -> List[Dict[str, Any]]:
    """
    Per-category subtotals for a month, largest first:
      [{"category": "alimentacao", "total": 123.0}, ...]
    Categories without expenses are left out.
    """
    rows = storage.query(
        """
        SELECT category, SUM(amount) AS total
        FROM expenses
        WHERE date LIKE ?
        GROUP BY category
        ORDER BY total DESC
        """,
        [_month_prefix(month)],
    )
    return [{"category": r["category"], "total": round(float(r["total"] or 0.0), 2)} for r in rows]


def month_stats(storage: Storage, month: str) -> Dict[str, Any]:
    """
    month: 'YYYY-MM'
    Total spent, budget, per-category breakdown and expense count for the month.
    """
    prefix = _month_prefix(month)

    totals = storage.query(
        "SELECT COALESCE(SUM(amount), 0) AS total, COUNT(*) AS count FROM expenses WHERE date LIKE ?",
        [prefix],
    )
    budget = storage.query("SELECT amount FROM budgets WHERE month = ?", [month])

    total = totals[0]["total"] if totals else 0
    count = totals[0]["count"] if totals else 0

    return {
        "month": month,
        "total": round(float(total or 0.0), 2),
        "budget": float(budget[0]["amount"]) if budget else 0.0,
        "byCategory": month_category_breakdown(storage, month),
        "count": int(count or 0),
    }
