# expense_tracker/main.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import crud
from .config import get_cors_origins, get_host, get_port
from .log import setup_logging
from .models import CATEGORIES
from .schemas import (
    BudgetIn,
    BudgetOut,
    CategoryOut,
    ExpenseIn,
    ExpenseOut,
    Health,
    Message,
    MonthStats,
)
from .storage import Storage, get_storage

setup_logging()
logger = logging.getLogger(__name__)

# ---------- App ----------
app = FastAPI(title="Expense Tracker API")


# Registered before CORSMiddleware so CORS still wraps the 500 responses.
@app.middleware("http")
async def unhandled_error_middleware(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": str(exc)})


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup():
    # create tables on first run
    get_storage().init()


# ---------- Errors ----------
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


def _require_expense_fields(payload: ExpenseIn) -> None:
    missing = payload.missing_fields()
    if missing:
        raise HTTPException(
            status_code=400,
            detail=f"All fields are required (missing: {', '.join(missing)})",
        )


# ---------- Expenses ----------
@app.get("/api/expenses", response_model=List[ExpenseOut])
def list_expenses(
    month: Optional[str] = None,
    category: Optional[str] = None,
    storage: Storage = Depends(get_storage),
):
    return crud.list_expenses(storage, month=month, category=category)


@app.get("/api/expenses/{expense_id}", response_model=ExpenseOut)
def get_expense(expense_id: int, storage: Storage = Depends(get_storage)):
    expense = crud.get_expense(storage, expense_id)
    if expense is None:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense


@app.post("/api/expenses", response_model=ExpenseOut, status_code=201)
def create_expense(payload: ExpenseIn, storage: Storage = Depends(get_storage)):
    _require_expense_fields(payload)
    expense = crud.create_expense(
        storage,
        description=payload.description,
        amount=payload.amount,
        category=payload.category,
        date_str=payload.date,
    )
    logger.info("Created expense %s (%s, %s)", expense["id"], payload.category, payload.date)
    return expense


@app.put("/api/expenses/{expense_id}", response_model=ExpenseOut)
def update_expense(expense_id: int, payload: ExpenseIn, storage: Storage = Depends(get_storage)):
    _require_expense_fields(payload)
    expense = crud.update_expense(
        storage,
        expense_id,
        description=payload.description,
        amount=payload.amount,
        category=payload.category,
        date_str=payload.date,
    )
    if expense is None:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense


@app.delete("/api/expenses/{expense_id}", response_model=Message)
def delete_expense(expense_id: int, storage: Storage = Depends(get_storage)):
    if not crud.delete_expense(storage, expense_id):
        raise HTTPException(status_code=404, detail="Expense not found")
    logger.info("Deleted expense %s", expense_id)
    return {"message": "Expense deleted"}


# ---------- Budgets ----------
@app.get("/api/budgets", response_model=List[BudgetOut])
def list_budgets(storage: Storage = Depends(get_storage)):
    return crud.list_budgets(storage)


@app.get("/api/budgets/{month}", response_model=BudgetOut, response_model_exclude_none=True)
def get_budget(month: str, storage: Storage = Depends(get_storage)):
    budget = crud.get_budget(storage, month)
    if budget is None:
        # no budget set yet reads as zero
        return {"month": month, "amount": 0}
    return budget


@app.post("/api/budgets", response_model=BudgetOut)
def set_budget(payload: BudgetIn, storage: Storage = Depends(get_storage)):
    if not payload.month or payload.amount is None:
        raise HTTPException(status_code=400, detail="Month and amount are required")
    budget = crud.set_budget(storage, payload.month, payload.amount)
    logger.info("Budget for %s set to %s", payload.month, payload.amount)
    return budget


# ---------- Stats ----------
@app.get("/api/stats/{month}", response_model=MonthStats)
def month_stats(month: str, storage: Storage = Depends(get_storage)):
    return crud.month_stats(storage, month)


# ---------- Misc ----------
@app.get("/api/categories", response_model=List[CategoryOut])
def list_categories():
    return [{"id": cid, "name": name} for cid, name in CATEGORIES]


@app.get("/api/health", response_model=Health)
def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


def run() -> None:
    uvicorn.run("expense_tracker.main:app", host=get_host(), port=get_port())


if __name__ == "__main__":
    run()
