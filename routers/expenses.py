from typing import List

from fastapi import APIRouter, Depends
from pymongo.database import Database

from database import (
    create_document, delete_document, get_db, get_document_or_404, get_documents, oid,
    resolve_refs, serialize_doc, to_naive_utc, utcnow,
)
from schemas import Expense, ExpenseCreate
from security import require_admin

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.get("", response_model=List[dict])
def list_expenses(admin: dict = Depends(require_admin), db: Database = Depends(get_db)):
    docs = [serialize_doc(d) for d in get_documents(db, "expense", sort=[("date", -1)])]
    return resolve_refs(db, docs, "event_id", "event", ("title",))


@router.post("", status_code=201, response_model=dict)
def create_expense(payload: ExpenseCreate, admin: dict = Depends(require_admin), db: Database = Depends(get_db)):
    if payload.event_id:
        get_document_or_404(db, "event", payload.event_id, "Event")

    expense = Expense(
        **payload.model_dump(exclude={"title", "date"}),
        title=payload.title.strip(),
        date=to_naive_utc(payload.date) or utcnow(),
        created_by=admin["id"],
    )
    expense_id = create_document(db, "expense", expense)
    return serialize_doc(db["expense"].find_one({"_id": oid(expense_id)}))


@router.delete("/{expense_id}", response_model=dict)
def delete_expense(expense_id: str, admin: dict = Depends(require_admin), db: Database = Depends(get_db)):
    delete_document(db, "expense", expense_id, "Expense")
    return {"id": expense_id, "message": "Expense deleted"}
