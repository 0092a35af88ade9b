from typing import List, Optional

from fastapi import APIRouter, Depends
from pymongo.database import Database

from database import (
    create_document, get_db, get_document_or_404, get_documents, oid, resolve_refs,
    serialize_doc, to_naive_utc, utcnow,
)
from logging_config import get_logger
from notifications import notify
from schemas import Fee, FeeCreate, FeeStatus
from security import get_current_user, require_admin

logger = get_logger("fees")

router = APIRouter(prefix="/fees", tags=["fees"])


@router.get("/my", response_model=List[dict])
def list_my_fees(current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    docs = get_documents(db, "fee", {"user_id": current_user["id"]}, sort=[("year", -1), ("month", -1)])
    return [serialize_doc(d) for d in docs]


@router.post("", status_code=201, response_model=dict)
def create_fee(payload: FeeCreate, admin: dict = Depends(require_admin), db: Database = Depends(get_db)):
    get_document_or_404(db, "user", payload.user_id, "User")

    fee = Fee(**payload.model_dump(exclude={"paid_at"}), paid_at=to_naive_utc(payload.paid_at) or utcnow())
    fee_id = create_document(db, "fee", fee)
    logger.info(f"Fee {fee_id} recorded for user {fee.user_id} ({fee.month}/{fee.year}) by {admin['id']}")

    if fee.status == "paid":
        notify(db, fee.user_id, f"Your fee of {fee.amount:g} for {fee.month}/{fee.year} has been received", "success")
    else:
        notify(db, fee.user_id, f"Your fee for {fee.month}/{fee.year} is marked {fee.status}", "warning")
    return serialize_doc(db["fee"].find_one({"_id": oid(fee_id)}))


@router.get("", response_model=List[dict])
def list_fees(
    user_id: Optional[str] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
    status: Optional[FeeStatus] = None,
    admin: dict = Depends(require_admin),
    db: Database = Depends(get_db),
):
    filt: dict = {}
    if user_id:
        filt["user_id"] = user_id
    if month:
        filt["month"] = month
    if year:
        filt["year"] = year
    if status:
        filt["status"] = status

    docs = [serialize_doc(d) for d in get_documents(db, "fee", filt, sort=[("created_at", -1)])]
    return resolve_refs(db, docs, "user_id", "user", ("name", "email"))
