from datetime import datetime
from typing import Dict, List, Optional, Set

from fastapi import APIRouter, Depends, Query
from pymongo.database import Database

from database import (
    create_document, get_db, get_document_or_404, get_documents, oid, resolve_refs,
    serialize_doc, to_naive_utc, utcnow,
)
from exceptions import InvalidStatusTransition, ValidationError
from logging_config import get_logger
from notifications import notify
from schemas import Donation, DonationCreate, DonationStatusUpdate
from security import get_current_user, get_optional_user, require_admin

logger = get_logger("donations")

router = APIRouter(prefix="/donations", tags=["donations"])

# pending is the only state a donation can leave
DONATION_TRANSITIONS: Dict[str, Set[str]] = {
    "pending": {"confirmed", "failed"},
    "confirmed": set(),
    "failed": set(),
}

STATUS_MESSAGES = {
    "confirmed": ("Your donation of {amount:g} has been confirmed. Thank you!", "success"),
    "failed": ("Your donation of {amount:g} could not be verified.", "error"),
}


def check_donation_transition(current: str, requested: str) -> None:
    if requested not in DONATION_TRANSITIONS.get(current, set()):
        raise InvalidStatusTransition("Donation", current, requested)


@router.post("", status_code=201, response_model=dict)
def create_donation(payload: DonationCreate, user: Optional[dict] = Depends(get_optional_user),
                    db: Database = Depends(get_db)):
    if payload.event_id:
        get_document_or_404(db, "event", payload.event_id, "Event")

    donation = Donation(**payload.model_dump(), user_id=user["id"] if user else None)
    donation_id = create_document(db, "donation", donation)
    logger.info(f"Donation {donation_id} received ({donation.amount:g} via {donation.payment_method})")
    return serialize_doc(db["donation"].find_one({"_id": oid(donation_id)}))


@router.get("/my", response_model=List[dict])
def list_my_donations(current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    docs = [serialize_doc(d) for d in get_documents(
        db, "donation", {"user_id": current_user["id"]}, sort=[("donation_date", -1)])]
    return resolve_refs(db, docs, "event_id", "event", ("title", "slug"))


@router.get("", response_model=List[dict])
def list_donations(
    event_id: Optional[str] = None,
    status: Optional[str] = None,
    user_id: Optional[str] = None,
    date_from: Optional[datetime] = Query(None, alias="from"),
    date_to: Optional[datetime] = Query(None, alias="to"),
    admin: dict = Depends(require_admin),
    db: Database = Depends(get_db),
):
    filt: dict = {}
    if event_id:
        filt["event_id"] = event_id
    if status and status != "all":
        if status not in DONATION_TRANSITIONS:
            raise ValidationError(f"Unknown donation status '{status}'", field="status")
        filt["status"] = status
    if user_id:
        filt["user_id"] = user_id
    if date_from or date_to:
        filt["donation_date"] = {}
        if date_from:
            filt["donation_date"]["$gte"] = to_naive_utc(date_from)
        if date_to:
            filt["donation_date"]["$lte"] = to_naive_utc(date_to)

    docs = [serialize_doc(d) for d in get_documents(db, "donation", filt, sort=[("donation_date", -1)])]
    resolve_refs(db, docs, "event_id", "event", ("title",))
    return resolve_refs(db, docs, "user_id", "user", ("name", "email"))


@router.put("/{donation_id}/status", response_model=dict)
def update_donation_status(donation_id: str, payload: DonationStatusUpdate,
                           admin: dict = Depends(require_admin), db: Database = Depends(get_db)):
    donation = get_document_or_404(db, "donation", donation_id, "Donation")
    current = donation.get("status", "pending")
    check_donation_transition(current, payload.status)

    # Only matches while the donation still has the status we validated against
    res = db["donation"].update_one(
        {"_id": oid(donation_id), "status": current},
        {"$set": {"status": payload.status, "updated_at": utcnow()}},
    )
    if res.matched_count == 0:
        latest = get_document_or_404(db, "donation", donation_id, "Donation")
        raise InvalidStatusTransition("Donation", latest.get("status", "pending"), payload.status)

    updated = db["donation"].find_one({"_id": oid(donation_id)})
    logger.info(f"Donation {donation_id} marked {payload.status} by {admin['id']}")

    message, kind = STATUS_MESSAGES[payload.status]
    notify(db, updated.get("user_id"), message.format(amount=updated.get("amount", 0)), kind)
    return serialize_doc(updated)
