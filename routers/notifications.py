from typing import List

from fastapi import APIRouter, Depends
from pymongo.database import Database

from database import get_db, get_document_or_404, get_documents, serialize_doc, update_document, utcnow
from exceptions import Forbidden
from security import get_current_user

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=List[dict])
def list_notifications(current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    docs = get_documents(db, "notification", {"user_id": current_user["id"]}, sort=[("created_at", -1)])
    return [serialize_doc(d) for d in docs]


@router.put("/read-all", response_model=dict)
def mark_all_read(current_user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    res = db["notification"].update_many(
        {"user_id": current_user["id"], "is_read": False},
        {"$set": {"is_read": True, "updated_at": utcnow()}},
    )
    return {"updated": res.modified_count}


@router.put("/{notification_id}/read", response_model=dict)
def mark_notification_read(notification_id: str, current_user: dict = Depends(get_current_user),
                           db: Database = Depends(get_db)):
    notification = get_document_or_404(db, "notification", notification_id, "Notification")
    if str(notification.get("user_id")) != current_user["id"]:
        raise Forbidden("Not authorized to modify this notification")
    return serialize_doc(update_document(db, "notification", notification_id, {"is_read": True}, "Notification"))
