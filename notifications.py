from typing import Optional

from pymongo.database import Database

from database import create_document, is_valid_id
from schemas import Notification


def notify(db: Database, user_id: Optional[str], message: str, type: str = "info") -> Optional[str]:
    """Store a notification for a member; no-op for guests"""
    if not is_valid_id(user_id):
        return None
    return create_document(db, "notification", Notification(user_id=user_id, message=message, type=type))
