from typing import Dict, Union

from pymongo.database import Database

ACTIVE_EVENT_STATUSES = ["upcoming", "ongoing"]


def _amount(doc: dict) -> float:
    return float(doc.get("amount") or 0)


def summarize(db: Database) -> Dict[str, Union[float, int]]:
    """
    Money totals and operational counts for the admin dashboard.

    Each collection is read once; the result is not a transactional snapshot
    across collections.
    """
    total_donations = 0.0
    total_confirmed = 0.0
    for d in db["donation"].find({}, {"amount": 1, "status": 1}):
        total_donations += _amount(d)
        if d.get("status") == "confirmed":
            total_confirmed += _amount(d)

    total_fees = sum(_amount(f) for f in db["fee"].find({"status": "paid"}, {"amount": 1}))
    total_expenses = sum(_amount(e) for e in db["expense"].find({}, {"amount": 1}))

    return {
        "total_donations": total_donations,
        "total_confirmed_donations": total_confirmed,
        "total_fees": float(total_fees),
        "total_expenses": float(total_expenses),
        "net_balance": total_confirmed + total_fees - total_expenses,
        "user_count": db["user"].count_documents({}),
        "event_count": db["event"].count_documents({"status": {"$in": ACTIVE_EVENT_STATUSES}}),
        "pending_donation_count": db["donation"].count_documents({"status": "pending"}),
    }
