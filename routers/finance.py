from fastapi import APIRouter, Depends
from pymongo.database import Database

from database import get_db
from finance import summarize
from security import require_admin

router = APIRouter(prefix="/finance", tags=["finance"])


@router.get("/summary", response_model=dict)
def finance_summary(admin: dict = Depends(require_admin), db: Database = Depends(get_db)):
    return summarize(db)
