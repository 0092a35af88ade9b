from typing import List, Optional

from fastapi import APIRouter, Depends
from pymongo.database import Database

from database import (
    create_document, delete_document, get_db, get_documents, is_valid_id, oid,
    resolve_refs, serialize_doc, to_naive_utc, update_document,
)
from exceptions import DuplicateResource, NotFound, ValidationError
from logging_config import get_logger
from schemas import Event, EventCreate, EventStatus, EventStatusUpdate, EventUpdate
from security import require_admin
from slugs import generate_event_slug, slugify

logger = get_logger("events")

router = APIRouter(prefix="/events", tags=["events"])

ACTIVE_STATUSES = ["upcoming", "ongoing"]


def _clean_manager_ids(manager_ids: Optional[List[str]]) -> List[str]:
    return [str(i).strip() for i in (manager_ids or []) if is_valid_id(str(i).strip())]


def _event_or_404(db: Database, event_id: str) -> dict:
    event = db["event"].find_one({"_id": oid(event_id)})
    if event is None:
        raise NotFound("Event")
    return event


@router.get("", response_model=List[dict])
def list_events(status: Optional[EventStatus] = None, db: Database = Depends(get_db)):
    filt = {"is_public": True}
    if status:
        filt["status"] = status
    return [serialize_doc(d) for d in get_documents(db, "event", filt, sort=[("start_date", 1)])]


@router.get("/upcoming", response_model=List[dict])
def list_upcoming_events(db: Database = Depends(get_db)):
    filt = {"is_public": True, "status": {"$in": ACTIVE_STATUSES}}
    return [serialize_doc(d) for d in get_documents(db, "event", filt, sort=[("start_date", 1)])]


@router.get("/{slug}", response_model=dict)
def get_event(slug: str, db: Database = Depends(get_db)):
    event = db["event"].find_one({"slug": slug})
    if event is None and is_valid_id(slug):
        event = db["event"].find_one({"_id": oid(slug)})
    if event is None:
        raise NotFound("Event")

    docs = [serialize_doc(event)]
    resolve_refs(db, docs, "manager_ids", "user", ("name", "email", "phone"))
    resolve_refs(db, docs, "created_by", "user", ("name",))
    return docs[0]


@router.post("", status_code=201, response_model=dict)
def create_event(payload: EventCreate, admin: dict = Depends(require_admin), db: Database = Depends(get_db)):
    title = payload.title.strip()
    if not title:
        raise ValidationError("Please add an event title", field="title")

    event = Event(
        **payload.model_dump(exclude={"title", "slug", "manager_ids", "start_date", "end_date"}),
        title=title,
        slug=generate_event_slug(db, title, payload.slug),
        start_date=to_naive_utc(payload.start_date),
        end_date=to_naive_utc(payload.end_date),
        manager_ids=_clean_manager_ids(payload.manager_ids),
        created_by=admin["id"],
    )
    event_id = create_document(db, "event", event)
    logger.info(f"Event created: {event_id} slug={event.slug} by {admin['id']}")
    return serialize_doc(db["event"].find_one({"_id": oid(event_id)}))


@router.put("/{event_id}", response_model=dict)
def update_event(event_id: str, payload: EventUpdate, admin: dict = Depends(require_admin),
                 db: Database = Depends(get_db)):
    event = _event_or_404(db, event_id)
    # Dates may be cleared with null; other fields ignore it
    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items()
               if v is not None or k in ("start_date", "end_date")}

    if "title" in changes:
        changes["title"] = changes["title"].strip()
        if not changes["title"]:
            raise ValidationError("Please add an event title", field="title")

    if "slug" in changes:
        new_slug = slugify(changes["slug"])
        if new_slug != event.get("slug") and db["event"].find_one({"slug": new_slug}):
            raise DuplicateResource("Slug already in use")
        changes["slug"] = new_slug

    if "manager_ids" in changes:
        changes["manager_ids"] = _clean_manager_ids(changes["manager_ids"])
    for field in ("start_date", "end_date"):
        if field in changes:
            changes[field] = to_naive_utc(changes[field])

    return serialize_doc(update_document(db, "event", event_id, changes, "Event"))


@router.delete("/{event_id}", response_model=dict)
def delete_event(event_id: str, admin: dict = Depends(require_admin), db: Database = Depends(get_db)):
    delete_document(db, "event", event_id, "Event")
    logger.info(f"Event deleted: {event_id} by {admin['id']}")
    return {"id": event_id, "message": "Event deleted"}


@router.put("/{event_id}/status", response_model=dict)
def update_event_status(event_id: str, payload: EventStatusUpdate, admin: dict = Depends(require_admin),
                        db: Database = Depends(get_db)):
    # Any status may be set from any other; events have no transition graph
    return serialize_doc(update_document(db, "event", event_id, {"status": payload.status}, "Event"))
