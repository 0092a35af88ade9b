"""
Site content, committee and gallery.

Site content sections are free-form objects. ``PUT /site/{section}`` patches
(shallow merge, creating the section if needed); ``PUT /site/{section}/replace``
overwrites the whole object.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends
from pymongo.database import Database

from database import (
    create_document, delete_document, get_db, get_documents, oid, serialize_doc,
    to_naive_utc, update_document, utcnow,
)
from exceptions import ValidationError
from schemas import CommitteeMember, CommitteeMemberUpdate, GalleryItem
from security import require_admin

router = APIRouter(prefix="/content", tags=["content"])


# ===== Site content =====
def get_section(db: Database, section: str) -> Dict[str, Any]:
    content = db["sitecontent"].find_one({"section": section})
    return content.get("data", {}) if content else {}


def _write_section(db: Database, section: str, data: Dict[str, Any]) -> Dict[str, Any]:
    now = utcnow()
    db["sitecontent"].update_one(
        {"section": section},
        {"$set": {"data": data, "updated_at": now}, "$setOnInsert": {"section": section, "created_at": now}},
        upsert=True,
    )
    return data


def patch_section(db: Database, section: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Merge top-level keys into the stored section; nested objects are replaced, not merged"""
    for key in fields:
        if not key or "." in key or key.startswith("$"):
            raise ValidationError(f"Invalid content key '{key}'", field=key)

    now = utcnow()
    # one $set per key so concurrent patches to different keys both land
    changes = {f"data.{key}": value for key, value in fields.items()}
    changes["updated_at"] = now
    db["sitecontent"].update_one(
        {"section": section},
        {"$set": changes, "$setOnInsert": {"section": section, "created_at": now}},
        upsert=True,
    )
    return get_section(db, section)


def replace_section(db: Database, section: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    return _write_section(db, section, dict(fields))


@router.get("/site/{section}", response_model=dict)
def read_site_content(section: str, db: Database = Depends(get_db)):
    return get_section(db, section)


@router.put("/site/{section}", response_model=dict)
def update_site_content(section: str, fields: Dict[str, Any] = Body(...),
                        admin: dict = Depends(require_admin), db: Database = Depends(get_db)):
    return patch_section(db, section, fields)


@router.put("/site/{section}/replace", response_model=dict)
def replace_site_content(section: str, fields: Dict[str, Any] = Body(...),
                         admin: dict = Depends(require_admin), db: Database = Depends(get_db)):
    return replace_section(db, section, fields)


# ===== Committee =====
@router.get("/committee", response_model=List[dict])
def list_committee(db: Database = Depends(get_db)):
    return [serialize_doc(d) for d in get_documents(db, "committeemember", sort=[("order", 1)])]


@router.post("/committee", status_code=201, response_model=dict)
def add_committee_member(member: CommitteeMember, admin: dict = Depends(require_admin),
                         db: Database = Depends(get_db)):
    member_id = create_document(db, "committeemember", member)
    return serialize_doc(db["committeemember"].find_one({"_id": oid(member_id)}))


@router.put("/committee/{member_id}", response_model=dict)
def update_committee_member(member_id: str, payload: CommitteeMemberUpdate,
                            admin: dict = Depends(require_admin), db: Database = Depends(get_db)):
    changes = payload.model_dump(exclude_none=True)
    return serialize_doc(update_document(db, "committeemember", member_id, changes, "Member"))


@router.delete("/committee/{member_id}", response_model=dict)
def delete_committee_member(member_id: str, admin: dict = Depends(require_admin),
                            db: Database = Depends(get_db)):
    delete_document(db, "committeemember", member_id, "Member")
    return {"id": member_id, "message": "Member removed"}


# ===== Gallery =====
@router.get("/gallery", response_model=List[dict])
def list_gallery(db: Database = Depends(get_db)):
    return [serialize_doc(d) for d in get_documents(db, "galleryitem", sort=[("date", -1)])]


@router.post("/gallery", status_code=201, response_model=dict)
def add_gallery_item(item: GalleryItem, admin: dict = Depends(require_admin), db: Database = Depends(get_db)):
    item.date = to_naive_utc(item.date)
    item_id = create_document(db, "galleryitem", item)
    return serialize_doc(db["galleryitem"].find_one({"_id": oid(item_id)}))


@router.delete("/gallery/{item_id}", response_model=dict)
def delete_gallery_item(item_id: str, admin: dict = Depends(require_admin), db: Database = Depends(get_db)):
    delete_document(db, "galleryitem", item_id, "Item")
    return {"id": item_id, "message": "Item removed"}
