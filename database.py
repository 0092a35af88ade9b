"""
MongoDB access helpers.

Each collection is named after the lower-cased schema class (User -> "user").
Routers receive the database through the ``get_db`` dependency so tests can
swap in another client.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

from bson import ObjectId
from pydantic import BaseModel
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from config import settings
from exceptions import NotFound, UpstreamUnavailable, ValidationError
from logging_config import get_logger

logger = get_logger("database")

client: Optional[MongoClient] = None
db: Optional[Database] = None

try:
    client = MongoClient(settings.DATABASE_URL, serverSelectionTimeoutMS=settings.MONGO_TIMEOUT_MS)
    db = client[settings.DATABASE_NAME]
except PyMongoError as e:
    # The API still starts; every database-backed request answers 503
    logger.error(f"MongoDB client could not be created: {e}")


def get_db() -> Database:
    if db is None:
        raise UpstreamUnavailable()
    return db


def utcnow() -> datetime:
    """Naive UTC timestamp, the form MongoDB hands back"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def is_valid_id(value: Any) -> bool:
    return isinstance(value, str) and ObjectId.is_valid(value) and len(value) == 24


def oid(id_str: str) -> ObjectId:
    if not is_valid_id(id_str):
        raise ValidationError("Invalid ID", field="id")
    return ObjectId(id_str)


def serialize_doc(doc: Optional[dict]) -> Optional[dict]:
    if not doc:
        return doc
    doc = dict(doc)
    _id = doc.get("_id")
    if isinstance(_id, ObjectId):
        doc["id"] = str(_id)
        del doc["_id"]
    doc.pop("password", None)
    return doc


def create_document(database: Database, collection_name: str, data: Union[BaseModel, dict]) -> str:
    """Insert a document stamped with created_at/updated_at and return its id"""
    if isinstance(data, BaseModel):
        data_dict = data.model_dump()
    else:
        data_dict = dict(data)
    now = utcnow()
    data_dict.setdefault("created_at", now)
    data_dict["updated_at"] = now
    result = database[collection_name].insert_one(data_dict)
    return str(result.inserted_id)


def get_documents(
    database: Database,
    collection_name: str,
    filter_dict: Optional[Dict[str, Any]] = None,
    sort: Optional[List[tuple]] = None,
    limit: Optional[int] = None,
) -> List[dict]:
    cursor = database[collection_name].find(filter_dict or {})
    if sort:
        cursor = cursor.sort(sort)
    if limit:
        cursor = cursor.limit(limit)
    return list(cursor)


def get_document_or_404(database: Database, collection_name: str, id_str: str, resource: str) -> dict:
    doc = database[collection_name].find_one({"_id": oid(id_str)})
    if doc is None:
        raise NotFound(resource)
    return doc


def update_document(database: Database, collection_name: str, id_str: str,
                    changes: Dict[str, Any], resource: str) -> dict:
    """Apply a $set to one document and return the updated version"""
    changes = dict(changes)
    changes["updated_at"] = utcnow()
    res = database[collection_name].update_one({"_id": oid(id_str)}, {"$set": changes})
    if res.matched_count == 0:
        raise NotFound(resource)
    return database[collection_name].find_one({"_id": oid(id_str)})


def delete_document(database: Database, collection_name: str, id_str: str, resource: str) -> None:
    res = database[collection_name].delete_one({"_id": oid(id_str)})
    if res.deleted_count == 0:
        raise NotFound(resource)


def resolve_refs(
    database: Database,
    docs: Iterable[dict],
    field: str,
    collection_name: str,
    fields: Iterable[str],
) -> List[dict]:
    """
    Replace id references in ``field`` with small embedded documents.

    Works for single ids and lists of ids; unknown or invalid ids resolve to
    None (single) or are dropped (list).
    """
    docs = list(docs)
    wanted = set()
    for d in docs:
        value = d.get(field)
        ids = value if isinstance(value, list) else [value]
        wanted.update(i for i in ids if is_valid_id(i))

    projection = {f: 1 for f in fields}
    lookup = {}
    if wanted:
        for ref in database[collection_name].find({"_id": {"$in": [ObjectId(i) for i in wanted]}}, projection):
            lookup[str(ref["_id"])] = serialize_doc(ref)

    for d in docs:
        value = d.get(field)
        if isinstance(value, list):
            d[field] = [lookup[i] for i in value if i in lookup]
        elif value is not None:
            d[field] = lookup.get(value)
    return docs
