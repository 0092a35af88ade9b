import random
import re
import string
import time
from typing import Callable, Optional

from pymongo.database import Database

MAX_SUFFIX_ATTEMPTS = 1000

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
SLUG_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


def _now_ms() -> int:
    return int(time.time() * 1000)


def _random_base36(length: int = 7) -> str:
    alphabet = string.digits + string.ascii_lowercase
    return "".join(random.choice(alphabet) for _ in range(length))


def fallback_slug() -> str:
    return f"event-{_now_ms()}-{_random_base36()}"


def slugify(title: Optional[str]) -> str:
    """
    Turn a title into a lowercase, hyphen-separated slug.

    "Eid Charity Drive!!" -> "eid-charity-drive". Titles with no letters or
    digits get a generated ``event-<ms>-<random>`` slug.
    """
    if not isinstance(title, str):
        return fallback_slug()
    slug = _NON_ALNUM.sub("-", title.lower().strip()).strip("-")
    return slug or fallback_slug()


def unique_slug(base: str, exists: Callable[[str], bool]) -> str:
    """
    First of base, base-1, base-2, ... that ``exists`` reports free.

    Gives up after MAX_SUFFIX_ATTEMPTS suffixes and appends a millisecond
    timestamp instead.
    """
    if not exists(base):
        return base
    for counter in range(1, MAX_SUFFIX_ATTEMPTS + 1):
        candidate = f"{base}-{counter}"
        if not exists(candidate):
            return candidate
    return f"{base}-{_now_ms()}"


def slug_taken(db: Database) -> Callable[[str], bool]:
    return lambda slug: db["event"].find_one({"slug": slug}, {"_id": 1}) is not None


def generate_event_slug(db: Database, title: str, requested: Optional[str] = None) -> str:
    """Slug for a new event: the requested one if given, else derived from the title"""
    base = slugify(requested) if requested and requested.strip() else slugify(title)
    return unique_slug(base, slug_taken(db))
