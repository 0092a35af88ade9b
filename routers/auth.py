from typing import List, Optional

from fastapi import APIRouter, Depends
from pymongo.database import Database

from database import (
    create_document, delete_document, get_db, get_documents,
    oid, serialize_doc, update_document,
)
from exceptions import AccountInactive, DuplicateUser, InvalidCredentials, ValidationError
from logging_config import get_logger
from notifications import notify
from schemas import (
    LoginPayload, MembershipUpdate, ProfileUpdate, RegisterPayload, RoleUpdate, User, UserCreate,
)
from security import (
    AccessRole, create_access_token, get_current_user, get_password_hash, require_admin,
    resolve_role, verify_password,
)

logger = get_logger("auth")

router = APIRouter(prefix="/auth", tags=["auth"])

PUBLIC_USER_FIELDS = (
    "id", "name", "email", "phone", "role", "custom_role", "membership_status",
    "profile_image", "address", "occupation", "bio", "is_active",
)


def public_user(user: dict) -> dict:
    data = {field: user.get(field) for field in PUBLIC_USER_FIELDS}
    data["join_date"] = user.get("created_at")
    return data


def find_conflicting_user(db: Database, phone: Optional[str], email: Optional[str],
                          exclude_id: Optional[str] = None) -> Optional[dict]:
    clauses = []
    if phone:
        clauses.append({"phone": phone})
    if email:
        clauses.append({"email": email.lower()})
    if not clauses:
        return None
    query = {"$or": clauses}
    if exclude_id:
        query["_id"] = {"$ne": oid(exclude_id)}
    return db["user"].find_one(query)


def _create_user(db: Database, payload: RegisterPayload, role: str, custom_role: str,
                 membership_status: str) -> dict:
    phone = payload.phone.strip()
    email = payload.email.strip().lower() if payload.email else None
    if find_conflicting_user(db, phone, email):
        raise DuplicateUser()
    user = User(
        name=payload.name.strip(),
        email=email,
        phone=phone,
        password=get_password_hash(payload.password),
        role=role,
        custom_role=custom_role,
        membership_status=membership_status,
    )
    user_id = create_document(db, "user", user)
    return serialize_doc(db["user"].find_one({"_id": oid(user_id)}))


# ===== Public =====
@router.post("/register", status_code=201, response_model=dict)
def register(payload: RegisterPayload, db: Database = Depends(get_db)):
    # Self-registered members wait for admin approval
    user = _create_user(db, payload, AccessRole.USER.value, "", "pending")
    logger.log_auth_event("register", True, phone=user["phone"])
    return {**public_user(user), "token": create_access_token(user["id"], user["role"])}


@router.post("/login", response_model=dict)
def login(payload: LoginPayload, db: Database = Depends(get_db)):
    phone = payload.phone.strip()
    user = db["user"].find_one({"phone": phone})
    if not user or not verify_password(payload.password, user.get("password", "")):
        logger.log_auth_event("login", False, phone=phone, reason="invalid credentials")
        raise InvalidCredentials()
    if not user.get("is_active", True):
        logger.log_auth_event("login", False, phone=phone, reason="inactive")
        raise AccountInactive()

    user = serialize_doc(user)
    logger.log_auth_event("login", True, phone=phone)
    return {
        "access_token": create_access_token(user["id"], user.get("role", AccessRole.USER.value)),
        "token_type": "bearer",
        "user": public_user(user),
    }


# ===== Self service =====
@router.get("/me", response_model=dict)
def read_users_me(current_user: dict = Depends(get_current_user)):
    return public_user(current_user)


@router.put("/profile", response_model=dict)
def update_profile(payload: ProfileUpdate, current_user: dict = Depends(get_current_user),
                   db: Database = Depends(get_db)):
    # Empty values leave the stored field unchanged
    changes = {k: v.strip() for k, v in payload.model_dump(exclude_unset=True).items()
               if isinstance(v, str) and v.strip()}
    if "email" in changes:
        changes["email"] = changes["email"].lower()
    if find_conflicting_user(db, changes.get("phone"), changes.get("email"), exclude_id=current_user["id"]):
        raise DuplicateUser()
    if "password" in changes:
        changes["password"] = get_password_hash(payload.password)

    updated = serialize_doc(update_document(db, "user", current_user["id"], changes, "User"))
    return {**public_user(updated), "token": create_access_token(updated["id"], updated["role"])}


# ===== Admin =====
@router.post("/users", status_code=201, response_model=dict)
def create_user(payload: UserCreate, admin: dict = Depends(require_admin), db: Database = Depends(get_db)):
    role, custom_role = resolve_role(payload.role, payload.custom_role)
    user = _create_user(db, payload, role, custom_role, "approved")
    logger.info(f"User {user['id']} created by admin {admin['id']} with role {role}")
    return public_user(user)


@router.get("/users", response_model=List[dict])
def list_users(admin: dict = Depends(require_admin), db: Database = Depends(get_db)):
    return [public_user(serialize_doc(d)) for d in get_documents(db, "user", sort=[("name", 1)])]


@router.delete("/users/{user_id}", response_model=dict)
def delete_user(user_id: str, admin: dict = Depends(require_admin), db: Database = Depends(get_db)):
    delete_document(db, "user", user_id, "User")
    logger.info(f"User {user_id} removed by admin {admin['id']}")
    return {"id": user_id, "message": "User removed"}


@router.put("/users/{user_id}/role", response_model=dict)
def update_user_role(user_id: str, payload: RoleUpdate, admin: dict = Depends(require_admin),
                     db: Database = Depends(get_db)):
    role, custom_role = resolve_role(payload.role, payload.custom_role)
    user = serialize_doc(update_document(db, "user", user_id, {"role": role, "custom_role": custom_role}, "User"))
    return {"id": user["id"], "name": user["name"], "role": user["role"], "custom_role": user["custom_role"]}


@router.put("/users/{user_id}/membership", response_model=dict)
def update_membership(user_id: str, payload: MembershipUpdate, admin: dict = Depends(require_admin),
                      db: Database = Depends(get_db)):
    changes = payload.model_dump(exclude_none=True)
    if not changes:
        raise ValidationError("Please provide membership_status or is_active")
    user = serialize_doc(update_document(db, "user", user_id, changes, "User"))
    if changes.get("membership_status") == "approved":
        notify(db, user_id, "Your membership has been approved", "success")
    return public_user(user)
