from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, selectinload

from tourism_api.core.dependencies import get_db
from tourism_api.core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from tourism_api.core.jwt import create_access_token
from tourism_api.core.logging_config import get_logger
from tourism_api.core.security import hash_password, verify_password
from tourism_api.db.session import transaction
from tourism_api.models.enums import UserRole
from tourism_api.models.booking import Booking
from tourism_api.models.user import User
from tourism_api.schemas.common import Envelope, MessageOut
from tourism_api.schemas.site import SiteOut
from tourism_api.schemas.user import UserCreate, UserLogin, UserOut, UserProfileOut, UserUpdate

logger = get_logger()

router = APIRouter(prefix="/users", tags=["Users"])

# Profiles with their own aggregate go through /tour-site and /guides
SELF_SERVICE_ROLES = (UserRole.TOURIST, UserRole.SUPER_ADMIN)


def _profile(user: User) -> dict:
    data = UserOut.model_validate(user).model_dump()
    data["site_admin_id"] = user.site_admin.id if user.site_admin else None
    data["site_id"] = user.site_admin.site_id if user.site_admin else None
    data["guide_id"] = user.guide.id if user.guide else None
    return data


# =====================================================================
#                           CREATE USER
# =====================================================================
@router.post("/create", response_model=Envelope[UserOut], status_code=201)
def create_user(data: UserCreate, db: Session = Depends(get_db)):
    if data.role not in SELF_SERVICE_ROLES:
        raise ValidationError(
            "Validation failed",
            errors=[f"role must be one of: {', '.join(r.value for r in SELF_SERVICE_ROLES)}"],
        )

    if db.query(User).filter(User.email == data.email).first():
        raise ConflictError("User with this email already exists")

    with transaction(db):
        user = User(
            name=data.name,
            email=data.email,
            password=hash_password(data.password),
            phone_number=data.phone_number,
            profile_picture=data.profile_picture,
            role=data.role,
        )
        db.add(user)

    logger.info(f"User created | user={user.id} | role={user.role.value}")

    return {"is_ok": True, "message": "User created successfully", "data": user}


# =====================================================================
#                           LIST / GET
# =====================================================================
@router.get("/alluser", response_model=Envelope[List[UserProfileOut]])
def get_all_users(db: Session = Depends(get_db)):
    users = (
        db.query(User)
        .options(selectinload(User.site_admin), selectinload(User.guide))
        .order_by(User.created_at.desc())
        .all()
    )

    return {
        "is_ok": True,
        "message": "Users retrieved successfully",
        "data": [_profile(u) for u in users],
    }


@router.get("/{user_id}", response_model=Envelope[UserProfileOut])
def get_user(user_id: str, db: Session = Depends(get_db)):
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")

    return {"is_ok": True, "message": "User retrieved successfully", "data": _profile(user)}


# =====================================================================
#                           UPDATE USER
# =====================================================================
@router.put("/update/{user_id}", response_model=Envelope[UserOut])
def update_user(user_id: str, data: UserUpdate, db: Session = Depends(get_db)):
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")

    changes = data.model_dump(exclude_unset=True)

    if changes.get("email") and changes["email"] != user.email:
        if db.query(User).filter(User.email == changes["email"]).first():
            raise ConflictError("Email already taken by another user")

    with transaction(db):
        for field in ("name", "email"):
            if changes.get(field) is not None:
                setattr(user, field, changes[field])
        for field in ("phone_number", "profile_picture"):
            if field in changes:
                setattr(user, field, changes[field])
        if changes.get("password"):
            user.password = hash_password(changes["password"])

    logger.info(f"User updated | user={user.id} | fields={sorted(changes)}")

    return {"is_ok": True, "message": "User updated successfully", "data": user}


# =====================================================================
#                           DELETE USER
# =====================================================================
@router.delete("/delete/{user_id}", response_model=MessageOut)
def delete_user(user_id: str, db: Session = Depends(get_db)):
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")

    if user.site_admin:
        raise ConflictError("User is a site admin; delete it through /tour-site/delete")
    if user.guide:
        raise ConflictError("User is a tourist guide; delete it through /guides/delete")
    if db.query(Booking.id).filter(Booking.tourist_id == user_id).first():
        raise ConflictError("Cannot delete user with bookings")

    with transaction(db):
        db.delete(user)

    logger.info(f"User deleted | user={user_id}")

    return {"is_ok": True, "message": "User deleted successfully"}


# =====================================================================
#                           LOGIN
# =====================================================================
@router.post("/login")
def login(data: UserLogin, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == data.email).first()
    if not user:
        raise NotFoundError("User not found")

    if not verify_password(data.password, user.password):
        logger.warning(f"Failed login | user={user.id}")
        raise AuthenticationError("Invalid credentials")

    token = create_access_token({"sub": user.id, "role": user.role.value})

    response = {
        "status": True,
        "isOk": True,
        "message": "Login successful",
        "user": UserOut.model_validate(user).model_dump(by_alias=True, mode="json"),
        "accessToken": token,
        "tokenType": "bearer",
    }

    if user.role == UserRole.SITE_ADMIN and user.site_admin:
        response["site"] = SiteOut.model_validate(user.site_admin.site).model_dump(by_alias=True, mode="json")

    return response
