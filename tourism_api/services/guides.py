from sqlalchemy.orm import Session

from tourism_api.core.exceptions import ConflictError, NotFoundError
from tourism_api.core.logging_config import get_logger
from tourism_api.core.security import hash_password
from tourism_api.db.session import transaction
from tourism_api.models.enums import UserRole
from tourism_api.models.guide import TouristGuide
from tourism_api.models.user import User
from tourism_api.schemas.guide import GuideCreate, GuideUpdate
from tourism_api.services.booking_guard import ensure_guide_deletable

logger = get_logger().bind(log_type="guide")

USER_FIELDS = ("name", "email", "phone_number", "profile_picture")
NULLABLE_USER_FIELDS = ("phone_number", "profile_picture")
GUIDE_FIELDS = ("bio", "languages", "price_per_hour", "availability")


def create_guide(db: Session, data: GuideCreate) -> TouristGuide:
    if db.query(User).filter(User.email == data.email).first():
        raise ConflictError("User with this email already exists")

    with transaction(db):
        user = User(
            name=data.name,
            email=data.email,
            password=hash_password(data.password),
            phone_number=data.phone_number,
            profile_picture=data.profile_picture,
            role=UserRole.GUIDE,
        )
        guide = TouristGuide(
            user=user,
            bio=data.bio,
            languages=data.languages,
            price_per_hour=data.price_per_hour,
            availability=data.availability,
        )
        db.add_all([user, guide])

    logger.info(f"Guide created | guide={guide.id} | user={user.email}")

    return guide


def update_guide(db: Session, guide_id: str, data: GuideUpdate) -> TouristGuide:
    guide = db.get(TouristGuide, guide_id)
    if not guide:
        raise NotFoundError("Guide not found")

    changes = data.model_dump(exclude_unset=True)
    user = guide.user

    if changes.get("email") and changes["email"] != user.email:
        if db.query(User).filter(User.email == changes["email"]).first():
            raise ConflictError("Email already taken by another user")

    with transaction(db):
        for field in USER_FIELDS:
            if field in changes and (changes[field] is not None or field in NULLABLE_USER_FIELDS):
                setattr(user, field, changes[field])
        if changes.get("password"):
            user.password = hash_password(changes["password"])

        for field in GUIDE_FIELDS:
            if field in changes and changes[field] is not None:
                setattr(guide, field, changes[field])

    logger.info(f"Guide updated | guide={guide.id} | fields={sorted(changes)}")

    return guide


def delete_guide(db: Session, guide_id: str) -> None:
    guide = db.get(TouristGuide, guide_id)
    if not guide:
        raise NotFoundError("Guide not found")

    ensure_guide_deletable(db, guide_id)

    user_id = guide.user_id

    with transaction(db):
        # events.guide_id is SET NULL, so the guide's events stay behind
        db.query(TouristGuide).filter(TouristGuide.id == guide_id).delete(synchronize_session=False)
        db.query(User).filter(User.id == user_id).delete(synchronize_session=False)

    db.expunge_all()

    logger.info(f"Guide deleted | guide={guide_id} | user={user_id}")
