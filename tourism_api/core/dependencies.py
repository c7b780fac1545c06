from tourism_api.core.config import UPLOAD_DIR
from tourism_api.db.session import SessionLocal
from tourism_api.utils.image_storage import ImageStorage

_storage = ImageStorage(UPLOAD_DIR)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_storage() -> ImageStorage:
    return _storage
