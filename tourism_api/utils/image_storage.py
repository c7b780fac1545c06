"""
Disk-backed image store.

Uploads are written to a private staging directory first and only moved to
their public location (``<root>/<category>/<name>``, served at
``/uploads/<category>/<name>``) once the database transaction that references
them has committed. Every failure path discards the staged copies, so a
rejected or rolled-back request leaves nothing behind.
"""
import io
import os
import random
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from tourism_api.core.config import MAX_UPLOAD_FILES, MAX_UPLOAD_SIZE, UPLOAD_URL_PREFIX
from tourism_api.core.exceptions import ValidationError
from tourism_api.core.logging_config import get_logger

logger = get_logger().bind(log_type="storage")

STAGING_DIRNAME = ".staging"


@dataclass(frozen=True)
class StoredImage:
    name: str
    path: str
    size: int
    content_type: str
    category: str

    @property
    def url(self) -> str:
        return f"{UPLOAD_URL_PREFIX}/{self.category}/{self.name}"


class ImageStorage:
    def __init__(
        self,
        root: str,
        max_files: int = MAX_UPLOAD_FILES,
        max_size: int = MAX_UPLOAD_SIZE,
    ):
        self.root = root
        self.staging_root = os.path.join(root, STAGING_DIRNAME)
        self.max_files = max_files
        self.max_size = max_size

    # =====================================================================
    #                               STAGING
    # =====================================================================
    def stage(
        self,
        uploads: Optional[Sequence[UploadFile]],
        category: str,
        field_name: str,
    ) -> List[StoredImage]:
        uploads = [u for u in (uploads or []) if u is not None and u.filename]

        if len(uploads) > self.max_files:
            raise ValidationError(
                "Validation failed",
                errors=[f"At most {self.max_files} images can be uploaded at once"],
            )

        staged: List[StoredImage] = []
        try:
            for upload in uploads:
                staged.append(self._stage_one(upload, category, field_name))
        except Exception:
            self.discard(staged)
            raise

        if staged:
            logger.info(f"Staged {len(staged)} {category} image(s)")

        return staged

    def _stage_one(self, upload: UploadFile, category: str, field_name: str) -> StoredImage:
        content_type = (upload.content_type or "").lower()
        if not content_type.startswith("image/"):
            raise ValidationError(
                "Validation failed",
                errors=[f"{upload.filename}: only image files are allowed"],
            )

        data = upload.file.read(self.max_size + 1)
        if len(data) > self.max_size:
            raise ValidationError(
                "Validation failed",
                errors=[f"{upload.filename}: file exceeds {self.max_size // (1024 * 1024)}MB"],
            )

        try:
            img = Image.open(io.BytesIO(data))
            image_format = img.format
            img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError):
            raise ValidationError(
                "Validation failed",
                errors=[f"{upload.filename}: invalid image file"],
            )

        ext = os.path.splitext(upload.filename)[1].lower()
        if not ext and image_format:
            ext = f".{image_format.lower()}"

        name = f"{field_name}_{int(time.time() * 1000)}_{random.randint(0, 10**9)}{ext}"

        staging_dir = os.path.join(self.staging_root, category)
        os.makedirs(staging_dir, exist_ok=True)
        path = os.path.join(staging_dir, name)

        with open(path, "wb") as fh:
            fh.write(data)

        return StoredImage(
            name=name,
            path=path,
            size=len(data),
            content_type=content_type,
            category=category,
        )

    # =====================================================================
    #                       PROMOTE / DISCARD
    # =====================================================================
    def promote(self, images: Iterable[StoredImage]) -> None:
        """Move staged files to their public location. Runs after commit."""
        for image in images:
            target_dir = os.path.join(self.root, image.category)
            os.makedirs(target_dir, exist_ok=True)
            try:
                os.replace(image.path, os.path.join(target_dir, image.name))
            except OSError as e:
                # Row is already committed; the URL will 404 until fixed by hand
                logger.error(f"Could not publish {image.url}: {e}")

    def discard(self, images: Iterable[StoredImage]) -> None:
        for image in images:
            try:
                if os.path.exists(image.path):
                    os.remove(image.path)
            except OSError as e:
                logger.error(f"Could not discard staged file {image.path}: {e}")

    @contextmanager
    def staged(
        self,
        uploads: Optional[Sequence[UploadFile]],
        category: str,
        field_name: str,
    ):
        """
        Stage ``uploads`` for the duration of the block.

        Leaving the block normally publishes the files; any exception discards
        them and propagates.
        """
        images = self.stage(uploads, category, field_name)
        try:
            yield images
        except BaseException:
            self.discard(images)
            if images:
                logger.info(f"Discarded {len(images)} staged {category} image(s)")
            raise
        self.promote(images)

    # =====================================================================
    #                             REMOVAL
    # =====================================================================
    def path_for_url(self, url: str) -> Optional[str]:
        prefix = f"{UPLOAD_URL_PREFIX}/"
        if not url or not url.startswith(prefix):
            return None

        category, _, name = url[len(prefix):].partition("/")
        if not category or not name or category == STAGING_DIRNAME:
            return None

        return os.path.join(self.root, category, os.path.basename(name))

    def exists(self, url: str) -> bool:
        path = self.path_for_url(url)
        return path is not None and os.path.isfile(path)

    def remove_urls(self, urls: Iterable[str]) -> None:
        """Best-effort removal of published files; never raises."""
        for url in urls:
            path = self.path_for_url(url)
            if path is None:
                logger.warning(f"Skipping removal of unmanaged URL {url}")
                continue
            try:
                if os.path.exists(path):
                    os.remove(path)
                    logger.info(f"File deleted: {path}")
            except OSError as e:
                logger.error(f"Error deleting file {path}: {e}")
