import logging
import os
import tempfile
import time
import uuid
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError
from werkzeug.utils import secure_filename

from ..errors import ImageProcessingError, ValidationError

MB = 1024 * 1024
ALLOWED_MIME_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp")

# Per-kind upload limits
UPLOAD_KINDS = {
    "barbershops": {"max_size": 5 * MB, "max_files": 5},
    "profiles": {"max_size": 2 * MB, "max_files": 1},
}


def stream_size(file) -> int:
    """Byte length of an uploaded file without consuming it."""
    stream = file.stream
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


class FileStorageService:
    """Local-disk storage for uploaded images.

    Files live under ``<upload_dir>/<kind>/`` and are published at
    ``<url_prefix>/<kind>/<filename>``.
    """

    def __init__(self, upload_dir: str, url_prefix: str = "/uploads", logger=None):
        self.upload_dir = os.path.abspath(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")
        self.logger = logger or logging.getLogger(__name__)

    def ensure_directories(self) -> None:
        for kind in UPLOAD_KINDS:
            os.makedirs(os.path.join(self.upload_dir, kind), exist_ok=True)

    def kind_dir(self, kind: str) -> str:
        if kind not in UPLOAD_KINDS:
            raise ValueError(f"Unknown upload kind: {kind}")
        return os.path.join(self.upload_dir, kind)

    # -- validation ------------------------------------------------------

    def validate_image(self, file, kind: str = "barbershops") -> None:
        max_size = UPLOAD_KINDS[kind]["max_size"]
        if stream_size(file) > max_size:
            raise ValidationError(
                f"File size too large. Maximum {max_size // MB}MB allowed.",
                details=[file.filename or "upload"],
            )
        if (file.mimetype or "").lower() not in ALLOWED_MIME_TYPES:
            raise ValidationError(
                "Invalid file type. Only JPEG, PNG, and WebP are allowed.",
                details=[file.filename or "upload"],
            )

    def validate_batch(self, files, kind: str = "barbershops") -> None:
        if not files:
            raise ValidationError("No image files provided")
        max_files = UPLOAD_KINDS[kind]["max_files"]
        if len(files) > max_files:
            raise ValidationError(f"Too many files. Maximum {max_files} allowed.")
        for file in files:
            self.validate_image(file, kind)

    # -- naming ----------------------------------------------------------

    @staticmethod
    def generate_filename(original_name: Optional[str]) -> str:
        """Fresh unique name; only the sanitized extension of the original survives."""
        extension = os.path.splitext(secure_filename(original_name or ""))[1].lower()
        return f"{uuid.uuid4().hex}{extension}"

    def save_upload(self, file, kind: str) -> str:
        self.ensure_directories()
        path = os.path.join(self.kind_dir(kind), self.generate_filename(file.filename))
        file.save(path)
        return path

    def get_file_url(self, filename: str, kind: str) -> str:
        return f"{self.url_prefix}/{kind}/{filename}"

    def path_for_url(self, url: str) -> Optional[str]:
        """Map a public upload URL back to its file, or None if it is not ours."""
        prefix = f"{self.url_prefix}/"
        if not url or not url.startswith(prefix):
            return None
        parts = url[len(prefix):].split("/")
        if len(parts) != 2 or parts[0] not in UPLOAD_KINDS:
            return None
        kind, filename = parts
        if not filename or filename != secure_filename(filename):
            return None
        return os.path.join(self.kind_dir(kind), filename)

    # -- processing ------------------------------------------------------

    def _render_jpeg(self, input_path: str, output_path: str, size, quality: int) -> None:
        directory = os.path.dirname(output_path) or "."
        fd, tmp_path = tempfile.mkstemp(suffix=".tmp", dir=directory)
        os.close(fd)
        try:
            with Image.open(input_path) as image:
                image = ImageOps.exif_transpose(image)
                fitted = ImageOps.fit(
                    image.convert("RGB"),
                    size,
                    method=Image.Resampling.LANCZOS,
                    centering=(0.5, 0.5),
                )
                fitted.save(tmp_path, "JPEG", quality=quality)
            os.replace(tmp_path, output_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def process_image(
        self,
        input_path: str,
        output_path: str,
        width: int = 800,
        height: int = 600,
        quality: int = 80,
    ) -> None:
        """Center-crop to ``width`` x ``height`` as JPEG, then drop the original."""
        try:
            self._render_jpeg(input_path, output_path, (width, height), quality)
        except (OSError, UnidentifiedImageError, ValueError) as e:
            self.logger.error(f"Error processing image {input_path}: {e}")
            raise ImageProcessingError("Failed to process image") from e

        if os.path.abspath(input_path) != os.path.abspath(output_path):
            self.delete_file(input_path)

    def generate_thumbnail(self, input_path: str, output_path: str, size: int = 200) -> None:
        try:
            self._render_jpeg(input_path, output_path, (size, size), 70)
        except (OSError, UnidentifiedImageError, ValueError) as e:
            self.logger.error(f"Error generating thumbnail for {input_path}: {e}")
            raise ImageProcessingError("Failed to generate thumbnail") from e

    @staticmethod
    def thumbnail_path(path: str) -> str:
        stem, _ = os.path.splitext(path)
        return f"{stem}_thumb.jpg"

    def store_image(self, file, kind: str, width: int, height: int, quality: int = 80) -> dict:
        """Save, resize and thumbnail one upload. Returns its public URLs."""
        raw_path = self.save_upload(file, kind)
        stem = os.path.splitext(os.path.basename(raw_path))[0]
        final_path = os.path.join(self.kind_dir(kind), f"{stem}.jpg")
        try:
            self.process_image(raw_path, final_path, width, height, quality)
        except ImageProcessingError:
            self.delete_file(raw_path)
            raise

        thumb_path = self.thumbnail_path(final_path)
        try:
            self.generate_thumbnail(final_path, thumb_path)
        except ImageProcessingError:
            self.delete_file(final_path)
            raise
        return {
            "url": self.get_file_url(os.path.basename(final_path), kind),
            "thumbnailUrl": self.get_file_url(os.path.basename(thumb_path), kind),
        }

    # -- deletion --------------------------------------------------------

    def delete_file(self, path: str) -> bool:
        """Remove ``path``. Returns False when there was nothing to remove."""
        try:
            os.remove(path)
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            self.logger.error(f"Error deleting file {path}: {e}")
            return False

    def delete_url(self, url: str) -> bool:
        """Delete an uploaded image and its thumbnail by public URL."""
        path = self.path_for_url(url)
        if not path:
            return False
        removed = self.delete_file(path)
        self.delete_file(self.thumbnail_path(path))
        return removed

    def cleanup_old_files(self, older_than_days: int = 30, keep_urls=None) -> int:
        """Delete uploads older than the cutoff, sparing ``keep_urls`` and their thumbnails."""
        keep = set()
        for url in keep_urls or ():
            path = self.path_for_url(url)
            if path:
                keep.update({path, self.thumbnail_path(path)})

        cutoff = time.time() - older_than_days * 24 * 60 * 60
        removed = 0
        for kind in UPLOAD_KINDS:
            directory = os.path.join(self.upload_dir, kind)
            if not os.path.isdir(directory):
                continue
            for name in os.listdir(directory):
                path = os.path.join(directory, name)
                if path in keep or not os.path.isfile(path):
                    continue
                if os.path.getmtime(path) < cutoff and self.delete_file(path):
                    removed += 1
        return removed
