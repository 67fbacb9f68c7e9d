import io
import json
import os
import time

import pytest
from PIL import Image
from werkzeug.datastructures import FileStorage

from barberapp.errors import ImageProcessingError, ValidationError
from barberapp.scheduler import cleanup_uploads, referenced_upload_urls
from barberapp.services.file_storage_service import MB, FileStorageService
from tests.helpers import make_image


@pytest.fixture
def storage(tmp_path):
    service = FileStorageService(str(tmp_path / "uploads"))
    service.ensure_directories()
    return service


def upload(raw, filename="photo.png", content_type="image/png"):
    return FileStorage(stream=io.BytesIO(raw), filename=filename, content_type=content_type)


def write_image(path, size=(1200, 900)):
    Image.new("RGB", size, (10, 120, 200)).save(path, "PNG")
    return path


@pytest.mark.storage
class TestValidation:
    """Test suite for upload checks."""

    def test_accepts_small_png(self, storage):
        storage.validate_image(upload(make_image().getvalue()), "barbershops")

    def test_profile_size_limit(self, storage):
        file = upload(b"\0" * (2 * MB + 1))
        with pytest.raises(ValidationError) as excinfo:
            storage.validate_image(file, "profiles")
        assert excinfo.value.message == "File size too large. Maximum 2MB allowed."
        # the stream is left where it was
        assert file.stream.tell() == 0

    def test_barbershop_size_limit_is_larger(self, storage):
        storage.validate_image(upload(b"\0" * (2 * MB + 1)), "barbershops")

    def test_rejects_other_types(self, storage):
        with pytest.raises(ValidationError):
            storage.validate_image(upload(b"%PDF", "doc.pdf", "application/pdf"))

    def test_batch_limits(self, storage):
        with pytest.raises(ValidationError):
            storage.validate_batch([], "barbershops")

        two = [upload(b"x"), upload(b"y")]
        with pytest.raises(ValidationError) as excinfo:
            storage.validate_batch(two, "profiles")
        assert excinfo.value.message == "Too many files. Maximum 1 allowed."


@pytest.mark.storage
class TestNaming:
    """Test suite for filenames and URLs."""

    def test_generated_names_are_unique_and_safe(self):
        first = FileStorageService.generate_filename("../../etc/Evil Photo.PNG")
        second = FileStorageService.generate_filename("../../etc/Evil Photo.PNG")
        assert first != second
        assert first.endswith(".png")
        assert "/" not in first and ".." not in first

    def test_url_round_trip(self, storage):
        url = storage.get_file_url("abc.jpg", "barbershops")
        assert url == "/uploads/barbershops/abc.jpg"
        assert storage.path_for_url(url) == os.path.join(storage.upload_dir, "barbershops", "abc.jpg")

    @pytest.mark.parametrize(
        "url",
        [
            "/uploads/barbershops/../secret.txt",
            "/uploads/other/abc.jpg",
            "https://cdn.example.com/uploads/barbershops/abc.jpg",
            "/uploads/barbershops/",
            "",
        ],
    )
    def test_foreign_urls_are_rejected(self, storage, url):
        assert storage.path_for_url(url) is None


@pytest.mark.storage
class TestProcessing:
    """Test suite for resizing and thumbnails."""

    def test_process_image_crops_and_removes_original(self, storage, tmp_path):
        source = write_image(str(tmp_path / "raw.png"))
        target = str(tmp_path / "out.jpg")

        storage.process_image(source, target, 800, 600)

        with Image.open(target) as image:
            assert image.size == (800, 600)
            assert image.format == "JPEG"
        assert not os.path.exists(source)

    def test_thumbnail(self, storage, tmp_path):
        source = write_image(str(tmp_path / "raw.png"))
        thumb = FileStorageService.thumbnail_path(str(tmp_path / "raw.jpg"))

        storage.generate_thumbnail(source, thumb)

        assert thumb.endswith("raw_thumb.jpg")
        with Image.open(thumb) as image:
            assert image.size == (200, 200)

    def test_broken_input(self, storage, tmp_path):
        source = tmp_path / "broken.png"
        source.write_bytes(b"definitely not an image")
        target = tmp_path / "out.jpg"

        with pytest.raises(ImageProcessingError):
            storage.process_image(str(source), str(target))
        assert not target.exists()
        # no temp files left behind
        assert sorted(p.name for p in tmp_path.iterdir()) == ["broken.png", "uploads"]

    def test_store_image(self, storage):
        stored = storage.store_image(upload(make_image().getvalue()), "barbershops", 800, 600)
        assert stored["url"].startswith("/uploads/barbershops/")
        assert stored["thumbnailUrl"].endswith("_thumb.jpg")
        files = os.listdir(os.path.join(storage.upload_dir, "barbershops"))
        assert len(files) == 2

    def test_store_broken_image_leaves_nothing(self, storage):
        with pytest.raises(ImageProcessingError):
            storage.store_image(upload(b"garbage"), "barbershops", 800, 600)
        assert os.listdir(os.path.join(storage.upload_dir, "barbershops")) == []


@pytest.mark.storage
class TestDeletion:
    """Test suite for file removal and cleanup."""

    def test_delete_file_twice(self, storage, tmp_path):
        path = tmp_path / "gone.txt"
        path.write_text("bye")

        assert storage.delete_file(str(path)) is True
        assert storage.delete_file(str(path)) is False

    def test_delete_url_removes_thumbnail(self, storage):
        stored = storage.store_image(upload(make_image().getvalue()), "barbershops", 800, 600)

        assert storage.delete_url(stored["url"]) is True
        assert os.listdir(os.path.join(storage.upload_dir, "barbershops")) == []
        assert storage.delete_url(stored["url"]) is False

    def test_cleanup_old_files(self, storage):
        directory = os.path.join(storage.upload_dir, "barbershops")
        old = os.path.join(directory, "old.jpg")
        kept = os.path.join(directory, "kept.jpg")
        fresh = os.path.join(directory, "fresh.jpg")
        for path in (old, kept, fresh):
            with open(path, "wb") as f:
                f.write(b"x")

        forty_days_ago = time.time() - 40 * 24 * 60 * 60
        for path in (old, kept):
            os.utime(path, (forty_days_ago, forty_days_ago))

        removed = storage.cleanup_old_files(30, keep_urls=["/uploads/barbershops/kept.jpg"])

        assert removed == 1
        assert sorted(os.listdir(directory)) == ["fresh.jpg", "kept.jpg"]


@pytest.mark.storage
def test_scheduled_cleanup_spares_referenced_images(app, client, barber, barbershop, upload_dir):
    response = client.post(
        f"/api/barbershops/{barbershop['id']}/images",
        data={"images": [(make_image(), "keep.png")]},
        content_type="multipart/form-data",
        headers=barber["headers"],
    )
    kept_url = json.loads(response.data)["data"]["images"][0]

    directory = os.path.join(upload_dir, "barbershops")
    orphan = os.path.join(directory, "orphan.jpg")
    with open(orphan, "wb") as f:
        f.write(b"x")
    long_ago = time.time() - 90 * 24 * 60 * 60
    for name in os.listdir(directory):
        os.utime(os.path.join(directory, name), (long_ago, long_ago))

    with app.app_context():
        assert kept_url in referenced_upload_urls()
    assert cleanup_uploads(app) == 1

    kept_name = kept_url.rsplit("/", 1)[1]
    assert sorted(os.listdir(directory)) == sorted([kept_name, kept_name.replace(".jpg", "_thumb.jpg")])
