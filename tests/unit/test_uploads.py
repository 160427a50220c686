import io
import re

from fastapi import UploadFile

from marketplace.posts.uploads import random_filename, remove_upload, save_upload


def test_random_filename_keeps_only_extension():
    name = random_filename("../../etc/Photo.PNG")
    assert re.fullmatch(r"\d+-\d+\.png", name)
    assert random_filename(None).count(".") == 0


def test_random_filenames_differ():
    assert len({random_filename("a.jpg") for _ in range(20)}) > 1


def test_save_upload_writes_file(tmp_path):
    upload = UploadFile(file=io.BytesIO(b"\x89PNG-data"), filename="photo.png")
    url = save_upload(upload, uploads_dir=tmp_path)
    assert url.startswith("/uploads/")
    assert url.endswith(".png")
    saved = tmp_path / url.rsplit("/", 1)[1]
    assert saved.read_bytes() == b"\x89PNG-data"


def test_remove_upload(tmp_path):
    url = save_upload(UploadFile(file=io.BytesIO(b"data"), filename="a.png"), uploads_dir=tmp_path)
    assert remove_upload(url, uploads_dir=tmp_path) is True
    assert list(tmp_path.iterdir()) == []
    assert remove_upload(url, uploads_dir=tmp_path) is False
    assert remove_upload("/elsewhere/a.png", uploads_dir=tmp_path) is False
