import io
import random

import pytest

from upload_service.errors import UploadStorageError
from upload_service.storage import (
    PREFIX_CHARSET,
    FileStore,
    base_name,
    file_extension,
    random_prefix,
    sanitize_filename,
    storage_filename,
)


@pytest.mark.parametrize("filename, expected", [
    ("photo.jpg", ".jpg"),
    ("archive.tar.gz", ".gz"),
    ("README", ""),
    ("trailing.", "."),
    (".bashrc", ".bashrc"),
    ("dir.d/noext", ""),
    ("C:\\Users\\me\\setup.exe", ".exe"),
    ("Setup.EXE", ".EXE"),
])
def test_file_extension(filename, expected):
    assert file_extension(filename) == expected


def test_base_name_strips_both_separators():
    assert base_name("../../etc/passwd.txt") == "passwd.txt"
    assert base_name("..\\..\\boot.ini") == "boot.ini"
    assert base_name("plain.txt") == "plain.txt"


def test_sanitize_only_replaces_spaces():
    assert sanitize_filename("a b  c.txt") == "a_b__c.txt"
    assert sanitize_filename("tab\there.txt") == "tab\there.txt"
    assert sanitize_filename("ünïcode name.txt") == "ünïcode_name.txt"


def test_random_prefix_uses_alphanumeric_charset():
    rng = random.Random(1234)
    prefixes = {random_prefix(6, rng) for _ in range(200)}

    assert all(len(prefix) == 6 for prefix in prefixes)
    assert all(set(prefix) <= set(PREFIX_CHARSET) for prefix in prefixes)
    assert len(prefixes) > 190


def test_storage_filename_is_deterministic_for_seeded_rng():
    first = storage_filename("my file.txt", 6, random.Random(7))
    second = storage_filename("my file.txt", 6, random.Random(7))

    assert first == second
    assert first.endswith("_my_file.txt")
    assert len(first) == len("my_file.txt") + 7


def test_save_writes_stream(tmp_path):
    store = FileStore(str(tmp_path), rng=random.Random(3))

    name, size = store.save(io.BytesIO(b"abc" * 1000), "data set.csv")

    assert name.endswith("_data_set.csv")
    assert size == 3000
    assert (tmp_path / name).read_bytes() == b"abc" * 1000


def test_save_overwrites_on_collision(tmp_path):
    store = FileStore(str(tmp_path), rng=random.Random(9))
    name, _ = store.save(io.BytesIO(b"a much longer first body"), "same.txt")

    store.rng = random.Random(9)
    again, _ = store.save(io.BytesIO(b"short"), "same.txt")

    assert again == name
    assert (tmp_path / name).read_bytes() == b"short"


def test_ensure_directory_creates_parents(tmp_path):
    target = tmp_path / "a" / "b" / "uploaded"
    FileStore(str(target)).ensure_directory()
    assert target.is_dir()


def test_ensure_directory_failure(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")

    with pytest.raises(UploadStorageError) as excinfo:
        FileStore(str(blocker / "sub")).ensure_directory()

    assert excinfo.value.message == "Unable to create directory"
    assert excinfo.value.status_code == 500
    assert isinstance(excinfo.value.__cause__, OSError)


def test_save_fails_when_directory_missing(tmp_path):
    store = FileStore(str(tmp_path / "missing"))

    with pytest.raises(UploadStorageError) as excinfo:
        store.save(io.BytesIO(b"data"), "file.txt")

    assert excinfo.value.message == "Unable to create file on server"


class BrokenStream(io.RawIOBase):
    """Yields one chunk and then fails like a dropped client connection."""

    def __init__(self):
        self.calls = 0

    def readable(self):
        return True

    def read(self, size=-1):
        self.calls += 1
        if self.calls == 1:
            return b"partial"
        raise OSError("connection reset")


def test_save_failure_keeps_partial_file(tmp_path):
    store = FileStore(str(tmp_path), rng=random.Random(5))

    with pytest.raises(UploadStorageError) as excinfo:
        store.save(BrokenStream(), "video.mp4")

    assert excinfo.value.message == "Unable to save file on server"
    leftovers = list(tmp_path.iterdir())
    assert len(leftovers) == 1
    assert leftovers[0].read_bytes() == b"partial"


def test_save_rejects_null_byte_in_name(tmp_path):
    store = FileStore(str(tmp_path))

    with pytest.raises(UploadStorageError) as excinfo:
        store.save(io.BytesIO(b"data"), "a\x00b.txt")

    assert excinfo.value.message == "Unable to create file on server"
    assert list(tmp_path.iterdir()) == []
