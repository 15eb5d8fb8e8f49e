import io
import os

import pytest

from upload_service.app import create_app
from upload_service.config import UploadSettings
from upload_service.metrics import UploadMetrics

HOSTNAME = "http://files.test"


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploaded"


@pytest.fixture
def static_dir(tmp_path):
    path = tmp_path / "static"
    path.mkdir()
    (path / "index.html").write_text("<h1>upload</h1>")
    (path / "app.css").write_text("body { margin: 0 }")
    return path


@pytest.fixture
def settings(upload_dir, static_dir):
    return UploadSettings(
        hostname=HOSTNAME,
        upload_dir=str(upload_dir),
        static_dir=str(static_dir),
        url_prefix="/uploaded",
        access_log=True,
        case_insensitive_extensions=False,
    )


@pytest.fixture
def metrics():
    return UploadMetrics()


@pytest.fixture
def app(settings, metrics):
    app = create_app(settings, metrics)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def stored_files(path):
    if not os.path.isdir(path):
        return []
    return sorted(os.listdir(path))


def upload(client, *files):
    """POST ``(filename, bytes)`` pairs as repeated ``file`` parts."""
    parts = [(io.BytesIO(content), name) for name, content in files]
    return client.post(
        "/upload",
        data={"file": parts},
        content_type="multipart/form-data",
    )
