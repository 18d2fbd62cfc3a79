"""
Shared fixtures. Every test gets its own storage folders under tmp_path.

Run:  pytest -v
"""

from io import BytesIO

import pytest
import yaml
from PIL import Image

from cms import create_app
from cms.security import hash_password

# Keep key derivation cheap in tests
TEST_ITERATIONS = 1_000


@pytest.fixture
def credentials_file(tmp_path):
    path = tmp_path / "users.yml"
    path.write_text(
        yaml.safe_dump({
            "admin": hash_password("secret", TEST_ITERATIONS),
            "bill": hash_password("billspassword", TEST_ITERATIONS),
        }),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def app(tmp_path, credentials_file):
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "DATA_FOLDER": str(tmp_path / "data"),
        "IMAGE_FOLDER": str(tmp_path / "images"),
        "CREDENTIALS_FILE": str(credentials_file),
        "PASSWORD_HASH_ITERATIONS": TEST_ITERATIONS,
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client):
    """A test client whose session is already signed in as admin."""
    with client.session_transaction() as sess:
        sess["user"] = "admin"
    return client


@pytest.fixture
def documents(app):
    return app.extensions["cms.documents"]


@pytest.fixture
def images(app):
    return app.extensions["cms.images"]


@pytest.fixture
def png_bytes():
    buf = BytesIO()
    Image.new("RGB", (4, 4), color=(200, 30, 30)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def session_of():
    """Snapshot of a client's session after its last request."""
    def read(client):
        with client.session_transaction() as sess:
            return dict(sess)
    return read
