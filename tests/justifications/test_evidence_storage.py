from __future__ import annotations

import io

import pytest
from PIL import Image

from src.timeclock.timeclock.core.exceptions import EvidenceUploadError
from src.timeclock.timeclock.evidence.storage import LocalEvidenceStorage


def _png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), color=(200, 10, 10)).save(buf, format="PNG")
    return buf.getvalue()


def test_stores_image_under_user_folder(tmp_path):
    storage = LocalEvidenceStorage(tmp_path, base_url="/evidence/")
    url = storage.upload(_png_bytes(), "user-1", "../atestado médico.png")

    assert url.startswith("/evidence/user-1/")
    stored = list((tmp_path / "user-1").iterdir())
    assert len(stored) == 1
    assert stored[0].name.endswith("atestado_medico.png")
    assert url.endswith(stored[0].name)


def test_rejects_non_image(tmp_path):
    with pytest.raises(EvidenceUploadError):
        LocalEvidenceStorage(tmp_path).upload(b"not an image", "u1", "x.png")


def test_rejects_empty_and_oversized(tmp_path):
    storage = LocalEvidenceStorage(tmp_path, max_bytes=10)
    with pytest.raises(EvidenceUploadError):
        storage.upload(b"", "u1")
    with pytest.raises(EvidenceUploadError):
        storage.upload(_png_bytes(), "u1")
