from __future__ import annotations

import io
import logging
import uuid
from pathlib import Path
from typing import Protocol

from PIL import Image, UnidentifiedImageError
from werkzeug.utils import secure_filename

from ..core.exceptions import EvidenceUploadError

logger = logging.getLogger(__name__)


class EvidenceStorage(Protocol):
    def upload(self, data: bytes, user_id: str, filename: str = "") -> str:
        """Store an evidence image and return its public reference."""

        raise NotImplementedError


class LocalEvidenceStorage(EvidenceStorage):
    """Stores evidence photos on disk under ``<base_dir>/<user>/``."""

    ALLOWED_FORMATS = {"JPEG", "PNG", "WEBP", "HEIF", "GIF"}

    def __init__(self, base_dir: str | Path, *, base_url: str = "/evidence", max_bytes: int = 10 * 1024 * 1024):
        self._base_dir = Path(base_dir)
        self._base_url = base_url.rstrip("/")
        self._max_bytes = int(max_bytes)

    def _detect_format(self, data: bytes) -> str:
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.verify()
                return str(img.format or "").upper()
        except (UnidentifiedImageError, OSError, SyntaxError) as exc:
            raise EvidenceUploadError("Arquivo enviado não é uma imagem válida.") from exc

    def upload(self, data: bytes, user_id: str, filename: str = "") -> str:
        if not data:
            raise EvidenceUploadError("Arquivo vazio.")
        if len(data) > self._max_bytes:
            raise EvidenceUploadError("Imagem muito grande.")

        fmt = self._detect_format(data)
        if fmt not in self.ALLOWED_FORMATS:
            raise EvidenceUploadError(f"Formato de imagem não suportado: {fmt or '?'}")

        safe_user = secure_filename(str(user_id)) or "anonymous"
        safe_name = secure_filename(filename) or f"evidence.{fmt.lower()}"
        stored_name = f"{uuid.uuid4().hex}_{safe_name}"

        target_dir = self._base_dir / safe_user
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            (target_dir / stored_name).write_bytes(data)
        except OSError as exc:
            logger.exception("Could not store evidence for %s", user_id)
            raise EvidenceUploadError("Falha ao salvar a imagem.") from exc

        return f"{self._base_url}/{safe_user}/{stored_name}"
