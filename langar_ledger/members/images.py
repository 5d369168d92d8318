"""Mini README: Storage for uploaded member photographs.

Structure:
    * ImageStore - stage uploads as ``<roll_no><ext>``, list and zip them.

One image per roll number: a new upload for the same member replaces the old
file, whatever its extension was. Roll numbers may contain any characters, so
existing files are matched on their exact stem rather than through a glob.

Uploads are staged: ``staged`` writes the bytes to a hidden temporary file,
yields the final file name so the caller can record it, and only moves the
file into place when the caller's block succeeds.
"""

from __future__ import annotations

import io
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List

from ..backups.archiver import zip_directory
from ..errors import NotFoundError, ValidationError
from ..logging_utils import get_logger
from ..utils import canonical_roll_no

LOGGER = get_logger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp"}
STAGING_PREFIX = ".upload-"


class ImageStore:
    def __init__(self, directory: Path, *, url_prefix: str = "/images") -> None:
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")

    def filename_for(self, roll_no: object, original_filename: str) -> str:
        """Validate an upload and return the name it will be stored under."""

        extension = Path(original_filename or "").suffix.lower()
        if extension not in ALLOWED_EXTENSIONS:
            raise ValidationError(f"Unsupported image type: {extension or 'none'}")
        stem = canonical_roll_no(roll_no)
        if "/" in stem or "\\" in stem or stem.startswith("."):
            raise ValidationError(f"Roll number {stem} cannot be used as a file name")
        return f"{stem}{extension}"

    @contextmanager
    def staged(self, roll_no: object, original_filename: str, data: bytes) -> Iterator[str]:
        """Write ``data`` aside, yield the stored name, publish it if the block succeeds."""

        filename = self.filename_for(roll_no, original_filename)
        self.directory.mkdir(parents=True, exist_ok=True)
        handle, temp_name = tempfile.mkstemp(prefix=STAGING_PREFIX, dir=str(self.directory))
        try:
            with os.fdopen(handle, "wb") as temp_file:
                temp_file.write(data)
            yield filename
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise
        os.replace(temp_name, self.directory / filename)
        self._remove_other_versions(filename)
        LOGGER.info("Stored image %s (%s bytes)", filename, len(data))

    def _remove_other_versions(self, filename: str) -> None:
        stem = Path(filename).stem
        for path in self.directory.iterdir():
            if path.is_file() and path.stem == stem and path.name != filename:
                path.unlink()
                LOGGER.debug("Removed previous image %s", path.name)

    def list_images(self) -> List[Dict[str, str]]:
        if not self.directory.exists():
            return []
        return [
            {"name": path.name, "url": f"{self.url_prefix}/{path.name}"}
            for path in sorted(self.directory.iterdir())
            if path.is_file() and not path.name.startswith(STAGING_PREFIX)
        ]

    def archive(self) -> bytes:
        """Return a ZIP of every stored image."""

        if not self.directory.exists():
            raise NotFoundError("Upload directory not found.")
        buffer = io.BytesIO()
        zip_directory(self.directory, buffer)
        return buffer.getvalue()
