"""
Screenshot export for test results.

This module provides the AttachmentExporter which persists image
attachments into the report's side directory under generated,
collision-free names.
"""

from __future__ import annotations

import logging
import shutil
import uuid
from collections.abc import Callable, Iterable
from pathlib import Path

from ..events.models import Attachment, ImageKind
from .models import ScreenshotRef

logger = logging.getLogger(__name__)

SCREENSHOTS_DIR = "screenshots"
DEFAULT_SCREENSHOT_NAME = "Screenshot"


def generate_uuid() -> str:
    """Default identifier strategy: a random UUID4."""
    return str(uuid.uuid4())


class AttachmentExporter:
    """
    Writes image attachments into an export directory.

    Only ``image/png`` and ``image/jpeg`` attachments are exported. Inline
    bodies get an extension derived from the content type; file-backed
    attachments keep the extension of their source file. A failed write
    or copy drops that one attachment and never interrupts the others.

    Example:
        exporter = AttachmentExporter(Path("md-report/screenshots"))
        refs = exporter.export(result.attachments)
        # [ScreenshotRef(name="screenshot", path="screenshots/<uuid>.png")]
    """

    def __init__(
        self,
        export_dir: str | Path,
        generate_id: Callable[[], str] = generate_uuid,
    ):
        self.export_dir = Path(export_dir)
        self.generate_id = generate_id

    def export(self, attachments: Iterable[Attachment]) -> list[ScreenshotRef]:
        """
        Export every qualifying attachment, in order.

        Args:
            attachments: Attachments of a single test result

        Returns:
            One ScreenshotRef per successfully exported attachment
        """
        screenshots: list[ScreenshotRef] = []

        for attachment in attachments:
            kind = attachment.image_kind
            if kind == ImageKind.OTHER:
                continue

            if attachment.body is not None:
                ref = self._write_body(attachment, kind)
            elif attachment.path:
                ref = self._copy_file(attachment)
            else:
                continue

            if ref is not None:
                screenshots.append(ref)

        return screenshots

    def _write_body(self, attachment: Attachment, kind: ImageKind) -> ScreenshotRef | None:
        ext = ".jpg" if kind == ImageKind.JPEG else ".png"
        filename = f"{self.generate_id()}{ext}"

        try:
            self._ensure_export_dir()
            (self.export_dir / filename).write_bytes(attachment.body)
        except OSError as e:
            logger.warning(f"Failed to save screenshot: {e}")
            return None

        return self._reference(attachment, filename)

    def _copy_file(self, attachment: Attachment) -> ScreenshotRef | None:
        original_ext = Path(attachment.path).suffix
        filename = f"{self.generate_id()}{original_ext}"

        try:
            self._ensure_export_dir()
            shutil.copyfile(attachment.path, self.export_dir / filename)
        except OSError as e:
            logger.warning(f"Failed to copy screenshot: {e}")
            return None

        return self._reference(attachment, filename)

    def _ensure_export_dir(self) -> None:
        if not self.export_dir.is_dir():
            self.export_dir.mkdir(parents=True, exist_ok=True)

    def _reference(self, attachment: Attachment, filename: str) -> ScreenshotRef:
        return ScreenshotRef(
            name=attachment.name or DEFAULT_SCREENSHOT_NAME,
            path=f"{SCREENSHOTS_DIR}/{filename}",
        )
