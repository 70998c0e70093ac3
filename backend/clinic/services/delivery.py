"""File delivery targets for rendered exports.

A delivery receives the encoded document, the final filename and the media
type, and hands the bytes over to wherever the user picks them up. The HTTP
download target lives in ``app.delivery``.
"""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import structlog

from clinic.services.errors import DeliveryError

logger = structlog.get_logger(__name__)


class FileDelivery(Protocol):
    def deliver(self, content: bytes, filename: str, media_type: str) -> str | None:
        """Hand ``content`` to the user as ``filename``; return where it went."""
        ...


@dataclass(frozen=True)
class DeliveredFile:
    filename: str
    media_type: str
    content: bytes

    @property
    def text(self) -> str:
        return self.content.decode("utf-8-sig")


class MemoryDelivery:
    """Keeps delivered files in memory, in delivery order."""

    def __init__(self) -> None:
        self.delivered: list[DeliveredFile] = []

    def deliver(self, content: bytes, filename: str, media_type: str) -> str:
        self.delivered.append(DeliveredFile(filename, media_type, content))
        return f"memory:{filename}"

    @property
    def last(self) -> DeliveredFile | None:
        return self.delivered[-1] if self.delivered else None


class DirectoryDelivery:
    """Writes delivered files below an export directory.

    The bytes go to a temporary file next to the target which is then
    renamed into place, so a partially written export never appears under
    the final name.
    """

    def __init__(self, export_dir: Path | str) -> None:
        self.export_dir = Path(export_dir)

    def target_path(self, filename: str) -> Path:
        root: Path = self.export_dir.resolve()
        target: Path = (root / filename).resolve()
        if target == root or not target.is_relative_to(root):
            raise DeliveryError(f"Refusing to write {filename!r} outside {root}")
        return target

    def deliver(self, content: bytes, filename: str, media_type: str) -> str:
        target: Path = self.target_path(filename)
        tmp_path: str | None = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=target.parent, prefix=f".{target.name}.", suffix=".part"
            )
            with os.fdopen(fd, "wb") as fh:
                fh.write(content)
            os.replace(tmp_path, target)
        except OSError as exc:
            raise DeliveryError(f"Could not write export to {target}: {exc}") from exc
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)

        logger.debug("export_written", path=str(target), media_type=media_type)
        return str(target)
