"""
Download sinks for generated export documents.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Protocol, runtime_checkable

from schooney.utils.logging import get_logger

log = get_logger(__name__)


@runtime_checkable
class DownloadSink(Protocol):
    def download(self, filename: str, mime_type: str, content: str) -> str:
        """Deliver the document; returns where it went."""
        ...


class FileDownloadSink:
    """Writes documents into a directory, creating it on first use."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def download(self, filename: str, mime_type: str, content: str) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / filename
        with path.open("w", encoding="utf-8", newline="") as f:
            f.write(content)
        log.info("Document written", extra={"path": str(path), "mime_type": mime_type})
        return str(path)


class MemoryDownloadSink:
    def __init__(self) -> None:
        self.files: Dict[str, str] = {}

    def download(self, filename: str, mime_type: str, content: str) -> str:
        self.files[filename] = content
        return filename


__all__ = ["DownloadSink", "FileDownloadSink", "MemoryDownloadSink"]
