"""
Incremental reader for an append-only log file.

Each ``poll`` returns the complete lines appended since the previous poll. A
partial trailing line is carried over until its newline arrives. Truncation
(size below the read offset) and replacement (new inode) restart reading at
the beginning of the file.
"""

import codecs
import logging
import os
from typing import BinaryIO, List, Optional

from .types import LogMonitorState

logger = logging.getLogger(__name__)


class LogFileTailer:
    """Follows one log file from its end."""

    def __init__(self, file_path: str, encoding: str = "utf-8"):
        self.state = LogMonitorState(file_path=file_path)
        self._encoding = encoding
        self._decoder = self._new_decoder()
        self._handle: Optional[BinaryIO] = None

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def open_at_end(self) -> None:
        """
        Open the file positioned at its current end; existing content is not replayed.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        stat = os.stat(self.state.file_path)
        self._handle = open(self.state.file_path, "rb")
        self.state.byte_offset = stat.st_size
        self.state.inode = stat.st_ino
        self.state.line_buffer = ""
        self._decoder = self._new_decoder()

    def close(self) -> None:
        handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            handle.close()
        except OSError as exc:  # Best-effort cleanup operation
            logger.debug("Ignoring error closing %s: %s", self.state.file_path, exc)

    def poll(self) -> List[str]:
        """Return the complete lines appended since the last poll."""
        try:
            stat = os.stat(self.state.file_path)
        except FileNotFoundError:
            # Mid-rotation; the file is picked up again once it reappears
            return []

        if self._handle is None or stat.st_ino != self.state.inode or stat.st_size < self.state.byte_offset:
            self._restart(stat.st_ino)

        if stat.st_size <= self.state.byte_offset:
            return []

        self._handle.seek(self.state.byte_offset)
        data = self._handle.read(stat.st_size - self.state.byte_offset)
        self.state.byte_offset += len(data)
        return self._split_lines(self._decoder.decode(data))

    def _restart(self, inode: int) -> None:
        logger.info("Log file %s was truncated or replaced; reading from the start", self.state.file_path)
        self.close()
        self._handle = open(self.state.file_path, "rb")
        self.state.byte_offset = 0
        self.state.inode = inode
        self.state.line_buffer = ""
        self._decoder = self._new_decoder()

    def _split_lines(self, text: str) -> List[str]:
        pending = self.state.line_buffer + text
        parts = pending.split("\n")
        self.state.line_buffer = parts.pop()
        lines = []
        for part in parts:
            line = part.rstrip("\r")
            if line.strip():
                lines.append(line)
        return lines

    def _new_decoder(self) -> codecs.IncrementalDecoder:
        return codecs.getincrementaldecoder(self._encoding)(errors="replace")


__all__ = ["LogFileTailer"]
