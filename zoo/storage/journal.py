"""Narrative journal for the zoo.

The journal is the visitor-facing log sink: every narrative line the
simulation produces is appended here with a timestamp. It can be saved to and
restored from disk in one of two renderings:

    JSON  {"Logs": [{"Timestamp": "...", "Message": "..."}]}
    XML   <Logs><LogEntry><Timestamp>yyyy-mm-dd HH:MM:SS</Timestamp>
          <Message>...</Message></LogEntry></Logs>

Timestamps are kept to the second so a save/load round trip is lossless.
Diagnostics go through Python logging, never through the journal.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from datetime import datetime
from pathlib import Path
from typing import Callable, Literal

import aiofiles
from pydantic import BaseModel, ConfigDict, Field, field_validator

from zoo.logging_config import log_journal
from .errors import JournalError

logger = logging.getLogger(__name__)

JournalFormat = Literal["json", "xml"]

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DISPLAY_FORMAT = "%H:%M:%S"


class JournalEntry(BaseModel):
    """One narrative line with the moment it was written."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: datetime = Field(alias="Timestamp")
    message: str = Field(alias="Message")

    @field_validator("timestamp")
    @classmethod
    def _truncate_to_second(cls, value: datetime) -> datetime:
        return value.replace(microsecond=0)

    def render(self) -> str:
        return f"[{self.timestamp.strftime(DISPLAY_FORMAT)}] {self.message}"


class _JournalDocument(BaseModel):
    """On-disk JSON container."""

    logs: list[JournalEntry] = Field(default_factory=list, alias="Logs")

    model_config = ConfigDict(populate_by_name=True)


class Journal:
    """Ordered, append-only list of narrative entries.

    Subclasses provide the file rendering. Appending is synchronous and
    single-step, so a line is either in the journal or not.

    Usage:
        journal = create_journal("json")
        journal.log("🍖 food dropped to enclosure 'A'")
        await journal.save_to_file(Path("zoo_data/journal.json"))
    """

    format_name: str = "journal"

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock
        self._entries: list[JournalEntry] = []
        self._listeners: list[Callable[[JournalEntry], None]] = []

    @property
    def entries(self) -> tuple[JournalEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def log(self, message: str) -> JournalEntry:
        """Append a line stamped with the current time."""
        entry = JournalEntry(timestamp=self._clock(), message=message)
        self._entries.append(entry)
        for listener in tuple(self._listeners):
            listener(entry)
        return entry

    def add_listener(self, listener: Callable[[JournalEntry], None]) -> None:
        """Call listener with each new entry as it is logged."""
        self._listeners.append(listener)

    def get_logs(self) -> list[str]:
        """Rendered lines, "[HH:MM:SS] message", in write order."""
        return [entry.render() for entry in self._entries]

    def clear(self) -> None:
        self._entries.clear()

    async def save_to_file(self, path: Path) -> None:
        """Write every entry to path, replacing the file.

        Raises:
            JournalError: If rendering or writing fails
        """
        try:
            text = self._dump(self._entries)
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, "w", encoding="utf-8") as f:
                await f.write(text)
        except (OSError, ValueError) as e:
            raise JournalError(
                f"Failed to save {self.format_name.upper()} log: {e}", cause=e
            ) from e
        log_journal(logger, "save", path, f"{len(self._entries)} entries")

    async def load_from_file(self, path: Path) -> None:
        """Replace the journal contents with the entries stored at path.

        Raises:
            JournalError: If the file cannot be read or parsed; the
                journal is left unchanged
        """
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                text = await f.read()
            entries = self._parse(text)
        except (OSError, ValueError, ET.ParseError) as e:
            raise JournalError(
                f"Failed to load {self.format_name.upper()} log: {e}", cause=e
            ) from e
        self._entries = entries
        log_journal(logger, "load", path, f"{len(entries)} entries")

    def _dump(self, entries: list[JournalEntry]) -> str:
        raise NotImplementedError

    def _parse(self, text: str) -> list[JournalEntry]:
        raise NotImplementedError


class JsonJournal(Journal):
    """Journal saved as an indented JSON document."""

    format_name = "json"

    def _dump(self, entries: list[JournalEntry]) -> str:
        document = _JournalDocument(logs=list(entries))
        return document.model_dump_json(by_alias=True, indent=2)

    def _parse(self, text: str) -> list[JournalEntry]:
        return _JournalDocument.model_validate_json(text).logs


class XmlJournal(Journal):
    """Journal saved as an XML tree.

    Entries whose timestamp cannot be parsed are skipped on load.
    """

    format_name = "xml"

    def _dump(self, entries: list[JournalEntry]) -> str:
        root = ET.Element("Logs")
        for entry in entries:
            element = ET.SubElement(root, "LogEntry")
            ET.SubElement(element, "Timestamp").text = entry.timestamp.strftime(TIMESTAMP_FORMAT)
            ET.SubElement(element, "Message").text = entry.message
        ET.indent(root)
        body = ET.tostring(root, encoding="unicode")
        return f'<?xml version="1.0" encoding="utf-8" standalone="yes"?>\n{body}\n'

    def _parse(self, text: str) -> list[JournalEntry]:
        root = ET.fromstring(text.encode("utf-8"))
        entries = []
        for element in root.findall("LogEntry"):
            raw_timestamp = element.findtext("Timestamp")
            message = element.findtext("Message") or ""
            try:
                timestamp = datetime.strptime(raw_timestamp or "", TIMESTAMP_FORMAT)
            except ValueError:
                logger.warning(f"Skipping journal entry with bad timestamp: {raw_timestamp!r}")
                continue
            entries.append(JournalEntry(timestamp=timestamp, message=message))
        return entries


JOURNAL_FORMATS: dict[str, type[Journal]] = {
    "json": JsonJournal,
    "xml": XmlJournal,
}


def create_journal(
    journal_format: JournalFormat = "json",
    clock: Callable[[], datetime] = datetime.now,
) -> Journal:
    """Build an empty journal for the given file rendering.

    Raises:
        ValueError: If the format is not json or xml
    """
    try:
        journal_cls = JOURNAL_FORMATS[journal_format]
    except KeyError:
        raise ValueError(f"Unknown journal format: {journal_format}") from None
    return journal_cls(clock=clock)
