"""Repository layer responsible for reading study group requests."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from backend.domain.models import StudyGroupRequest
from backend.utils.config import Settings, get_settings
from backend.utils.logger import get_logger


logger = get_logger(__name__)

FIELDS_PER_RECORD = 4


class RequestSourceError(Exception):
    """Base failure while loading the request source."""


class SourceUnavailableError(RequestSourceError):
    """Raised when the request file cannot be opened or read."""


class RequestSourceFormatError(RequestSourceError):
    """Raised when the request file does not follow the expected layout."""


def _parse_int(token: str, field_name: str, record_number: int) -> int:
    try:
        return int(token)
    except ValueError as exc:
        raise RequestSourceFormatError(
            f"record {record_number}: {field_name} must be an integer, got '{token}'"
        ) from exc


def parse_requests(text: str) -> list[StudyGroupRequest]:
    """Parse ``<count>`` followed by ``<group> <day> <start> <end>`` records.

    Tokens are whitespace separated, so records may span lines. Day tokens are
    kept verbatim; checking them is the allocator's job.
    """
    tokens = text.split()
    if not tokens:
        raise RequestSourceFormatError("request source is empty")

    try:
        count = int(tokens[0])
    except ValueError as exc:
        raise RequestSourceFormatError(
            f"first token must be the record count, got '{tokens[0]}'"
        ) from exc
    if count < 0:
        raise RequestSourceFormatError("record count must be >= 0")

    body = tokens[1:]
    needed = count * FIELDS_PER_RECORD
    if len(body) < needed:
        raise RequestSourceFormatError(
            f"expected {count} records ({needed} fields), found {len(body)} fields"
        )
    if len(body) > needed:
        logger.warning(
            "Ignoring trailing request source tokens | declared=%s | extra_tokens=%s",
            count,
            len(body) - needed,
        )

    requests: list[StudyGroupRequest] = []
    for index in range(count):
        record_number = index + 1
        group_name, day, start_token, end_token = body[
            index * FIELDS_PER_RECORD:(index + 1) * FIELDS_PER_RECORD
        ]
        if len(group_name) != 1:
            raise RequestSourceFormatError(
                f"record {record_number}: group name must be a single character, got '{group_name}'"
            )
        requests.append(
            StudyGroupRequest(
                group_name=group_name,
                day=day,
                start=_parse_int(start_token, "start", record_number),
                end=_parse_int(end_token, "end", record_number),
                sequence=index,
            )
        )
    return requests


class RequestSourceRepository:
    """Reads request files so the allocator never touches the filesystem."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()

    @property
    def default_path(self) -> Path:
        return Path(self._settings.request_source_path)

    def load_requests(self, path: Optional[Path] = None) -> list[StudyGroupRequest]:
        source_path = Path(path) if path is not None else self.default_path
        try:
            text = source_path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Request source unavailable | path=%s | error=%s", source_path, exc)
            raise SourceUnavailableError(f"cannot open request source '{source_path}'") from exc
        except UnicodeDecodeError as exc:
            raise RequestSourceFormatError(
                f"request source '{source_path}' is not valid UTF-8 text"
            ) from exc
        return parse_requests(text)
