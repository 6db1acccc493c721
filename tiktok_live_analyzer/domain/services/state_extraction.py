"""Extraction of the embedded page state and defensive traversal of its shape.

The platform embeds its page data as a JSON document inside a script tag.
Its nested layout changes without notice, so every lookup is expressed as an
ordered list of key paths and the first path that yields a value wins.
Absence at any level means "not found" for that field only.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from ..models.live_status import UserInfo

logger = logging.getLogger(__name__)

DEFAULT_STATE_SCRIPT_ID = "SIGI_STATE"

KeyPath = Tuple[str, ...]

_LIVE_ROOM_USER_INFO: KeyPath = ("LiveRoom", "liveRoomUserInfo")

STATUS_PATHS: Sequence[KeyPath] = (
    _LIVE_ROOM_USER_INFO + ("liveRoom", "status"),
    _LIVE_ROOM_USER_INFO + ("user", "status"),
)

ROOM_ID_PATHS: Sequence[KeyPath] = (
    _LIVE_ROOM_USER_INFO + ("liveRoom", "roomId"),
    _LIVE_ROOM_USER_INFO + ("user", "roomId"),
)

STREAM_DATA_PATHS: Sequence[KeyPath] = (
    _LIVE_ROOM_USER_INFO + ("liveRoom", "streamData", "pull_data", "stream_data"),
    _LIVE_ROOM_USER_INFO + ("liveRoom", "hevcStreamData", "pull_data", "stream_data"),
)

USER_TABLE_PATHS: Sequence[KeyPath] = (
    ("UserModule", "users"),
    ("UserPage", "users"),
)

USER_ID_KEYS = ("id", "idStr")
REGION_KEYS = ("region", "country")


@dataclass(frozen=True)
class ResolvedStatus:
    """Status fields recovered from a state document."""
    status_code: Optional[int] = None
    room_id: Optional[str] = None


def _script_pattern(script_id: str) -> "re.Pattern[str]":
    return re.compile(
        r'<script[^>]*\bid="' + re.escape(script_id) + r'"[^>]*>(.*?)</script>',
        re.DOTALL,
    )


_DEFAULT_SCRIPT_PATTERN = _script_pattern(DEFAULT_STATE_SCRIPT_ID)


def find_state_script(markup: str, script_id: str = DEFAULT_STATE_SCRIPT_ID) -> Optional[str]:
    """Return the text content of the state script tag, if any."""
    if not markup:
        return None
    pattern = _DEFAULT_SCRIPT_PATTERN if script_id == DEFAULT_STATE_SCRIPT_ID else _script_pattern(script_id)
    match = pattern.search(markup)
    if not match or not match.group(1).strip():
        return None
    return match.group(1)


def parse_state_blob(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """Parse the state script content; malformed content yields None."""
    if text is None:
        return None
    try:
        document = json.loads(text)
    except ValueError as e:
        logger.warning(f"⚠️ Embedded state document is not valid JSON: {e}")
        return None
    if not isinstance(document, dict):
        return None
    return document


def extract_state_blob(markup: str, script_id: str = DEFAULT_STATE_SCRIPT_ID) -> Optional[Dict[str, Any]]:
    """Locate and parse the embedded state document of a page.

    Args:
        markup: Raw page markup
        script_id: Element id of the state script tag

    Returns:
        Parsed document, or None when absent or malformed
    """
    return parse_state_blob(find_state_script(markup, script_id))


def lookup_path(document: Any, path: KeyPath) -> Any:
    """Walk a key path, returning None as soon as a level is missing."""
    current = document
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
        if current is None:
            return None
    return current


def first_match(document: Any, paths: Iterable[KeyPath]) -> Any:
    """Return the value of the first path that resolves to something."""
    for path in paths:
        value = lookup_path(document, path)
        if value is not None:
            return value
    return None


def _first_key(record: Dict[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = record.get(key)
        if value not in (None, ""):
            return value
    return None


def _as_status_code(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


def _as_optional_str(value: Any) -> Optional[str]:
    if value is None or value == "" or isinstance(value, (dict, list)):
        return None
    return str(value)


def resolve_status(document: Optional[Dict[str, Any]]) -> ResolvedStatus:
    """Recover the live room status code and room id."""
    if not document:
        return ResolvedStatus()
    return ResolvedStatus(
        status_code=_as_status_code(first_match(document, STATUS_PATHS)),
        room_id=_as_optional_str(first_match(document, ROOM_ID_PATHS)),
    )


def find_user_record(users: Dict[str, Any], account: str) -> Optional[Dict[str, Any]]:
    """Find an account in a user table.

    Tries the exact key, then the ``@``-prefixed key, then scans the table
    for an entry whose ``uniqueId`` matches case-insensitively.
    """
    for key in (account, f"@{account}"):
        record = users.get(key)
        if isinstance(record, dict):
            return record

    wanted = account.lower()
    for record in users.values():
        if not isinstance(record, dict):
            continue
        unique_id = record.get("uniqueId")
        if isinstance(unique_id, str) and unique_id.lower() == wanted:
            return record
    return None


def resolve_user_info(document: Optional[Dict[str, Any]], account: str) -> UserInfo:
    """Recover the numeric user id and region of an account."""
    if not document:
        return UserInfo()

    users = first_match(document, USER_TABLE_PATHS)
    if not isinstance(users, dict):
        return UserInfo()

    record = find_user_record(users, account)
    if record is None:
        return UserInfo()

    return UserInfo(
        user_id=_as_optional_str(_first_key(record, USER_ID_KEYS)),
        region=_as_optional_str(_first_key(record, REGION_KEYS)),
    )


def resolve_stream_manifest_raw(document: Optional[Dict[str, Any]]) -> Optional[str]:
    """Return the nested stream data JSON string, if present."""
    if not document:
        return None
    raw = first_match(document, STREAM_DATA_PATHS)
    if not isinstance(raw, str) or not raw.strip():
        return None
    return raw


def parse_stream_manifest(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    """Second parse pass over the stream data string.

    Returns:
        Mapping of quality tier to variant descriptor, or None when the
        string is not a JSON object carrying a ``data`` mapping
    """
    if raw is None:
        return None
    try:
        parsed = json.loads(raw)
    except ValueError as e:
        logger.warning(f"⚠️ Stream data is not valid JSON: {e}")
        return None
    if not isinstance(parsed, dict):
        return None
    data = parsed.get("data")
    if not isinstance(data, dict):
        return None
    return data
