"""JSON envelope codec implementation."""

import json
from datetime import date, datetime, timezone
from typing import Any

from cacheaside.core.entities.cache_entry import CacheEntry
from cacheaside.core.exceptions import SerializationError

VALUE_FIELD = "value"
EXPIRE_AT_FIELD = "expireAt"

_DATETIME_TAG = "__datetime__"
_DATE_TAG = "__date__"
_DICT_TAG = "__dict__"
_RESERVED_TAGS = frozenset({_DATETIME_TAG, _DATE_TAG, _DICT_TAG})


class JsonEntryCodec:
    """JSON codec for cache entries.

    Entries are stored as a UTF-8 JSON object with two fields::

        {"value": <json>, "expireAt": "2024-01-15T10:30:00.000000+00:00"}

    ``datetime`` and ``date`` values nested anywhere in the value are
    tagged on encode and restored on decode. Application dicts that look
    like a tag are stored as a ``__dict__`` list of pairs, so they come
    back as the same dict. Objects exposing ``__dict__`` are stored as
    their attribute dict and come back as a plain dict.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        """Initialize the codec.

        Args:
            encoding: Character encoding to use.
        """
        self._encoding = encoding

    def encode(self, entry: CacheEntry[Any]) -> bytes:
        """Serialize an entry to bytes.

        Args:
            entry: The entry to serialize.

        Returns:
            The serialized envelope as bytes.

        Raises:
            SerializationError: If the value cannot be serialized.
        """
        try:
            envelope = {
                VALUE_FIELD: _escape_reserved(entry.value),
                EXPIRE_AT_FIELD: format_timestamp(entry.expire_at),
            }
            json_str = json.dumps(envelope, default=self._default_encoder)
            return json_str.encode(self._encoding)
        except (TypeError, ValueError, RecursionError) as e:
            raise SerializationError(f"Failed to serialize entry: {e}") from e

    def decode(self, data: bytes) -> CacheEntry[Any]:
        """Deserialize bytes to an entry.

        Args:
            data: The bytes to deserialize.

        Returns:
            The decoded CacheEntry.

        Raises:
            SerializationError: If the data is not a valid envelope.
        """
        envelope = self._load_envelope(data, object_hook=self._object_hook)
        return CacheEntry(
            value=envelope[VALUE_FIELD],
            expire_at=parse_timestamp(envelope[EXPIRE_AT_FIELD]),
        )

    def rewrite_expiration(self, data: bytes, expire_at: datetime) -> bytes:
        """Replace the expiration of a serialized entry.

        Only the envelope is interpreted; the stored value is re-emitted
        as found, tags included.

        Args:
            data: A serialized envelope.
            expire_at: The new logical expiration.

        Returns:
            The rewritten envelope as bytes.

        Raises:
            SerializationError: If the data is not a valid envelope.
        """
        envelope = self._load_envelope(data)
        parse_timestamp(envelope[EXPIRE_AT_FIELD])
        envelope[EXPIRE_AT_FIELD] = format_timestamp(expire_at)
        return json.dumps(envelope).encode(self._encoding)

    def _load_envelope(self, data: bytes, object_hook: Any = None) -> dict[str, Any]:
        try:
            json_str = data.decode(self._encoding)
            envelope = json.loads(json_str, object_hook=object_hook)
        except (ValueError, TypeError) as e:
            # Covers JSONDecodeError, UnicodeDecodeError and bad tag payloads.
            raise SerializationError(f"Failed to deserialize data: {e}") from e

        if not isinstance(envelope, dict):
            raise SerializationError("Cache envelope must be a JSON object")
        missing = {VALUE_FIELD, EXPIRE_AT_FIELD} - envelope.keys()
        if missing:
            raise SerializationError(
                f"Cache envelope is missing fields: {', '.join(sorted(missing))}"
            )
        return envelope

    def _default_encoder(self, obj: Any) -> Any:
        """Custom encoder for non-JSON-serializable types.

        Args:
            obj: The object to encode.

        Returns:
            A JSON-serializable representation of the object.

        Raises:
            TypeError: If the object cannot be encoded.
        """
        if isinstance(obj, datetime):
            return {_DATETIME_TAG: obj.isoformat()}
        if isinstance(obj, date):
            return {_DATE_TAG: obj.isoformat()}
        if hasattr(obj, "__dict__"):
            return _escape_reserved(obj.__dict__)
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")

    @staticmethod
    def _object_hook(obj: dict[str, Any]) -> Any:
        if len(obj) == 1:
            if _DATETIME_TAG in obj:
                return datetime.fromisoformat(obj[_DATETIME_TAG])
            if _DATE_TAG in obj:
                return date.fromisoformat(obj[_DATE_TAG])
            if _DICT_TAG in obj:
                return dict(obj[_DICT_TAG])
        return obj


def _escape_reserved(value: Any) -> Any:
    """Wrap single-key dicts whose key is a tag name.

    The object hook restores any one-key dict keyed by a tag, so such
    application dicts are stored as pairs instead.
    """
    if isinstance(value, dict):
        escaped = {key: _escape_reserved(item) for key, item in value.items()}
        if len(escaped) == 1 and next(iter(escaped)) in _RESERVED_TAGS:
            return {_DICT_TAG: [[key, item] for key, item in escaped.items()]}
        return escaped
    if isinstance(value, (list, tuple)):
        return [_escape_reserved(item) for item in value]
    return value


def format_timestamp(value: datetime) -> str:
    """Format an instant as ISO-8601 UTC with microsecond precision.

    Naive datetimes are assumed to already be in UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def parse_timestamp(raw: Any) -> datetime:
    """Parse an ISO-8601 instant into an aware UTC datetime.

    Raises:
        SerializationError: If the value is not a valid timestamp.
    """
    if not isinstance(raw, str):
        raise SerializationError(f"Invalid {EXPIRE_AT_FIELD} value: {raw!r}")
    text = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise SerializationError(f"Invalid {EXPIRE_AT_FIELD} value: {raw!r}") from e
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
