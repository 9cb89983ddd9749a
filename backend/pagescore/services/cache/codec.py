"""
Payload codec for cache entries.

JSON is the structured byte format. Payloads above the compression threshold
are zlib-compressed and tagged with a 3-byte marker, but only when that
actually makes them smaller.
"""
import json
import zlib
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from typing import Any

from pagescore.config import settings
from pagescore.exceptions import CorruptCacheEntryError

COMPRESSED_MARKER = b"gz:"


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    raise TypeError(f"Object of type {type(value).__name__} is not cacheable")


class PayloadCodec:
    """Serialize values to bytes and back, compressing large payloads."""

    def __init__(
        self,
        compression_threshold: int = settings.CACHE_COMPRESSION_THRESHOLD,
        compression_enabled: bool = settings.CACHE_COMPRESSION_ENABLED,
    ):
        self.compression_threshold = compression_threshold
        self.compression_enabled = compression_enabled

    def encode(self, value: Any) -> bytes:
        """Raises TypeError/ValueError for values JSON cannot represent."""
        raw = json.dumps(value, default=_json_default, separators=(",", ":"), allow_nan=False).encode("utf-8")

        if self.compression_enabled and len(raw) > self.compression_threshold:
            compressed = zlib.compress(raw)
            if len(compressed) + len(COMPRESSED_MARKER) < len(raw):
                return COMPRESSED_MARKER + compressed

        return raw

    def decode(self, data: bytes) -> Any:
        if isinstance(data, str):
            data = data.encode("utf-8")

        if data.startswith(COMPRESSED_MARKER):
            try:
                data = zlib.decompress(data[len(COMPRESSED_MARKER):])
            except zlib.error as e:
                raise CorruptCacheEntryError(f"Failed to decompress cache data: {e}") from e

        try:
            return json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CorruptCacheEntryError(f"Failed to deserialize cache data: {e}") from e

    @staticmethod
    def is_compressed(data: bytes) -> bool:
        return data.startswith(COMPRESSED_MARKER)
