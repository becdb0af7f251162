import json
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from .exceptions import MetadataParseError

# The zero time is written for backups that have not been stored remotely yet.
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

RFC3339_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?"
    r"(?:([Zz])|([+-])(\d{2}):(\d{2}))$"
)


def parse_timestamp(value: str) -> datetime:
    """
    Parses an RFC3339 timestamp. Fractional seconds beyond microsecond
    precision are truncated.
    """
    match = RFC3339_RE.match(value)
    if not match:
        raise ValueError("not an RFC3339 timestamp: %r" % value)
    year, month, day, hour, minute, second = (int(x) for x in match.group(1, 2, 3, 4, 5, 6))
    fraction = match.group(7) or "0"
    microsecond = int(fraction[:6].ljust(6, "0"))
    if match.group(8):
        tz = timezone.utc
    else:
        offset = timedelta(hours=int(match.group(10)), minutes=int(match.group(11)))
        tz = timezone(-offset if match.group(9) == "-" else offset)
    value = datetime(year, month, day, hour, minute, second, microsecond, tzinfo=tz)
    try:
        value.astimezone(timezone.utc)
    except OverflowError as e:
        raise ValueError("timestamp is outside years 1-9999 in UTC: %s" % match.group(0)) from e
    return value


def format_timestamp(value: Optional[datetime]) -> str:
    """
    Renders a timestamp as RFC3339 in UTC. None renders as the zero time.
    """
    if value is None:
        value = ZERO_TIME
    if value.utcoffset():
        value = value.astimezone(timezone.utc)
    # strftime does not zero-pad years below 1000 everywhere
    result = "%04d-%02d-%02dT%02d:%02d:%02d" % (
        value.year,
        value.month,
        value.day,
        value.hour,
        value.minute,
        value.second,
    )
    if value.microsecond:
        result += (".%06d" % value.microsecond).rstrip("0")
    return result + "Z"


@dataclass(frozen=True)
class Metadata:
    """
    Describes a single backup: what it is, where it came from, and when it
    was made.
    """

    id: str
    checksum: str
    checksum_format: str
    size: int
    started: datetime
    finished: datetime
    stored: Optional[datetime]
    notes: str
    environment: str
    machine: str
    hostname: str
    version: str

    @classmethod
    def from_json(cls, data: Dict) -> "Metadata":
        if not isinstance(data, dict):
            raise MetadataParseError(
                "metadata must be a JSON object, not %s" % type(data).__name__
            )
        stored = _optional_timestamp(data, "Stored")
        if stored == ZERO_TIME:
            stored = None
        return cls(
            id=_string(data, "ID"),
            checksum=_string(data, "Checksum"),
            checksum_format=_string(data, "ChecksumFormat"),
            size=_size(data, "Size"),
            started=_timestamp(data, "Started"),
            finished=_timestamp(data, "Finished"),
            stored=stored,
            notes=_string(data, "Notes", default=""),
            environment=_string(data, "Environment"),
            machine=_string(data, "Machine"),
            hostname=_string(data, "Hostname"),
            version=_string(data, "Version"),
        )

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Metadata":
        """
        Parses the serialised form stored inside a backup archive.
        """
        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise MetadataParseError("metadata is not valid JSON: %s" % e) from e
        return cls.from_json(data)

    def to_json(self) -> Dict:
        return {
            "ID": self.id,
            "Checksum": self.checksum,
            "ChecksumFormat": self.checksum_format,
            "Size": self.size,
            "Stored": format_timestamp(self.stored),
            "Started": format_timestamp(self.started),
            "Finished": format_timestamp(self.finished),
            "Notes": self.notes,
            "Environment": self.environment,
            "Machine": self.machine,
            "Hostname": self.hostname,
            "Version": self.version,
        }

    def to_bytes(self) -> bytes:
        return (json.dumps(self.to_json()) + "\n").encode("utf-8")


_MISSING = object()


def _string(data: Dict, key: str, default=_MISSING) -> str:
    value = data.get(key, default)
    if value is _MISSING:
        raise MetadataParseError("metadata is missing %s" % key)
    if not isinstance(value, str):
        raise MetadataParseError(
            "metadata %s must be a string, not %s" % (key, type(value).__name__)
        )
    return value


def _size(data: Dict, key: str) -> int:
    if key not in data:
        raise MetadataParseError("metadata is missing %s" % key)
    value = data[key]
    # bool is a subclass of int
    if isinstance(value, bool) or not isinstance(value, int):
        raise MetadataParseError(
            "metadata %s must be an integer, not %s" % (key, type(value).__name__)
        )
    if value < 0:
        raise MetadataParseError("metadata %s cannot be negative" % key)
    return value


def _timestamp(data: Dict, key: str) -> datetime:
    value = _string(data, key)
    try:
        return parse_timestamp(value)
    except ValueError as e:
        raise MetadataParseError("metadata %s: %s" % (key, e)) from e


def _optional_timestamp(data: Dict, key: str) -> Optional[datetime]:
    if data.get(key) is None:
        return None
    return _timestamp(data, key)
