"""
Backup Export / Restore
v2.0.0 - Multi-dog envelope

JSON backup envelope:
  {
    "version": 2,
    "exportedAt": "<ISO 8601>",
    "user": {...},          # optional, only if the profile has content
    "dogs": [{...}, ...],
    "walks": [{...}, ...]
  }

Version 1 backups carried a single optional "dog" object instead of the
"dogs" array; they are migrated on decode.

CSV export is walks only, one row per walk.
"""
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any, Union

from config import EXPORT_VERSION, CSV_HEADER
from schema import (
  Walk, Dog, UserProfile,
  get_current_time, format_timestamp, parse_timestamp,
)


class BackupError(Exception):
  """Base class for export/restore failures"""


class InvalidBackupError(BackupError):
  """The payload is not a backup we can read"""


class BackupFileError(BackupError):
  """A backup or CSV file could not be read or written"""


INVALID_BACKUP_MESSAGE = "This file is not a valid WalkyTrails backup."


@dataclass
class ExportEnvelope:
  """Full backup: user profile, dogs and all walks"""
  version: int
  exported_at: datetime
  walks: List[Walk] = field(default_factory=list)
  dogs: List[Dog] = field(default_factory=list)
  user: Optional[UserProfile] = None

  def to_dict(self) -> Dict:
    result: Dict[str, Any] = {
      'version': self.version,
      'exportedAt': format_timestamp(self.exported_at),
      'dogs': [dog.to_dict() for dog in self.dogs],
      'walks': [walk.to_dict() for walk in self.walks],
    }
    if self.user is not None:
      result['user'] = self.user.to_dict()
    return result

  @classmethod
  def from_dict(cls, data: Dict) -> "ExportEnvelope":
    """
    Decode an envelope of any supported version.
    Raises InvalidBackupError if anything required is missing or unreadable.
    """
    if not isinstance(data, dict):
      raise InvalidBackupError(INVALID_BACKUP_MESSAGE)

    try:
      version = int(data['version'])
      exported_at = parse_timestamp(data['exportedAt'])
      raw_walks = data['walks']
    except (KeyError, TypeError, ValueError) as e:
      raise InvalidBackupError(f"{INVALID_BACKUP_MESSAGE} ({e})") from e

    if version > EXPORT_VERSION:
      raise InvalidBackupError(
        f"Backup version {version} is newer than this app supports ({EXPORT_VERSION})."
      )
    if not isinstance(raw_walks, list):
      raise InvalidBackupError(f"{INVALID_BACKUP_MESSAGE} (walks is not a list)")

    try:
      walks = [Walk.from_dict(w) for w in raw_walks]
      dogs = _decode_dogs(data)
      user = UserProfile.from_dict(data['user']) if data.get('user') else None
    except (KeyError, TypeError, ValueError, AttributeError) as e:
      raise InvalidBackupError(f"{INVALID_BACKUP_MESSAGE} ({e})") from e

    return cls(version=version, exported_at=exported_at, walks=walks, dogs=dogs, user=user)


def _decode_dogs(data: Dict) -> List[Dog]:
  """Current "dogs" array, or the legacy single "dog" object"""
  if isinstance(data.get('dogs'), list):
    return [Dog.from_dict(d) for d in data['dogs']]

  legacy = data.get('dog')
  if isinstance(legacy, dict):
    dog = Dog.from_dict(legacy)
    if dog.has_content:
      return [dog]

  return []


# ============================================
# JSON
# ============================================

def build_envelope(
  walks: List[Walk],
  dogs: Optional[List[Dog]] = None,
  user: Optional[UserProfile] = None,
  now: Optional[datetime] = None
) -> ExportEnvelope:
  """Dogs and user without any content are left out"""
  return ExportEnvelope(
    version=EXPORT_VERSION,
    exported_at=now or get_current_time(),
    walks=list(walks),
    dogs=[dog for dog in (dogs or []) if dog.has_content],
    user=user if (user is not None and user.has_content) else None,
  )


def export_json(
  walks: List[Walk],
  dogs: Optional[List[Dog]] = None,
  user: Optional[UserProfile] = None,
  now: Optional[datetime] = None
) -> str:
  """Encode a full backup as pretty-printed JSON with sorted keys"""
  envelope = build_envelope(walks, dogs, user, now)
  return json.dumps(envelope.to_dict(), indent=2, sort_keys=True, ensure_ascii=False)


def decode_backup(payload: Union[str, bytes]) -> ExportEnvelope:
  """Decode a previously exported JSON backup"""
  try:
    data = json.loads(payload)
  except (TypeError, ValueError) as e:
    raise InvalidBackupError(INVALID_BACKUP_MESSAGE) from e
  return ExportEnvelope.from_dict(data)


# ============================================
# CSV
# ============================================

def escape_csv(value: str) -> str:
  """Quote a field containing a comma, quote or line break; double the quotes"""
  if any(ch in value for ch in (',', '"', '\n', '\r')):
    return '"' + value.replace('"', '""') + '"'
  return value


def format_csv_timestamp(value: datetime) -> str:
  """ISO 8601 in UTC with milliseconds, e.g. 2026-01-31T10:00:00.000Z"""
  utc = value.astimezone(timezone.utc)
  return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def walk_to_csv_row(walk: Walk, now: Optional[datetime] = None) -> List[str]:
  return [
    format_csv_timestamp(walk.start_time),
    format_csv_timestamp(walk.end_time) if walk.end_time else "",
    f"{walk.duration_seconds(now):.0f}",
    f"{walk.distance_meters:.2f}",
    walk.notes or "",
    "; ".join(event.type.value for event in walk.events),
  ]


def export_csv(walks: List[Walk], now: Optional[datetime] = None) -> str:
  """Start, End, Duration (sec), Distance (m), Notes, Events - one row per walk"""
  rows = [",".join(CSV_HEADER)]
  for walk in walks:
    rows.append(",".join(escape_csv(value) for value in walk_to_csv_row(walk, now)))
  return "\n".join(rows)


# ============================================
# Files
# ============================================

def write_backup(
  path: str,
  walks: List[Walk],
  dogs: Optional[List[Dog]] = None,
  user: Optional[UserProfile] = None
) -> str:
  content = export_json(walks, dogs, user)
  _write_text(path, content)
  return path


def write_csv(path: str, walks: List[Walk]) -> str:
  _write_text(path, export_csv(walks))
  return path


def read_backup(path: str) -> ExportEnvelope:
  try:
    with open(path, 'r', encoding='utf-8') as f:
      content = f.read()
  except OSError as e:
    raise BackupFileError(f"Could not read {path}: {e}") from e
  return decode_backup(content)


def _write_text(path: str, content: str):
  try:
    with open(path, 'w', encoding='utf-8', newline='') as f:
      f.write(content)
  except OSError as e:
    raise BackupFileError(f"Could not write {path}: {e}") from e


# ============================================
# Restore
# ============================================

def apply_restore(envelope: ExportEnvelope, walk_store, dog_store=None, user_store=None) -> Dict:
  """
  Replace current data with the backup.
  Walks are always replaced; dogs only if the backup has any; the user
  profile only if the backup carries one with content.
  """
  walk_store.replace_walks(envelope.walks)

  dogs_restored = 0
  if dog_store is not None and envelope.dogs:
    dog_store.replace_dogs(envelope.dogs)
    dogs_restored = len(envelope.dogs)

  user_restored = False
  if user_store is not None and envelope.user is not None and envelope.user.has_content:
    user_store.save(envelope.user)
    user_restored = True

  return {
    "walks": len(envelope.walks),
    "dogs": dogs_restored,
    "user": user_restored,
  }
