"""
Tests for JSON backup, CSV export and restore.
"""
import json
from datetime import timedelta

import pytest

from export import (
  BackupFileError, InvalidBackupError, apply_restore, build_envelope, decode_backup,
  escape_csv, export_csv, export_json, format_csv_timestamp, read_backup, write_backup, write_csv,
)
from schema import Coordinate, Dog, EventType, UserProfile, Walk
from stores import DogProfileStore, UserProfileStore, WalkStore


def _walk(start_time, notes=None, dog_ids=None):
  walk = Walk(start_time=start_time, distance_meters=1234.5, notes=notes, dog_ids=dog_ids or [])
  walk.add_event(EventType.PEE, coordinate=Coordinate(52.5, 13.4), now=start_time + timedelta(minutes=2))
  walk.add_event(EventType.POOP, now=start_time + timedelta(minutes=5))
  walk.end(route=[Coordinate(52.5, 13.4)], now=start_time + timedelta(minutes=30))
  return walk


class TestJsonBackup:

  def test_round_trip(self, start_time):
    dog = Dog(name="Rex", breed="Labrador", photo_data=b"\xff\xd8jpeg")
    user = UserProfile(name="Sam")
    walk = _walk(start_time, notes="Park", dog_ids=[dog.id])

    envelope = decode_backup(export_json([walk], [dog], user, now=start_time))

    assert envelope.version == 2
    assert envelope.exported_at == start_time
    assert envelope.walks == [walk]
    assert envelope.dogs == [dog]
    assert envelope.user == user

  def test_layout(self, start_time):
    data = json.loads(export_json([_walk(start_time)], now=start_time))
    assert data["version"] == 2
    assert data["exportedAt"] == "2026-01-31T10:00:00Z"
    assert data["walks"][0]["startTime"] == "2026-01-31T10:00:00Z"
    assert data["walks"][0]["events"][0]["timestamp"] == "2026-01-31T10:02:00Z"
    assert data["dogs"] == []
    assert "user" not in data
    assert data["walks"][0]["distanceMeters"] == 1234.5

  def test_empty_profiles_left_out(self, start_time):
    envelope = build_envelope([], [Dog(), Dog(name="Luna")], UserProfile(), now=start_time)
    assert [d.name for d in envelope.dogs] == ["Luna"]
    assert envelope.user is None

  def test_legacy_single_dog(self):
    payload = json.dumps({
      "version": 1,
      "exportedAt": "2025-06-01T08:00:00Z",
      "walks": [],
      "dog": {"name": "Rex", "breed": "Beagle"},
    })
    envelope = decode_backup(payload)
    assert len(envelope.dogs) == 1
    assert envelope.dogs[0].name == "Rex"
    assert envelope.dogs[0].id

  def test_legacy_empty_dog_dropped(self):
    payload = json.dumps({
      "version": 1,
      "exportedAt": "2025-06-01T08:00:00Z",
      "walks": [],
      "dog": {"name": "", "breed": ""},
    })
    assert decode_backup(payload).dogs == []

  @pytest.mark.parametrize("payload", [
    "not json at all",
    "[]",
    json.dumps({"exportedAt": "2025-06-01T08:00:00Z", "walks": []}),
    json.dumps({"version": 2, "walks": []}),
    json.dumps({"version": 2, "exportedAt": "2025-06-01T08:00:00Z"}),
    json.dumps({"version": 2, "exportedAt": "2025-06-01T08:00:00Z", "walks": {}}),
    json.dumps({"version": 2, "exportedAt": "2025-06-01T08:00:00Z", "walks": [{"id": "X"}]}),
  ])
  def test_invalid_backup(self, payload):
    with pytest.raises(InvalidBackupError):
      decode_backup(payload)

  def test_newer_version_rejected(self):
    payload = json.dumps({"version": 3, "exportedAt": "2025-06-01T08:00:00Z", "walks": []})
    with pytest.raises(InvalidBackupError, match="newer"):
      decode_backup(payload)


class TestCsv:

  def test_escape(self):
    assert escape_csv("plain") == "plain"
    assert escape_csv("a,b") == '"a,b"'
    assert escape_csv('say "hi"') == '"say ""hi"""'
    assert escape_csv("two\nlines") == '"two\nlines"'

  def test_timestamp_format(self, start_time):
    assert format_csv_timestamp(start_time) == "2026-01-31T10:00:00.000Z"

  def test_rows(self, start_time):
    csv = export_csv([_walk(start_time, notes='Met "Rex", nice')])
    lines = csv.split("\n")
    assert lines[0] == "Start,End,Duration (sec),Distance (m),Notes,Events"
    assert lines[1] == (
      '2026-01-31T10:00:00.000Z,2026-01-31T10:30:00.000Z,1800,1234.50,'
      '"Met ""Rex"", nice",pee; poop'
    )
    assert len(lines) == 2

  def test_header_only_without_walks(self):
    assert export_csv([]) == "Start,End,Duration (sec),Distance (m),Notes,Events"


class TestFiles:

  def test_write_and_read_backup(self, tmp_path, start_time):
    path = str(tmp_path / "backup.json")
    walk = _walk(start_time)
    write_backup(path, [walk], [Dog(name="Rex")], UserProfile(name="Sam"))

    envelope = read_backup(path)
    assert [w.id for w in envelope.walks] == [walk.id]
    assert envelope.user.name == "Sam"

  def test_write_csv(self, tmp_path, start_time):
    path = tmp_path / "walks.csv"
    write_csv(str(path), [_walk(start_time)])
    assert path.read_text(encoding="utf-8").startswith("Start,End")

  def test_missing_file(self, tmp_path):
    with pytest.raises(BackupFileError):
      read_backup(str(tmp_path / "missing.json"))

  def test_unwritable_path(self, tmp_path):
    with pytest.raises(BackupFileError):
      write_csv(str(tmp_path / "no-such-dir" / "walks.csv"), [])


class TestRestore:

  def test_replaces_walks_dogs_and_user(self, storage, start_time):
    walk_store = WalkStore(storage)
    dog_store = DogProfileStore(storage)
    user_store = UserProfileStore(storage)
    dog_store.add_dog(Dog(name="Old"))
    walk_store.start_walk()
    walk_store.end_walk()
    walk_store.save_walk()

    backup_walk = _walk(start_time)
    envelope = decode_backup(export_json([backup_walk], [Dog(name="Rex")], UserProfile(name="Sam")))
    result = apply_restore(envelope, walk_store, dog_store, user_store)

    assert result == {"walks": 1, "dogs": 1, "user": True}
    assert [w.id for w in WalkStore(storage).walks] == [backup_walk.id]
    assert [d.name for d in DogProfileStore(storage).dogs] == ["Rex"]
    assert UserProfileStore(storage).user.name == "Sam"

  def test_keeps_dogs_and_user_when_backup_has_none(self, storage, start_time):
    walk_store = WalkStore(storage)
    dog_store = DogProfileStore(storage)
    user_store = UserProfileStore(storage)
    dog_store.add_dog(Dog(name="Luna"))
    user_store.save(UserProfile(name="Alex"))

    envelope = decode_backup(export_json([_walk(start_time)]))
    result = apply_restore(envelope, walk_store, dog_store, user_store)

    assert result == {"walks": 1, "dogs": 0, "user": False}
    assert [d.name for d in DogProfileStore(storage).dogs] == ["Luna"]
    assert UserProfileStore(storage).user.name == "Alex"
