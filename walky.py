#!/usr/bin/env python3
"""
WalkyTrails - Command Line Runner
v2.0.0 - Multi-dog walks

Drives the walk lifecycle, dog profiles, weather and backups from the
command line. State lives in the local key-value database, so a walk can
be started, logged and ended across separate invocations.

Usage:
  python walky.py --start --dog <id>        # Start a walk
  python walky.py --log pee --at 52.52 13.40 # Log an event
  python walky.py --track route.txt         # Feed GPS points (lat,lon per line)
  python walky.py --end                     # End the walk (pending summary)
  python walky.py --notes "Met Rex"         # Notes for the pending walk
  python walky.py --save --weather          # Save with current weather
  python walky.py --discard                 # Drop the pending walk
  python walky.py --status                  # Current walk
  python walky.py --history                 # Saved walks
  python walky.py --stats                   # History statistics
  python walky.py --export-json backup.json # Full backup
  python walky.py --export-csv walks.csv    # Walks as CSV
  python walky.py --restore backup.json --yes
"""
import sys
import argparse
from typing import List, Optional

from config import DB_PATH
from display import formatted_duration, formatted_elapsed, dogs_summary_text, event_label, event_icon
from export import (
  BackupError, write_backup, write_csv, read_backup, apply_restore,
)
from intents import NoWalkInProgressError, find_shortcut
from schema import (
  Coordinate, Dog, EventType, SavedWeather,
  DistanceUnit, DateStylePreference, MapStylePreference, TemperatureUnit, WeatherDebugMode,
)
from services import LocationTracker, WeatherService, is_valid_coordinate, mock_snapshot, walk_suggestion
from stats import get_walk_stats
from storage import KeyValueStore
from stores import WalkStore, WalkState, DogProfileStore, UserProfileStore, SettingsStore


SETTING_TYPES = {
  "distance_unit": DistanceUnit,
  "date_style": DateStylePreference,
  "map_style": MapStylePreference,
  "temperature_unit": TemperatureUnit,
  "weather_debug_mode": WeatherDebugMode,
}


# ============================================
# Walk Lifecycle
# ============================================

def start_walk(storage: KeyValueStore, dog_ids: Optional[List[str]] = None) -> bool:
  store = WalkStore(storage)
  dog_store = DogProfileStore(storage)

  dog_ids = list(dog_ids or [])
  if not dog_ids and len(dog_store.dogs) == 1:
    dog_ids = [dog_store.dogs[0].id]

  unknown = [d for d in dog_ids if dog_store.dog(d) is None]
  if unknown:
    print(f"❌ Unknown dog id(s): {', '.join(unknown)}")
    return False

  walk = store.start_walk(dog_ids)
  if walk is None:
    return False

  names = dogs_summary_text(walk, dog_store)
  print(f"🐕 Walk started{' with ' + names if names else ''}")
  return True


def log_event(
  storage: KeyValueStore,
  event_type: str,
  dog_id: Optional[str] = None,
  at: Optional[List[float]] = None
) -> bool:
  store = WalkStore(storage)
  try:
    parsed = EventType.from_string(event_type)
  except ValueError as e:
    print(f"❌ {e}")
    return False

  if store.state != WalkState.IN_PROGRESS:
    print("❌ No walk in progress. Start one with --start.")
    return False

  if at and not is_valid_coordinate(at[0], at[1]):
    print(f"❌ Not a valid location: {at[0]} {at[1]}")
    return False

  coordinate = Coordinate(at[0], at[1]) if at else None
  event = store.add_event_to_current_walk(parsed, coordinate=coordinate, dog_id=dog_id)
  if event is None:
    return False

  label = event_label(event, DogProfileStore(storage))
  print(f"  {event_icon(event.type)} Logged {event.type.display_name}{' for ' + label if label else ''}")
  return True


def read_track_file(path: str) -> List[Coordinate]:
  """Read "lat,lon" lines; blank lines and # comments are skipped"""
  points = []
  with open(path, 'r', encoding='utf-8') as f:
    for line_no, line in enumerate(f, start=1):
      text = line.strip()
      if not text or text.startswith('#'):
        continue
      try:
        lat, lon = (float(part) for part in text.split(',')[:2])
      except ValueError:
        print(f"  ⚠️ Skipping line {line_no}: {text}")
        continue
      if not is_valid_coordinate(lat, lon):
        print(f"  ⚠️ Skipping line {line_no}, not a valid location: {text}")
        continue
      points.append(Coordinate(lat, lon))
  return points


def track_file(storage: KeyValueStore, path: str) -> bool:
  """Append GPS points to the current walk and recompute its distance"""
  store = WalkStore(storage)
  walk = store.current_walk
  if walk is None:
    print("❌ No walk in progress. Start one with --start.")
    return False

  try:
    new_points = read_track_file(path)
  except (OSError, UnicodeDecodeError) as e:
    print(f"❌ Could not read {path}: {e}")
    return False

  tracker = LocationTracker()
  tracker.start_tracking()
  distance = tracker.replay(walk.route_for_map + new_points)
  tracker.stop_tracking()

  store.update_current_walk_route(tracker.route_coordinates)
  store.update_current_walk_distance(distance)

  settings = SettingsStore(storage)
  print(f"  📍 {len(new_points)} points added, distance {settings.formatted_distance(distance)}")
  if tracker.rejected_samples:
    print(f"  ⚠️ Ignored {tracker.rejected_samples} jump(s) over {tracker.max_jump_meters:.0f} m")
  return True


def end_walk(storage: KeyValueStore) -> bool:
  store = WalkStore(storage)
  walk = store.end_walk()
  if walk is None:
    print("ℹ️ No walk in progress")
    return False

  settings = SettingsStore(storage)
  print("🏁 Walk ended")
  print(f"   Duration: {formatted_duration(walk.duration_seconds())}")
  print(f"   Distance: {settings.formatted_distance(walk.distance_meters)}")
  print(f"   Events: {len(walk.events)}")
  print("   Save with --save or drop with --discard")
  return True


def set_notes(storage: KeyValueStore, notes: str, walk_id: Optional[str] = None) -> bool:
  store = WalkStore(storage)
  if walk_id:
    if not store.update_notes(walk_id, notes):
      print(f"❌ No saved walk {walk_id}")
      return False
  elif store.walk_to_summarize is not None:
    store.set_notes_for_walk_to_summarize(notes)
  else:
    print("❌ No walk waiting for a summary")
    return False

  print("✅ Notes updated")
  return True


def _weather_location(store: WalkStore) -> Optional[Coordinate]:
  """Last known position of the pending walk"""
  walk = store.walk_to_summarize
  if walk is None:
    return None
  if walk.route_for_map:
    return walk.route_for_map[-1]
  for event in reversed(walk.events):
    if event.coordinate is not None:
      return event.coordinate
  return None


def fetch_saved_weather(
  storage: KeyValueStore,
  coordinate: Optional[Coordinate],
  service: Optional[WeatherService] = None
) -> Optional[SavedWeather]:
  settings = SettingsStore(storage)
  snapshot = mock_snapshot(settings.weather_debug_mode)
  if snapshot is None:
    if coordinate is None:
      print("  ⚠️ No location for this walk, saving without weather")
      return None
    service = service or WeatherService()
    snapshot = service.load(coordinate.latitude, coordinate.longitude, settings.temperature_unit.value)
  if snapshot is None:
    return None

  print(f"  🌤️ {settings.formatted_temperature(snapshot.temperature_celsius)}, {snapshot.condition_description}")
  return snapshot.to_saved_weather()


def save_walk(storage: KeyValueStore, with_weather: bool = False, service: Optional[WeatherService] = None) -> bool:
  store = WalkStore(storage)
  if store.walk_to_summarize is None:
    print("❌ No walk waiting for a summary. End one with --end.")
    return False

  weather = None
  if with_weather:
    weather = fetch_saved_weather(storage, _weather_location(store), service)

  walk = store.save_walk(weather=weather)
  print(f"✅ Walk saved ({len(store.walks)} in history)")
  return walk is not None


def discard_walk(storage: KeyValueStore) -> bool:
  store = WalkStore(storage)
  if store.discard_walk() is None:
    print("❌ No walk waiting for a summary")
    return False
  print("🗑️ Walk discarded")
  return True


def run_shortcut(storage: KeyValueStore, phrase: str) -> bool:
  shortcut = find_shortcut(phrase)
  if shortcut is None:
    print(f"❌ No shortcut for \"{phrase}\"")
    return False
  try:
    shortcut["action"](storage)
  except NoWalkInProgressError as e:
    print(f"❌ {e}")
    return False
  print(f"✅ {shortcut['title']}")
  return True


# ============================================
# Reports
# ============================================

def show_status(storage: KeyValueStore):
  store = WalkStore(storage)
  dog_store = DogProfileStore(storage)
  settings = SettingsStore(storage)

  print("\n" + "=" * 60)
  print("🐕 WALKYTRAILS - Current Walk")
  print("=" * 60)

  if store.state == WalkState.NO_WALK:
    print("  No walk in progress")
    return

  walk = store.current_walk or store.walk_to_summarize
  if store.state == WalkState.IN_PROGRESS:
    print(f"  ⏱️ Elapsed: {formatted_elapsed(walk.start_time)}")
  else:
    print(f"  🏁 Ended, waiting for save/discard ({formatted_duration(walk.duration_seconds())})")

  names = dogs_summary_text(walk, dog_store)
  if names:
    print(f"  Dogs: {names}")
  print(f"  Distance: {settings.formatted_distance(walk.distance_meters)}")
  if walk.notes:
    print(f"  Notes: {walk.notes}")

  print(f"\n  Events ({len(walk.events)}):")
  for event in walk.events:
    label = event_label(event, dog_store)
    print(f"    {event_icon(event.type)} {settings.formatted_time(event.timestamp)} "
          f"{event.type.display_name}{' - ' + label if label else ''}")


def show_history(storage: KeyValueStore):
  store = WalkStore(storage)
  dog_store = DogProfileStore(storage)
  settings = SettingsStore(storage)

  print("\n" + "=" * 60)
  print(f"📋 WALK HISTORY ({len(store.walks)} walks)")
  print("=" * 60)

  if not store.walks:
    print("  No walks yet. Start one with --start.")
    return

  for walk in store.walks:
    line = (f"  {settings.formatted_date(walk.start_time)} | "
            f"{formatted_duration(walk.duration_seconds())} | "
            f"{settings.formatted_distance(walk.distance_meters)}")
    if walk.events:
      line += f" | {len(walk.events)} event(s)"
    print(line)

    names = dogs_summary_text(walk, dog_store)
    if names:
      print(f"    Dogs: {names}")
    if walk.saved_weather:
      weather = walk.saved_weather
      print(f"    Weather: {settings.formatted_temperature(weather.temperature_celsius)}, "
            f"{weather.condition_description}")
    if walk.notes:
      print(f"    Notes: {walk.notes}")
    print(f"    id: {walk.id}")


def show_stats(storage: KeyValueStore):
  store = WalkStore(storage)
  settings = SettingsStore(storage)
  stats = get_walk_stats(store.walks)

  print("\n" + "=" * 60)
  print("📊 WALK STATS")
  print("=" * 60)
  print(f"  Walks: {stats['total_walks']} ({stats['walks_last_7_days']} in the last 7 days)")
  print(f"  Total distance: {settings.formatted_distance_short(stats['total_distance_meters'])}")
  print(f"  Total time: {formatted_duration(stats['total_duration_seconds'])}")
  if stats['avg_distance_meters'] is not None:
    print(f"  Average: {settings.formatted_distance(stats['avg_distance_meters'])}, "
          f"{formatted_duration(stats['avg_duration_seconds'])}")

  print("\n  Events:")
  for event_type in EventType:
    print(f"    {event_icon(event_type)} {event_type.display_name}: {stats['events_by_type'][event_type.value]}")


# ============================================
# Profiles & Settings
# ============================================

def add_dog(storage: KeyValueStore, name: str, breed: str = "") -> Dog:
  dog_store = DogProfileStore(storage)
  dog = Dog(name=name.strip(), breed=breed.strip())
  dog_store.add_dog(dog)
  UserProfileStore(storage).complete_onboarding()
  print(f"✅ Added {dog.name} ({dog.id})")
  return dog


def list_dogs(storage: KeyValueStore):
  dog_store = DogProfileStore(storage)
  print(f"\n🐕 DOGS ({len(dog_store.dogs)})")
  print("-" * 40)
  for dog in dog_store.dogs:
    print(f"  {dog.name or '?'}{' | ' + dog.breed if dog.breed else ''} | {dog.id}")


def set_user(storage: KeyValueStore, name: str):
  user_store = UserProfileStore(storage)
  user = user_store.user
  user.name = name.strip()
  user_store.save(user)
  print(f"✅ Profile saved for {user.name}")


def set_setting(storage: KeyValueStore, key: str, value: str) -> bool:
  enum_type = SETTING_TYPES.get(key)
  if enum_type is None:
    print(f"❌ Unknown setting {key}. Choose from: {', '.join(SETTING_TYPES)}")
    return False

  valid = [member.value for member in enum_type]
  if value not in valid:
    print(f"❌ Invalid value for {key}. Choose from: {', '.join(valid)}")
    return False

  settings = SettingsStore(storage)
  setattr(settings, key, enum_type(value))
  print(f"✅ {key} = {value}")
  return True


def show_weather(storage: KeyValueStore, latitude: float, longitude: float, service: Optional[WeatherService] = None) -> bool:
  settings = SettingsStore(storage)
  service = service or WeatherService()

  snapshot = mock_snapshot(settings.weather_debug_mode)
  if snapshot is not None:
    service.set_override(snapshot)
  else:
    service.load(latitude, longitude, settings.temperature_unit.value)

  weather = service.current_weather
  if weather is None:
    print(f"❌ {service.error_message or 'No weather available'}")
    return False

  print(f"🌤️ {settings.formatted_temperature(weather.temperature_celsius)}, {weather.condition_description}")
  suggestion = walk_suggestion(weather)
  if suggestion:
    print(f"   {suggestion}")
  return True


# ============================================
# Backup
# ============================================

def export_json_file(storage: KeyValueStore, path: str) -> bool:
  store = WalkStore(storage)
  try:
    write_backup(path, store.walks, DogProfileStore(storage).dogs, UserProfileStore(storage).user)
  except BackupError as e:
    print(f"❌ {e}")
    return False
  print(f"✅ Exported {len(store.walks)} walks to {path}")
  return True


def export_csv_file(storage: KeyValueStore, path: str) -> bool:
  store = WalkStore(storage)
  try:
    write_csv(path, store.walks)
  except BackupError as e:
    print(f"❌ {e}")
    return False
  print(f"✅ Exported {len(store.walks)} walks to {path}")
  return True


def restore_file(storage: KeyValueStore, path: str, confirmed: bool = False) -> bool:
  try:
    envelope = read_backup(path)
  except BackupError as e:
    print(f"❌ {e}")
    return False

  dog_line = f" and {len(envelope.dogs)} dog(s)" if envelope.dogs else ""
  if not confirmed:
    print(f"⚠️ This will replace your walk history and dogs with the backup: "
          f"{len(envelope.walks)} walk(s){dog_line}. Re-run with --yes to continue.")
    return False

  result = apply_restore(
    envelope,
    WalkStore(storage),
    DogProfileStore(storage),
    UserProfileStore(storage),
  )
  print(f"✅ Restored {result['walks']} walk(s), {result['dogs']} dog(s)")
  return True


# ============================================
# Entry Point
# ============================================

def build_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(description="WalkyTrails v2.0 - dog walk tracker")
  parser.add_argument("--db", type=str, default=DB_PATH, help="Database file")

  parser.add_argument("--start", action="store_true", help="Start a walk")
  parser.add_argument("--dog", type=str, action="append", help="Dog ID (repeat for several dogs)")
  parser.add_argument("--log", type=str, help="Log an event: pee, poop, water, play")
  parser.add_argument("--at", type=float, nargs=2, metavar=("LAT", "LON"), help="Event location")
  parser.add_argument("--track", type=str, metavar="FILE", help="Add GPS points (lat,lon per line)")
  parser.add_argument("--end", action="store_true", help="End the current walk")
  parser.add_argument("--notes", type=str, help="Notes for the pending walk (or --walk)")
  parser.add_argument("--walk", type=str, help="Saved walk ID for --notes")
  parser.add_argument("--save", action="store_true", help="Save the pending walk")
  parser.add_argument("--weather", action="store_true", help="Attach current weather on --save")
  parser.add_argument("--discard", action="store_true", help="Discard the pending walk")
  parser.add_argument("--shortcut", type=str, metavar="PHRASE", help="Run a voice shortcut")

  parser.add_argument("--status", action="store_true", help="Show the current walk (default)")
  parser.add_argument("--history", action="store_true", help="Show saved walks")
  parser.add_argument("--stats", action="store_true", help="Show walk statistics")

  parser.add_argument("--add-dog", type=str, metavar="NAME", help="Add a dog")
  parser.add_argument("--breed", type=str, default="", help="Breed for --add-dog")
  parser.add_argument("--dogs", action="store_true", help="List dogs")
  parser.add_argument("--user", type=str, metavar="NAME", help="Set your name")
  parser.add_argument("--set", type=str, nargs=2, metavar=("KEY", "VALUE"), help="Change a setting")
  parser.add_argument("--weather-at", type=float, nargs=2, metavar=("LAT", "LON"), help="Show weather")

  parser.add_argument("--export-json", type=str, metavar="FILE", help="Export full backup")
  parser.add_argument("--export-csv", type=str, metavar="FILE", help="Export walks as CSV")
  parser.add_argument("--restore", type=str, metavar="FILE", help="Restore from a JSON backup")
  parser.add_argument("--yes", action="store_true", help="Confirm --restore")
  return parser


def main(argv: Optional[List[str]] = None) -> int:
  args = build_parser().parse_args(argv)
  storage = KeyValueStore(args.db)

  if args.start:
    ok = start_walk(storage, args.dog)
  elif args.log:
    ok = log_event(storage, args.log, dog_id=(args.dog or [None])[0], at=args.at)
  elif args.track:
    ok = track_file(storage, args.track)
  elif args.end:
    ok = end_walk(storage)
  elif args.notes is not None:
    ok = set_notes(storage, args.notes, args.walk)
  elif args.save:
    ok = save_walk(storage, with_weather=args.weather)
  elif args.discard:
    ok = discard_walk(storage)
  elif args.shortcut:
    ok = run_shortcut(storage, args.shortcut)
  elif args.status:
    show_status(storage)
    ok = True
  elif args.history:
    show_history(storage)
    ok = True
  elif args.stats:
    show_stats(storage)
    ok = True
  elif args.add_dog:
    add_dog(storage, args.add_dog, args.breed)
    ok = True
  elif args.dogs:
    list_dogs(storage)
    ok = True
  elif args.user:
    set_user(storage, args.user)
    ok = True
  elif args.set:
    ok = set_setting(storage, args.set[0], args.set[1])
  elif args.weather_at:
    ok = show_weather(storage, args.weather_at[0], args.weather_at[1])
  elif args.export_json:
    ok = export_json_file(storage, args.export_json)
  elif args.export_csv:
    ok = export_csv_file(storage, args.export_csv)
  elif args.restore:
    ok = restore_file(storage, args.restore, confirmed=args.yes)
  else:
    show_status(storage)
    ok = True

  return 0 if ok else 1


if __name__ == "__main__":
  sys.exit(main())
