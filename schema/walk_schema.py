"""
Walk Schema
v2.0.0 - Multi-dog walks

Single source of truth for walk data structure.
Stores, shortcuts and backups all read and write walks through
to_dict() / from_dict() so the JSON layout stays identical everywhere.

Design Principles:
- A walk with no end_time is in progress
- Events are append-only and never reordered
- Optional fields added in later versions decode to defaults when absent
  (routeCoordinates, notes, dogIds, savedWeather, event dogId)
- JSON keys are camelCase to stay compatible with app backups
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List, Dict, Any


class EventType(str, Enum):
  """Things a dog can do on a walk"""
  PEE = "pee"
  POOP = "poop"
  WATER = "water"
  PLAY = "play"

  @property
  def display_name(self) -> str:
    return self.value.capitalize()

  @classmethod
  def from_string(cls, value: str) -> "EventType":
    """Convert string to EventType, ignoring case and whitespace"""
    if not value:
      raise ValueError("Event type is required")

    value_lower = value.lower().strip()
    for event_type in cls:
      if event_type.value == value_lower:
        return event_type

    raise ValueError(f"Unknown event type: {value}")


def new_id() -> str:
  """Generate a unique record ID (uppercase UUID, like the app)"""
  return str(uuid.uuid4()).upper()


def get_current_time() -> datetime:
  """Returns the current time as an aware UTC datetime"""
  return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
  """
  ISO 8601 in UTC with whole seconds and a "Z" suffix, e.g.
  2026-01-31T10:00:00Z. The app's backup decoder rejects fractional seconds.
  """
  if value.tzinfo is None:
    value = value.replace(tzinfo=timezone.utc)
  return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_timestamp(value: str) -> datetime:
  """
  Parse an ISO 8601 timestamp.
  Accepts a trailing "Z" and treats naive values as UTC.
  """
  if not value:
    raise ValueError("Timestamp is required")

  text = value.strip()
  if text.endswith("Z") or text.endswith("z"):
    text = text[:-1] + "+00:00"

  parsed = datetime.fromisoformat(text)
  if parsed.tzinfo is None:
    parsed = parsed.replace(tzinfo=timezone.utc)
  return parsed


@dataclass(frozen=True)
class Coordinate:
  """A point on the route or where an event happened"""
  latitude: float
  longitude: float

  def to_dict(self) -> Dict:
    return {'latitude': self.latitude, 'longitude': self.longitude}

  @classmethod
  def from_dict(cls, data: Dict) -> "Coordinate":
    return cls(latitude=float(data['latitude']), longitude=float(data['longitude']))


@dataclass(frozen=True)
class SavedWeather:
  """Weather at the moment a walk was saved. Never updated afterwards."""
  temperature_celsius: float
  condition_description: str
  weather_code: int

  def to_dict(self) -> Dict:
    return {
      'temperatureCelsius': self.temperature_celsius,
      'conditionDescription': self.condition_description,
      'weatherCode': self.weather_code,
    }

  @classmethod
  def from_dict(cls, data: Dict) -> "SavedWeather":
    return cls(
      temperature_celsius=float(data['temperatureCelsius']),
      condition_description=data.get('conditionDescription', ''),
      weather_code=int(data.get('weatherCode', 0)),
    )


@dataclass(frozen=True)
class WalkEvent:
  """
  A single event logged during a walk.

  Events are immutable once created; the only way to change one is to
  replace the whole walk.
  """
  type: EventType
  id: str = field(default_factory=new_id)
  timestamp: datetime = field(default_factory=get_current_time)
  latitude: Optional[float] = None
  longitude: Optional[float] = None
  dog_id: Optional[str] = None  # None for events logged before multi-dog

  @property
  def coordinate(self) -> Optional[Coordinate]:
    """Coordinate for a map marker; None if the event has no location"""
    if self.latitude is None or self.longitude is None:
      return None
    return Coordinate(self.latitude, self.longitude)

  def to_dict(self) -> Dict:
    result = {
      'id': self.id,
      'type': self.type.value,
      'timestamp': format_timestamp(self.timestamp),
    }

    if self.latitude is not None:
      result['latitude'] = self.latitude
    if self.longitude is not None:
      result['longitude'] = self.longitude
    if self.dog_id:
      result['dogId'] = self.dog_id

    return result

  @classmethod
  def from_dict(cls, data: Dict) -> "WalkEvent":
    if not data:
      raise ValueError("Cannot create WalkEvent from empty data")

    return cls(
      id=data.get('id') or new_id(),
      type=EventType.from_string(data.get('type', '')),
      timestamp=parse_timestamp(data['timestamp']),
      latitude=data.get('latitude'),
      longitude=data.get('longitude'),
      dog_id=data.get('dogId'),
    )


@dataclass
class Walk:
  """
  A recorded walk, in progress or completed.

  Lifecycle: created on start, mutated while current, frozen by end(),
  then saved to history or discarded by the walk store.
  """

  # ===== IDENTITY =====
  id: str = field(default_factory=new_id)

  # ===== TIMING =====
  start_time: datetime = field(default_factory=get_current_time)
  end_time: Optional[datetime] = None  # None = in progress

  # ===== TRACKING =====
  distance_meters: float = 0.0
  events: List[WalkEvent] = field(default_factory=list)
  route_coordinates: Optional[List[Coordinate]] = None  # None for walks before route recording

  # ===== DETAILS =====
  notes: Optional[str] = None
  dog_ids: List[str] = field(default_factory=list)  # Empty only for legacy walks
  saved_weather: Optional[SavedWeather] = None

  @property
  def is_in_progress(self) -> bool:
    return self.end_time is None

  @property
  def route_for_map(self) -> List[Coordinate]:
    """Route for map display; empty if not recorded"""
    return list(self.route_coordinates or [])

  def duration_seconds(self, now: Optional[datetime] = None) -> float:
    """Seconds from start to end, or to now while in progress"""
    end = self.end_time or now or get_current_time()
    return (end - self.start_time).total_seconds()

  def end(self, route: Optional[List[Coordinate]] = None, now: Optional[datetime] = None):
    """Freeze the walk. end_time is only ever set once."""
    if self.end_time is not None:
      raise ValueError(f"Walk {self.id} already ended")

    if route is not None:
      self.route_coordinates = list(route)
    self.end_time = now or get_current_time()

  def add_event(
    self,
    event_type: EventType,
    coordinate: Optional[Coordinate] = None,
    dog_id: Optional[str] = None,
    now: Optional[datetime] = None
  ) -> WalkEvent:
    """
    Append an event and return it.

    Single-dog walks attribute unassigned events to that dog.
    Timestamps never go backwards relative to the previous event.
    """
    if dog_id is None and len(self.dog_ids) == 1:
      dog_id = self.dog_ids[0]
    elif dog_id is not None and self.dog_ids and dog_id not in self.dog_ids:
      raise ValueError(f"Dog {dog_id} is not on this walk")

    timestamp = now or get_current_time()
    if self.events and timestamp < self.events[-1].timestamp:
      timestamp = self.events[-1].timestamp

    event = WalkEvent(
      type=event_type,
      timestamp=timestamp,
      latitude=coordinate.latitude if coordinate else None,
      longitude=coordinate.longitude if coordinate else None,
      dog_id=dog_id,
    )
    self.events.append(event)
    return event

  def to_dict(self) -> Dict:
    """Convert to dictionary for storage"""
    result: Dict[str, Any] = {
      'id': self.id,
      'startTime': format_timestamp(self.start_time),
      'distanceMeters': self.distance_meters,
      'events': [event.to_dict() for event in self.events],
      'dogIds': list(self.dog_ids),
    }

    if self.end_time is not None:
      result['endTime'] = format_timestamp(self.end_time)
    if self.route_coordinates is not None:
      result['routeCoordinates'] = [c.to_dict() for c in self.route_coordinates]
    if self.notes is not None:
      result['notes'] = self.notes
    if self.saved_weather is not None:
      result['savedWeather'] = self.saved_weather.to_dict()

    return result

  @classmethod
  def from_dict(cls, data: Dict) -> "Walk":
    """Create Walk from dictionary, tolerating fields missing in older versions"""
    if not data:
      raise ValueError("Cannot create Walk from empty data")

    route = data.get('routeCoordinates')
    weather = data.get('savedWeather')
    end_time = data.get('endTime')

    return cls(
      id=data['id'],
      start_time=parse_timestamp(data['startTime']),
      end_time=parse_timestamp(end_time) if end_time else None,
      distance_meters=float(data.get('distanceMeters') or 0),
      events=[WalkEvent.from_dict(e) for e in data.get('events') or []],
      route_coordinates=[Coordinate.from_dict(c) for c in route] if route is not None else None,
      notes=data.get('notes'),
      dog_ids=list(data.get('dogIds') or []),
      saved_weather=SavedWeather.from_dict(weather) if weather else None,
    )
