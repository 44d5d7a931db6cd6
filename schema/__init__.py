"""
Schema Package
v2.0.0 - Multi-dog walks

Contains all data models for WalkyTrails.

Modules:
- walk_schema: Walk, WalkEvent, Coordinate, SavedWeather and timestamp helpers
- profile_schema: Dog and UserProfile
- settings_schema: Display preferences
"""

from .walk_schema import (
  Walk,
  WalkEvent,
  EventType,
  Coordinate,
  SavedWeather,
  new_id,
  get_current_time,
  format_timestamp,
  parse_timestamp,
)

from .profile_schema import (
  Dog,
  UserProfile,
)

from .settings_schema import (
  AppSettings,
  DistanceUnit,
  DateStylePreference,
  MapStylePreference,
  TemperatureUnit,
  WeatherDebugMode,
)

__all__ = [
  # Walks
  'Walk',
  'WalkEvent',
  'EventType',
  'Coordinate',
  'SavedWeather',
  'new_id',
  'get_current_time',
  'format_timestamp',
  'parse_timestamp',

  # Profiles
  'Dog',
  'UserProfile',

  # Settings
  'AppSettings',
  'DistanceUnit',
  'DateStylePreference',
  'MapStylePreference',
  'TemperatureUnit',
  'WeatherDebugMode',
]
