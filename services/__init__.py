"""
Services for WalkyTrails
"""
from .location import (
  LocationTracker,
  AuthorizationStatus,
  accept_distance_delta,
  distance_between,
  is_valid_coordinate,
)
from .weather import (
  WeatherService,
  WeatherSnapshot,
  WeatherError,
  condition_description,
  parse_snapshot,
  mock_snapshot,
  walk_suggestion,
)

__all__ = [
  'LocationTracker',
  'AuthorizationStatus',
  'accept_distance_delta',
  'distance_between',
  'is_valid_coordinate',
  'WeatherService',
  'WeatherSnapshot',
  'WeatherError',
  'condition_description',
  'parse_snapshot',
  'mock_snapshot',
  'walk_suggestion',
]
