"""
Settings Schema
v1.1.0 - Temperature unit and weather debug mode

User display preferences. Each value persists as its raw string.
"""
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Optional


class _Preference(str, Enum):
  """Shared parsing for string-valued preferences"""

  @classmethod
  def from_string(cls, value: Optional[str], default=None):
    """Convert stored string to a preference, falling back to default"""
    if value:
      for member in cls:
        if member.value == value:
          return member
    return default if default is not None else list(cls)[0]


class DistanceUnit(_Preference):
  KILOMETERS = "km"
  MILES = "mi"

  @property
  def display_name(self) -> str:
    return {"km": "Kilometers", "mi": "Miles"}[self.value]


class DateStylePreference(_Preference):
  MEDIUM = "medium"  # Jan 31, 2026
  SHORT = "short"    # 1/31/26
  LONG = "long"      # January 31, 2026

  @property
  def display_name(self) -> str:
    return self.value.capitalize()


class MapStylePreference(_Preference):
  STANDARD = "standard"
  HYBRID = "hybrid"
  IMAGERY = "imagery"

  @property
  def display_name(self) -> str:
    return {"standard": "Standard", "hybrid": "Hybrid", "imagery": "Satellite"}[self.value]


class TemperatureUnit(_Preference):
  CELSIUS = "celsius"
  FAHRENHEIT = "fahrenheit"

  @property
  def symbol(self) -> str:
    return "°C" if self is TemperatureUnit.CELSIUS else "°F"


class WeatherDebugMode(_Preference):
  LIVE = "live"
  SIMULATE_HOT = "simulateHot"
  SIMULATE_COLD = "simulateCold"
  SIMULATE_RAIN = "simulateRain"


@dataclass
class AppSettings:
  """Snapshot of all preferences, for reports and the CLI"""
  distance_unit: DistanceUnit = DistanceUnit.KILOMETERS
  date_style: DateStylePreference = DateStylePreference.MEDIUM
  map_style: MapStylePreference = MapStylePreference.STANDARD
  temperature_unit: TemperatureUnit = TemperatureUnit.CELSIUS
  weather_debug_mode: WeatherDebugMode = WeatherDebugMode.LIVE

  def to_dict(self) -> Dict:
    return {k: v.value for k, v in asdict(self).items()}
