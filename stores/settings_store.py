"""
Settings Store
v1.1.0 - Temperature unit and weather debug mode

Persists display preferences, one key per setting, and formats
distances, dates and temperatures according to them.
"""
from datetime import datetime, tzinfo
from typing import Optional

from config import STORAGE_KEYS, DISTANCE_CONFIG
from schema import (
  AppSettings,
  DistanceUnit,
  DateStylePreference,
  MapStylePreference,
  TemperatureUnit,
  WeatherDebugMode,
)
from storage import KeyValueStore
from .base_store import BaseStore


MONTH_NAMES = [
  "January", "February", "March", "April", "May", "June",
  "July", "August", "September", "October", "November", "December",
]


class SettingsStore(BaseStore):

  def __init__(self, storage: Optional[KeyValueStore] = None):
    super().__init__(storage)
    self._distance_unit = DistanceUnit.from_string(self._load("distance_unit"))
    self._date_style = DateStylePreference.from_string(self._load("date_style"))
    self._map_style = MapStylePreference.from_string(self._load("map_style"))
    self._temperature_unit = TemperatureUnit.from_string(self._load("temperature_unit"))
    self._weather_debug_mode = WeatherDebugMode.from_string(self._load("weather_debug_mode"))

  def _load(self, name: str) -> Optional[str]:
    value = self.load_json(STORAGE_KEYS[name])
    return value if isinstance(value, str) else None

  def _store(self, name: str, value):
    self.save_json(STORAGE_KEYS[name], value.value)

  # ============================================
  # Preferences
  # ============================================

  @property
  def distance_unit(self) -> DistanceUnit:
    return self._distance_unit

  @distance_unit.setter
  def distance_unit(self, value: DistanceUnit):
    self._distance_unit = DistanceUnit(value)
    self._store("distance_unit", self._distance_unit)

  @property
  def date_style(self) -> DateStylePreference:
    return self._date_style

  @date_style.setter
  def date_style(self, value: DateStylePreference):
    self._date_style = DateStylePreference(value)
    self._store("date_style", self._date_style)

  @property
  def map_style(self) -> MapStylePreference:
    return self._map_style

  @map_style.setter
  def map_style(self, value: MapStylePreference):
    self._map_style = MapStylePreference(value)
    self._store("map_style", self._map_style)

  @property
  def temperature_unit(self) -> TemperatureUnit:
    return self._temperature_unit

  @temperature_unit.setter
  def temperature_unit(self, value: TemperatureUnit):
    self._temperature_unit = TemperatureUnit(value)
    self._store("temperature_unit", self._temperature_unit)

  @property
  def weather_debug_mode(self) -> WeatherDebugMode:
    return self._weather_debug_mode

  @weather_debug_mode.setter
  def weather_debug_mode(self, value: WeatherDebugMode):
    self._weather_debug_mode = WeatherDebugMode(value)
    self._store("weather_debug_mode", self._weather_debug_mode)

  def snapshot(self) -> AppSettings:
    return AppSettings(
      distance_unit=self._distance_unit,
      date_style=self._date_style,
      map_style=self._map_style,
      temperature_unit=self._temperature_unit,
      weather_debug_mode=self._weather_debug_mode,
    )

  # ============================================
  # Formatting
  # ============================================

  def formatted_distance(self, meters: float) -> str:
    """Distance in the chosen unit; small values in m or ft"""
    if self._distance_unit == DistanceUnit.MILES:
      miles = meters / DISTANCE_CONFIG["meters_per_mile"]
      if miles >= 1:
        return f"{miles:.2f} mi"
      return f"{meters * DISTANCE_CONFIG['feet_per_meter']:.0f} ft"

    if meters >= 1000:
      return f"{meters / 1000:.2f} km"
    return f"{meters:.0f} m"

  def formatted_distance_short(self, meters: float) -> str:
    """Distance for stats, always in km or mi"""
    if self._distance_unit == DistanceUnit.MILES:
      return f"{meters / DISTANCE_CONFIG['meters_per_mile']:.1f} mi"
    return f"{meters / 1000:.1f} km"

  def formatted_date(self, value: datetime, tz: Optional[tzinfo] = None) -> str:
    """Date only, in the chosen style. Converts to tz (local time by default)."""
    local = value.astimezone(tz)
    if self._date_style == DateStylePreference.SHORT:
      return f"{local.month}/{local.day}/{local.year % 100:02d}"
    if self._date_style == DateStylePreference.LONG:
      return f"{MONTH_NAMES[local.month - 1]} {local.day}, {local.year}"
    return f"{MONTH_NAMES[local.month - 1][:3]} {local.day}, {local.year}"

  def formatted_time(self, value: datetime, tz: Optional[tzinfo] = None) -> str:
    """Time only, e.g. "9:05 AM" """
    local = value.astimezone(tz)
    hour = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{hour}:{local.minute:02d} {suffix}"

  def formatted_temperature(self, celsius: float) -> str:
    """Temperatures are stored in Celsius and shown in the chosen unit"""
    if self._temperature_unit == TemperatureUnit.FAHRENHEIT:
      return f"{celsius * 9 / 5 + 32:.0f}{TemperatureUnit.FAHRENHEIT.symbol}"
    return f"{celsius:.0f}{TemperatureUnit.CELSIUS.symbol}"
