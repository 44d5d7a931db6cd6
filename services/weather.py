"""
Weather service
v1.1.0 - Stale response guard

Fetches current conditions from Open-Meteo (no API key required) and
turns them into a snapshot for display, walk suggestions, and the
SavedWeather attached to a walk when it is saved.

One GET per load. Nothing is retried; failures become an error message.
"""
from dataclasses import dataclass
from typing import Optional, Dict, Any

import requests

from config import WEATHER_CONFIG, SUGGESTION_THRESHOLDS, USER_AGENT
from schema import SavedWeather, TemperatureUnit, WeatherDebugMode


class WeatherError(Exception):
  """Weather could not be fetched or understood"""


@dataclass(frozen=True)
class WeatherSnapshot:
  """Current weather plus next-hour precipitation"""
  temperature_celsius: float
  weather_code: int
  condition_description: str
  feels_like_celsius: Optional[float] = None
  precipitation_next_hour_mm: Optional[float] = None
  precipitation_probability_next_hour: Optional[int] = None

  def to_saved_weather(self) -> SavedWeather:
    return SavedWeather(
      temperature_celsius=self.temperature_celsius,
      condition_description=self.condition_description,
      weather_code=self.weather_code,
    )


# WMO weather interpretation codes
_CONDITIONS = {
  (0,): "Clear",
  (1,): "Mainly clear",
  (2,): "Partly cloudy",
  (3,): "Overcast",
  (45, 48): "Foggy",
  (51, 53, 55): "Drizzle",
  (56, 57): "Freezing drizzle",
  (61, 63, 65): "Rain",
  (66, 67): "Freezing rain",
  (71, 73, 75, 77): "Snow",
  (80, 81, 82): "Showers",
  (85, 86): "Snow showers",
  (95,): "Thunderstorm",
  (96, 99): "Thunderstorm with hail",
}


def condition_description(code: int) -> str:
  """Short description of a WMO weather code"""
  for codes, description in _CONDITIONS.items():
    if code in codes:
      return description
  return "Unknown"


def _to_celsius(value: float, temperature_unit: str) -> float:
  if temperature_unit == TemperatureUnit.FAHRENHEIT.value:
    return (value - 32) * 5 / 9
  return value


def parse_snapshot(payload: Any, temperature_unit: str = "celsius") -> Optional[WeatherSnapshot]:
  """
  Build a snapshot from an Open-Meteo forecast response.
  Values are always stored in Celsius whatever unit was requested.
  """
  if not isinstance(payload, dict):
    return None

  current = payload.get("current")
  if not isinstance(current, dict):
    return None

  unit = TemperatureUnit.from_string(temperature_unit).value
  temp = current.get("temperature_2m")
  feels = current.get("apparent_temperature")
  code = current.get("weather_code")
  code = int(code) if code is not None else 0

  # Index 0 is the current hour, index 1 the next one
  precip_next_hour = None
  precip_prob_next_hour = None
  hourly = payload.get("hourly")
  if isinstance(hourly, dict):
    times = hourly.get("time") or []
    precip = hourly.get("precipitation") or []
    prob = hourly.get("precipitation_probability") or []
    if len(times) >= 2 and len(precip) >= 2 and len(prob) >= 2:
      precip_next_hour = precip[1]
      precip_prob_next_hour = prob[1]

  return WeatherSnapshot(
    temperature_celsius=_to_celsius(float(temp or 0), unit),
    feels_like_celsius=_to_celsius(float(feels), unit) if feels is not None else None,
    weather_code=code,
    condition_description=condition_description(code),
    precipitation_next_hour_mm=precip_next_hour,
    precipitation_probability_next_hour=precip_prob_next_hour,
  )


def mock_snapshot(mode: str) -> Optional[WeatherSnapshot]:
  """Canned weather for testing suggestions; None for live or unknown modes"""
  mode = WeatherDebugMode.from_string(mode)
  if mode == WeatherDebugMode.SIMULATE_HOT:
    return WeatherSnapshot(35, 0, "Clear", feels_like_celsius=38)
  if mode == WeatherDebugMode.SIMULATE_COLD:
    return WeatherSnapshot(-5, 0, "Clear", feels_like_celsius=-8)
  if mode == WeatherDebugMode.SIMULATE_RAIN:
    return WeatherSnapshot(
      15, 61, "Rain",
      feels_like_celsius=14,
      precipitation_next_hour_mm=2.0,
      precipitation_probability_next_hour=70,
    )
  return None


def walk_suggestion(weather: Optional[WeatherSnapshot]) -> Optional[str]:
  """One-line suggestion for dog walkers; rain beats heat beats cold"""
  if weather is None:
    return None

  prob = weather.precipitation_probability_next_hour or 0
  mm = weather.precipitation_next_hour_mm or 0
  if prob >= SUGGESTION_THRESHOLDS["rain_probability"] or mm >= SUGGESTION_THRESHOLDS["rain_mm"]:
    return "Rain soon - consider a shorter walk."

  feels = weather.feels_like_celsius
  if feels is None:
    feels = weather.temperature_celsius
  if feels >= SUGGESTION_THRESHOLDS["hot_feels_like"]:
    return "Hot - keep it short and shady."

  if weather.temperature_celsius < SUGGESTION_THRESHOLDS["cold_temperature"]:
    return "Cold - keep it short and warm up after."

  return None


class WeatherService:
  """
  Loads current weather and keeps the latest result.

  Each load() takes a request number; a result arriving for anything
  but the newest request is thrown away.
  """

  def __init__(
    self,
    session: Optional[requests.Session] = None,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None
  ):
    self.session = session or requests.Session()
    self.session.headers.update({"User-Agent": USER_AGENT})
    self.base_url = base_url or WEATHER_CONFIG["base_url"]
    self.timeout = timeout or WEATHER_CONFIG["timeout"]

    self.current_weather: Optional[WeatherSnapshot] = None
    self.is_loading = False
    self.error_message: Optional[str] = None
    self._request_id = 0

  def build_params(self, latitude: float, longitude: float, temperature_unit: str = "celsius") -> Dict:
    return {
      "latitude": str(latitude),
      "longitude": str(longitude),
      "current": WEATHER_CONFIG["current_fields"],
      "hourly": WEATHER_CONFIG["hourly_fields"],
      "temperature_unit": TemperatureUnit.from_string(temperature_unit).value,
      "timezone": "auto",
      "forecast_hours": str(WEATHER_CONFIG["forecast_hours"]),
    }

  def fetch(self, latitude: float, longitude: float, temperature_unit: str = "celsius") -> WeatherSnapshot:
    """Fetch weather once. Raises WeatherError on any failure."""
    params = self.build_params(latitude, longitude, temperature_unit)
    try:
      response = self.session.get(self.base_url, params=params, timeout=self.timeout)
      response.raise_for_status()
      payload = response.json()
    except requests.RequestException as e:
      raise WeatherError(f"Weather request failed: {e}") from e
    except ValueError as e:
      raise WeatherError(f"Invalid weather response: {e}") from e

    try:
      snapshot = parse_snapshot(payload, params["temperature_unit"])
    except (TypeError, ValueError) as e:
      raise WeatherError(f"Invalid weather response: {e}") from e
    if snapshot is None:
      raise WeatherError("Weather response had no current conditions")
    return snapshot

  def load(self, latitude: float, longitude: float, temperature_unit: str = "celsius") -> Optional[WeatherSnapshot]:
    """Fetch weather and update state; returns the snapshot if it was applied"""
    self._request_id += 1
    request_id = self._request_id
    self.is_loading = True
    self.error_message = None

    try:
      snapshot = self.fetch(latitude, longitude, temperature_unit)
    except WeatherError as e:
      if request_id != self._request_id:
        return None
      self.is_loading = False
      self.error_message = str(e)
      print(f"  ❌ {e}")
      return None

    if request_id != self._request_id:
      # A newer request started while this one was in flight
      return None

    self.is_loading = False
    self.current_weather = snapshot
    return snapshot

  def set_override(self, snapshot: Optional[WeatherSnapshot]):
    """Show a fixed snapshot instead of fetching; in-flight results are ignored"""
    self._request_id += 1
    self.current_weather = snapshot
    self.is_loading = False
    self.error_message = None

  def clear_override(self):
    self.current_weather = None
