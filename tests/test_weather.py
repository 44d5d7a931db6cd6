"""
Tests for the weather service.

HTTP is replaced by a MagicMock session; nothing touches the network.
"""
from unittest.mock import MagicMock

import pytest
import requests

from schema import WeatherDebugMode
from services import (
  WeatherError, WeatherService, WeatherSnapshot,
  condition_description, mock_snapshot, parse_snapshot, walk_suggestion,
)


def _payload(temp=20.0, feels=19.0, code=2, probs=(10, 20), precip=(0.0, 0.1)):
  return {
    "current": {
      "temperature_2m": temp,
      "apparent_temperature": feels,
      "weather_code": code,
      "precipitation": 0.0,
    },
    "hourly": {
      "time": ["2026-01-31T10:00", "2026-01-31T11:00"],
      "precipitation_probability": list(probs),
      "precipitation": list(precip),
    },
  }


def _session(payload=None, error=None):
  session = MagicMock()
  session.headers = {}
  response = MagicMock()
  if error is not None:
    session.get.side_effect = error
  else:
    response.json.return_value = payload
  session.get.return_value = response
  return session


class TestParseSnapshot:

  def test_celsius(self):
    snapshot = parse_snapshot(_payload())
    assert snapshot.temperature_celsius == 20.0
    assert snapshot.feels_like_celsius == 19.0
    assert snapshot.condition_description == "Partly cloudy"
    assert snapshot.precipitation_probability_next_hour == 20
    assert snapshot.precipitation_next_hour_mm == 0.1

  def test_fahrenheit_converted_to_celsius(self):
    snapshot = parse_snapshot(_payload(temp=68.0, feels=50.0), "fahrenheit")
    assert snapshot.temperature_celsius == pytest.approx(20.0)
    assert snapshot.feels_like_celsius == pytest.approx(10.0)

  def test_short_hourly_has_no_next_hour(self):
    payload = _payload()
    payload["hourly"]["time"] = ["2026-01-31T10:00"]
    snapshot = parse_snapshot(payload)
    assert snapshot.precipitation_probability_next_hour is None
    assert snapshot.precipitation_next_hour_mm is None

  def test_missing_current(self):
    assert parse_snapshot({"hourly": {}}) is None
    assert parse_snapshot([]) is None

  def test_condition_description(self):
    assert condition_description(0) == "Clear"
    assert condition_description(63) == "Rain"
    assert condition_description(1234) == "Unknown"


class TestWalkSuggestion:

  def test_rain_by_probability(self):
    weather = WeatherSnapshot(35, 61, "Rain", precipitation_probability_next_hour=60)
    assert walk_suggestion(weather) == "Rain soon - consider a shorter walk."

  def test_rain_by_amount(self):
    weather = WeatherSnapshot(15, 61, "Rain", precipitation_next_hour_mm=0.5)
    assert walk_suggestion(weather) == "Rain soon - consider a shorter walk."

  def test_hot_uses_feels_like(self):
    weather = WeatherSnapshot(30, 0, "Clear", feels_like_celsius=33)
    assert walk_suggestion(weather) == "Hot - keep it short and shady."

  def test_cold(self):
    weather = WeatherSnapshot(-2, 0, "Clear")
    assert walk_suggestion(weather) == "Cold - keep it short and warm up after."

  def test_mild_has_no_suggestion(self):
    assert walk_suggestion(WeatherSnapshot(18, 1, "Mainly clear")) is None
    assert walk_suggestion(None) is None

  def test_mock_modes(self):
    assert mock_snapshot(WeatherDebugMode.LIVE) is None
    assert "Hot" in walk_suggestion(mock_snapshot(WeatherDebugMode.SIMULATE_HOT))
    assert "Cold" in walk_suggestion(mock_snapshot(WeatherDebugMode.SIMULATE_COLD))
    assert "Rain" in walk_suggestion(mock_snapshot(WeatherDebugMode.SIMULATE_RAIN))


class TestWeatherService:

  def test_build_params(self):
    service = WeatherService(session=_session())
    params = service.build_params(52.52, 13.41, "fahrenheit")
    assert params["latitude"] == "52.52"
    assert params["temperature_unit"] == "fahrenheit"
    assert params["forecast_hours"] == "2"
    assert "temperature_2m" in params["current"]

  def test_load_success(self):
    session = _session(_payload())
    service = WeatherService(session=session, base_url="http://weather.test")

    snapshot = service.load(52.52, 13.41)

    assert snapshot.temperature_celsius == 20.0
    assert service.current_weather == snapshot
    assert service.error_message is None
    assert not service.is_loading
    args, kwargs = session.get.call_args
    assert args[0] == "http://weather.test"
    assert kwargs["params"]["latitude"] == "52.52"

  def test_fetch_network_error(self):
    service = WeatherService(session=_session(error=requests.ConnectionError("offline")))
    with pytest.raises(WeatherError):
      service.fetch(0, 0)

  def test_fetch_bad_json(self):
    session = _session()
    session.get.return_value.json.side_effect = ValueError("not json")
    with pytest.raises(WeatherError):
      WeatherService(session=session).fetch(0, 0)

  def test_fetch_http_error(self):
    session = _session(_payload())
    session.get.return_value.raise_for_status.side_effect = requests.HTTPError("500")
    with pytest.raises(WeatherError):
      WeatherService(session=session).fetch(0, 0)

  def test_load_bad_payload_sets_error(self):
    service = WeatherService(session=_session({"current": {"temperature_2m": "n/a"}}))
    assert service.load(1, 2) is None
    assert service.error_message.startswith("Invalid weather response")
    assert service.current_weather is None
    assert not service.is_loading

  def test_fetch_bad_payload_raises_weather_error(self):
    service = WeatherService(session=_session({"current": {"temperature_2m": 20, "weather_code": "sunny"}}))
    with pytest.raises(WeatherError):
      service.fetch(0, 0)

  def test_load_failure_sets_error(self):
    service = WeatherService(session=_session({"nothing": True}))
    assert service.load(0, 0) is None
    assert service.error_message
    assert service.current_weather is None

  def test_stale_response_ignored(self):
    service = WeatherService(session=_session())
    calls = []

    def respond(*args, **kwargs):
      calls.append(kwargs["params"]["latitude"])
      response = MagicMock()
      if len(calls) == 1:
        # A second load starts and finishes while the first is in flight
        service.load(2, 2)
        response.json.return_value = _payload(temp=30.0)
      else:
        response.json.return_value = _payload(temp=5.0, code=3)
      return response

    service.session.get.side_effect = respond

    assert service.load(1, 1) is None
    assert service.current_weather.temperature_celsius == 5.0
    assert calls == ["1", "2"]

  def test_override_discards_in_flight(self):
    service = WeatherService(session=_session())
    override = mock_snapshot(WeatherDebugMode.SIMULATE_COLD)

    def respond(*args, **kwargs):
      service.set_override(override)
      response = MagicMock()
      response.json.return_value = _payload()
      return response

    service.session.get.side_effect = respond
    service.load(0, 0)
    assert service.current_weather == override

    service.clear_override()
    assert service.current_weather is None

  def test_saved_weather(self):
    saved = WeatherSnapshot(21.5, 2, "Partly cloudy", feels_like_celsius=20).to_saved_weather()
    assert saved.temperature_celsius == 21.5
    assert saved.weather_code == 2
