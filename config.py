"""
Configuration for WalkyTrails
"""
import os

# Database configuration
DB_PATH = os.environ.get("WALKY_DB_PATH", "walky.db")

# Persisted keys - one JSON blob per key
STORAGE_KEYS = {
  "walks": "walkyTrails.savedWalks",
  "current_walk": "walkyTrails.currentWalk",
  "walk_to_summarize": "walkyTrails.walkToSummarize",
  "dogs": "walkyTrails.dogs",
  "legacy_dog": "walkyTrails.dogProfile",  # Pre multi-dog, single object
  "user_profile": "walkyTrails.userProfile",
  "onboarding_completed": "walkyTrails.onboardingCompleted",
  "distance_unit": "walkyTrails.distanceUnit",
  "date_style": "walkyTrails.dateStyle",
  "map_style": "walkyTrails.mapStyle",
  "temperature_unit": "walkyTrails.temperatureUnit",
  "weather_debug_mode": "walkyTrails.weatherDebugMode",
}

# Backup envelope
EXPORT_VERSION = 2

CSV_HEADER = ["Start", "End", "Duration (sec)", "Distance (m)", "Notes", "Events"]

# GPS distance accumulation
DISTANCE_CONFIG = {
  "max_jump_meters": 500.0,  # Larger deltas are glitches, not walking
  "meters_per_mile": 1609.344,
  "feet_per_meter": 3.28084,
}

# Weather (Open-Meteo, no API key required)
WEATHER_CONFIG = {
  "base_url": os.environ.get("WALKY_WEATHER_URL", "https://api.open-meteo.com/v1/forecast"),
  "timeout": 15,
  "current_fields": "temperature_2m,apparent_temperature,weather_code,precipitation",
  "hourly_fields": "precipitation_probability,precipitation",
  "forecast_hours": 2,
}

# Walk suggestion thresholds (Celsius)
SUGGESTION_THRESHOLDS = {
  "rain_probability": 50,
  "rain_mm": 0.5,
  "hot_feels_like": 32,
  "cold_temperature": 0,
}

# User agent for web requests
USER_AGENT = "WalkyTrails/1.0"
