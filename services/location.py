"""
Location tracking and distance accumulation

Fed with GPS fixes while a walk is in progress. Keeps the route and adds
up distance, dropping implausible jumps (simulator glitches, bad fixes).
"""
import math
from enum import Enum
from typing import List, Optional

from geopy.distance import geodesic

from config import DISTANCE_CONFIG
from schema import Coordinate


class AuthorizationStatus(str, Enum):
  NOT_DETERMINED = "not_determined"
  DENIED = "denied"
  AUTHORIZED = "authorized"


def distance_between(a: Coordinate, b: Coordinate) -> float:
  """Geodesic distance in meters"""
  return geodesic((a.latitude, a.longitude), (b.latitude, b.longitude)).meters


def is_valid_coordinate(latitude: float, longitude: float) -> bool:
  """Finite and inside [-90, 90] / [-180, 180]"""
  if not (math.isfinite(latitude) and math.isfinite(longitude)):
    return False
  return -90 <= latitude <= 90 and -180 <= longitude <= 180


def accept_distance_delta(delta: float, max_jump: Optional[float] = None) -> bool:
  """A delta counts toward the walk only if 0 <= delta < max jump"""
  if max_jump is None:
    max_jump = DISTANCE_CONFIG["max_jump_meters"]
  return 0 <= delta < max_jump


class LocationTracker:
  """Tracks location during a walk and accumulates distance in meters"""

  def __init__(self, max_jump_meters: Optional[float] = None):
    self.max_jump_meters = max_jump_meters or DISTANCE_CONFIG["max_jump_meters"]
    self.authorization_status = AuthorizationStatus.NOT_DETERMINED
    self.distance_meters: float = 0.0
    self.current_location: Optional[Coordinate] = None
    self.route_coordinates: List[Coordinate] = []
    self.rejected_samples: int = 0
    self._last_location: Optional[Coordinate] = None
    self._is_tracking = False

  @property
  def is_tracking(self) -> bool:
    return self._is_tracking

  def request_permission(self, granted: bool = True) -> AuthorizationStatus:
    self.authorization_status = (
      AuthorizationStatus.AUTHORIZED if granted else AuthorizationStatus.DENIED
    )
    return self.authorization_status

  def start_tracking(self) -> bool:
    """Start tracking; resets distance and route"""
    if self.authorization_status == AuthorizationStatus.DENIED:
      print("  ⚠️ Location access denied, distance will not be tracked")
      return False

    self.distance_meters = 0.0
    self.current_location = None
    self.route_coordinates = []
    self.rejected_samples = 0
    self._last_location = None
    self._is_tracking = True
    return True

  def stop_tracking(self):
    self._is_tracking = False

  def update(self, latitude: float, longitude: float, horizontal_accuracy: float = 0.0) -> bool:
    """
    Process one GPS fix. Returns True if it added distance.

    Negative accuracy or an impossible coordinate means the fix is invalid
    and is ignored entirely. Every valid fix extends the route, even when
    its delta is rejected.
    """
    if not self._is_tracking or horizontal_accuracy < 0:
      return False
    if not is_valid_coordinate(latitude, longitude):
      return False

    location = Coordinate(latitude, longitude)
    added = False

    if self._last_location is not None:
      delta = distance_between(self._last_location, location)
      if accept_distance_delta(delta, self.max_jump_meters):
        self.distance_meters += delta
        added = True
      else:
        self.rejected_samples += 1

    self._last_location = location
    self.current_location = location
    self.route_coordinates.append(location)
    return added

  def replay(self, points: List[Coordinate]) -> float:
    """Feed a recorded track through update(); returns total distance"""
    for point in points:
      self.update(point.latitude, point.longitude)
    return self.distance_meters
