"""
Tests for GPS distance accumulation.

One degree of latitude is roughly 111 km, so 0.001 degrees is about 111 m
and 0.01 degrees about 1.1 km.
"""
import pytest

from schema import Coordinate
from services import (
  AuthorizationStatus, LocationTracker, accept_distance_delta, distance_between, is_valid_coordinate,
)


class TestAcceptDistanceDelta:

  @pytest.mark.parametrize("delta", [0.0, 10.0, 499.99])
  def test_accepts(self, delta):
    assert accept_distance_delta(delta)

  @pytest.mark.parametrize("delta", [-1.0, 500.0, 5000.0])
  def test_rejects(self, delta):
    assert not accept_distance_delta(delta)

  def test_custom_limit(self):
    assert not accept_distance_delta(150.0, max_jump=100.0)


@pytest.mark.parametrize("lat,lon,expected", [
  (52.5, 13.4, True),
  (-90.0, 180.0, True),
  (95.0, 13.4, False),
  (52.5, -181.0, False),
  (float("nan"), 13.4, False),
  (52.5, float("inf"), False),
])
def test_is_valid_coordinate(lat, lon, expected):
  assert is_valid_coordinate(lat, lon) is expected


def test_distance_between():
  meters = distance_between(Coordinate(52.0, 13.0), Coordinate(52.001, 13.0))
  assert 100 < meters < 120


class TestLocationTracker:

  def _tracker(self):
    tracker = LocationTracker()
    tracker.request_permission(True)
    assert tracker.start_tracking()
    return tracker

  def test_accumulates_distance(self):
    tracker = self._tracker()
    assert not tracker.update(52.0, 13.0)
    assert tracker.update(52.001, 13.0)
    assert tracker.update(52.002, 13.0)
    assert 200 < tracker.distance_meters < 240
    assert len(tracker.route_coordinates) == 3

  def test_rejects_jump_but_keeps_point(self):
    tracker = self._tracker()
    tracker.update(52.0, 13.0)
    assert not tracker.update(52.01, 13.0)

    assert tracker.distance_meters == 0
    assert tracker.rejected_samples == 1
    assert tracker.current_location == Coordinate(52.01, 13.0)
    assert len(tracker.route_coordinates) == 2

    # Next delta is measured from the point after the jump
    assert tracker.update(52.011, 13.0)
    assert 100 < tracker.distance_meters < 120

  def test_invalid_accuracy_ignored(self):
    tracker = self._tracker()
    tracker.update(52.0, 13.0)
    tracker.update(53.0, 13.0, horizontal_accuracy=-1)
    assert tracker.route_coordinates == [Coordinate(52.0, 13.0)]

  def test_impossible_coordinates_ignored(self):
    tracker = self._tracker()
    tracker.update(52.5, 13.4)
    assert not tracker.update(95.0, 13.4)
    assert not tracker.update(float("nan"), 13.4)
    assert tracker.route_coordinates == [Coordinate(52.5, 13.4)]
    assert tracker.distance_meters == 0
    assert tracker.rejected_samples == 0

  def test_updates_ignored_when_not_tracking(self):
    tracker = LocationTracker()
    tracker.update(52.0, 13.0)
    assert tracker.route_coordinates == []

  def test_stop_tracking(self):
    tracker = self._tracker()
    tracker.update(52.0, 13.0)
    tracker.stop_tracking()
    tracker.update(52.001, 13.0)
    assert not tracker.is_tracking
    assert len(tracker.route_coordinates) == 1

  def test_start_resets(self):
    tracker = self._tracker()
    tracker.replay([Coordinate(52.0, 13.0), Coordinate(52.001, 13.0)])
    tracker.start_tracking()
    assert tracker.distance_meters == 0
    assert tracker.route_coordinates == []

  def test_denied_permission(self):
    tracker = LocationTracker()
    assert tracker.request_permission(False) == AuthorizationStatus.DENIED
    assert not tracker.start_tracking()
    assert not tracker.is_tracking

  def test_replay(self):
    tracker = self._tracker()
    distance = tracker.replay([
      Coordinate(52.0, 13.0),
      Coordinate(52.001, 13.0),
      Coordinate(60.0, 13.0),
      Coordinate(60.001, 13.0),
    ])
    assert 200 < distance < 240
    assert tracker.rejected_samples == 1
