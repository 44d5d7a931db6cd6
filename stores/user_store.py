"""
User Profile Store
v1.0.0

Persists the user profile (name, photo) and whether onboarding is done.
"""
from typing import Optional

from config import STORAGE_KEYS
from schema import UserProfile
from storage import KeyValueStore
from .base_store import BaseStore


class UserProfileStore(BaseStore):

  def __init__(self, storage: Optional[KeyValueStore] = None):
    super().__init__(storage)
    self.user: UserProfile = self._load_user()
    self.has_completed_onboarding: bool = self._load_onboarding()

  def _load_user(self) -> UserProfile:
    data = self.load_json(STORAGE_KEYS["user_profile"])
    if not isinstance(data, dict):
      return UserProfile()
    try:
      return UserProfile.from_dict(data)
    except (TypeError, ValueError) as e:
      print(f"  ⚠️ Could not read user profile: {e}")
      return UserProfile()

  def _load_onboarding(self) -> bool:
    """
    Onboarding counts as done if it was completed explicitly, or if the
    user already set up dogs (legacy single dog or the dogs array).
    """
    if self.storage.get_bool(STORAGE_KEYS["onboarding_completed"]):
      return True
    if self.storage.contains(STORAGE_KEYS["legacy_dog"]):
      return True
    dogs = self.load_json(STORAGE_KEYS["dogs"], default=[])
    return isinstance(dogs, list) and len(dogs) > 0

  def _persist(self):
    self.save_json(STORAGE_KEYS["user_profile"], self.user.to_dict())

  def save(self, user: UserProfile):
    self.user = user
    self._persist()

  def update_photo(self, image_data: Optional[bytes]):
    self.user.photo_data = image_data
    self._persist()

  def complete_onboarding(self):
    self.has_completed_onboarding = True
    self.storage.set_bool(STORAGE_KEYS["onboarding_completed"], True)
