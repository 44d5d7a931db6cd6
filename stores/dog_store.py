"""
Dog Profile Store
v2.0.0 - Multi-dog profiles

Persists the user's dogs as an array.
On first load, migrates the legacy single-dog key into the array.
"""
from typing import List, Optional

from config import STORAGE_KEYS
from schema import Dog
from storage import KeyValueStore
from .base_store import BaseStore


class DogProfileStore(BaseStore):
  """The user's dogs, in the order they were added"""

  def __init__(self, storage: Optional[KeyValueStore] = None):
    super().__init__(storage)
    self.dogs: List[Dog] = self._load_dogs()

  def _load_dogs(self) -> List[Dog]:
    # New format: array of dogs
    data = self.load_json(STORAGE_KEYS["dogs"], default=[])
    dogs = []
    if isinstance(data, list):
      for item in data:
        try:
          dogs.append(Dog.from_dict(item))
        except (AttributeError, TypeError, ValueError) as e:
          print(f"  ⚠️ Skipping unreadable dog: {e}")
    if dogs:
      return dogs

    return self._migrate_legacy_dog()

  def _migrate_legacy_dog(self) -> List[Dog]:
    """Move a pre multi-dog profile (single object, no id) into the array"""
    legacy = self.load_json(STORAGE_KEYS["legacy_dog"])
    if not isinstance(legacy, dict):
      return []

    try:
      dog = Dog.from_dict(legacy)
    except (TypeError, ValueError) as e:
      print(f"  ⚠️ Could not migrate legacy dog profile: {e}")
      return []

    if not dog.has_content:
      return []

    self.remove(STORAGE_KEYS["legacy_dog"])
    self.save_json(STORAGE_KEYS["dogs"], [dog.to_dict()])
    print(f"  ✅ Migrated legacy dog profile: {dog.name or dog.breed}")
    return [dog]

  def _persist(self):
    self.save_json(STORAGE_KEYS["dogs"], [dog.to_dict() for dog in self.dogs])

  # ============================================
  # Queries
  # ============================================

  def dog(self, dog_id: str) -> Optional[Dog]:
    for dog in self.dogs:
      if dog.id == dog_id:
        return dog
    return None

  @property
  def first_dog(self) -> Optional[Dog]:
    return self.dogs[0] if self.dogs else None

  @property
  def has_any_dog(self) -> bool:
    return any(dog.has_content for dog in self.dogs)

  # ============================================
  # Mutations
  # ============================================

  def add_dog(self, dog: Dog):
    self.dogs.append(dog)
    self._persist()

  def update_dog(self, dog: Dog) -> bool:
    for idx, existing in enumerate(self.dogs):
      if existing.id == dog.id:
        self.dogs[idx] = dog
        self._persist()
        return True
    return False

  def delete_dog(self, dog_id: str) -> bool:
    remaining = [dog for dog in self.dogs if dog.id != dog_id]
    if len(remaining) == len(self.dogs):
      return False
    self.dogs = remaining
    self._persist()
    return True

  def update_photo(self, dog_id: str, image_data: Optional[bytes]) -> bool:
    dog = self.dog(dog_id)
    if dog is None:
      return False
    dog.photo_data = image_data
    self._persist()
    return True

  def replace_dogs(self, dogs: List[Dog]):
    """Replace all dogs, e.g. after restoring a backup"""
    self.dogs = list(dogs)
    self._persist()
