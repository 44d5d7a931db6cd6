"""
Base store class for persisted app state
"""
import json
from typing import Any, Optional

from storage import KeyValueStore, get_storage


class BaseStore:
  """Base class for stores backed by the key-value storage"""

  def __init__(self, storage: Optional[KeyValueStore] = None):
    self.storage = storage or get_storage()

  def load_json(self, key: str, default: Any = None) -> Any:
    """Load a JSON value; missing or corrupt data falls back to default"""
    try:
      value = self.storage.get_json(key)
    except json.JSONDecodeError as e:
      print(f"  ⚠️ Could not read {key}: {e}")
      return default
    return default if value is None else value

  def save_json(self, key: str, value: Any):
    self.storage.set_json(key, value)

  def remove(self, key: str):
    self.storage.remove(key)

  @staticmethod
  def clean_text(value: Optional[str]) -> Optional[str]:
    """Trim whitespace; blank text becomes None"""
    text = (value or "").strip()
    return text or None
