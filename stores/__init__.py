"""
Stores for WalkyTrails
"""
from .walk_store import WalkStore, WalkState
from .dog_store import DogProfileStore
from .user_store import UserProfileStore
from .settings_store import SettingsStore

__all__ = [
  'WalkStore',
  'WalkState',
  'DogProfileStore',
  'UserProfileStore',
  'SettingsStore',
]
