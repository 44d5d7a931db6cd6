"""
Profile Schema
v2.0.0 - Multi-dog profiles

Dogs belong to the user; the user profile is a singleton.
Photos are raw JPEG bytes, stored base64 in JSON.
"""
import base64
from dataclasses import dataclass, field
from typing import Optional, Dict

from .walk_schema import new_id


def encode_photo(data: Optional[bytes]) -> Optional[str]:
  if data is None:
    return None
  return base64.b64encode(data).decode("ascii")


def decode_photo(value: Optional[str]) -> Optional[bytes]:
  if not value:
    return None
  return base64.b64decode(value)


@dataclass
class Dog:
  """One of the user's dogs"""
  id: str = field(default_factory=new_id)
  name: str = ""
  breed: str = ""
  photo_data: Optional[bytes] = None

  @property
  def has_content(self) -> bool:
    """True when anything was actually filled in"""
    return bool(self.name.strip() or self.breed.strip() or self.photo_data is not None)

  def to_dict(self) -> Dict:
    result = {
      'id': self.id,
      'name': self.name,
      'breed': self.breed,
    }
    if self.photo_data is not None:
      result['photoData'] = encode_photo(self.photo_data)
    return result

  @classmethod
  def from_dict(cls, data: Dict) -> "Dog":
    """Create Dog from dictionary. Legacy dogs had no id, so one is assigned."""
    if data is None:
      raise ValueError("Cannot create Dog from empty data")

    return cls(
      id=data.get('id') or new_id(),
      name=data.get('name') or "",
      breed=data.get('breed') or "",
      photo_data=decode_photo(data.get('photoData')),
    )


@dataclass
class UserProfile:
  """The human on the walk"""
  name: str = ""
  photo_data: Optional[bytes] = None

  @property
  def has_content(self) -> bool:
    return bool(self.name.strip() or self.photo_data is not None)

  def to_dict(self) -> Dict:
    result = {'name': self.name}
    if self.photo_data is not None:
      result['photoData'] = encode_photo(self.photo_data)
    return result

  @classmethod
  def from_dict(cls, data: Dict) -> "UserProfile":
    if not data:
      return cls()
    return cls(
      name=data.get('name') or "",
      photo_data=decode_photo(data.get('photoData')),
    )
