"""
Key-Value Storage
v1.0.0

Local persistence for WalkyTrails. Every store saves its state as one
JSON blob under a named key (see config.STORAGE_KEYS), so the layer
underneath only needs get / set / remove.

Design Principles:
- One table, one row per key
- Each write is its own transaction
- Callers decide what a missing or corrupt value means
"""
import sqlite3
import json
from typing import Optional, Any, List
from contextlib import contextmanager

from config import DB_PATH
from schema import get_current_time, format_timestamp


class KeyValueStore:
  """SQLite-backed key-value store holding JSON text"""

  def __init__(self, db_path: str = DB_PATH):
    self.db_path = db_path
    self.init_database()

  # ============================================
  # Database Connection Management
  # ============================================

  @contextmanager
  def _get_connection(self):
    """Get database connection with automatic cleanup"""
    conn = sqlite3.connect(self.db_path)
    conn.row_factory = sqlite3.Row
    try:
      yield conn
      conn.commit()
    except Exception:
      conn.rollback()
      raise
    finally:
      conn.close()

  def init_database(self):
    """Initialize database schema"""
    with self._get_connection() as conn:
      cursor = conn.cursor()
      cursor.execute("""
        CREATE TABLE IF NOT EXISTS kv_store (
          key TEXT PRIMARY KEY,
          value TEXT NOT NULL,
          updated_at TEXT NOT NULL
        )
      """)

  # ============================================
  # Raw Access
  # ============================================

  def get(self, key: str) -> Optional[str]:
    """Get the raw text stored under key"""
    with self._get_connection() as conn:
      cursor = conn.cursor()
      cursor.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
      row = cursor.fetchone()
      return row['value'] if row else None

  def set(self, key: str, value: str):
    """Store raw text under key, replacing any previous value"""
    with self._get_connection() as conn:
      cursor = conn.cursor()
      cursor.execute("""
        INSERT OR REPLACE INTO kv_store (key, value, updated_at)
        VALUES (?, ?, ?)
      """, (key, value, format_timestamp(get_current_time())))

  def remove(self, key: str):
    with self._get_connection() as conn:
      cursor = conn.cursor()
      cursor.execute("DELETE FROM kv_store WHERE key = ?", (key,))

  def contains(self, key: str) -> bool:
    with self._get_connection() as conn:
      cursor = conn.cursor()
      cursor.execute("SELECT 1 FROM kv_store WHERE key = ?", (key,))
      return cursor.fetchone() is not None

  def keys(self) -> List[str]:
    with self._get_connection() as conn:
      cursor = conn.cursor()
      cursor.execute("SELECT key FROM kv_store ORDER BY key")
      return [row['key'] for row in cursor.fetchall()]

  # ============================================
  # JSON Helpers
  # ============================================

  def get_json(self, key: str) -> Optional[Any]:
    """
    Get the decoded JSON value under key.
    Raises json.JSONDecodeError if the stored text is corrupt.
    """
    raw = self.get(key)
    if raw is None:
      return None
    return json.loads(raw)

  def set_json(self, key: str, value: Any):
    self.set(key, json.dumps(value))

  def get_bool(self, key: str) -> bool:
    """Missing or unreadable flags read as False"""
    try:
      return bool(self.get_json(key))
    except json.JSONDecodeError:
      return False

  def set_bool(self, key: str, value: bool):
    self.set_json(key, bool(value))


# Create a default instance for easy importing
_default_storage: Optional[KeyValueStore] = None

def get_storage() -> KeyValueStore:
  """Get the default KeyValueStore instance"""
  global _default_storage
  if _default_storage is None:
    _default_storage = KeyValueStore()
  return _default_storage
