"""
User Settings Manager for the lfsml SDK

Handles local storage of client preferences: the default API URL and the
job polling configuration. Uses SQLite database in ~/.lfsml/user_settings.db
"""

import os
import sqlite3
from typing import Optional, Dict
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

API_URL_ENV_VAR = "LFSML_API_URL"
FALLBACK_API_URL = "http://localhost:8000"
DEFAULT_POLL_INTERVAL = 2.0


class UserSettingsManager:
    """Manages persisted client settings"""

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize the user settings manager

        Args:
            db_path: Optional path of the settings database (defaults to ~/.lfsml/user_settings.db)
        """
        self._init_database(db_path)

    def _init_database(self, db_path: Optional[str]):
        """Initialize SQLite database for user settings"""
        if db_path is None:
            settings_dir = os.path.expanduser("~/.lfsml")
            os.makedirs(settings_dir, exist_ok=True)
            db_path = os.path.join(settings_dir, "user_settings.db")
        else:
            parent = os.path.dirname(db_path)
            if parent:
                os.makedirs(parent, exist_ok=True)

        self.db_path = db_path

        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS user_settings (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    setting_key TEXT NOT NULL UNIQUE,
                    setting_value TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()

    # ============================================
    # API URL
    # ============================================

    def resolve_api_url(self, api_url: Optional[str] = None) -> str:
        """
        Resolve the API URL to use

        Order: explicit argument, LFSML_API_URL environment variable,
        saved default, then http://localhost:8000.
        """
        if api_url:
            return api_url
        env_url = os.environ.get(API_URL_ENV_VAR)
        if env_url:
            return env_url
        saved = self.get_default_api_url()
        if saved:
            return saved
        return FALLBACK_API_URL

    def set_default_api_url(self, api_url: str) -> bool:
        """
        Set the default API URL

        Args:
            api_url: The default API URL

        Returns:
            bool: True if set successfully
        """
        return self._save_setting('default_api_url', api_url)

    def get_default_api_url(self) -> Optional[str]:
        """Get the saved default API URL, or None if not set"""
        return self._get_setting('default_api_url')

    # ============================================
    # POLLING
    # ============================================

    def set_poll_interval(self, seconds: float) -> bool:
        """Persist the training status polling interval"""
        if seconds < 0:
            raise ValueError("Poll interval must be non-negative")
        return self._save_setting('poll_interval', str(seconds))

    def get_poll_interval(self) -> float:
        """Get the polling interval in seconds (2.0 unless overridden)"""
        value = self._get_setting('poll_interval')
        if value is None:
            return DEFAULT_POLL_INTERVAL
        try:
            return float(value)
        except ValueError:
            logger.warning(f"Ignoring invalid poll_interval setting: {value!r}")
            return DEFAULT_POLL_INTERVAL

    # ============================================
    # STORAGE
    # ============================================

    def _save_setting(self, key: str, value: str) -> bool:
        """Save a setting to the database"""
        now = datetime.utcnow().isoformat() + 'Z'
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute("""
                    INSERT INTO user_settings
                    (setting_key, setting_value, created_at, updated_at)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(setting_key) DO UPDATE SET
                        setting_value = excluded.setting_value,
                        updated_at = excluded.updated_at
                """, (key, value, now, now))
                conn.commit()
                return True

        except sqlite3.Error as e:
            logger.error(f"Failed to save setting {key}: {e}")
            return False

    def _get_setting(self, key: str) -> Optional[str]:
        """Get a setting from the database"""
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.execute("""
                    SELECT setting_value FROM user_settings
                    WHERE setting_key = ?
                """, (key,))

                result = cursor.fetchone()
                return result[0] if result else None

        except sqlite3.Error as e:
            logger.error(f"Failed to get setting {key}: {e}")
            return None

    def get_all_settings(self) -> Dict[str, str]:
        """Get all settings"""
        try:
            with sqlite3.connect(self.db_path) as conn:
                cursor = conn.execute("SELECT setting_key, setting_value FROM user_settings")
                return {row[0]: row[1] for row in cursor.fetchall()}

        except sqlite3.Error as e:
            logger.error(f"Failed to get all settings: {e}")
            return {}

    def clear_all_data(self) -> bool:
        """Clear all saved settings"""
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute("DELETE FROM user_settings")
                conn.commit()
                logger.info("All user settings cleared")
                return True

        except sqlite3.Error as e:
            logger.error(f"Failed to clear settings: {e}")
            return False
