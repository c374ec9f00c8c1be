import json
import os
import shutil
from pathlib import Path

from utils.logging_setup import get_logger

logger = get_logger("app_info_cache")


class AppInfoCache:
    """Durable JSON store for state that should survive between runs.

    The file keeps an "info" mapping of arbitrary JSON values. Each successful
    load of the main file rotates it into numbered backups, and a corrupt main
    file falls back to the most recent readable backup.
    """
    DEFAULT_JSON_LOC = str(Path.home() / ".i18n_key_lookup" / "app_info_cache.json")
    INFO_KEY = "info"
    NUM_BACKUPS = 4  # Number of backup files to maintain

    def __init__(self, json_path=None):
        self.json_path = json_path or AppInfoCache.DEFAULT_JSON_LOC
        self._cache = {AppInfoCache.INFO_KEY: {}}
        self.load()

    def wipe_instance(self):
        self._cache = {AppInfoCache.INFO_KEY: {}}

    def store(self):
        try:
            os.makedirs(os.path.dirname(os.path.abspath(self.json_path)), exist_ok=True)
            with open(self.json_path, "w", encoding="utf-8") as f:
                json.dump(self._cache, f, ensure_ascii=False, indent=2)
        except Exception as e:
            logger.error(f"Error storing cache: {e}")
            raise e

    def load(self):
        cache_paths = [self.json_path] + self._get_backup_paths()
        if not any(os.path.exists(path) for path in cache_paths):
            logger.debug(f"No cache file found at {self.json_path}, starting with an empty cache")
            return

        for path in cache_paths:
            if not os.path.exists(path):
                continue
            try:
                with open(path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError("cache root is not an object")
                self._cache = data
                if path == self.json_path:
                    message = f"Loaded cache from {self.json_path}"
                    rotated_count = self._rotate_backups()
                    if rotated_count > 0:
                        message += f", rotated {rotated_count} backups"
                    logger.debug(message)
                else:
                    logger.warning(f"Loaded cache from backup: {path}")
                return
            except (OSError, ValueError) as e:
                logger.error(f"Failed to load cache from {path}: {e}")
                continue
        # If we get here, all attempts failed (but at least one file existed)
        logger.error(f"Failed to load cache from all locations: {cache_paths}, starting with an empty cache")

    def set(self, key, value):
        if AppInfoCache.INFO_KEY not in self._cache:
            self._cache[AppInfoCache.INFO_KEY] = {}
        self._cache[AppInfoCache.INFO_KEY][key] = value

    def get(self, key, default_val=None):
        if AppInfoCache.INFO_KEY not in self._cache or key not in self._cache[AppInfoCache.INFO_KEY]:
            return default_val
        return self._cache[AppInfoCache.INFO_KEY][key]

    def _get_backup_paths(self):
        """Get list of backup file paths in order of preference"""
        backup_paths = []
        for i in range(1, self.NUM_BACKUPS + 1):
            index = "" if i == 1 else f"{i}"
            backup_paths.append(f"{self.json_path}.bak{index}")
        return backup_paths

    def _rotate_backups(self):
        """Rotate backup files: move each backup to the next position, oldest gets overwritten"""
        backup_paths = self._get_backup_paths()
        rotated_count = 0

        if os.path.exists(backup_paths[-1]):
            os.remove(backup_paths[-1])

        for i in range(len(backup_paths) - 1, 0, -1):
            if os.path.exists(backup_paths[i - 1]):
                shutil.copy2(backup_paths[i - 1], backup_paths[i])
                rotated_count += 1

        shutil.copy2(self.json_path, backup_paths[0])
        return rotated_count
