import json
import os

from utils.app_info_cache import AppInfoCache


class TestAppInfoCache:

    def test_missing_file_starts_empty(self, tmp_path):
        cache = AppInfoCache(str(tmp_path / "cache.json"))
        assert cache.get("anything", "default") == "default"

    def test_store_and_load(self, tmp_path):
        json_path = str(tmp_path / "nested" / "cache.json")
        cache = AppInfoCache(json_path)
        cache.set("project_keys", {"shop": []})
        cache.store()

        reloaded = AppInfoCache(json_path)
        assert reloaded.get("project_keys") == {"shop": []}

    def test_load_rotates_backup(self, tmp_path):
        json_path = str(tmp_path / "cache.json")
        cache = AppInfoCache(json_path)
        cache.set("value", 1)
        cache.store()

        AppInfoCache(json_path)
        assert os.path.exists(json_path + ".bak")

    def test_corrupt_file_falls_back_to_backup(self, tmp_path):
        json_path = str(tmp_path / "cache.json")
        with open(json_path + ".bak", "w", encoding="utf-8") as f:
            json.dump({"info": {"value": "from backup"}}, f)
        with open(json_path, "w", encoding="utf-8") as f:
            f.write("{not json")

        cache = AppInfoCache(json_path)
        assert cache.get("value") == "from backup"

    def test_all_files_corrupt_starts_empty(self, tmp_path):
        json_path = str(tmp_path / "cache.json")
        with open(json_path, "w", encoding="utf-8") as f:
            f.write("[]")
        cache = AppInfoCache(json_path)
        assert cache.get("value") is None

    def test_wipe_instance(self, tmp_path):
        cache = AppInfoCache(str(tmp_path / "cache.json"))
        cache.set("value", 1)
        cache.wipe_instance()
        assert cache.get("value") is None
