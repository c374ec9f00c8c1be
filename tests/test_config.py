import json
import os

from i18n_keys.insertion_formatter import QuoteStyle
from i18n_keys.key_lookup import LookupSettings
from utils.config import ConfigManager
from utils.project_detector import ProjectDetector, default_project_name

from conftest import write_file


class TestConfigManager:

    def test_builtin_defaults(self, tmp_path):
        config = ConfigManager(tmp_path)
        assert config.get("lookup.locales_dir") == "config/locales"
        assert config.get("lookup.separator") == ":  "
        assert config.get("lookup.quote_style") == "single"

    def test_missing_key_returns_default(self, tmp_path):
        config = ConfigManager(tmp_path)
        assert config.get("lookup.missing", "fallback") == "fallback"
        assert config.get("lookup.locales_dir.deeper", "fallback") == "fallback"

    def test_user_config_overrides_default_config(self, tmp_path):
        write_file(tmp_path / "default_config.json", json.dumps({"lookup": {"namespace": "Translations"}}))
        write_file(tmp_path / "user_config.json", json.dumps({"lookup": {"quote_style": "double"}}))
        config = ConfigManager(tmp_path)
        assert config.get("lookup.namespace") == "Translations"
        assert config.get("lookup.quote_style") == "double"
        assert config.get("lookup.locales_dir") == "config/locales"

    def test_invalid_json_ignored(self, tmp_path):
        write_file(tmp_path / "user_config.json", "{broken")
        assert ConfigManager(tmp_path).get("lookup.namespace") == "I18n"

    def test_set_persists_user_config(self, tmp_path):
        config = ConfigManager(tmp_path)
        assert config.set("lookup.quote_style", "double") is True
        assert config.get("lookup.quote_style") == "double"
        with open(tmp_path / "user_config.json", encoding="utf-8") as f:
            assert json.load(f) == {"lookup": {"quote_style": "double"}}
        assert ConfigManager(tmp_path).get("lookup.quote_style") == "double"


class TestLookupSettingsFromConfig:

    def test_values_from_config(self, tmp_path):
        write_file(tmp_path / "user_config.json", json.dumps({
            "lookup": {"locales_dir": "locales", "quote_style": "double", "separator": " | "}
        }))
        settings = LookupSettings.from_config(ConfigManager(tmp_path))
        assert settings.locales_dir == "locales"
        assert settings.quote_style == QuoteStyle.DOUBLE
        assert settings.separator == " | "
        assert settings.namespace == "I18n"

    def test_overrides(self, tmp_path):
        settings = LookupSettings.from_config(ConfigManager(tmp_path), namespace="Translations")
        assert settings.namespace == "Translations"


class TestProjectDetector:

    def test_finds_gemfile_above_file(self, rails_project):
        view = os.path.join(rails_project, "app", "views", "users", "show.html.erb")
        assert ProjectDetector.find_project_root(view) == os.path.abspath(rails_project)

    def test_custom_markers(self, tmp_path):
        write_file(tmp_path / "project" / "marker.txt", "")
        nested = tmp_path / "project" / "a" / "b"
        nested.mkdir(parents=True)
        assert ProjectDetector.find_project_root(str(nested), ["marker.txt"]) == str(tmp_path / "project")

    def test_no_marker_uses_directory_of_path(self, tmp_path):
        path = tmp_path / "loose" / "file.rb"
        write_file(path, "")
        assert ProjectDetector.find_project_root(str(path), ["no-such-marker-xyz"]) == str(tmp_path / "loose")

    def test_is_rails_project(self, tmp_path):
        for indicator in ("config/locales/", "app/views/", "app/models/"):
            (tmp_path / indicator).mkdir(parents=True)
        assert ProjectDetector.is_rails_project(str(tmp_path)) is True

    def test_not_rails_project(self, tmp_path):
        assert ProjectDetector.is_rails_project(str(tmp_path)) is False

    def test_default_project_name_is_absolute_root(self, tmp_path):
        assert default_project_name(str(tmp_path)) == os.path.abspath(str(tmp_path))
