import os
import textwrap

import pytest

from i18n_keys.key_lookup import KeyLookup, LookupSettings
from i18n_keys.project_cache import MemoryCacheStore, ProjectCache
from utils.logging_setup import configure_logging


def write_file(path, content):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(textwrap.dedent(content).lstrip("\n"))
    return str(path)


@pytest.fixture
def rails_project(tmp_path):
    """A small Rails project with nested and flat locale files."""
    root = tmp_path / "shop"
    write_file(root / "Gemfile", "source 'https://rubygems.org'\n")
    write_file(root / "config" / "locales" / "en" / "users.yml", """
        en:
          users:
            show:
              title: "Title"
              welcome: "Welcome, %{user_name}!"
            index:
              heading: "All users"
    """)
    write_file(root / "config" / "locales" / "en" / "admin.yml", """
        en:
          admin:
            dashboard: "Dashboard"
    """)
    write_file(root / "config" / "locales" / "de.yml", """
        de:
          admin:
            dashboard: "Übersicht"
    """)
    write_file(root / "app" / "views" / "users" / "show.html.erb", "<h1></h1>\n")
    write_file(root / "app" / "controllers" / "users_controller.rb", "class UsersController\nend\n")
    return str(root)


@pytest.fixture
def memory_store():
    return MemoryCacheStore()


@pytest.fixture
def key_lookup(memory_store):
    settings = LookupSettings()
    return KeyLookup(settings, ProjectCache(memory_store, separator=settings.separator))


@pytest.fixture(autouse=True)
def log_handler():
    """Bind the log handler to this test's stderr."""
    configure_logging()
