import argparse
import sys

from i18n_keys.errors import I18nKeyLookupError, RefreshCancelled
from i18n_keys.insertion_formatter import insert_at
from i18n_keys.key_lookup import KeyLookup, LookupSettings
from i18n_keys.project_cache import AppInfoCacheStore, ProjectCache
from utils.app_info_cache import AppInfoCache
from utils.config import ConfigManager
from utils.logging_setup import configure_logging, get_logger

logger = get_logger("app")

EXIT_CANCELLED = 130


def build_key_lookup(config: ConfigManager, cache_path=None) -> KeyLookup:
    settings = LookupSettings.from_config(config)
    app_info_cache = AppInfoCache(cache_path or config.get("cache.path"))
    cache = ProjectCache(AppInfoCacheStore(app_info_cache), separator=settings.separator)
    return KeyLookup(settings, cache)


def _read_text(file_path):
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        return ""


def _write_insertion(key_lookup, display, file_path, offset, dry_run=False):
    text = _read_text(file_path)
    offset = len(text) if offset is None else offset
    insertion = key_lookup.format(display, file_path)
    new_text, cursor = insert_at(text, offset, insertion)
    if not dry_run:
        with open(file_path, "w", encoding="utf-8") as f:
            f.write(new_text)
        logger.info(f"Inserted {insertion.text} into {file_path} at offset {offset}")
    print(insertion.text)
    print(f"cursor: {cursor}")
    return 0


def cmd_lookup(key_lookup, args):
    for candidate in key_lookup.candidates(args.path, args.query, force_refresh=args.refresh):
        print(candidate)
    return 0


def cmd_refresh(key_lookup, args):
    entries = key_lookup.refresh(args.path)
    _, project_id = key_lookup.resolve_project(args.path)
    print(f"{len(entries)} keys cached for {project_id}")
    return 0


def cmd_file_saved(key_lookup, args):
    updated = key_lookup.file_saved(args.file)
    return 0 if updated else 1


def cmd_insert(key_lookup, args):
    return _write_insertion(key_lookup, args.key, args.file, args.offset, args.dry_run)


def cmd_pick(key_lookup, args):
    from PyQt6.QtWidgets import QApplication
    from ui.key_picker_dialog import KeyPickerDialog

    qt_app = QApplication.instance() or QApplication(sys.argv[:1])  # must outlive the dialog
    dialog = KeyPickerDialog(key_lookup, args.file, force_refresh=args.refresh)
    selected = []
    dialog.key_selected.connect(selected.append)
    dialog.exec()
    if not selected:
        logger.info("No key selected")
        return 1
    return _write_insertion(key_lookup, selected[0], args.file, args.offset, args.dry_run)


def cmd_clear(key_lookup, args):
    if args.path:
        _, project_id = key_lookup.resolve_project(args.path)
        key_lookup.cache.clear(project_id)
        print(f"Cleared cached keys for {project_id}")
    else:
        key_lookup.cache.clear()
        print("Cleared all cached keys")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog="i18n-key-lookup",
        description="Look up Rails translation keys and insert t(...) calls.",
    )
    parser.add_argument("--config-dir", default=None, help="Directory holding default_config.json and user_config.json")
    parser.add_argument("--cache-path", default=None, help="Location of the persistent key cache (JSON)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    lookup = subparsers.add_parser("lookup", help="List translation keys, using the cache when possible")
    lookup.add_argument("path", help="Any file or directory inside the project")
    lookup.add_argument("-q", "--query", default="", help="Whitespace separated terms that must all match")
    lookup.add_argument("--refresh", action="store_true", help="Rescan translation files before listing")
    lookup.set_defaults(func=cmd_lookup)

    refresh = subparsers.add_parser("refresh", help="Rescan all translation files of a project")
    refresh.add_argument("path", help="Any file or directory inside the project")
    refresh.set_defaults(func=cmd_refresh)

    file_saved = subparsers.add_parser("file-saved", help="Update cached keys after a translation file was saved")
    file_saved.add_argument("file", help="Saved file")
    file_saved.set_defaults(func=cmd_file_saved)

    insert = subparsers.add_parser("insert", help="Insert the t(...) call for a key into a file")
    insert.add_argument("file", help="File to insert into")
    insert.add_argument("-k", "--key", required=True, help="Key or rendered entry, e.g. 'users.show.title:  Title'")
    insert.add_argument("-o", "--offset", type=int, default=None, help="Character offset (default: end of file)")
    insert.add_argument("--dry-run", action="store_true", help="Print the snippet without writing the file")
    insert.set_defaults(func=cmd_insert)

    pick = subparsers.add_parser("pick", help="Pick a key in a searchable list and insert it into a file")
    pick.add_argument("file", help="File to insert into")
    pick.add_argument("-o", "--offset", type=int, default=None, help="Character offset (default: end of file)")
    pick.add_argument("--refresh", action="store_true", help="Rescan translation files before showing the list")
    pick.add_argument("--dry-run", action="store_true", help="Print the snippet without writing the file")
    pick.set_defaults(func=cmd_pick)

    clear = subparsers.add_parser("clear", help="Drop cached keys")
    clear.add_argument("path", nargs="?", default=None, help="Project to clear (default: all projects)")
    clear.set_defaults(func=cmd_clear)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    config = ConfigManager(args.config_dir)
    configure_logging("DEBUG" if args.verbose else config.get("logging.level"))

    key_lookup = build_key_lookup(config, args.cache_path)
    try:
        return args.func(key_lookup, args)
    except (RefreshCancelled, KeyboardInterrupt):
        logger.info("Cancelled, cached keys left unchanged")
        return EXIT_CANCELLED
    except I18nKeyLookupError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
