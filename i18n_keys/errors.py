class I18nKeyLookupError(Exception):
    """Base class for errors raised while looking up translation keys."""


class TranslationParseError(I18nKeyLookupError):
    """A translation file could not be parsed as a YAML document."""

    def __init__(self, file_path, reason):
        self.file_path = file_path
        self.reason = reason
        super().__init__(f"Could not parse translation file {file_path}: {reason}")


class RefreshCancelled(I18nKeyLookupError):
    """A full refresh was interrupted before it finished."""


class CacheStoreError(I18nKeyLookupError):
    """The durable store could not be written."""

    def __init__(self, store_path, reason):
        self.store_path = store_path
        self.reason = reason
        super().__init__(f"Could not write key cache {store_path}: {reason}")
