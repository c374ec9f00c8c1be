import os
from typing import Iterable, Optional

from utils.logging_setup import get_logger

logger = get_logger("project_detector")

DEFAULT_ROOT_MARKERS = ("Gemfile", "config/application.rb", ".git")


class ProjectDetector:
    """Locates the root of the project a file belongs to."""

    @staticmethod
    def find_project_root(path: str, markers: Iterable[str] = DEFAULT_ROOT_MARKERS) -> str:
        """Walk up from a path to the first directory holding a root marker.

        Args:
            path: A file or directory inside the project
            markers: Files or directories, relative to a candidate root, that
                identify the project root

        Returns:
            str: Absolute project root. When no marker is found, the directory
            of the path itself.
        """
        markers = list(markers)
        start = os.path.abspath(path)
        if not os.path.isdir(start):
            start = os.path.dirname(start)

        current = start
        while True:
            for marker in markers:
                if os.path.exists(os.path.join(current, marker)):
                    logger.debug(f"Found project root marker {marker} in {current}")
                    return current
            parent = os.path.dirname(current)
            if parent == current:
                break
            current = parent

        logger.debug(f"No project root marker found above {path}, using {start}")
        return start

    @staticmethod
    def is_rails_project(project_path: str) -> bool:
        """Check if a directory looks like a Ruby on Rails project.

        Args:
            project_path: Path to the project directory

        Returns:
            bool: True if at least three Rails indicators are present
        """
        rails_indicators = [
            "config/application.rb",
            "config/routes.rb",
            "app/controllers/",
            "app/models/",
            "app/views/",
            "db/migrate/",
            "config/environments/",
            "config/initializers/",
            "config/locales/",
        ]

        found_indicators = 0
        for indicator in rails_indicators:
            if os.path.exists(os.path.join(project_path, indicator)):
                found_indicators += 1

        if found_indicators >= 3:
            logger.debug(f"Detected Rails project with {found_indicators} indicators")
            return True
        return False


def default_project_name(project_root: Optional[str]) -> str:
    """Project identifier used as the cache key: the absolute root path."""
    return os.path.abspath(project_root) if project_root else ""
