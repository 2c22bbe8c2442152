"""Resolve backend paths for configuration, environment files, and log output."""

from pathlib import Path
from typing import Dict


class PathResolver:
    """
    Named locations relative to the backend root.
    Directories are created on first access; files never are.
    """

    # utility -> iconset -> backend
    BACKEND_ROOT = Path(__file__).resolve().parents[2]
    PACKAGE_ROOT = Path(__file__).resolve().parents[1]

    DIRECTORIES: Dict[str, Path] = {
        "config": PACKAGE_ROOT / "config",
        "logs": BACKEND_ROOT / "data" / "logs",
    }
    FILES: Dict[str, Path] = {
        "env": BACKEND_ROOT / ".env",
    }

    @classmethod
    def directory(cls, name: str) -> Path:
        """Return an existing directory for `name`, creating it if needed."""
        if name not in cls.DIRECTORIES:
            raise KeyError(
                f"Unknown directory key: '{name}'. Valid keys: {list(cls.DIRECTORIES)}"
            )
        path = cls.DIRECTORIES[name]
        path.mkdir(parents=True, exist_ok=True)
        return path

    @classmethod
    def file(cls, name: str) -> Path:
        if name not in cls.FILES:
            raise KeyError(f"Unknown file key: '{name}'. Valid keys: {list(cls.FILES)}")
        return cls.FILES[name]


class Finder:
    """Thin wrapper exposing resolved locations to the rest of the backend."""

    def get_directory(self, name: str) -> Path:
        return PathResolver.directory(name)

    def get_file(self, name: str) -> Path:
        """Path of a named file; it may not exist."""
        return PathResolver.file(name)
