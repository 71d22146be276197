"""Position snapshot storages."""
from .json_file import JsonFileStorage

__all__ = ["JsonFileStorage"]
