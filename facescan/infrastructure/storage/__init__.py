"""Profile store implementations."""
from .documents import export_people, parse_people
from .json_file import JsonFileProfileStore
from .memory import InMemoryProfileStore

__all__ = ["InMemoryProfileStore", "JsonFileProfileStore", "export_people", "parse_people"]
