from .file_store import JsonFileBackend

__all__ = ["JsonFileBackend"]
