from __future__ import annotations
from typing import Union


class StructHashError(Exception):
    def __init__(self, message: str, path: Union[str, tuple[Union[str, int], ...], None] = None):
        super().__init__(message)
        self.path = path


class SchemaDefinitionError(StructHashError):
    pass


class ConfigError(StructHashError):
    pass
