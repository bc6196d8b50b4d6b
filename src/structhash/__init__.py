from __future__ import annotations

from .access import MappingView, SequenceView
from .collector import ErrorCollector, ErrorKind, Violation, format_path
from .config import Settings, load_settings
from .errors import ConfigError, SchemaDefinitionError, StructHashError
from .normalize import TOO_DEEP, canonical_key, normalize
from .report import ValidationReport
from .schema import Schema, SchemaBuilder, SchemaNode, define_schema
from .structured import StructuredHash, Validatable, check, validate_all
from .validator import CheckContext, validate

__version__ = "0.1.0"
