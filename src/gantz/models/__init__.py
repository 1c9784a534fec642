"""
Models module for gantz application.

- Photo, Memo, Comment, Person: records of the four collections
- PersonDraft and extras helpers for the people editor
- DatabaseManager: DuckDB connection and schema management
"""

from .database import DatabaseManager, create_database, get_database_manager
from .memo import ANONYMOUS_NICKNAME, Comment, Memo
from .person import ExtraField, Person, PersonDraft, extras_to_rows, normalize_extras, rows_to_extras
from .photo import Photo
from .schema import get_schema_statements

__all__ = [
    "ANONYMOUS_NICKNAME",
    "Comment",
    "DatabaseManager",
    "ExtraField",
    "Memo",
    "Person",
    "PersonDraft",
    "Photo",
    "create_database",
    "extras_to_rows",
    "get_database_manager",
    "get_schema_statements",
    "normalize_extras",
    "rows_to_extras",
]
