"""
Database schema definitions for gantz application.

Four collections: photos, memos, memo_comments and people.
"""

PHOTOS_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS photos (
    id TEXT PRIMARY KEY,
    image_url TEXT NOT NULL,
    caption TEXT,
    taken_at TIMESTAMP,
    created_at TIMESTAMP NOT NULL
);
"""

MEMOS_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS memos (
    id TEXT PRIMARY KEY,
    created_at TIMESTAMP NOT NULL,
    title TEXT NOT NULL,
    body TEXT NOT NULL
);
"""

MEMO_COMMENTS_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS memo_comments (
    id TEXT PRIMARY KEY,
    created_at TIMESTAMP NOT NULL,
    memo_id TEXT NOT NULL,
    nickname TEXT,
    body TEXT NOT NULL
);
"""

PEOPLE_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS people (
    id TEXT PRIMARY KEY,
    created_at TIMESTAMP NOT NULL,
    name TEXT NOT NULL,
    mbti TEXT,
    bio TEXT,
    avatar_url TEXT,
    extras TEXT NOT NULL DEFAULT '[]'
);
"""

TABLE_SCHEMAS = {
    "photos": PHOTOS_TABLE_SCHEMA,
    "memos": MEMOS_TABLE_SCHEMA,
    "memo_comments": MEMO_COMMENTS_TABLE_SCHEMA,
    "people": PEOPLE_TABLE_SCHEMA,
}

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_photos_created_at ON photos(created_at);",
    "CREATE INDEX IF NOT EXISTS idx_memos_created_at ON memos(created_at);",
    "CREATE INDEX IF NOT EXISTS idx_memo_comments_memo ON memo_comments(memo_id, created_at);",
    "CREATE INDEX IF NOT EXISTS idx_people_created_at ON people(created_at);",
]

REQUIRED_COLUMNS = {
    "photos": {"id", "image_url", "caption", "taken_at", "created_at"},
    "memos": {"id", "created_at", "title", "body"},
    "memo_comments": {"id", "created_at", "memo_id", "nickname", "body"},
    "people": {"id", "created_at", "name", "mbti", "bio", "avatar_url", "extras"},
}


def get_schema_statements() -> list[str]:
    """
    Get all database schema creation statements.

    Returns:
        List of SQL statements to create tables and indexes
    """
    return list(TABLE_SCHEMAS.values()) + INDEXES
