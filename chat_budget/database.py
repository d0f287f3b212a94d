"""
SQLite database layer for conversation history.
The stored history is the untrimmed, un-normalized record shown to the user;
trimming always happens on copies at request time.
"""

import sqlite3
from typing import List, Optional, Dict, Any
from datetime import datetime
from pathlib import Path
from contextlib import contextmanager

from .schemas import Message


class Database:
    """
    SQLite database manager for conversation history.
    """

    def __init__(self, db_path: str = "data/conversation.db"):
        """Initialize database connection and create tables."""
        self.db_path = db_path

        # Ensure directory exists
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self._create_tables()

    @contextmanager
    def _get_connection(self):
        """Context manager for database connections."""
        conn = sqlite3.connect(self.db_path, timeout=30.0)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _create_tables(self):
        """Create database tables if they don't exist."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS messages (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    session_id TEXT NOT NULL,
                    role TEXT NOT NULL,
                    content TEXT NOT NULL,
                    timestamp TEXT NOT NULL,
                    token_count INTEGER,
                    created_at TEXT DEFAULT CURRENT_TIMESTAMP
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_messages_session
                ON messages(session_id, timestamp)
            """)

    # ===== Message Operations =====

    def save_message(self, session_id: str, message: Message) -> int:
        """
        Save a message to the database.
        Returns the message ID.
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                INSERT INTO messages (session_id, role, content, timestamp, token_count)
                VALUES (?, ?, ?, ?, ?)
            """, (
                session_id,
                message.role,
                message.content,
                message.timestamp.isoformat(),
                message.token_count
            ))
            return cursor.lastrowid

    def get_messages(self, session_id: str, limit: Optional[int] = None) -> List[Message]:
        """
        Retrieve messages for a session in chronological order.

        Args:
            session_id: Session identifier
            limit: Maximum number of messages to return (oldest first)

        Returns:
            List of Message objects
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()

            query = """
                SELECT role, content, timestamp, token_count
                FROM messages
                WHERE session_id = ?
                ORDER BY timestamp ASC, id ASC
            """
            params: tuple = (session_id,)

            if limit:
                query += " LIMIT ?"
                params += (limit,)

            cursor.execute(query, params)
            rows = cursor.fetchall()

            return [
                Message(
                    role=row["role"],
                    content=row["content"],
                    timestamp=datetime.fromisoformat(row["timestamp"]),
                    token_count=row["token_count"]
                )
                for row in rows
            ]

    # ===== Utility Methods =====

    def clear_session(self, session_id: str):
        """Clear all messages for a session."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM messages WHERE session_id = ?", (session_id,))

    def get_all_session_ids(self) -> List[str]:
        """Get all unique session IDs, most recently started first."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                SELECT session_id
                FROM messages
                GROUP BY session_id
                ORDER BY MIN(timestamp) DESC
            """)
            return [row["session_id"] for row in cursor.fetchall()]

    def get_session_stats(self, session_id: str) -> Dict[str, Any]:
        """Get statistics about a session."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                SELECT COUNT(*) as count, COALESCE(SUM(token_count), 0) as total
                FROM messages
                WHERE session_id = ?
            """, (session_id,))
            row = cursor.fetchone()

            return {
                "message_count": row["count"],
                "total_tokens": row["total"]
            }
