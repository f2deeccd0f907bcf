"""Statement executors: where generated SQL goes."""

from typing import Any, List, TextIO

from shared.logger import get_logger

from .exceptions import StatementExecutionError

logger = get_logger(__name__)


class StatementCollector:
    """Keep every executed statement in memory, in order."""

    def __init__(self):
        self.statements: List[str] = []

    def __call__(self, statement: str) -> None:
        self.statements.append(statement)

    def sql(self) -> str:
        """All collected statements as one SQL script."""
        return "\n".join(s.rstrip("\n") for s in self.statements) + ("\n" if self.statements else "")


class StreamExecutor:
    """Write statements to a text stream (a file or stdout)."""

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.count = 0

    def __call__(self, statement: str) -> None:
        self.stream.write(statement.rstrip("\n") + "\n")
        self.count += 1


class ConnectionExecutor:
    """
    Execute statements on a DB-API 2.0 connection (e.g. PyMySQL).

    The caller owns the connection; nothing is committed here unless
    ``autocommit`` is set, in which case each statement is committed.
    """

    def __init__(self, connection: Any, autocommit: bool = False):
        self.connection = connection
        self.autocommit = autocommit

    def __call__(self, statement: str) -> None:
        cursor = self.connection.cursor()
        try:
            cursor.execute(statement)
            if self.autocommit:
                self.connection.commit()
        except Exception as e:
            logger.error(f"Statement failed: {e}")
            raise StatementExecutionError(statement, str(e)) from e
        finally:
            cursor.close()
