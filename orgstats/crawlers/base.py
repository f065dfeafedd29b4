"""Base ingestion stage with common functionality"""

from typing import Any, Dict, List, Sequence
import logging

from sqlalchemy.dialects.sqlite import insert as sqlite_insert


class BaseStage:
    """
    Base ingestion stage

    Stages walk one GitHub list endpoint page by page and insert rows that
    are not stored yet. Each page is committed once written, so a failure
    keeps earlier pages and loses only the page in flight.
    """

    def __init__(self, github_client: Any):
        self._github_client = github_client
        self.logger = logging.getLogger(self.__class__.__name__)

    def log_start(self, target: str):
        """Log stage start"""
        self.logger.info(f"Starting {self.__class__.__name__} for {target}")

    def log_end(self, target: str, stats: Dict[str, int]):
        """Log stage end with counts"""
        self.logger.info(
            f"Finished {self.__class__.__name__} for {target}: "
            f"{stats['input']} records, {stats['created']} new"
        )

    @staticmethod
    def empty_stats() -> Dict[str, int]:
        return {"input": 0, "created": 0, "pages": 0}

    @staticmethod
    def insert_if_absent(db: Any, model: Any, rows: List[Dict[str, Any]], index_elements: Sequence[str]) -> int:
        """
        Insert rows, ignoring those whose natural key already exists

        Args:
            db: SQLAlchemy session
            model: Mapped model class
            rows: Column dictionaries
            index_elements: Columns of the unique natural key

        Returns:
            Number of rows actually inserted
        """
        if not rows:
            return 0

        statement = sqlite_insert(model).values(rows)
        statement = statement.on_conflict_do_nothing(index_elements=list(index_elements))
        result = db.execute(statement)
        return max(result.rowcount or 0, 0)
