from uuid import UUID

import structlog

from sbomdiff.core.repository import IngestionRepository
from sbomdiff.core.repository import SnapshotRepository
from sbomdiff.core.validation import parse_snapshot_id

logger = structlog.get_logger('db_service')


class DbService:
    """Schema management and read-only listings backing the `db` commands."""

    def init_schema(self, repo_db: IngestionRepository, reset: bool = False) -> None:
        if reset:
            logger.warning('Dropping and recreating schema', database=repo_db.config.database)
            repo_db.reset_schema()
        else:
            repo_db.ensure_schema()
        logger.info('Schema ready', database=repo_db.config.database, tables=list(repo_db.config.tables))

    def get_db_stats(self, query_repo: SnapshotRepository) -> dict[str, int]:
        return query_repo.get_stats()

    def list_project_snapshots(
        self, query_repo: SnapshotRepository, project_id: str | UUID, limit: int = 50,
    ) -> list[dict]:
        project_uuid = parse_snapshot_id(project_id, 'project')
        return list(query_repo.list_snapshots(project_uuid, limit=limit))
