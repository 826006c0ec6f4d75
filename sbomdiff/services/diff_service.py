import time
from uuid import UUID

import structlog

from sbomdiff.core.errors import InternalError
from sbomdiff.core.errors import NotFoundError
from sbomdiff.core.errors import SbomDiffError
from sbomdiff.core.repository import SnapshotProvider
from sbomdiff.core.validation import validate_diff_ids
from sbomdiff.engine.assembler import compute_diff
from sbomdiff.models.diff import DiffResult
from sbomdiff.models.sbom import SbomSnapshot

logger = structlog.get_logger('diff_service')


class DiffService:
    """Compares two stored snapshots of the same project."""

    def __init__(self, provider: SnapshotProvider, match_key: str = 'name'):
        self.provider = provider
        self.match_key = match_key

    def diff(self, base_snapshot_id: str | UUID, target_snapshot_id: str | UUID) -> DiffResult:
        """
        Load both snapshots from the provider and compute their diff.

        Raises:
            ValidationError: malformed ids, or base == target
            NotFoundError: a snapshot is missing or the two belong to different projects
            InternalError: the provider failed; no partial result is returned
        """
        base_id, target_id = validate_diff_ids(base_snapshot_id, target_snapshot_id)
        log = logger.bind(base_sbom_id=str(base_id), target_sbom_id=str(target_id))

        base = self._load_snapshot(base_id, 'base')
        target = self._load_snapshot(target_id, 'target')
        if base.project_id != target.project_id:
            log.warning(
                'Snapshot project mismatch',
                base_project=str(base.project_id), target_project=str(target.project_id),
            )
            raise NotFoundError('sbom project mismatch')

        t0 = time.perf_counter()
        base_components = self._fetch('base components', self.provider.get_components, base_id)
        target_components = self._fetch('target components', self.provider.get_components, target_id)
        base_assocs = self._fetch(
            'base vulnerabilities', self.provider.get_vulnerability_associations, base_id,
        )
        target_assocs = self._fetch(
            'target vulnerabilities', self.provider.get_vulnerability_associations, target_id,
        )
        t_fetch = time.perf_counter()

        result = compute_diff(
            base_components, target_components,
            base_assocs, target_assocs,
            match_key=self.match_key,
        )
        log.info(
            'Diff computed',
            added=result.summary.added_count,
            removed=result.summary.removed_count,
            updated=result.summary.updated_count,
            new_vulnerabilities=result.summary.new_vulnerabilities_count,
            fetch=f"{t_fetch - t0:.3f}s",
            compute=f"{time.perf_counter() - t_fetch:.3f}s",
        )
        return result

    def _load_snapshot(self, snapshot_id: UUID, side: str) -> SbomSnapshot:
        snapshot = self._fetch(f'{side} sbom', self.provider.get_snapshot, snapshot_id)
        if snapshot is None:
            raise NotFoundError(f'{side} sbom not found: {snapshot_id}')
        return snapshot

    def _fetch(self, what: str, fetch, snapshot_id: UUID):
        try:
            return fetch(snapshot_id)
        except SbomDiffError:
            raise
        except Exception as e:
            logger.error('Provider fetch failed', what=what, sbom_id=str(snapshot_id), error=str(e))
            raise InternalError(f'failed to load {what}: {e}') from e
