import json
from unittest.mock import MagicMock
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from sbomdiff.__main__ import app
from sbomdiff.core.errors import InternalError
from sbomdiff.core.errors import NotFoundError
from sbomdiff.engine.assembler import compute_diff
from tests.factories import BASE_ID
from tests.factories import PROJECT_ID
from tests.factories import TARGET_ID

runner = CliRunner()


@pytest.fixture
def container(base_components, target_components, base_vulns, target_vulns):
    with patch('sbomdiff.commands.diff.get_container') as mock_get_container, \
            patch('sbomdiff.commands.diff.check_clickhouse_connection') as mock_check:
        mock_check.return_value = True
        container = mock_get_container.return_value
        container.create_diff_service.return_value.diff.return_value = compute_diff(
            base_components, target_components, base_vulns, target_vulns,
        )
        yield container


def test_diff_json(container, expected_scenario):
    result = runner.invoke(app, ['diff', str(BASE_ID), str(TARGET_ID), '--json'])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == expected_scenario
    container.create_diff_service.return_value.diff.assert_called_once_with(BASE_ID, TARGET_ID)


def test_diff_tables(container):
    result = runner.invoke(app, ['diff', str(BASE_ID), str(TARGET_ID)])
    assert result.exit_code == 0, result.output
    assert 'SBOM Diff Summary' in result.stdout
    assert 'react' in result.stdout
    assert 'CVE-2023-45857' in result.stdout


def test_diff_host_override(container):
    runner.invoke(app, ['diff', str(BASE_ID), str(TARGET_ID), '--host', 'ch.example', '--json'])
    assert container.config._db_base.host == 'ch.example'


def test_diff_rejects_identical_ids(container):
    result = runner.invoke(app, ['diff', str(BASE_ID), str(BASE_ID)])
    assert result.exit_code == 1
    assert 'must be different' in result.output
    container.create_diff_service.assert_not_called()


def test_diff_rejects_malformed_id(container):
    result = runner.invoke(app, ['diff', 'nope', str(TARGET_ID)])
    assert result.exit_code == 1
    assert 'invalid base sbom id' in result.output


def test_diff_not_found(container):
    container.create_diff_service.return_value.diff.side_effect = NotFoundError('target sbom not found')
    result = runner.invoke(app, ['diff', str(BASE_ID), str(TARGET_ID)])
    assert result.exit_code == 1
    assert 'target sbom not found' in result.output


def test_diff_internal_error(container):
    container.create_diff_service.return_value.diff.side_effect = InternalError('failed to load base components')
    result = runner.invoke(app, ['diff', str(BASE_ID), str(TARGET_ID)])
    assert result.exit_code == 1
    assert 'Internal Error' in result.output


@patch('sbomdiff.commands.db.snapshots.check_clickhouse_connection')
@patch('sbomdiff.commands.db.snapshots.get_container')
def test_db_snapshots(mock_get_container, mock_check):
    repo = MagicMock()
    repo.list_snapshots.return_value = iter([
        {'id': TARGET_ID, 'format': 'cyclonedx', 'format_version': '1.5', 'created_at': '2024-05-02', 'components': 3},
    ])
    container = mock_get_container.return_value
    container.get_snapshot_repository.return_value.__enter__.return_value = repo
    from sbomdiff.services.db_service import DbService
    container.get_db_service.return_value = DbService()

    result = runner.invoke(app, ['db', 'snapshots', str(PROJECT_ID)])
    assert result.exit_code == 0, result.output
    assert str(TARGET_ID) in result.stdout
    repo.list_snapshots.assert_called_once_with(PROJECT_ID, limit=50)


@patch('sbomdiff.commands.db.init.check_clickhouse_connection')
@patch('sbomdiff.commands.db.init.get_container')
def test_db_init(mock_get_container, mock_check):
    container = mock_get_container.return_value
    repo_db = container.get_ingestion_repository.return_value.__enter__.return_value
    result = runner.invoke(app, ['db', 'init'])
    assert result.exit_code == 0, result.output
    container.get_db_service.return_value.init_schema.assert_called_once_with(repo_db, reset=False)
    assert mock_check.call_args.kwargs['require_database'] is False
