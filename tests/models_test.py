from uuid import UUID

import pydantic
import pytest

from sbomdiff.models.diff import DiffResult
from sbomdiff.models.sbom import Component
from sbomdiff.models.sbom import purl_type
from sbomdiff.models.sbom import SbomSnapshot


@pytest.mark.parametrize(
    ('purl', 'expected'), [
        ('pkg:npm/lodash@4.17.21', 'npm'),
        ('pkg:npm/%40angular/core@17.0.0', 'npm'),
        ('pkg:maven/org.apache.logging.log4j/log4j-core@2.17.0', 'maven'),
        ('PKG:PyPI/requests@2.31.0', 'pypi'),
        ('', ''),
        (None, ''),
        ('lodash', ''),
    ],
)
def test_purl_type(purl, expected):
    assert purl_type(purl) == expected


def test_component_purl_type():
    assert Component(name='requests', purl='pkg:pypi/requests@2.31.0').purl_type == 'pypi'


def test_snapshot_is_immutable():
    snapshot = SbomSnapshot(
        id=UUID(int=1), project_id=UUID(int=2), format='CycloneDX',
    )
    assert snapshot.format == 'cyclonedx'
    with pytest.raises(pydantic.ValidationError):
        snapshot.format = 'spdx'


def test_empty_result():
    result = DiffResult()
    assert result.is_empty
    assert result.summary.added_count == 0
