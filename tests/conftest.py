import pytest

from tests.factories import BASE_ID
from tests.factories import comp
from tests.factories import FOREIGN_ID
from tests.factories import InMemoryProvider
from tests.factories import OTHER_PROJECT_ID
from tests.factories import PROJECT_ID
from tests.factories import TARGET_ID
from tests.factories import vuln


@pytest.fixture
def base_components():
    return [comp('lodash', '4.17.15', 'MIT'), comp('axios', '1.3.0', 'MIT')]


@pytest.fixture
def target_components():
    return [
        comp('lodash', '4.17.21', 'MIT'),
        comp('axios', '1.4.0', 'MIT'),
        comp('react', '18.2.0', 'MIT'),
    ]


@pytest.fixture
def base_vulns():
    return [vuln('lodash', 'CVE-2020-8203', 'HIGH', '4.17.15')]


@pytest.fixture
def target_vulns():
    return [
        vuln('lodash', 'CVE-2020-8203', 'HIGH', '4.17.21'),
        vuln('axios', 'CVE-2023-45857', 'MEDIUM', '1.4.0'),
    ]


@pytest.fixture
def provider(base_components, target_components, base_vulns, target_vulns):
    p = InMemoryProvider()
    p.add(BASE_ID, PROJECT_ID, base_components, base_vulns)
    p.add(TARGET_ID, PROJECT_ID, target_components, target_vulns)
    p.add(FOREIGN_ID, OTHER_PROJECT_ID, [comp('left-pad', '1.3.0')])
    return p


@pytest.fixture
def expected_scenario():
    return {
        'summary': {
            'added_count': 1,
            'removed_count': 0,
            'updated_count': 2,
            'new_vulnerabilities_count': 1,
        },
        'added': [{'name': 'react', 'version': '18.2.0', 'license': 'MIT'}],
        'removed': [],
        'updated': [
            {'name': 'axios', 'old_version': '1.3.0', 'new_version': '1.4.0'},
            {'name': 'lodash', 'old_version': '4.17.15', 'new_version': '4.17.21'},
        ],
        'new_vulnerabilities': [
            {'cve_id': 'CVE-2023-45857', 'component': 'axios', 'version': '1.4.0', 'severity': 'MEDIUM'},
        ],
    }
