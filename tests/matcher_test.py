import random

import pytest

from sbomdiff.engine.matcher import dedupe_components
from sbomdiff.engine.matcher import identity_key
from sbomdiff.engine.matcher import match_components
from sbomdiff.models.sbom import Component
from tests.factories import comp


def pairs(items):
    return [(i.name, i.version) for i in items]


def updates(items):
    return [(u.name, u.old_version, u.new_version) for u in items]


class TestMatchComponents:
    """Tests for match_components."""

    def test_empty_base_is_all_added(self):
        result = match_components([], [comp('a', '1'), comp('b', '2')])
        assert pairs(result.added) == [('a', '1'), ('b', '2')]
        assert result.removed == []
        assert result.updated == []

    def test_empty_target_is_all_removed(self):
        result = match_components([comp('a', '1')], [])
        assert pairs(result.removed) == [('a', '1')]
        assert result.added == []

    def test_none_inputs_are_empty(self):
        result = match_components(None, None)
        assert result.added == []
        assert result.removed == []
        assert result.updated == []

    def test_identical_lists_are_unchanged(self):
        components = [comp('a', '1'), comp('b', '2')]
        result = match_components(components, list(components))
        assert result.added == []
        assert result.removed == []
        assert result.updated == []
        assert pairs(result.unchanged) == [('a', '1'), ('b', '2')]

    def test_version_change_is_update(self):
        result = match_components([comp('lodash', '4.17.15')], [comp('lodash', '4.17.21')])
        assert updates(result.updated) == [('lodash', '4.17.15', '4.17.21')]
        assert result.added == []
        assert result.removed == []

    def test_duplicate_rows_do_not_inflate_counts(self):
        """Same (name, version) repeated from several inclusion paths counts once."""
        target = [comp('react', '18.2.0')] * 3
        result = match_components([], target)
        assert pairs(result.added) == [('react', '18.2.0')]

    def test_duplicates_on_both_sides_are_unchanged(self):
        result = match_components([comp('a', '1')] * 2, [comp('a', '1')] * 5)
        assert result.added == [] and result.removed == [] and result.updated == []

    def test_common_versions_pair_before_updates(self):
        """util 2.0 stays unchanged; the leftovers pair as 1.0 -> 3.0."""
        base = [comp('util', '1.0'), comp('util', '2.0')]
        target = [comp('util', '2.0'), comp('util', '3.0')]
        result = match_components(base, target)
        assert pairs(result.unchanged) == [('util', '2.0')]
        assert updates(result.updated) == [('util', '1.0', '3.0')]
        assert result.added == [] and result.removed == []

    def test_extra_instances_become_added_or_removed(self):
        base = [comp('x', '2.0'), comp('x', '1.0')]
        target = [comp('x', '3.0')]
        result = match_components(base, target)
        assert updates(result.updated) == [('x', '1.0', '3.0')]
        assert pairs(result.removed) == [('x', '2.0')]

        reverse = match_components(target, base)
        assert updates(reverse.updated) == [('x', '3.0', '1.0')]
        assert pairs(reverse.added) == [('x', '2.0')]

    def test_pairing_ignores_arrival_order(self):
        base = [comp('x', v) for v in ('1.0', '1.1', '1.2')]
        target = [comp('x', v) for v in ('2.0', '2.1')]
        expected = match_components(base, target)
        rng = random.Random(7)
        for _ in range(5):
            b, t = list(base), list(target)
            rng.shuffle(b)
            rng.shuffle(t)
            assert match_components(b, t) == expected

    def test_name_match_is_case_sensitive(self):
        result = match_components([comp('Foo', '1')], [comp('foo', '1')])
        assert pairs(result.removed) == [('Foo', '1')]
        assert pairs(result.added) == [('foo', '1')]
        assert result.updated == []

    def test_added_entry_carries_license(self):
        result = match_components([], [comp('react', '18.2.0', 'MIT')])
        assert result.added[0].license == 'MIT'

    def test_missing_license_is_empty_string(self):
        result = match_components([comp('a', '1')], [])
        assert result.removed[0].license == ''


class TestNamePurlTypeKey:
    """Tests for the widened (name, purl type) identity."""

    base = [comp('util', '1.0', purl='pkg:npm/util@1.0')]
    target = [comp('util', '2.0', purl='pkg:pypi/util@2.0')]

    def test_default_key_treats_ecosystems_as_same_component(self):
        result = match_components(self.base, self.target)
        assert updates(result.updated) == [('util', '1.0', '2.0')]

    def test_purl_type_key_separates_ecosystems(self):
        result = match_components(self.base, self.target, match_key='name_purl_type')
        assert result.updated == []
        assert pairs(result.removed) == [('util', '1.0')]
        assert pairs(result.added) == [('util', '2.0')]

    def test_purl_type_key_still_detects_updates(self):
        result = match_components(
            [comp('util', '1.0', purl='pkg:npm/util@1.0')],
            [comp('util', '1.1', purl='pkg:npm/util@1.1')],
            match_key='name_purl_type',
        )
        assert updates(result.updated) == [('util', '1.0', '1.1')]

    def test_unknown_match_key_raises(self):
        with pytest.raises(ValueError):
            identity_key('purl')


class TestDedupeComponents:
    """Tests for dedupe_components."""

    def test_conflicting_duplicates_resolve_independent_of_order(self):
        rows = [comp('a', '1', 'MIT'), comp('a', '1', 'Apache-2.0')]
        assert dedupe_components(rows)[0].license == 'Apache-2.0'
        assert dedupe_components(list(reversed(rows)))[0].license == 'Apache-2.0'

    def test_distinct_versions_are_kept(self):
        rows = [comp('a', '1'), comp('a', '2'), comp('a', '1')]
        assert sorted(c.version for c in dedupe_components(rows)) == ['1', '2']

    def test_missing_fields_on_duplicates_do_not_break_ordering(self):
        rows = [
            Component(name='a', version='1', license=None, type=None, purl=None),
            comp('a', '1', 'MIT'),
        ]
        for ordering in (rows, list(reversed(rows))):
            (chosen,) = dedupe_components(ordering)
            assert chosen.license is None

    def test_missing_version_is_empty_string(self):
        result = match_components([Component(name='a', version=None)], [comp('a', '1')])
        assert [(u.old_version, u.new_version) for u in result.updated] == [('', '1')]
