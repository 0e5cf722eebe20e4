import pytest

from jvms_prolog.workflows.dedup import deduplicate
from jvms_prolog.workflows.pipeline import VersionSpec


def _specs(*texts: str):
    return [VersionSpec(version=v, spec=t) for v, t in enumerate(texts, start=7)]


def test_keep_duplicates_preserves_every_result():
    results = _specs("A", "A", "B", "B", "A")
    kept = deduplicate(results, keep_duplicates=True)
    assert kept == results


def test_adjacent_policy_readmits_non_adjacent_repeat():
    kept = deduplicate(_specs("A", "A", "B", "B", "A"), policy="adjacent")
    assert [r.spec for r in kept] == ["A", "B", "A"]
    assert [r.version for r in kept] == [7, 9, 11]


def test_global_policy_drops_any_repeat():
    kept = deduplicate(_specs("A", "A", "B", "B", "A"), policy="global")
    assert [r.spec for r in kept] == ["A", "B"]
    assert [r.version for r in kept] == [7, 9]


def test_dedup_orders_by_version_before_comparing():
    results = list(reversed(_specs("A", "B", "A")))
    kept = deduplicate(results, policy="adjacent")
    assert [r.version for r in kept] == [7, 8, 9]


def test_empty_spec_is_a_regular_value():
    kept = deduplicate(_specs("", "", "A"))
    assert [r.spec for r in kept] == ["", "A"]


def test_unknown_policy_rejected():
    with pytest.raises(ValueError):
        deduplicate(_specs("A"), policy="fuzzy")
