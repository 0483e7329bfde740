"""
Tests for criteria classification.
"""

from decimal import Decimal

import pytest

from safe_criteria.core.types import UNDEFINED, CriteriaKind
from safe_criteria.criteria.classifier import (
    bare_filter_keys,
    classify_criteria,
    extract_filter_clause,
    has_explicit_filtering,
    is_bypass_requested,
    split_directive_metadata,
)


class TestClassifyCriteria:
    """Tests for the criteria variant step."""

    def test_undefined_is_absent(self):
        """Should classify UNDEFINED as absent."""
        assert classify_criteria(UNDEFINED) is CriteriaKind.ABSENT

    def test_callable_is_implicit_callback(self):
        """Should classify a callable as the callback shorthand."""
        assert classify_criteria(lambda err, rows: None) is CriteriaKind.IMPLICIT_CALLBACK

    @pytest.mark.parametrize("value", [7, 3.5, Decimal("2"), "abc", [1, 2], (1, 2), [], None])
    def test_primary_key_shorthand(self, value):
        """Should classify scalars, None and lists as primary-key shorthand."""
        assert classify_criteria(value) is CriteriaKind.PRIMARY_KEY_SHORTHAND

    def test_bool_is_not_primary_key(self):
        """Should not treat bool as an identifier even though it is an int subclass."""
        assert classify_criteria(True) is CriteriaKind.STRUCTURED

    def test_mapping_is_structured(self):
        """Should classify a mapping as structured."""
        assert classify_criteria({"where": {}}) is CriteriaKind.STRUCTURED

    def test_inherently_safe_kinds(self):
        """Should mark only the callback and primary-key forms as inherently safe."""
        assert CriteriaKind.PRIMARY_KEY_SHORTHAND.is_inherently_safe
        assert CriteriaKind.IMPLICIT_CALLBACK.is_inherently_safe
        assert not CriteriaKind.ABSENT.is_inherently_safe
        assert not CriteriaKind.STRUCTURED.is_inherently_safe


class TestExtractFilterClause:
    """Tests for filter clause extraction."""

    def test_where_returned_directly(self):
        """Should return the `where` mapping itself."""
        where = {"name": "alpha"}
        assert extract_filter_clause({"where": where, "limit": 5}) is where

    def test_empty_where_still_counts(self):
        """Should return an empty `where` mapping as-is."""
        assert extract_filter_clause({"where": {}}) == {}

    def test_list_where_is_a_clause(self):
        """Should return a list `where` as the clause."""
        assert extract_filter_clause({"where": [1, 2]}) == [1, 2]

    def test_legacy_bare_filter(self):
        """Should collect non-directive top-level keys into a bare clause."""
        criteria = {"name": "alpha", "status": "active", "limit": 10, "sort": "name ASC"}
        assert extract_filter_clause(criteria) == {"name": "alpha", "status": "active"}

    def test_non_object_where_falls_back_to_bare_keys(self):
        """Should ignore a non-object `where` and use bare keys."""
        assert extract_filter_clause({"where": None, "name": "alpha"}) == {"name": "alpha"}

    def test_directives_only_is_none(self):
        """Should return None when only directives are present."""
        assert extract_filter_clause({"limit": 10, "sort": "name", "meta": {"x": 1}}) is None

    @pytest.mark.parametrize("value", [UNDEFINED, None, 7, "abc", [1, 2], True])
    def test_non_mappings(self, value):
        """Should return None for anything that is not a mapping."""
        assert extract_filter_clause(value) is None

    def test_custom_directive_keys(self):
        """Should honor a custom directive key set."""
        keys = frozenset({"where", "page"})
        assert extract_filter_clause({"page": 2, "limit": 5}, keys) == {"limit": 5}


class TestHasExplicitFiltering:
    """Tests for the explicit-filter check."""

    def test_where_present(self):
        """Should count a `where` clause as filtering."""
        assert has_explicit_filtering({"where": {"name": "alpha"}}) is True

    def test_bare_keys_present(self):
        """Should count legacy bare keys as filtering."""
        assert has_explicit_filtering({"name": "alpha", "limit": 1}) is True

    def test_directives_only(self):
        """Should not count pagination and sorting as filtering."""
        assert has_explicit_filtering({"limit": 10, "skip": 5, "sort": "name"}) is False

    def test_meta_only(self):
        """Should not count bypass metadata as filtering."""
        assert has_explicit_filtering({"meta": {"allow_undefined_where": True}}) is False

    def test_bare_key_with_undefined_value(self):
        """Should count a bare predicate as filtering even when its value is UNDEFINED."""
        assert has_explicit_filtering({"name": UNDEFINED}) is True

    @pytest.mark.parametrize(
        "criteria",
        [
            {"where": {"a": 1}},
            {"where": {}},
            {"where": 5, "limit": 1},
            {"name": "x"},
            {"limit": 3},
            {},
        ],
    )
    def test_agrees_with_extraction(self, criteria):
        """Should never disagree with extraction on the same input."""
        extracted = extract_filter_clause(criteria)
        assert has_explicit_filtering(criteria) == (
            extracted is not None or bool(bare_filter_keys(criteria))
        )


class TestBypass:
    """Tests for bypass metadata detection."""

    def test_flag_set(self):
        """Should detect the bypass flag inside `meta`."""
        assert is_bypass_requested({"meta": {"allow_undefined_where": True}}) is True

    def test_flag_false(self):
        """Should not bypass when the flag is False."""
        assert is_bypass_requested({"meta": {"allow_undefined_where": False}}) is False

    def test_no_meta(self):
        """Should not bypass without metadata."""
        assert is_bypass_requested({"where": {"a": 1}}) is False

    def test_meta_not_a_mapping(self):
        """Should not bypass when `meta` is not a mapping."""
        assert is_bypass_requested({"meta": True}) is False

    def test_non_mapping_criteria(self):
        """Should not bypass for non-mapping criteria."""
        assert is_bypass_requested(UNDEFINED) is False
        assert is_bypass_requested([1, 2]) is False

    def test_custom_flag_name(self):
        """Should look up a custom flag name."""
        criteria = {"meta": {"unsafe": True}}
        assert is_bypass_requested(criteria, "unsafe") is True
        assert is_bypass_requested(criteria) is False


class TestSplitDirectiveMetadata:
    """Tests for metadata stripping."""

    def test_strips_meta_into_copy(self):
        """Should move `meta` out into a copy and leave the input intact."""
        criteria = {"where": {"name": "alpha"}, "meta": {"fetch": True}}
        stripped, meta = split_directive_metadata(criteria)

        assert stripped == {"where": {"name": "alpha"}}
        assert meta == {"fetch": True}
        assert criteria == {"where": {"name": "alpha"}, "meta": {"fetch": True}}

    def test_copy_is_shallow(self):
        """Should share nested values with the input."""
        where = {"name": "alpha"}
        stripped, _ = split_directive_metadata({"where": where, "meta": {}})
        assert stripped["where"] is where

    def test_empty_meta_is_still_stripped(self):
        """Should strip an empty metadata mapping."""
        stripped, meta = split_directive_metadata({"where": {}, "meta": {}})
        assert "meta" not in stripped
        assert meta == {}

    def test_no_meta_returns_same_object(self):
        """Should return the input itself when there is no metadata."""
        criteria = {"where": {"name": "alpha"}}
        stripped, meta = split_directive_metadata(criteria)
        assert stripped is criteria
        assert meta is None

    @pytest.mark.parametrize("value", [None, False, 0, "", "fetch", [1], True, UNDEFINED])
    def test_non_mapping_meta_left_alone(self, value):
        """Should leave a non-mapping `meta` in place as a plain directive."""
        criteria = {"where": {}, "meta": value}
        stripped, meta = split_directive_metadata(criteria)
        assert stripped is criteria
        assert meta is None

    def test_non_mapping_passthrough(self):
        """Should pass non-mapping criteria through untouched."""
        assert split_directive_metadata(7) == (7, None)
