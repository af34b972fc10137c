"""Tests for tagged union dispatch."""

import pytest

from reify import (
    UNDEFINED,
    boolean,
    literal,
    number,
    optional,
    shape,
    string,
    tagged_union,
)
from reify.core.models import TaggedUnion


class TestTaggedUnion:
    """Test discriminated dispatch."""

    @pytest.fixture
    def schema(self) -> TaggedUnion:
        return tagged_union(
            "tag",
            {
                "t1": {"tag": literal("t1"), "strKey": string, "numKey": optional(number)},
                "t2": {"tag": literal("t2"), "booleanKey": boolean, "numKey": number},
            },
        )

    def test_matching_variant_accepts(self, schema) -> None:
        """Each variant validates its own fields."""
        assert schema({"tag": "t1", "strKey": "s"})
        assert schema({"tag": "t2", "booleanKey": True, "numKey": 42})

    def test_missing_variant_field_rejects(self, schema) -> None:
        """Fields required by the selected variant must be there."""
        assert not schema({"tag": "t2", "strKey": "x"})
        assert not schema({"tag": "t2", "booleanKey": True})

    def test_other_variants_fields_do_not_count(self, schema) -> None:
        """Satisfying another variant does not help."""
        assert not schema({"tag": "t1", "booleanKey": True, "numKey": 42})

    @pytest.mark.parametrize("tag", ["t3", "", "t", "t1 ", 1, None, True, ["t1"], {"t1": 1}])
    def test_unknown_tag_rejects(self, schema, tag: object) -> None:
        """Unknown, non-string or unhashable tags reject without raising."""
        assert schema({"tag": tag, "strKey": "s", "booleanKey": True, "numKey": 1}) is False

    @pytest.mark.parametrize("value", [None, UNDEFINED, "t1", ["t1"], 42, {}, {"strKey": "s"}])
    def test_non_objects_and_missing_tag_reject(self, schema, value: object) -> None:
        """Non-mappings and mappings without the tag are rejected."""
        assert not schema(value)

    def test_extra_fields_are_ignored(self, schema) -> None:
        """Variants have shape semantics."""
        assert schema({"tag": "t1", "strKey": "s", "extra": [1]})

    def test_only_selected_variant_runs(self) -> None:
        """Dispatch touches exactly one variant's fields."""
        seen: list[str] = []

        def spy(name: str):
            def check(value: object) -> bool:
                seen.append(name)
                return True

            return check

        schema = tagged_union(
            "kind",
            {
                "a": {"kind": literal("a"), "x": spy("a.x")},
                "b": {"kind": literal("b"), "y": spy("b.y")},
            },
        )

        assert schema({"kind": "b"})
        assert seen == ["b.y"]

    def test_accepts_shape_variants(self) -> None:
        """Variants may be given as shape validators."""
        schema = tagged_union("type", {"ok": shape({"type": literal("ok"), "value": number})})

        assert schema({"type": "ok", "value": 1})
        assert not schema({"type": "ok"})

    def test_variant_without_tag_field_raises(self) -> None:
        """Every variant has to declare the tag field."""
        with pytest.raises(ValueError):
            tagged_union("tag", {"t1": {"strKey": string}})

    def test_inconsistent_tag_literal_raises(self) -> None:
        """A variant keyed 't1' cannot check for tag 't2'."""
        with pytest.raises(ValueError):
            tagged_union("tag", {"t1": {"tag": literal("t2")}})

    def test_bad_tag_or_keys_raise(self) -> None:
        """Tag and variant keys are strings."""
        with pytest.raises(TypeError):
            tagged_union(1, {"t1": {1: literal("t1")}})  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            tagged_union("tag", {1: {"tag": literal(1)}})  # type: ignore[dict-item]
        with pytest.raises(TypeError):
            tagged_union("tag", [("t1", {"tag": literal("t1")})])  # type: ignore[arg-type]
