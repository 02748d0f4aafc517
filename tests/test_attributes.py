"""Tests for core.catalog.attributes — CMS attribute shape normalization."""

from core.catalog.attributes import (
    ListValue,
    PlainValue,
    StructuredItem,
    StructuredValue,
    attribute_strings,
    attribute_text,
    normalize_attribute,
)


class TestNormalizeAttribute:
    """Every raw shape maps onto exactly one variant of the tagged union."""

    def test_none_is_empty_list(self) -> None:
        assert normalize_attribute(None) == ListValue(values=())

    def test_string_is_plain(self) -> None:
        assert normalize_attribute("House") == PlainValue(value="House")

    def test_list_of_strings(self) -> None:
        assert normalize_attribute(["House", "Disco"]) == ListValue(values=("House", "Disco"))

    def test_list_drops_blanks(self) -> None:
        assert normalize_attribute(["House", "", None]) == ListValue(values=("House",))

    def test_list_of_objects(self) -> None:
        raw = [{"main": "House", "sub": "Deep House"}, {"main": "Disco"}]
        assert normalize_attribute(raw) == StructuredValue(
            items=(StructuredItem("House", "Deep House"), StructuredItem("Disco"))
        )

    def test_single_object(self) -> None:
        assert normalize_attribute({"main": "LP"}) == StructuredValue(
            items=(StructuredItem("LP"),)
        )

    def test_name_and_title_fallbacks(self) -> None:
        value = normalize_attribute([{"name": "Blue Note"}, {"title": "Strut"}])
        assert attribute_strings(value) == ("Blue Note", "Strut")

    def test_unresolved_references_are_dropped(self) -> None:
        raw = [{"_type": "reference", "_ref": "abc"}, {"main": "Jazz"}]
        assert attribute_strings(normalize_attribute(raw)) == ("Jazz",)

    def test_mixed_list_becomes_structured(self) -> None:
        value = normalize_attribute([{"main": "Jazz"}, "Soul"])
        assert isinstance(value, StructuredValue)
        assert attribute_strings(value) == ("Jazz", "Soul")

    def test_numbers_become_plain_strings(self) -> None:
        assert normalize_attribute(12) == PlainValue(value="12")


class TestProjections:
    """Test string projections used for matching and display."""

    def test_strings_of_plain(self) -> None:
        assert attribute_strings(PlainValue("House")) == ("House",)

    def test_empty_plain_has_no_strings(self) -> None:
        assert attribute_strings(PlainValue("")) == ()

    def test_sub_is_not_compared(self) -> None:
        value = normalize_attribute([{"main": "House", "sub": "Deep House"}])
        assert attribute_strings(value) == ("House",)

    def test_attribute_text_joins(self) -> None:
        assert attribute_text([{"main": "House"}, {"main": "Disco"}]) == "House, Disco"
        assert attribute_text(None) == ""
