import pytest

from i18n_keys.errors import TranslationParseError
from i18n_keys.translation_document import (MappingNode, ScalarNode, load_document,
                                            parse_document, scalar_to_str)


class TestParseDocument:

    def test_nested_mapping(self):
        document = parse_document('en:\n  errors:\n    not_found: "Not found"\n')
        assert document == MappingNode({
            "en": MappingNode({"errors": MappingNode({"not_found": ScalarNode("Not found")})})
        })

    def test_empty_document_is_empty_mapping(self):
        assert parse_document("") == MappingNode()

    def test_scalar_document(self):
        assert parse_document("just text") == ScalarNode("just text")

    def test_key_order_preserved(self):
        document = parse_document("en:\n  zebra: z\n  apple: a\n  mango: m\n")
        assert list(document.children["en"].children) == ["zebra", "apple", "mango"]

    def test_boolean_keys_and_values_converted(self):
        document = parse_document("en:\n  yes: true\n  count: 3\n  blank:\n")
        children = document.children["en"].children
        assert children["true"] == ScalarNode("true")
        assert children["count"] == ScalarNode("3")
        assert children["blank"] == ScalarNode("")

    def test_sequence_becomes_scalar(self):
        document = parse_document("en:\n  day_names: [Sunday, Monday]\n")
        assert document.children["en"].children["day_names"] == ScalarNode("[Sunday, Monday]")

    def test_invalid_yaml_raises(self):
        with pytest.raises(TranslationParseError):
            parse_document("en:\n  title: \"unterminated\n", "broken.yml")


class TestLoadDocument:

    def test_missing_file_raises_parse_error(self, tmp_path):
        with pytest.raises(TranslationParseError) as exc_info:
            load_document(str(tmp_path / "missing.yml"))
        assert "missing.yml" in str(exc_info.value)

    def test_reads_utf8(self, tmp_path):
        path = tmp_path / "de.yml"
        path.write_text('de:\n  title: "Übersicht"\n', encoding="utf-8")
        document = load_document(str(path))
        assert document.children["de"].children["title"] == ScalarNode("Übersicht")


class TestScalarToStr:

    def test_none(self):
        assert scalar_to_str(None) == ""

    def test_false(self):
        assert scalar_to_str(False) == "false"

    def test_nested_sequence(self):
        assert scalar_to_str([1, [2, 3]]) == "[1, [2, 3]]"
