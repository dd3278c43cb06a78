"""
Unit Tests for ADOC/Convert/asciidoc_loader.py

Tests parsing of rule documents into Document trees.
"""

import pytest
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ADOC.Convert.asciidoc_loader import AsciidocLoader, parse_attribute_list
from ADOC.Document.index import DocumentIndex, index


class TestParseAttributeList:
    """Test suite for parse_attribute_list()."""

    def test_positional_and_named_attributes(self):
        """Test style, language and key=value pairs."""
        attributes = parse_attribute_list('source,cypher,role=concept,requiresConcepts="a,b"')

        assert attributes == {
            "style": "source",
            "language": "cypher",
            "role": "concept",
            "requiresConcepts": "a,b",
        }

    def test_id_shorthand(self):
        """Test that '#id' sets the block id."""
        assert parse_attribute_list("source,#my-id")["id"] == "my-id"


class TestAsciidocLoader:
    """Test suite for AsciidocLoader."""

    def test_header(self, rule_document_text):
        """Test document title and header attributes."""
        document = AsciidocLoader().load_string(rule_document_text)

        assert document.title == "Rules"
        assert document.root.attributes["toc"] == "left"

    def test_sections_and_blocks(self, rule_document_text):
        """Test the block structure of the sample document."""
        document = AsciidocLoader().load_string(rule_document_text)

        sections = document.children(document.root)
        assert [s.title for s in sections] == ["Summary", "Architecture"]
        assert [b.context for b in document.children(sections[0])] == ["include"]
        assert [b.context for b in document.children(sections[1])] == ["paragraph", "listing", "listing"]

    def test_paragraph_lines(self, rule_document_text):
        """Test that consecutive lines form one paragraph."""
        document = AsciidocLoader().load_string(rule_document_text)
        paragraph = document.children(document.children(document.root)[1])[0]

        assert paragraph.lines == ["Rules for the example project.", "Second line of the paragraph."]

    def test_rule_blocks(self, rule_document_text):
        """Test anchors, attribute lines and titles of rule blocks."""
        document = AsciidocLoader().load_string(rule_document_text)
        concepts, constraints = index(document)

        concept = concepts["C1"]
        assert concept.title == "Counts all types."
        assert concept.attributes["language"] == "cypher"
        assert concept.lines == ["MATCH (t:Type) RETURN count(t) AS Count"]
        assert constraints["K1"].attributes["severity"] == "minor"
        assert constraints["K1"].attributes["requiresConcepts"] == "C1"

    def test_attribute_line_ends_paragraph(self):
        """Test that a block attribute line directly after a paragraph starts a new block."""
        text = (
            "== Rules\n"
            "\n"
            "Introduces the concept.\n"
            "[source,cypher,role=concept,id=C1]\n"
            "----\n"
            "MATCH (t:Type) RETURN t\n"
            "----\n"
        )

        document = AsciidocLoader().load_string(text)
        section = document.children(document.root)[0]
        paragraph, listing = document.children(section)

        assert paragraph.lines == ["Introduces the concept."]
        assert listing.context == "listing"
        assert listing.attributes["role"] == "concept"
        assert "C1" in DocumentIndex.parse(document).concept_blocks

    def test_include_block(self, rule_document_text):
        """Test that unresolved includes become include blocks."""
        document = AsciidocLoader().load_string(rule_document_text)
        include = document.children(document.children(document.root)[0])[0]

        assert include.attributes["target"] == "jQA:Summary"

    def test_nested_sections(self):
        """Test that deeper sections nest below their parent section."""
        document = AsciidocLoader().load_string("== A\n\n=== B\n\ntext\n\n== C\n")

        top = document.children(document.root)
        assert [s.title for s in top] == ["A", "C"]
        nested = document.children(top[0])[0]
        assert nested.title == "B" and nested.level == 2
        assert document.children(nested)[0].lines == ["text"]

    def test_listing_content_is_verbatim(self):
        """Test that listing content is not interpreted."""
        document = AsciidocLoader().load_string("----\n== not a section\n\n[[no-anchor]]\n----\n")
        listing = document.children(document.root)[0]

        assert listing.context == "listing"
        assert listing.lines == ["== not a section", "", "[[no-anchor]]"]

    def test_passthrough_block(self):
        """Test that passthrough content is kept raw."""
        document = AsciidocLoader().load_string("++++\n<b>raw</b>\n++++\n")

        assert document.children(document.root)[0].context == "pass"

    def test_comments_are_skipped(self):
        """Test line and block comments."""
        document = AsciidocLoader().load_string("// note\n////\nhidden\n////\nvisible\n")

        blocks = document.children(document.root)
        assert len(blocks) == 1
        assert blocks[0].lines == ["visible"]

    def test_unterminated_listing_raises_error(self):
        """Test that a missing closing delimiter is reported."""
        with pytest.raises(ValueError, match="unterminated block"):
            AsciidocLoader().load_string("----\nMATCH (n)\n", source="rules.adoc")

    def test_late_document_title_raises_error(self):
        """Test that a level 0 title after content is rejected."""
        with pytest.raises(ValueError, match="document title must be the first line"):
            AsciidocLoader().load_string("text\n\n= Title\n")

    def test_load_file_expands_file_includes(self, tmp_path):
        """Test that includes of existing files are inlined."""
        (tmp_path / "rules").mkdir()
        (tmp_path / "rules" / "more.adoc").write_text("[[C2]]\n[source,cypher,role=concept]\n----\nRETURN 1\n----\n")
        (tmp_path / "index.adoc").write_text("= Index\n\ninclude::rules/more.adoc[]\n")

        document = AsciidocLoader().load_file(str(tmp_path / "index.adoc"))
        concepts, _ = index(document)

        assert "C2" in concepts

    def test_load_missing_file_raises_error(self, tmp_path):
        """Test that missing documents raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Document not found"):
            AsciidocLoader().load_file(str(tmp_path / "missing.adoc"))
