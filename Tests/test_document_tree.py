"""
Unit Tests for ADOC/Document/tree.py

Tests block creation, navigation and structural mutation of documents.
"""

import pytest
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ADOC.Document.tree import Document


class TestBlock:
    """Test suite for Block accessors."""

    def test_id_and_roles_come_from_attributes(self):
        """Test that id and roles are read from the attributes."""
        document = Document()
        block = document.create_block("listing", attributes={"id": "C1", "role": "concept  extra"})

        assert block.id == "C1"
        assert block.roles == ["concept", "extra"]
        assert block.has_role("concept")

    def test_add_role_is_idempotent(self):
        """Test that adding a role twice keeps a single entry."""
        document = Document()
        block = document.create_block("listing", attributes={"role": "concept"})

        block.add_role("rule-toggle")
        block.add_role("rule-toggle")

        assert block.attributes["role"] == "concept rule-toggle"

    def test_created_block_is_detached(self):
        """Test that new blocks have no parent."""
        document = Document()
        block = document.create_block("paragraph", lines=["x"])

        assert document.parent(block) is None
        assert block.handle != document.root.handle


class TestNavigation:
    """Test suite for parent/children navigation."""

    def test_children_in_order(self, rule_document):
        """Test that children are returned in insertion order."""
        section = rule_document.children(rule_document.root)[0]
        contexts = [child.context for child in rule_document.children(section)]

        assert contexts == ["paragraph", "listing", "listing"]

    def test_parent_and_index_of(self, rule_document):
        """Test navigating back to the parent."""
        section = rule_document.children(rule_document.root)[0]
        concept = rule_document.find_by_id("C1")

        assert rule_document.parent(concept) is section
        assert rule_document.index_of(concept) == 1

    def test_index_of_root_raises_error(self, rule_document):
        """Test that the root has no position."""
        with pytest.raises(ValueError, match="has no parent"):
            rule_document.index_of(rule_document.root)

    def test_walk_is_document_order(self, rule_document):
        """Test pre-order traversal."""
        contexts = [block.context for block in rule_document.walk()]

        assert contexts == ["document", "section", "paragraph", "listing", "listing"]
        assert len(rule_document) == 5

    def test_get_unknown_handle_raises_error(self, rule_document):
        """Test that unknown handles raise KeyError."""
        with pytest.raises(KeyError):
            rule_document.get(999)


class TestMutation:
    """Test suite for insert/append/replace."""

    def test_insert_at_position(self, rule_document):
        """Test inserting between existing siblings."""
        section = rule_document.children(rule_document.root)[0]
        block = rule_document.create_block("paragraph", lines=["inserted"])

        rule_document.insert(section, 1, block)

        assert rule_document.index_of(block) == 1
        assert rule_document.index_of(rule_document.find_by_id("C1")) == 2

    def test_insert_attached_block_raises_error(self, rule_document):
        """Test that a block cannot be attached twice."""
        section = rule_document.children(rule_document.root)[0]
        concept = rule_document.find_by_id("C1")

        with pytest.raises(ValueError, match="already attached"):
            rule_document.insert(section, 0, concept)

    def test_insert_foreign_block_raises_error(self, rule_document):
        """Test that blocks of another document are rejected."""
        other = Document().create_block("paragraph")
        with pytest.raises(ValueError, match="does not belong"):
            rule_document.append(rule_document.root, other)

    def test_insert_out_of_range_raises_error(self, rule_document):
        """Test that positions beyond the end are rejected."""
        block = rule_document.create_block("paragraph")
        with pytest.raises(IndexError):
            rule_document.insert(rule_document.root, 5, block)

    def test_replace_keeps_position(self, rule_document):
        """Test replacing a block in place."""
        concept = rule_document.find_by_id("C1")
        section = rule_document.parent(concept)
        replacement = rule_document.create_block("pass", lines=["<p/>"])

        rule_document.replace(concept, replacement)

        assert rule_document.index_of(replacement) == 1
        assert rule_document.parent(concept) is None
        assert len(section.children) == 3
