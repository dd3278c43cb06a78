"""
Unit Tests for ADOC/Toggle/rule_toggle.py

Tests the additive and idempotent toggle annotation of rule blocks.
"""

import pytest
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ADOC.Results.result_store import ResultStore
from ADOC.Results.rules import RuleKind, Severity, Status
from ADOC.Toggle.rule_toggle import TOGGLE_ROLE, UNKNOWN_STATUS_ICON, RuleToggleAnnotator


class TestRuleToggleAnnotator:
    """Test suite for RuleToggleAnnotator.annotate()."""

    def test_rule_blocks_get_toggle_role(self, result_store, rule_document):
        """Test that concept and constraint blocks are marked."""
        count = RuleToggleAnnotator(result_store).annotate(rule_document)

        assert count == 2
        assert rule_document.find_by_id("C1").has_role(TOGGLE_ROLE)
        assert rule_document.find_by_id("K1").has_role(TOGGLE_ROLE)

    def test_existing_role_is_kept(self, result_store, rule_document):
        """Test that the rule role itself is preserved."""
        RuleToggleAnnotator(result_store).annotate(rule_document)

        assert rule_document.find_by_id("C1").roles == ["concept", TOGGLE_ROLE]

    def test_status_and_severity_from_result(self, result_store, rule_document):
        """Test the attributes used by the block title."""
        RuleToggleAnnotator(result_store).annotate(rule_document)

        attributes = rule_document.find_by_id("C1").attributes
        assert attributes["rule-status"] == "SUCCESS"
        assert attributes["rule-status-icon"] == "fa-check"
        assert attributes["rule-severity"] == "INFO"

    def test_failed_constraint_is_banned(self, constraint_rule, make_result, rule_document):
        """Test the icon and severity of a failed, escalated constraint."""
        store = ResultStore()
        store.record(RuleKind.CONSTRAINT, "K1", make_result(constraint_rule, status=Status.FAILURE, severity=Severity.MAJOR))

        RuleToggleAnnotator(store).annotate(rule_document)

        attributes = rule_document.find_by_id("K1").attributes
        assert attributes["rule-status-icon"] == "fa-ban"
        assert attributes["rule-severity"] == "MAJOR (from MINOR)"

    def test_rule_without_result(self, result_store, rule_document):
        """Test that rules without result use the declared severity."""
        RuleToggleAnnotator(result_store).annotate(rule_document)

        attributes = rule_document.find_by_id("K1").attributes
        assert attributes["rule-status-icon"] == UNKNOWN_STATUS_ICON
        assert attributes["rule-severity"] == "MINOR"

    def test_annotation_is_idempotent(self, result_store, rule_document):
        """Test that a second pass changes nothing."""
        annotator = RuleToggleAnnotator(result_store)
        annotator.annotate(rule_document)
        snapshot = [(b.handle, dict(b.attributes), list(b.lines), list(b.children)) for b in rule_document.walk()]

        assert annotator.annotate(rule_document) == 0
        assert [(b.handle, dict(b.attributes), list(b.lines), list(b.children)) for b in rule_document.walk()] == snapshot

    def test_existing_content_is_not_altered(self, result_store, rule_document):
        """Test that lines, titles and existing attributes are untouched."""
        concept = rule_document.find_by_id("C1")
        concept.attributes["rule-status"] = "CUSTOM"
        lines = list(concept.lines)
        title = concept.title

        RuleToggleAnnotator(result_store).annotate(rule_document)

        assert concept.attributes["rule-status"] == "CUSTOM"
        assert concept.attributes["language"] == "cypher"
        assert concept.lines == lines
        assert concept.title == title
        assert len(rule_document) == 5
