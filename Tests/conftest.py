"""
Pytest Configuration and Shared Fixtures

Provides reusable test fixtures for all test modules:
- Rules and rule results at different outcomes
- Parsed rule documents
- Report contexts and output directories
"""

import pytest
import os
import sys
from typing import Any, Dict, List, Optional

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ADOC.Document.tree import Document
from ADOC.Reporting.report_context import ReportContext
from ADOC.Results.result_store import ResultStore, build_rule_result
from ADOC.Results.rules import ExecutionResult, Rule, RuleKind, Severity, Status


# ============================================================================
# Rule Fixtures
# ============================================================================

@pytest.fixture
def concept_rule() -> Rule:
    """Concept declared with severity INFO."""
    return Rule(id="C1", kind=RuleKind.CONCEPT, severity=Severity.INFO, description="Counts all types.")


@pytest.fixture
def constraint_rule() -> Rule:
    """Constraint declared with severity MINOR."""
    return Rule(id="K1", kind=RuleKind.CONSTRAINT, severity=Severity.MINOR, description="No cycles allowed.")


@pytest.fixture
def make_result():
    """Factory fixture building RuleResult values the way the plugin does."""
    def _make(
        rule: Rule,
        status: Status = Status.SUCCESS,
        severity: Optional[Severity] = None,
        columns: Optional[List[str]] = None,
        rows: Optional[List[Dict[str, Any]]] = None,
    ):
        return build_rule_result(ExecutionResult(
            rule=rule,
            status=status,
            severity=severity or rule.severity,
            column_names=columns,
            rows=rows or [],
        ))
    return _make


@pytest.fixture
def result_store(concept_rule, make_result) -> ResultStore:
    """Store holding the single successful concept C1 with Count = 3."""
    store = ResultStore()
    store.record(RuleKind.CONCEPT, "C1", make_result(concept_rule, columns=["Count"], rows=[{"Count": 3}]))
    return store


# ============================================================================
# Document Fixtures
# ============================================================================

@pytest.fixture
def rule_document() -> Document:
    """
    Document with one section holding a paragraph, concept C1 and constraint K1.
    """
    document = Document(title="Rules")
    section = document.append(document.root, document.create_block("section", title="Architecture", level=1))
    document.append(section, document.create_block("paragraph", lines=["Introduction."]))
    document.append(section, document.create_block(
        "listing",
        lines=["MATCH (t:Type) RETURN count(t) AS Count"],
        attributes={"id": "C1", "role": "concept", "style": "source", "language": "cypher"},
        title="Counts all types.",
    ))
    document.append(section, document.create_block(
        "listing",
        lines=["MATCH (t:Type)-[:DEPENDS_ON*]->(t) RETURN t"],
        attributes={"id": "K1", "role": "constraint", "style": "source", "language": "cypher", "severity": "minor"},
        title="No cycles allowed.",
    ))
    return document


@pytest.fixture
def rule_document_text() -> str:
    """AsciiDoc source declaring a concept, a constraint and a summary include."""
    return """= Rules
:toc: left

== Summary

include::jQA:Summary[]

== Architecture

Rules for the example project.
Second line of the paragraph.

[[C1]]
[source,cypher,role=concept]
.Counts all types.
----
MATCH (t:Type) RETURN count(t) AS Count
----

[[K1]]
[source,cypher,role=constraint,severity=minor,requiresConcepts="C1"]
.No cycles allowed.
----
MATCH (t:Type)-[:DEPENDS_ON*]->(t) RETURN t
----
"""


# ============================================================================
# Output Fixtures
# ============================================================================

@pytest.fixture
def report_context(tmp_path) -> ReportContext:
    """Report context rooted in a temporary directory."""
    return ReportContext(str(tmp_path / "report"))


@pytest.fixture
def report_dir(report_context) -> str:
    """Report directory of the document plugin."""
    return report_context.report_directory("asciidoc")
