"""
Rule Toggle Annotation

Purpose: Prepare rule blocks for client-side show/hide.

Responsibilities:
- Mark every rule block with the "rule-toggle" role
- Attach status, status icon and severity used by the block title

Design notes:
- Purely additive: existing roles and attributes are never overwritten
- Idempotent: annotating twice changes nothing the second time
"""

from typing import Optional

from ADOC.Document.index import DocumentIndex
from ADOC.Document.tree import Block, Document
from ADOC.Results.result_store import ResultStore, RuleResult
from ADOC.Results.rules import RuleKind, Status

__all__ = ["TOGGLE_ROLE", "STATUS_ICONS", "UNKNOWN_STATUS_ICON", "RuleToggleAnnotator"]

TOGGLE_ROLE = "rule-toggle"

STATUS_ICONS = {
	Status.SUCCESS: "fa-check",
	Status.WARNING: "fa-exclamation-triangle",
	Status.FAILURE: "fa-ban",
	Status.SKIPPED: "fa-forward",
	Status.ERROR: "fa-times",
}

UNKNOWN_STATUS_ICON = "fa-question"


class RuleToggleAnnotator:
	"""Add toggle classification to the rule blocks of a document."""

	def __init__(self, result_store: ResultStore) -> None:
		self._results = result_store

	def annotate(self, document: Document) -> int:
		"""
		Annotate all rule blocks of a document.

		Returns:
			Number of blocks that were not annotated before
		"""
		document_index = DocumentIndex.parse(document)
		annotated = 0
		for kind in (RuleKind.CONCEPT, RuleKind.CONSTRAINT):
			for rule_id, block in document_index.blocks(kind).items():
				if self._annotate_block(block, self._results.lookup(kind, rule_id)):
					annotated += 1
		return annotated

	def _annotate_block(self, block: Block, result: Optional[RuleResult]) -> bool:
		if block.has_role(TOGGLE_ROLE):
			return False
		block.add_role(TOGGLE_ROLE)
		if result is not None:
			block.attributes.setdefault("rule-status", result.status.name)
			block.attributes.setdefault("rule-status-icon", STATUS_ICONS[result.status])
			block.attributes.setdefault("rule-severity", result.rule.severity.info(result.effective_severity))
		else:
			block.attributes.setdefault("rule-status", "NOT AVAILABLE")
			block.attributes.setdefault("rule-status-icon", UNKNOWN_STATUS_ICON)
			declared = block.attributes.get("severity")
			if declared:
				block.attributes.setdefault("rule-severity", str(declared).upper())
		return True
