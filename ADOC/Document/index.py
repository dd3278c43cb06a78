"""
Document Index

Purpose: Locate rule placeholder blocks in a parsed document.

A placeholder is a listing block carrying the role "concept" or
"constraint" and the id of the rule it declares, e.g.

	[[my:Concept]]
	[source,cypher,role=concept]
	----
	MATCH (n) RETURN n
	----
"""

import logging
from typing import Dict, Optional, Tuple

from ADOC.Document.tree import Block, Document
from ADOC.Results.rules import RuleKind
from ADOC.errors import DuplicateRuleIdError

__all__ = ["RULE_BLOCK_CONTEXT", "DocumentIndex", "index", "rule_kind_of"]

logger = logging.getLogger(__name__)

RULE_BLOCK_CONTEXT = "listing"


def rule_kind_of(block: Block) -> Optional[RuleKind]:
	"""Return the kind of rule a block declares, None for ordinary blocks."""
	if block.context != RULE_BLOCK_CONTEXT:
		return None
	if block.has_role(RuleKind.CONCEPT.value):
		return RuleKind.CONCEPT
	if block.has_role(RuleKind.CONSTRAINT.value):
		return RuleKind.CONSTRAINT
	return None


class DocumentIndex:
	"""Rule id -> placeholder block, separately for concepts and constraints."""

	def __init__(self, concept_blocks: Dict[str, Block], constraint_blocks: Dict[str, Block]) -> None:
		self.concept_blocks = concept_blocks
		self.constraint_blocks = constraint_blocks

	def blocks(self, kind: RuleKind) -> Dict[str, Block]:
		if kind is RuleKind.CONCEPT:
			return self.concept_blocks
		if kind is RuleKind.CONSTRAINT:
			return self.constraint_blocks
		raise ValueError(f"documents do not declare {kind.value} blocks")

	@classmethod
	def parse(cls, document: Document) -> "DocumentIndex":
		"""
		Scan a document once and collect its rule blocks.

		Raises:
			DuplicateRuleIdError: If a rule id is declared twice
		"""
		found: Dict[RuleKind, Dict[str, Block]] = {RuleKind.CONCEPT: {}, RuleKind.CONSTRAINT: {}}
		for block in document.walk():
			kind = rule_kind_of(block)
			if kind is None:
				continue
			rule_id = block.id
			if not rule_id:
				logger.warning("Skipping %s block without id (title '%s')", kind.value, block.title)
				continue
			if rule_id in found[kind]:
				raise DuplicateRuleIdError(rule_id, kind.value)
			found[kind][rule_id] = block
		return cls(found[RuleKind.CONCEPT], found[RuleKind.CONSTRAINT])


def index(document: Document) -> Tuple[Dict[str, Block], Dict[str, Block]]:
	"""Return (concept_blocks, constraint_blocks) of a document."""
	document_index = DocumentIndex.parse(document)
	return document_index.concept_blocks, document_index.constraint_blocks
