"""
Rule Result Enrichment

Purpose: Enrich a parsed rule document with the results of its rules.

Responsibilities:
- Index the concept and constraint blocks of the document
- Render the recorded result (or its absence) of every indexed rule
- Insert the rendered result right after the rule block

Design notes:
- The document is mutated in place and returned for chaining
- Results are only read here, never recorded
"""

import logging
from typing import Dict

from ADOC.Document.index import DocumentIndex
from ADOC.Document.tree import Block, Document
from ADOC.Enrichment.tree_mutator import insert_after
from ADOC.Render.result_renderer import ResultRenderer
from ADOC.Results.result_store import ResultStore
from ADOC.Results.rules import RuleKind

__all__ = ["DocumentEnricher"]

logger = logging.getLogger(__name__)


class DocumentEnricher:
	"""Insert rendered rule results into documents."""

	def __init__(self, result_store: ResultStore, renderer: ResultRenderer) -> None:
		self._results = result_store
		self._renderer = renderer

	def process(self, document: Document) -> Document:
		"""
		Enrich all rule blocks of a document.

		Raises:
			DuplicateRuleIdError: If a rule id is declared twice in the document
			DocumentStructureError: If a rule block has no parent
		"""
		document_index = DocumentIndex.parse(document)
		self._enrich(document, document_index.concept_blocks, RuleKind.CONCEPT)
		self._enrich(document, document_index.constraint_blocks, RuleKind.CONSTRAINT)
		return document

	def _enrich(self, document: Document, blocks: Dict[str, Block], kind: RuleKind) -> None:
		for rule_id, block in blocks.items():
			result = self._results.lookup(kind, rule_id)
			if result is None:
				logger.debug("No result available for %s '%s'", kind.value, rule_id)
			content = self._renderer.render(result)
			insert_after(document, block, content)
