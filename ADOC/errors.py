"""
Report-specific errors.
"""

__all__ = ["ReportingError", "DocumentStructureError", "DuplicateRuleIdError", "ReportConversionError"]


class ReportingError(Exception):
	"""Base exception for rule report failures."""

	pass


class DocumentStructureError(ReportingError):
	"""The document tree violates a structural precondition."""

	pass


class DuplicateRuleIdError(DocumentStructureError):
	"""The same rule id is referenced by more than one block of a document."""

	def __init__(self, rule_id: str, kind: str) -> None:
		super().__init__(f"Duplicate {kind} id '{rule_id}' in document")
		self.rule_id = rule_id
		self.kind = kind


class ReportConversionError(ReportingError):
	"""A document could not be loaded, enriched or converted."""

	pass
