"""
Rule Result Store

Purpose: Collect rule execution outcomes for the enrichment pass.

Responsibilities:
- Convert raw execution results into write-once RuleResult values
- Render cell values to string labels, one per contained value
- Keep concept and constraint results in two independent mappings

Design notes:
- The store is filled while rules execute and only read afterwards
- A recurring rule id overwrites the previous result
- Rows are read-only mappings of label tuples
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ADOC.Results.rules import ExecutionResult, Rule, RuleKind, Severity, Status

__all__ = ["EMPTY_RESULT_COLUMN", "RuleResult", "build_rule_result", "ResultStore"]

logger = logging.getLogger(__name__)

EMPTY_RESULT_COLUMN = "Empty Result"


@dataclass(frozen=True)
class RuleResult:
	"""Outcome of one executed rule, ready for rendering."""

	rule: Rule
	effective_severity: Severity
	status: Status
	column_names: Tuple[str, ...]
	rows: Tuple[Mapping[str, Tuple[str, ...]], ...] = ()

	def __post_init__(self) -> None:
		if len(set(self.column_names)) != len(self.column_names):
			raise ValueError(f"column names of rule '{self.rule.id}' must be unique: {list(self.column_names)}")
		# rows are frozen too: read-only mappings of value tuples
		rows = tuple(
			MappingProxyType({column: tuple(values) for column, values in row.items()})
			for row in self.rows
		)
		object.__setattr__(self, "column_names", tuple(self.column_names))
		object.__setattr__(self, "rows", rows)


def _label(value: Any) -> str:
	"""Render a single cell value as text."""
	if value is None:
		return ""
	if isinstance(value, bool):
		return "true" if value else "false"
	return str(value)


def _labels(value: Any) -> List[str]:
	"""Render a cell into its list of labels, one per contained value."""
	if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
		return [_label(value)]
	if isinstance(value, Mapping):
		return [f"{_label(k)}={_label(v)}" for k, v in value.items()]
	return [_label(v) for v in value]


def build_rule_result(result: ExecutionResult) -> RuleResult:
	"""
	Build a RuleResult from a raw execution result.

	Args:
		result: Outcome reported by the analysis engine

	Returns:
		RuleResult whose rows provide a value list for every column

	Raises:
		ValueError: If column names are not unique
	"""
	column_names = list(result.column_names) if result.column_names is not None else [EMPTY_RESULT_COLUMN]

	rows = []
	for row in result.rows:
		result_row: Dict[str, List[str]] = {}
		for column_name, value in row.items():
			result_row[column_name] = _labels(value)
		for column_name in column_names:
			result_row.setdefault(column_name, [])
		rows.append(result_row)

	return RuleResult(
		rule=result.rule,
		effective_severity=result.severity,
		status=result.status,
		column_names=tuple(column_names),
		rows=tuple(rows),
	)


class ResultStore:
	"""Rule id -> RuleResult mappings for concepts and constraints."""

	def __init__(self) -> None:
		self._results: Dict[RuleKind, Dict[str, RuleResult]] = {
			RuleKind.CONCEPT: {},
			RuleKind.CONSTRAINT: {},
		}

	def _mapping(self, kind: RuleKind) -> Dict[str, RuleResult]:
		if kind not in self._results:
			raise ValueError(f"results can only be stored for concepts and constraints, not {kind.value}")
		return self._results[kind]

	def record(self, kind: RuleKind, rule_id: str, result: RuleResult) -> None:
		"""Store or overwrite the result of a rule."""
		results = self._mapping(kind)
		if rule_id in results:
			logger.debug("Replacing result of %s '%s'", kind.value, rule_id)
		results[rule_id] = result

	def lookup(self, kind: RuleKind, rule_id: str) -> Optional[RuleResult]:
		"""Return the result of a rule, None if it has not been executed."""
		return self._mapping(kind).get(rule_id)

	def results(self, kind: RuleKind) -> Dict[str, RuleResult]:
		return dict(self._mapping(kind))

	def __len__(self) -> int:
		return sum(len(results) for results in self._results.values())
