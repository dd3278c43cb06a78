"""
Rule Model

Purpose: Describe executed rules as delivered by the analysis engine.

Responsibilities:
- Severity levels and their human-readable info text
- Result status classification
- Rule identity (id, kind, declared severity, source file)
- Raw execution results before they are turned into RuleResult values

Design notes:
- Enums are closed; parsing is case-insensitive and strict
- Everything here is immutable
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

__all__ = ["Severity", "Status", "RuleKind", "RuleSource", "Rule", "ExecutionResult"]


class Severity(Enum):
	"""Rule severity, ordered from most to least severe."""

	BLOCKER = 0
	CRITICAL = 1
	MAJOR = 2
	MINOR = 3
	INFO = 4

	@property
	def level(self) -> int:
		return self.value

	@property
	def label(self) -> str:
		return self.name

	def info(self, effective: Optional["Severity"] = None) -> str:
		"""
		Describe the severity actually applied to this rule.

		Args:
			effective: Severity after overrides, None if not overridden

		Returns:
			"MAJOR" if both are equal, "MAJOR (from MINOR)" if the declared
			severity MINOR was overridden by MAJOR
		"""
		if effective is None or effective is self:
			return self.label
		return f"{effective.label} (from {self.label})"

	@classmethod
	def parse(cls, value: Any) -> "Severity":
		if isinstance(value, Severity):
			return value
		if not isinstance(value, str) or not value.strip():
			raise ValueError("severity must be a non-empty string")
		try:
			return cls[value.strip().upper()]
		except KeyError:
			raise ValueError(f"severity must be one of {[s.name.lower() for s in cls]}") from None


class Status(Enum):
	"""Outcome of a rule execution."""

	SUCCESS = "success"
	WARNING = "warning"
	FAILURE = "failure"
	SKIPPED = "skipped"
	ERROR = "error"

	@classmethod
	def parse(cls, value: Any) -> "Status":
		if isinstance(value, Status):
			return value
		if not isinstance(value, str) or not value.strip():
			raise ValueError("status must be a non-empty string")
		try:
			return cls[value.strip().upper()]
		except KeyError:
			raise ValueError(f"status must be one of {[s.value for s in cls]}") from None


class RuleKind(Enum):
	CONCEPT = "concept"
	CONSTRAINT = "constraint"
	GROUP = "group"

	@classmethod
	def parse(cls, value: Any) -> "RuleKind":
		if isinstance(value, RuleKind):
			return value
		if not isinstance(value, str) or not value.strip():
			raise ValueError("kind must be a non-empty string")
		try:
			return cls(value.strip().lower())
		except ValueError:
			raise ValueError(f"kind must be one of {[k.value for k in cls]}") from None


@dataclass(frozen=True)
class RuleSource:
	"""File a rule was declared in, split into base directory and relative path."""

	directory: str
	relative_path: str

	@property
	def path(self) -> str:
		return os.path.join(self.directory, self.relative_path)


@dataclass(frozen=True)
class Rule:
	id: str
	kind: RuleKind
	severity: Severity = Severity.MINOR
	description: str = ""
	source: Optional[RuleSource] = None

	def __post_init__(self) -> None:
		if not isinstance(self.id, str) or not self.id.strip():
			raise ValueError("rule id must be a non-empty string")


@dataclass(frozen=True)
class ExecutionResult:
	"""
	Raw outcome of one rule execution as produced by the analysis engine.

	Row values are arbitrary objects; a value may be an iterable holding
	several values for the same cell. column_names is None when the
	engine returned no column metadata.
	"""

	rule: Rule
	status: Status
	severity: Severity
	column_names: Optional[List[str]] = None
	rows: List[Dict[str, Any]] = field(default_factory=list)
