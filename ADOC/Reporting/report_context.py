"""
Report Context

Purpose: Share report output locations and attached reports between plugins.

Responsibilities:
- Provide (and create) per-plugin report directories below the output root
- Keep the images and links other plugins attached to a rule, in order
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from ADOC.Results.rules import Rule

__all__ = ["ReportType", "Report", "ReportContext"]

logger = logging.getLogger(__name__)


class ReportType(Enum):
	IMAGE = "image"
	LINK = "link"

	@classmethod
	def parse(cls, value) -> "ReportType":
		if isinstance(value, ReportType):
			return value
		if not isinstance(value, str) or not value.strip():
			raise ValueError("report type must be a non-empty string")
		try:
			return cls(value.strip().lower())
		except ValueError:
			raise ValueError(f"report type must be one of {[t.value for t in cls]}") from None


@dataclass(frozen=True)
class Report:
	"""
	A resource attached to a rule result.

	url is either a local path, a file: URL or an absolute URL of another
	scheme. label is shown for links.
	"""

	report_type: ReportType
	url: str
	label: str = ""

	def __post_init__(self) -> None:
		if not isinstance(self.url, str) or not self.url.strip():
			raise ValueError("report url must be a non-empty string")


class ReportContext:
	"""Output directory and rule attachments of one reporting session."""

	def __init__(self, output_directory: str) -> None:
		self._output_directory = os.path.abspath(output_directory)
		self._reports: Dict[str, List[Report]] = {}

	@property
	def output_directory(self) -> str:
		return self._output_directory

	def report_directory(self, name: str) -> str:
		"""Return the directory reserved for a report, creating it if needed."""
		directory = os.path.join(self._output_directory, name)
		if not os.path.isdir(directory):
			os.makedirs(directory, exist_ok=True)
			logger.debug("Created report directory %s", directory)
		return directory

	def add_report(self, rule: Rule, report: Report) -> None:
		self._reports.setdefault(rule.id, []).append(report)

	def get_reports(self, rule: Optional[Rule]) -> List[Report]:
		"""Reports attached to a rule in the order they were added."""
		if rule is None:
			return []
		return list(self._reports.get(rule.id, []))
