'''
Rule Result Feed

Purpose: Load executed rule results from a YAML feed.

Responsibilities:
- Read the feed file and validate its structure
- Build Rule, ExecutionResult and Report values per entry

Expected structure:

	rules:
	  - id: example:Concept
	    kind: concept
	    description: Labels all example nodes.
	    severity: minor
	    effective_severity: major
	    status: success
	    source: index.adoc
	    columns: [Count]
	    rows:
	      - Count: 3
	    reports:
	      - {type: image, url: images/diagram.png}
	      - {type: link, url: "https://example.org", label: Details}

Relative sources and local report paths are resolved against the directory
of the feed file.
'''

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List
from urllib.parse import urlparse

import yaml

from ADOC.Reporting.report_context import Report, ReportType
from ADOC.Results.rules import ExecutionResult, Rule, RuleKind, RuleSource, Severity, Status

__all__ = ["FeedEntry", "load_feed", "parse_feed"]


@dataclass(frozen=True)
class FeedEntry:
	result: ExecutionResult
	reports: List[Report] = field(default_factory=list)

	@property
	def rule(self) -> Rule:
		return self.result.rule


def _require_string(entry: Dict[str, Any], key: str, idx: int) -> str:
	value = entry.get(key)
	if not isinstance(value, str) or not value.strip():
		raise ValueError(f"rules[{idx}]['{key}'] must be a non-empty string")
	return value.strip()


def _parse_source(value: Any, base_dir: str, idx: int) -> RuleSource:
	if isinstance(value, str) and value.strip():
		return RuleSource(base_dir, value.strip())
	if isinstance(value, dict):
		directory = value.get("directory", ".")
		path = value.get("path")
		if not isinstance(directory, str) or not isinstance(path, str) or not path.strip():
			raise ValueError(f"rules[{idx}]['source'] needs a 'path' and an optional 'directory' string")
		return RuleSource(os.path.normpath(os.path.join(base_dir, directory)), path.strip())
	raise ValueError(f"rules[{idx}]['source'] must be a path or a mapping")


def _resolve_url(url: str, base_dir: str) -> str:
	"""Resolve relative local paths, keep URLs and absolute paths."""
	scheme = urlparse(url).scheme
	if scheme and len(scheme) > 1:
		return url
	if os.path.isabs(url):
		return url
	return os.path.normpath(os.path.join(base_dir, url))


def _parse_reports(value: Any, base_dir: str, idx: int) -> List[Report]:
	if value is None:
		return []
	if not isinstance(value, list):
		raise ValueError(f"rules[{idx}]['reports'] must be a list")
	reports = []
	for report_idx, item in enumerate(value):
		if not isinstance(item, dict):
			raise ValueError(f"rules[{idx}]['reports'][{report_idx}] must be a mapping")
		url = item.get("url")
		if not isinstance(url, str) or not url.strip():
			raise ValueError(f"rules[{idx}]['reports'][{report_idx}]['url'] must be a non-empty string")
		label = item.get("label", "")
		if not isinstance(label, str):
			raise ValueError(f"rules[{idx}]['reports'][{report_idx}]['label'] must be a string")
		reports.append(Report(ReportType.parse(item.get("type")), _resolve_url(url.strip(), base_dir), label))
	return reports


def _parse_entry(entry: Any, base_dir: str, idx: int) -> FeedEntry:
	if not isinstance(entry, dict):
		raise ValueError(f"rules[{idx}] must be a mapping")

	severity = Severity.parse(entry.get("severity", "minor"))
	effective = Severity.parse(entry.get("effective_severity", severity))
	source = _parse_source(entry["source"], base_dir, idx) if entry.get("source") is not None else None

	description = entry.get("description", "")
	if not isinstance(description, str):
		raise ValueError(f"rules[{idx}]['description'] must be a string")

	rule = Rule(
		id=_require_string(entry, "id", idx),
		kind=RuleKind.parse(entry.get("kind")),
		severity=severity,
		description=description.strip(),
		source=source,
	)

	columns = entry.get("columns")
	if columns is not None:
		if not isinstance(columns, list) or not all(isinstance(c, str) for c in columns):
			raise ValueError(f"rules[{idx}]['columns'] must be a list of strings")

	rows = entry.get("rows", []) or []
	if not isinstance(rows, list):
		raise ValueError(f"rules[{idx}]['rows'] must be a list")
	for row_idx, row in enumerate(rows):
		if not isinstance(row, dict):
			raise ValueError(f"rules[{idx}]['rows'][{row_idx}] must be a mapping")

	result = ExecutionResult(
		rule=rule,
		status=Status.parse(entry.get("status")),
		severity=effective,
		column_names=columns,
		rows=rows,
	)
	return FeedEntry(result=result, reports=_parse_reports(entry.get("reports"), base_dir, idx))


def parse_feed(data: Any, base_dir: str = ".") -> List[FeedEntry]:
	"""
	Build feed entries from already parsed YAML data.

	Raises:
		ValueError: If the structure is invalid
	"""
	if data is None:
		return []
	if not isinstance(data, dict):
		raise ValueError("feed must be a mapping with a 'rules' list")
	rules = data.get("rules", []) or []
	if not isinstance(rules, list):
		raise ValueError("feed['rules'] must be a list")
	return [_parse_entry(entry, base_dir, idx) for idx, entry in enumerate(rules)]


def load_feed(path: str) -> List[FeedEntry]:
	"""
	Load a rule result feed from a YAML file.

	Raises:
		FileNotFoundError: If the file does not exist
		ValueError: If the YAML is malformed or the structure is invalid
	"""
	if not os.path.isfile(path):
		raise FileNotFoundError(f"Result feed not found: {path}")
	with open(path, "r", encoding="utf-8") as f:
		try:
			data = yaml.safe_load(f)
		except yaml.YAMLError as e:
			raise ValueError(f"Malformed YAML in {path}: {e}") from e
	return parse_feed(data, os.path.dirname(os.path.abspath(path)))
