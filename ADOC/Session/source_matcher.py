"""
Source File Matcher

Purpose: Select the rule documents to render.

Responsibilities:
- Scan an explicitly configured rule directory, or
- Fall back to the files the executed rules were declared in
- Apply comma-separated include/exclude glob patterns to relative paths
"""

import fnmatch
import os
from typing import Dict, Iterable, List, Optional

from ADOC.Results.rules import RuleSource

__all__ = ["DEFAULT_INCLUDE", "SourceFileMatcher"]

DEFAULT_INCLUDE = "index.adoc"


def _patterns(value: Optional[str]) -> List[str]:
	if not value:
		return []
	return [pattern.strip() for pattern in value.split(",") if pattern.strip()]


class SourceFileMatcher:
	"""Group matching rule documents by their base directory."""

	def __init__(self, rule_directory: Optional[str] = None, include: Optional[str] = None, exclude: Optional[str] = None) -> None:
		self._rule_directory = os.path.abspath(rule_directory) if rule_directory else None
		self._include = _patterns(include) or [DEFAULT_INCLUDE]
		self._exclude = _patterns(exclude)

	def accepts(self, relative_path: str) -> bool:
		path = relative_path.replace("\\", "/")
		if not any(fnmatch.fnmatch(path, pattern) for pattern in self._include):
			return False
		return not any(fnmatch.fnmatch(path, pattern) for pattern in self._exclude)

	def match(self, rule_sources: Iterable[RuleSource]) -> Dict[str, List[str]]:
		"""
		Return base directory -> rule documents to render.

		Args:
			rule_sources: Sources of the rules seen in this session, only
				used when no rule directory is configured

		Returns:
			Sorted absolute file paths per base directory; empty if nothing matches

		Raises:
			FileNotFoundError: If the configured rule directory does not exist
		"""
		if self._rule_directory is not None:
			files = self._scan_rule_directory()
			return {self._rule_directory: files} if files else {}

		files: Dict[str, List[str]] = {}
		for source in rule_sources:
			if not self.accepts(source.relative_path):
				continue
			directory = os.path.abspath(source.directory)
			path = os.path.join(directory, source.relative_path)
			if os.path.isfile(path):
				files.setdefault(directory, [])
				if path not in files[directory]:
					files[directory].append(path)
		return {directory: sorted(paths) for directory, paths in sorted(files.items())}

	def _scan_rule_directory(self) -> List[str]:
		if not os.path.isdir(self._rule_directory):
			raise FileNotFoundError(f"Rule directory not found: {self._rule_directory}")
		files = []
		for root, dirs, names in os.walk(self._rule_directory):
			dirs.sort()
			for name in sorted(names):
				path = os.path.join(root, name)
				if self.accepts(os.path.relpath(path, self._rule_directory)):
					files.append(path)
		return sorted(files)
