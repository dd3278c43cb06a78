"""
Report configuration.

Plugin properties are flat dotted keys, either passed directly or loaded
from a YAML file:

	asciidoc.report.directory: target/report/asciidoc
	asciidoc.report.rule.directory: jqassistant
	asciidoc.report.file.include: "index.adoc, *-rules.adoc"
	asciidoc.report.file.exclude: "draft/*"
"""

import os
from typing import Any, Dict, Optional

import yaml

__all__ = [
	"PROPERTY_DIRECTORY",
	"PROPERTY_RULE_DIRECTORY",
	"PROPERTY_FILE_INCLUDE",
	"PROPERTY_FILE_EXCLUDE",
	"ReportConfigLoader",
]

PROPERTY_DIRECTORY = "asciidoc.report.directory"
PROPERTY_RULE_DIRECTORY = "asciidoc.report.rule.directory"
PROPERTY_FILE_INCLUDE = "asciidoc.report.file.include"
PROPERTY_FILE_EXCLUDE = "asciidoc.report.file.exclude"

KNOWN_PROPERTIES = {PROPERTY_DIRECTORY, PROPERTY_RULE_DIRECTORY, PROPERTY_FILE_INCLUDE, PROPERTY_FILE_EXCLUDE}


class ReportConfigLoader:
	"""Load report plugin properties from YAML."""

	def __init__(self, config_path: str) -> None:
		self._config_path = config_path
		self._config = self._load()

	def _load(self) -> Dict[str, Any]:
		if not os.path.isfile(self._config_path):
			raise FileNotFoundError(f"Report config not found: {self._config_path}")
		with open(self._config_path, "r", encoding="utf-8") as f:
			data = yaml.safe_load(f) or {}
		if not isinstance(data, dict):
			raise ValueError(f"Report config must be a mapping: {self._config_path}")
		for key, value in data.items():
			if key not in KNOWN_PROPERTIES:
				raise ValueError(f"Unknown report property '{key}' in {self._config_path}")
			if value is not None and not isinstance(value, str):
				raise ValueError(f"Report property '{key}' must be a string")
		return data

	def _resolve(self, value: Optional[str]) -> Optional[str]:
		"""Resolve a directory relative to the config file."""
		if not value:
			return None
		config_dir = os.path.dirname(os.path.abspath(self._config_path))
		return os.path.normpath(os.path.join(config_dir, value))

	@property
	def properties(self) -> Dict[str, Any]:
		"""Properties with directories made absolute."""
		properties = {key: value for key, value in self._config.items() if value is not None}
		for key in (PROPERTY_DIRECTORY, PROPERTY_RULE_DIRECTORY):
			if key in properties:
				properties[key] = self._resolve(properties[key])
		return properties
