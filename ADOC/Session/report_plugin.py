"""
Rule Document Report Plugin

Purpose: Drive one reporting session from rule execution to HTML files.

Responsibilities:
- configure(): resolve report and rule directories, file filters
- begin(): start a session with an empty result store
- begin_group/begin_concept/begin_constraint(): remember rule sources
- set_result(): record concept and constraint results
- end(): load, enrich, annotate and convert every matching rule document

Design notes:
- Results are complete before any document is rendered
- Each document is written as soon as it is converted; the first failure
  aborts the remaining documents
"""

import logging
import os
from typing import Any, Dict, List, Optional, Set

from ADOC.Convert.asciidoc_loader import AsciidocLoader
from ADOC.Convert.html_writer import HtmlWriter
from ADOC.Enrichment.enricher import DocumentEnricher
from ADOC.Render.result_renderer import ResultRenderer
from ADOC.Reporting.report_context import ReportContext
from ADOC.Reporting.summary_renderer import SummaryIncludeProcessor
from ADOC.Results.result_store import ResultStore, build_rule_result
from ADOC.Results.rules import ExecutionResult, Rule, RuleKind, RuleSource
from ADOC.Session.config import (
	PROPERTY_DIRECTORY,
	PROPERTY_FILE_EXCLUDE,
	PROPERTY_FILE_INCLUDE,
	PROPERTY_RULE_DIRECTORY,
)
from ADOC.Session.source_matcher import SourceFileMatcher
from ADOC.Toggle.rule_toggle import RuleToggleAnnotator
from ADOC.errors import ReportConversionError, ReportingError

__all__ = ["DEFAULT_REPORT_DIRECTORY", "DocumentReportPlugin"]

logger = logging.getLogger(__name__)

DEFAULT_REPORT_DIRECTORY = "asciidoc"


class DocumentReportPlugin:
	"""Render rule documents enriched with the results of a session."""

	def __init__(self, loader: Optional[AsciidocLoader] = None, writer: Optional[HtmlWriter] = None) -> None:
		self._loader = loader or AsciidocLoader()
		self._writer = writer
		self._report_context: Optional[ReportContext] = None
		self._report_directory: Optional[str] = None
		self._source_matcher: Optional[SourceFileMatcher] = None
		self._rule_sources: Optional[Set[RuleSource]] = None
		self._results: Optional[ResultStore] = None

	@property
	def report_directory(self) -> Optional[str]:
		return self._report_directory

	@property
	def results(self) -> Optional[ResultStore]:
		return self._results

	def configure(self, report_context: ReportContext, properties: Dict[str, Any]) -> None:
		"""
		Configure output directory and document selection.

		Args:
			report_context: Context shared by all reports of the session
			properties: Plugin properties (see ADOC.Session.config)
		"""
		self._report_context = report_context
		directory = properties.get(PROPERTY_DIRECTORY)
		if directory:
			self._report_directory = os.path.abspath(directory)
		else:
			self._report_directory = report_context.report_directory(DEFAULT_REPORT_DIRECTORY)
		if not os.path.isdir(self._report_directory):
			os.makedirs(self._report_directory, exist_ok=True)
			logger.info("Created directory '%s'.", self._report_directory)
		self._source_matcher = SourceFileMatcher(
			properties.get(PROPERTY_RULE_DIRECTORY),
			properties.get(PROPERTY_FILE_INCLUDE),
			properties.get(PROPERTY_FILE_EXCLUDE),
		)

	def begin(self) -> None:
		self._rule_sources = set()
		self._results = ResultStore()

	def _require_session(self) -> None:
		if self._report_context is None:
			raise ReportingError("Plugin has not been configured")
		if self._results is None or self._rule_sources is None:
			raise ReportingError("No reporting session in progress, call begin() first")

	def begin_group(self, group: Rule) -> None:
		self._add_rule_source(group)

	def begin_concept(self, concept: Rule) -> None:
		self._add_rule_source(concept)

	def begin_constraint(self, constraint: Rule) -> None:
		self._add_rule_source(constraint)

	def _add_rule_source(self, rule: Rule) -> None:
		self._require_session()
		if rule.source is not None:
			self._rule_sources.add(rule.source)

	def set_result(self, result: ExecutionResult) -> None:
		"""Collect the results of executed concepts and constraints."""
		self._require_session()
		rule = result.rule
		if rule.kind in (RuleKind.CONCEPT, RuleKind.CONSTRAINT):
			self._results.record(rule.kind, rule.id, build_rule_result(result))

	def end(self) -> List[str]:
		"""
		Render all matching rule documents.

		Returns:
			Paths of the written HTML files

		Raises:
			ReportConversionError: If a document cannot be converted
		"""
		self._require_session()
		files = self._source_matcher.match(self._rule_sources)
		written: List[str] = []
		if not files:
			logger.info("No rule documents to render.")
			return written

		renderer = ResultRenderer(self._report_context, self._report_directory)
		enricher = DocumentEnricher(self._results, renderer)
		annotator = RuleToggleAnnotator(self._results)
		summary = SummaryIncludeProcessor(self._results)
		writer = self._writer or HtmlWriter()

		logger.info("Writing to report directory %s", self._report_directory)
		for base_dir, paths in files.items():
			for path in paths:
				logger.info("-> %s", path)
				target = self._target_path(base_dir, path)
				try:
					document = self._loader.load_file(path)
					summary.process(document)
					enricher.process(document)
					annotator.annotate(document)
					writer.write(document, target)
				except (ReportingError, OSError, ValueError) as e:
					raise ReportConversionError(f"Cannot render {path}: {e}") from e
				written.append(target)
		logger.info("Rendered %d document(s) successfully.", len(written))
		return written

	def _target_path(self, base_dir: str, path: str) -> str:
		relative_path = os.path.relpath(path, base_dir)
		name = os.path.splitext(relative_path)[0] + ".html"
		return os.path.join(self._report_directory, name)
