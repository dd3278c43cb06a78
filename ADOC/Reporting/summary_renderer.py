"""
Rule Summary Renderer

Purpose: Replace include::jQA:Summary[] directives with a result overview.

Responsibilities:
- Transform recorded results into template-friendly rows
- Render constraint and concept tables with Jinja2
- Swap summary include blocks for the rendered HTML

Design notes:
- Constraints first, then concepts, both sorted by rule id
- Rule ids link to the rule block anchors in the same document
- Unknown include targets are left untouched
"""

import logging
from typing import Any, Dict, List

from jinja2 import Environment

from ADOC.Document.tree import Document
from ADOC.Enrichment.tree_mutator import CONTENT_CONTEXT
from ADOC.Render.result_renderer import status_color
from ADOC.Results.result_store import ResultStore
from ADOC.Results.rules import RuleKind

__all__ = ["SUMMARY_TARGET", "SummaryDataTransformer", "SummaryIncludeProcessor"]

logger = logging.getLogger(__name__)

SUMMARY_TARGET = "jQA:Summary"

_SUMMARY_TEMPLATE = """<div class="summary">
{% for section in sections %}
<div class="title">{{ section.title }}</div>
{% if section.rules %}
<table>
<thead>
<tr>
<th>Id</th>
<th>Description</th>
<th>Severity</th>
<th>Status</th>
</tr>
</thead>
<tbody>
{% for rule in section.rules %}
<tr>
<td><a href="#{{ rule.id }}">{{ rule.id }}</a></td>
<td>{{ rule.description }}</td>
<td>{{ rule.severity }}</td>
<td class="{{ rule.color }}">{{ rule.status }}</td>
</tr>
{% endfor %}
</tbody>
</table>
{% else %}
<p>No {{ section.title | lower }} executed.</p>
{% endif %}
{% endfor %}
</div>"""


class SummaryDataTransformer:
	"""Transform recorded rule results into template-ready format."""

	def __init__(self, result_store: ResultStore) -> None:
		self._results = result_store

	def transform_rules(self, kind: RuleKind) -> List[Dict[str, str]]:
		"""
		Rows of one summary table.

		Extracts: id, description, severity, status, color
		"""
		rows = []
		results = self._results.results(kind)
		for rule_id in sorted(results):
			result = results[rule_id]
			rows.append({
				"id": rule_id,
				"description": result.rule.description,
				"severity": result.rule.severity.info(result.effective_severity),
				"status": result.status.name,
				"color": status_color(result.status)
			})
		return rows

	def transform(self) -> Dict[str, Any]:
		"""
		Transform all data into template context.

		Returns dict with all template variables.
		"""
		return {
			"sections": [
				{"title": "Constraints", "rules": self.transform_rules(RuleKind.CONSTRAINT)},
				{"title": "Concepts", "rules": self.transform_rules(RuleKind.CONCEPT)},
			]
		}


class SummaryIncludeProcessor:
	"""Resolve summary include directives of a document."""

	def __init__(self, result_store: ResultStore) -> None:
		self._transformer = SummaryDataTransformer(result_store)
		env = Environment(autoescape=True, trim_blocks=True, lstrip_blocks=True)
		self._template = env.from_string(_SUMMARY_TEMPLATE)

	def render(self) -> str:
		return self._template.render(**self._transformer.transform())

	def process(self, document: Document) -> int:
		"""
		Replace every summary include block by the rendered summary.

		Returns:
			Number of replaced include blocks
		"""
		includes = [
			block for block in document.walk()
			if block.context == "include" and block.attributes.get("target") == SUMMARY_TARGET
		]
		if not includes:
			return 0
		content = self.render().splitlines()
		for block in includes:
			document.replace(block, document.create_block(CONTENT_CONTEXT, lines=content))
		logger.debug("Resolved %d summary include(s)", len(includes))
		return len(includes)
