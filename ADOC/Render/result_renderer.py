"""
Rule Result Renderer

Purpose: Turn one rule result into the HTML shown below its rule block.

Responsibilities:
- Status and severity line for every executed rule
- Attached images and links when the rule has reports
- Full result table otherwise
- Report URLs relative to the report directory for local files

Design notes:
- Output is a list of raw HTML fragments, inserted verbatim into the document
- Cell values, link labels and URLs are HTML-escaped
- Jinja2 template for the table, autoescape on
"""

import logging
import os
from typing import List, Optional
from urllib.parse import urlparse
from urllib.request import url2pathname

from jinja2 import Environment
from markupsafe import escape

from ADOC.Reporting.report_context import Report, ReportContext, ReportType
from ADOC.Results.result_store import RuleResult
from ADOC.Results.rules import Status

__all__ = ["NOT_AVAILABLE", "STATUS_COLORS", "status_color", "ResultRenderer"]

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "Status: Not Available"

STATUS_COLORS = {
	Status.SUCCESS: "green",
	Status.WARNING: "yellow",
	Status.FAILURE: "red",
	Status.SKIPPED: "yellow",
	Status.ERROR: "red",
}

_LOCAL_HOSTS = ("", "localhost")

_TABLE_TEMPLATE = """<table>
<thead>
<tr>
{% for column in columns %}
<th>{{ column }}</th>
{% endfor %}
</tr>
</thead>
<tbody>
{% for row in rows %}
<tr>
{% for column in columns %}
<td>
{% for value in row.get(column, []) %}
{{ value }}
{% endfor %}
</td>
{% endfor %}
</tr>
{% endfor %}
</tbody>
</table>
"""


def status_color(status: Status) -> str:
	return STATUS_COLORS[status]


class ResultRenderer:
	"""Render RuleResult values as HTML fragments."""

	def __init__(self, report_context: ReportContext, report_directory: str) -> None:
		self._report_context = report_context
		self._report_directory = os.path.abspath(report_directory)
		env = Environment(autoescape=True, trim_blocks=True, lstrip_blocks=True)
		self._table_template = env.from_string(_TABLE_TEMPLATE)

	def render(self, result: Optional[RuleResult]) -> List[str]:
		"""
		Render a rule result.

		Args:
			result: Result of the rule, None if the rule was not executed

		Returns:
			HTML fragments to embed into the document
		"""
		if result is None:
			return [NOT_AVAILABLE]

		rule = result.rule
		content = [f'<div id="result({escape(rule.id)})">']
		content.append('<div class="paragraph">')
		content.append("<p>")
		content.append(self.render_status(result.status))
		content.append(self.render_severity(result))
		content.append("</p>")
		content.append("</div>")

		reports = self._report_context.get_reports(rule)
		if reports:
			for report in reports:
				content.append(self.render_report(report))
		else:
			content.append(self.render_table(result))

		content.append("</div>")
		return content

	def render_status(self, status: Status) -> str:
		return f'Status: <span class="{status_color(status)}">{status.name}</span>'

	def render_severity(self, result: RuleResult) -> str:
		"""Declared severity of the rule, described with the severity that was applied."""
		return f"Severity: {escape(result.rule.severity.info(result.effective_severity))}"

	def render_report(self, report: Report) -> str:
		url = self.report_url(report)
		if report.report_type is ReportType.IMAGE:
			return self.render_image(url)
		if report.report_type is ReportType.LINK:
			return self.render_link(url, report.label)
		raise ValueError(f"Unsupported report type: {report.report_type}")

	def render_image(self, url: str) -> str:
		"""Clickable image linking to the full resource."""
		return f'<div><a href="{escape(url)}"><img src="{escape(url)}"/></a></div>'

	def render_link(self, url: str, label: str) -> str:
		return f'<a href="{escape(url)}">{escape(label or url)}</a>'

	def render_table(self, result: RuleResult) -> str:
		return self._table_template.render(columns=result.column_names, rows=result.rows) + "\n"

	def report_url(self, report: Report) -> str:
		"""
		URL of a report as it is written into the document.

		Local resources become paths relative to the report directory so the
		output can be moved as a whole; other URLs are kept as they are.
		"""
		parsed = urlparse(report.url)
		# single letter schemes are windows drive letters
		if parsed.scheme and parsed.scheme != "file" and len(parsed.scheme) > 1:
			return report.url
		try:
			return self._relative_url(report.url, parsed.scheme == "file")
		except ValueError as e:
			logger.warning("Cannot determine path from URL '%s': %s", report.url, e)
			return report.url

	def _relative_url(self, url: str, is_file_url: bool) -> str:
		if is_file_url:
			parsed = urlparse(url)
			if parsed.netloc not in _LOCAL_HOSTS:
				raise ValueError(f"host '{parsed.netloc}' is not local")
			path = url2pathname(parsed.path)
		else:
			path = url
		relative_path = os.path.relpath(os.path.abspath(path), self._report_directory)
		return relative_path.replace("\\", "/")
