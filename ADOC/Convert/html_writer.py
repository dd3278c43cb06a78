"""
HTML Writer

Purpose: Convert enriched Document trees to standalone HTML5 files.

Responsibilities:
- Load the Jinja2 document template (inline fallback if the file is missing)
- Render sections, paragraphs, listings, passthrough content and rule blocks
- Write the HTML file next to the other reports

Design notes:
- Autoescaping is on; only passthrough blocks are written raw
- The toggle script is only emitted if a block carries the rule-toggle role
"""

import logging
import os
from typing import Optional

from jinja2 import Environment, FileSystemLoader, Template

from ADOC.Document.tree import Document
from ADOC.Toggle.rule_toggle import TOGGLE_ROLE

__all__ = ["HtmlTemplateLoader", "HtmlWriter"]

logger = logging.getLogger(__name__)

TEMPLATE_FILE = "document.html.j2"


class HtmlTemplateLoader:
	"""Load and manage the Jinja2 template for HTML conversion."""

	def __init__(self, template_dir: Optional[str] = None) -> None:
		self._template_dir = template_dir or self._get_template_dir()

	def _get_template_dir(self) -> str:
		"""Get absolute path to templates directory."""
		convert_dir = os.path.dirname(os.path.abspath(__file__))
		return os.path.join(convert_dir, "templates")

	def _create_inline_fallback(self) -> str:
		"""
		Create inline template as fallback if file not found.

		Returns plain HTML without styling or scripts.
		"""
		return """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>{{ document.title or "Rule Report" }}</title>
</head>
<body>
{% macro render_block(block) %}
{% if block.context == "section" %}
<h{{ block.level + 1 }}{% if block.id %} id="{{ block.id }}"{% endif %}>{{ block.title }}</h{{ block.level + 1 }}>
{% for child in children(block) %}
{{ render_block(child) }}
{% endfor %}
{% elif block.context == "paragraph" %}
<p>{{ block.lines | join("\n") }}</p>
{% elif block.context == "listing" %}
<div class="listingblock{% for role in block.roles %} {{ role }}{% endfor %}"{% if block.id %} id="{{ block.id }}"{% endif %}>
<div class="title">{{ block.title }}</div>
<pre>{{ block.lines | join("\n") }}</pre>
</div>
{% elif block.context == "pass" %}
{{ block.lines | join("\n") | safe }}
{% endif %}
{% endmacro %}
<h1>{{ document.title }}</h1>
{% for child in children(document.root) %}
{{ render_block(child) }}
{% endfor %}
</body>
</html>
"""

	def load_template(self) -> Template:
		"""
		Load Jinja2 template from file or use inline fallback.

		Returns:
			Jinja2 Template object
		"""
		template_path = os.path.join(self._template_dir, TEMPLATE_FILE)

		if os.path.isfile(template_path):
			env = Environment(
				loader=FileSystemLoader(self._template_dir),
				autoescape=True,
				trim_blocks=True,
				lstrip_blocks=True
			)
			return env.get_template(TEMPLATE_FILE)

		logger.warning("Template %s not found, using inline template", template_path)
		env = Environment(
			autoescape=True,
			trim_blocks=True,
			lstrip_blocks=True
		)
		return env.from_string(self._create_inline_fallback())


class HtmlWriter:
	"""Render documents to HTML and write them to disk."""

	def __init__(self, template_loader: Optional[HtmlTemplateLoader] = None) -> None:
		self._template = (template_loader or HtmlTemplateLoader()).load_template()

	def render(self, document: Document) -> str:
		toggle = any(block.has_role(TOGGLE_ROLE) for block in document.walk())
		return self._template.render(document=document, children=document.children, toggle=toggle)

	def write(self, document: Document, path: str) -> str:
		"""
		Write a document as HTML.

		Args:
			document: Enriched document
			path: Target HTML file, parent directories are created

		Returns:
			Path of the written file
		"""
		content = self.render(document)
		directory = os.path.dirname(path)
		if directory:
			os.makedirs(directory, exist_ok=True)
		with open(path, "w", encoding="utf-8") as f:
			f.write(content)
		return path
