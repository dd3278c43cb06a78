"""
AsciiDoc Loader

Purpose: Parse rule documents into a Document tree.

Responsibilities:
- Read the AsciiDoc subset used by rule files (titles, sections, anchors,
  block attributes, listing/passthrough blocks, paragraphs, includes)
- Expand includes of existing files relative to the including file
- Keep unresolved includes (e.g. include::jQA:Summary[]) as include blocks

Design notes:
- Block anchors, attribute lines and titles apply to the next block
- Malformed input raises ValueError naming the source and line
"""

import logging
import os
import re
from typing import Any, Dict, List, Optional, Tuple

from ADOC.Document.tree import Block, Document

__all__ = ["AsciidocLoader", "parse_attribute_list"]

logger = logging.getLogger(__name__)

_SECTION_RE = re.compile(r"^(={1,6})\s+(\S.*)$")
_ANCHOR_RE = re.compile(r"^\[\[([^\[\],\s]+)(?:,[^\]]*)?\]\]$")
_ATTRIBUTE_LIST_RE = re.compile(r"^\[([^\[\]].*)\]$")
_BLOCK_TITLE_RE = re.compile(r"^\.([^.\s].*)$")
_INCLUDE_RE = re.compile(r"^include::(\S+?)\[(.*)\]$")
_DOCUMENT_ATTRIBUTE_RE = re.compile(r"^:([\w-]+):\s*(.*)$")
_ATTRIBUTE_TOKEN_RE = re.compile(r'(?:[^,"]|"[^"]*")+')

_LISTING_DELIMITER = "----"
_PASS_DELIMITER = "++++"
_COMMENT_DELIMITER = "////"

_MAX_INCLUDE_DEPTH = 64

# (text, source, line number)
Line = Tuple[str, str, int]


def parse_attribute_list(text: str) -> Dict[str, Any]:
	"""
	Parse a block attribute list such as 'source,cypher,role=concept'.

	The first positional attribute is the block style, the second the
	source language. A positional '#id' sets the block id.
	"""
	attributes: Dict[str, Any] = {}
	positional = 0
	for token in _ATTRIBUTE_TOKEN_RE.findall(text):
		token = token.strip()
		if not token:
			continue
		if "=" in token:
			key, value = token.split("=", 1)
			attributes[key.strip()] = value.strip().strip('"')
			continue
		token = token.strip('"')
		if token.startswith("#"):
			attributes["id"] = token[1:]
			continue
		positional += 1
		if positional == 1:
			attributes["style"] = token
		elif positional == 2:
			attributes["language"] = token
		else:
			attributes[str(positional)] = token
	return attributes


class AsciidocLoader:
	"""Load AsciiDoc rule files into Document trees."""

	def load_file(self, path: str) -> Document:
		"""
		Load a document from disk.

		Raises:
			FileNotFoundError: If the file does not exist
			ValueError: If the document is malformed
		"""
		if not os.path.isfile(path):
			raise FileNotFoundError(f"Document not found: {path}")
		lines = self._read_lines(path, 0)
		return self._parse(lines)

	def load_string(self, text: str, base_dir: str = ".", source: str = "<string>") -> Document:
		lines = self._expand(text.splitlines(), source, base_dir, 0)
		return self._parse(lines)

	def _read_lines(self, path: str, depth: int) -> List[Line]:
		with open(path, "r", encoding="utf-8") as f:
			raw_lines = f.read().splitlines()
		return self._expand(raw_lines, path, os.path.dirname(os.path.abspath(path)), depth)

	def _expand(self, raw_lines: List[str], source: str, base_dir: str, depth: int) -> List[Line]:
		"""Replace includes of existing files by their lines."""
		if depth > _MAX_INCLUDE_DEPTH:
			raise ValueError(f"{source}: includes nested deeper than {_MAX_INCLUDE_DEPTH} levels")
		lines: List[Line] = []
		verbatim: Optional[str] = None
		for number, text in enumerate(raw_lines, start=1):
			stripped = text.rstrip()
			if stripped in (_LISTING_DELIMITER, _PASS_DELIMITER, _COMMENT_DELIMITER):
				verbatim = None if verbatim == stripped else (verbatim or stripped)
			match = _INCLUDE_RE.match(stripped) if verbatim is None else None
			if match:
				target = os.path.join(base_dir, match.group(1))
				if os.path.isfile(target):
					logger.debug("Including %s", target)
					lines.extend(self._read_lines(target, depth + 1))
					continue
			lines.append((stripped, source, number))
		return lines

	def _parse(self, lines: List[Line]) -> Document:
		document = Document()
		sections: List[Tuple[int, Block]] = [(0, document.root)]
		pending: Dict[str, Any] = {}
		pending_title = ""
		paragraph: List[str] = []
		in_header = True

		def flush_paragraph() -> None:
			nonlocal pending, pending_title
			if paragraph:
				block = document.create_block("paragraph", lines=list(paragraph), attributes=pending, title=pending_title)
				document.append(sections[-1][1], block)
				paragraph.clear()
				pending, pending_title = {}, ""

		i = 0
		while i < len(lines):
			text, source, number = lines[i]
			i += 1

			if paragraph and text.strip():
				if not self._starts_block(text):
					paragraph.append(text)
					continue
			if not text.strip():
				flush_paragraph()
				continue
			flush_paragraph()

			if text == _COMMENT_DELIMITER:
				i = self._skip_to(lines, i, _COMMENT_DELIMITER, source, number)[1]
				continue
			if text.startswith("//"):
				continue

			if in_header and not document.root.title:
				match = _SECTION_RE.match(text)
				if match and len(match.group(1)) == 1:
					document.root.title = match.group(2).strip()
					continue
			match = _DOCUMENT_ATTRIBUTE_RE.match(text)
			if in_header and match:
				document.root.attributes[match.group(1)] = match.group(2)
				continue
			in_header = False

			match = _ANCHOR_RE.match(text)
			if match:
				pending["id"] = match.group(1)
				continue
			match = _ATTRIBUTE_LIST_RE.match(text)
			if match:
				pending.update(parse_attribute_list(match.group(1)))
				continue
			match = _BLOCK_TITLE_RE.match(text)
			if match:
				pending_title = match.group(1).strip()
				continue

			match = _SECTION_RE.match(text)
			if match:
				level = len(match.group(1)) - 1
				if level == 0:
					raise ValueError(f"{source}:{number}: document title must be the first line")
				while sections[-1][0] >= level:
					sections.pop()
				section = document.create_block("section", attributes=pending, title=match.group(2).strip(), level=level)
				document.append(sections[-1][1], section)
				sections.append((level, section))
				pending, pending_title = {}, ""
				continue

			if text in (_LISTING_DELIMITER, _PASS_DELIMITER):
				content, i = self._skip_to(lines, i, text, source, number)
				context = "listing" if text == _LISTING_DELIMITER else "pass"
				block = document.create_block(context, lines=content, attributes=pending, title=pending_title)
				document.append(sections[-1][1], block)
				pending, pending_title = {}, ""
				continue

			match = _INCLUDE_RE.match(text)
			if match:
				attributes = dict(pending)
				attributes["target"] = match.group(1)
				attributes.update(parse_attribute_list(match.group(2)))
				block = document.create_block("include", attributes=attributes, title=pending_title)
				document.append(sections[-1][1], block)
				pending, pending_title = {}, ""
				continue

			paragraph.append(text)

		flush_paragraph()
		return document

	def _starts_block(self, text: str) -> bool:
		if text in (_LISTING_DELIMITER, _PASS_DELIMITER, _COMMENT_DELIMITER):
			return True
		if _SECTION_RE.match(text) or _ANCHOR_RE.match(text) or _INCLUDE_RE.match(text):
			return True
		if _ATTRIBUTE_LIST_RE.match(text):
			return True
		return False

	def _skip_to(self, lines: List[Line], start: int, delimiter: str, source: str, number: int) -> Tuple[List[str], int]:
		"""Collect lines up to the closing delimiter; returns them and the index after it."""
		content: List[str] = []
		i = start
		while i < len(lines):
			if lines[i][0] == delimiter:
				return content, i + 1
			content.append(lines[i][0])
			i += 1
		raise ValueError(f"{source}:{number}: unterminated block, expected closing '{delimiter}'")
