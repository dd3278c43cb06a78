"""
Tree Mutator

Inserts rendered result fragments into the document right after the
block they belong to.
"""

from typing import List

from ADOC.Document.tree import Block, Document
from ADOC.errors import DocumentStructureError

__all__ = ["CONTENT_CONTEXT", "insert_after"]

# passthrough blocks are written to the output as they are
CONTENT_CONTEXT = "pass"


def insert_after(document: Document, block: Block, fragment: List[str]) -> Block:
	"""
	Insert a new content block holding the fragment as the next sibling of a block.

	Args:
		document: Document owning the block
		block: Block to insert after, must have a parent
		fragment: Raw markup lines of the new block

	Returns:
		The inserted block (no attributes, fragment as lines)

	Raises:
		DocumentStructureError: If the block has no parent
	"""
	parent = document.parent(block)
	if parent is None:
		raise DocumentStructureError(f"Block '{block.id or block.handle}' has no parent")
	position = document.index_of(block)
	content = document.create_block(CONTENT_CONTEXT, lines=list(fragment))
	return document.insert(parent, position + 1, content)
