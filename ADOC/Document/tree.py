"""
Document Tree

Purpose: In-memory representation of a parsed document.

Responsibilities:
- Own every block of a document in a single arena
- Navigate parent/child relations through block handles
- Insert, append and replace blocks without breaking sibling order

Design notes:
- Blocks reference their parent and children by integer handle, never by
  object, so the tree has no reference cycles
- A block created by the document is detached until it is inserted
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

__all__ = ["Block", "Document"]


@dataclass
class Block:
	"""A content block: a section, paragraph, listing, passthrough or include."""

	handle: int
	context: str
	attributes: Dict[str, Any] = field(default_factory=dict)
	lines: List[str] = field(default_factory=list)
	title: str = ""
	level: int = 0
	parent: Optional[int] = None
	children: List[int] = field(default_factory=list)

	@property
	def id(self) -> Optional[str]:
		return self.attributes.get("id")

	@property
	def roles(self) -> List[str]:
		role = self.attributes.get("role") or ""
		return role.split()

	def has_role(self, name: str) -> bool:
		return name in self.roles

	def add_role(self, name: str) -> None:
		if not self.has_role(name):
			self.attributes["role"] = " ".join(self.roles + [name])


class Document:
	"""Arena of blocks rooted at a single document block."""

	def __init__(self, title: str = "", attributes: Optional[Dict[str, Any]] = None) -> None:
		self._blocks: Dict[int, Block] = {}
		self._next_handle = 0
		self.root = self.create_block("document", attributes=attributes, title=title)

	def create_block(
		self,
		context: str,
		lines: Optional[List[str]] = None,
		attributes: Optional[Dict[str, Any]] = None,
		title: str = "",
		level: int = 0,
	) -> Block:
		"""Create a detached block owned by this document."""
		block = Block(
			handle=self._next_handle,
			context=context,
			attributes=dict(attributes or {}),
			lines=list(lines or []),
			title=title,
			level=level,
		)
		self._blocks[block.handle] = block
		self._next_handle += 1
		return block

	def get(self, handle: int) -> Block:
		if handle not in self._blocks:
			raise KeyError(f"no block with handle {handle}")
		return self._blocks[handle]

	@property
	def title(self) -> str:
		return self.root.title

	def parent(self, block: Block) -> Optional[Block]:
		if block.parent is None:
			return None
		return self._blocks[block.parent]

	def children(self, block: Block) -> List[Block]:
		return [self._blocks[handle] for handle in block.children]

	def index_of(self, block: Block) -> int:
		"""Position of a block within its parent's children."""
		parent = self.parent(block)
		if parent is None:
			raise ValueError(f"block {block.handle} has no parent")
		return parent.children.index(block.handle)

	def _check_insertable(self, parent: Block, block: Block) -> None:
		if self._blocks.get(block.handle) is not block:
			raise ValueError(f"block {block.handle} does not belong to this document")
		if self._blocks.get(parent.handle) is not parent:
			raise ValueError(f"parent block {parent.handle} does not belong to this document")
		if block.parent is not None or block is self.root:
			raise ValueError(f"block {block.handle} is already attached")

	def insert(self, parent: Block, index: int, block: Block) -> Block:
		"""Insert a detached block at a position of the parent's children."""
		self._check_insertable(parent, block)
		if index < 0 or index > len(parent.children):
			raise IndexError(f"index {index} out of range for block {parent.handle}")
		parent.children.insert(index, block.handle)
		block.parent = parent.handle
		return block

	def append(self, parent: Block, block: Block) -> Block:
		return self.insert(parent, len(parent.children), block)

	def replace(self, old: Block, new: Block) -> Block:
		"""Put a detached block in the place of an attached one and detach the old block."""
		parent = self.parent(old)
		if parent is None:
			raise ValueError(f"block {old.handle} has no parent")
		index = parent.children.index(old.handle)
		self._check_insertable(parent, new)
		parent.children[index] = new.handle
		new.parent = parent.handle
		old.parent = None
		return new

	def walk(self, start: Optional[Block] = None) -> Iterator[Block]:
		"""Yield blocks in document order (pre-order), starting at the root by default."""
		stack = [start if start is not None else self.root]
		while stack:
			block = stack.pop()
			yield block
			stack.extend(self._blocks[handle] for handle in reversed(block.children))

	def find_by_id(self, block_id: str) -> Optional[Block]:
		for block in self.walk():
			if block.id == block_id:
				return block
		return None

	def __len__(self) -> int:
		"""Number of blocks reachable from the root."""
		return sum(1 for _ in self.walk())
