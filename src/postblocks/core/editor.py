"""Pure structural edits on a Structure: insert, update, delete, reorder.

Every function leaves its input untouched and returns a new Structure whose
blocks are re-indexed to contiguous `order`, whose TOC is rebuilt from the new
blocks, and whose `last_updated` is refreshed. Word count and read time are
not recomputed here; see `structure.refresh_stats`.

Unknown ids are not errors: updates and removals become no-ops, an unknown
`after_id` appends, and ids omitted from a reorder are dropped.
"""

from typing import Any, Optional

from pydantic import BaseModel

from postblocks.core.models import ContentBlock, Structure, block_adapter, new_block_id, utcnow
from postblocks.core.structure import build_toc, reindex


_IDENTITY_FIELDS = ('id', 'order')


def _rebuild(structure: Structure, blocks: list[ContentBlock]) -> Structure:
    blocks = reindex(blocks)
    return structure.model_copy(update={
        'blocks': blocks,
        'toc': build_toc(blocks),
        'last_updated': utcnow(),
    })


def _block_data(data: ContentBlock | dict[str, Any]) -> dict[str, Any]:
    raw = data.model_dump() if isinstance(data, BaseModel) else dict(data)
    return {k: v for k, v in raw.items() if k not in _IDENTITY_FIELDS}


def add_block(
    structure: Structure,
    new_block_data: ContentBlock | dict[str, Any],
    after_id: Optional[str] = None,
    ) -> Structure:
    """Insert a block with a fresh id right after `after_id`, or at the end if absent/unknown."""
    block = block_adapter.validate_python({**_block_data(new_block_data), 'id': new_block_id()})
    blocks = list(structure.blocks)
    index = next((i for i, b in enumerate(blocks) if b.id == after_id), None) if after_id else None
    if index is None:
        blocks.append(block)
    else:
        blocks.insert(index + 1, block)
    return _rebuild(structure, blocks)


def update_block(structure: Structure, block_id: str, fields: dict[str, Any]) -> Structure:
    """Merge fields into the block with block_id, keeping its id and position.

    The merged block is re-validated, so a bad field value raises pydantic's
    ValidationError.
    """
    changes = {k: v for k, v in fields.items() if k not in _IDENTITY_FIELDS}
    blocks = [
        block_adapter.validate_python({**b.model_dump(), **changes}) if b.id == block_id else b
        for b in structure.blocks
    ]
    return _rebuild(structure, blocks)


def remove_block(structure: Structure, block_id: str) -> Structure:
    return _rebuild(structure, [b for b in structure.blocks if b.id != block_id])


def reorder_blocks(structure: Structure, ordered_ids: list[str]) -> Structure:
    """Keep exactly the blocks named in ordered_ids, in that order; unknown ids are ignored."""
    by_id = {b.id: b for b in structure.blocks}
    seen: set[str] = set()
    blocks = []
    for block_id in ordered_ids:
        if block_id in by_id and block_id not in seen:
            seen.add(block_id)
            blocks.append(by_id[block_id])
    return _rebuild(structure, blocks)
