"""
Continuation rendering contract.

A block split across a page boundary is rendered at its natural height
inside a clipping container; the inner content is shifted up by the
continuation offset so only the slice belonging to the current page shows.
"""

from typing import Dict, Optional

from curriculo.pagination.types import ContinuationInfo


def visible_height(info: ContinuationInfo) -> float:
    """Height of the slice shown on the page that owns this entry."""
    if info.offset == 0 and info.visible_height is not None:
        return info.visible_height
    return info.total_height - info.offset


def is_continued(block_id: str, continuation: Optional[Dict[str, ContinuationInfo]]) -> bool:
    """True on the page(s) that show the tail of a split block."""
    info = (continuation or {}).get(block_id)
    return info is not None and info.offset > 0


def render_with_continuation(
    block_id: str,
    content_html: str,
    continuation: Optional[Dict[str, ContinuationInfo]],
) -> str:
    """
    Wrap a block's HTML in its clipping container when it is split.

    Args:
        block_id: Block identifier ("summary" or an experience id)
        content_html: Full, unclipped HTML of the block
        continuation: The page's continuation map (may be None)

    Returns:
        The original HTML when the block is not split, the clipped HTML
        otherwise, or "" when nothing of the block is visible on this page
    """
    info = (continuation or {}).get(block_id)
    if info is None:
        return content_html

    height = visible_height(info)
    if height <= 0:
        return ""

    top = f"-{_px(info.offset)}px" if info.offset > 0 else "0px"
    return (
        f'<div class="continuation-clip" data-block-id="{block_id}" '
        f'style="height: {_px(height)}px; position: relative; overflow: hidden;">'
        f'<div style="position: absolute; width: 100%; top: {top};">{content_html}</div>'
        f'</div>'
    )


def _px(value: float) -> str:
    # 120.0 -> "120", 120.5 -> "120.5"
    return f"{value:g}"
