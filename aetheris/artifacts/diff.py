"""Side-by-side line diff between two versions of one file."""

import difflib
import html
from dataclasses import dataclass
from itertools import zip_longest
from typing import List, Optional


@dataclass
class DiffRow:
    """One row of the split view. Either side is ``None`` when absent."""

    tag: str
    left_no: Optional[int]
    left: Optional[str]
    right_no: Optional[int]
    right: Optional[str]

    def to_dict(self):
        return {
            "tag": self.tag,
            "leftNo": self.left_no,
            "left": self.left,
            "rightNo": self.right_no,
            "right": self.right,
        }


def side_by_side(old: str, new: str) -> List[DiffRow]:
    old_lines = old.splitlines()
    new_lines = new.splitlines()
    rows: List[DiffRow] = []
    matcher = difflib.SequenceMatcher(None, old_lines, new_lines, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            for offset in range(i2 - i1):
                rows.append(DiffRow("equal", i1 + offset + 1, old_lines[i1 + offset], j1 + offset + 1, new_lines[j1 + offset]))
            continue
        left = [(i + 1, old_lines[i]) for i in range(i1, i2)]
        right = [(j + 1, new_lines[j]) for j in range(j1, j2)]
        for l_item, r_item in zip_longest(left, right):
            if l_item and r_item:
                row_tag = "replace"
            elif l_item:
                row_tag = "delete"
            else:
                row_tag = "insert"
            rows.append(
                DiffRow(
                    row_tag,
                    l_item[0] if l_item else None,
                    l_item[1] if l_item else None,
                    r_item[0] if r_item else None,
                    r_item[1] if r_item else None,
                )
            )
    return rows


def diff_stats(rows: List[DiffRow]) -> dict:
    added = sum(1 for row in rows if row.right is not None and row.tag != "equal")
    removed = sum(1 for row in rows if row.left is not None and row.tag != "equal")
    return {"added": added, "removed": removed}


def unified(old: str, new: str, path: str) -> str:
    return "".join(
        difflib.unified_diff(
            old.splitlines(keepends=True),
            new.splitlines(keepends=True),
            fromfile=f"a/{path}",
            tofile=f"b/{path}",
        )
    )


ROW_COLORS = {
    "equal": ("transparent", "transparent"),
    "replace": ("#3f1d1d", "#0f3a3d"),
    "delete": ("#3f1d1d", "transparent"),
    "insert": ("transparent", "#0f3a3d"),
}


def render_html(rows: List[DiffRow]) -> str:
    body = []
    for row in rows:
        left_bg, right_bg = ROW_COLORS[row.tag]
        body.append(
            "<tr>"
            f'<td class="ln">{row.left_no or ""}</td>'
            f'<td style="background:{left_bg}"><pre>{html.escape(row.left or "")}</pre></td>'
            f'<td class="ln">{row.right_no or ""}</td>'
            f'<td style="background:{right_bg}"><pre>{html.escape(row.right or "")}</pre></td>'
            "</tr>"
        )
    return (
        '<table class="diff" style="width:100%;border-collapse:collapse;font-family:monospace;font-size:12px;">'
        f'<tbody>{"".join(body)}</tbody></table>'
    )
