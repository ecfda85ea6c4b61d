# ============================================================================
# src/lab_value_extraction/core/presentation.py
# ============================================================================
"""
Rendering helpers for result maps: parameter → comma-joined values.
"""

from typing import List, Mapping, Sequence, Tuple


def render_rows(result_map: Mapping[str, Sequence[str]]) -> List[Tuple[str, str]]:
    """(parameter, "v1, v2, ...") pairs in result map order."""
    return [(name, ", ".join(values)) for name, values in result_map.items()]


def render_text(result_map: Mapping[str, Sequence[str]]) -> str:
    """Two-column plain text table; parameters without values show '-'."""
    rows = render_rows(result_map)
    if not rows:
        return ""

    width = max(len("Parameter"), max(len(name) for name, _ in rows))
    lines = [f"{'Parameter'.ljust(width)}  Values", f"{'-' * width}  {'-' * 6}"]
    for name, values in rows:
        lines.append(f"{name.ljust(width)}  {values or '-'}")
    return "\n".join(lines)
