# finance_visualizer/core/categories.py
from typing import List, Optional, Tuple

# Ordered label/color pairs; the first entry is the fallback for both lookups.
CATEGORIES: Tuple[Tuple[str, str], ...] = (
    ("Food", "#6366f1"),
    ("Transport", "#f59e42"),
    ("Shopping", "#10b981"),
    ("Bills", "#ef4444"),
    ("Other", "#a855f7"),
)

CATEGORY_LABELS: Tuple[str, ...] = tuple(label for label, _ in CATEGORIES)
CATEGORY_COLORS: Tuple[str, ...] = tuple(color for _, color in CATEGORIES)
DEFAULT_CATEGORY = CATEGORY_LABELS[0]


def category_index(label: Optional[str]) -> int:
    """Position of *label* in the canonical list, or -1 when unknown."""
    try:
        return CATEGORY_LABELS.index(label)
    except ValueError:
        return -1


def is_known_category(label: Optional[str]) -> bool:
    return category_index(label) >= 0


def normalize_category(label: Optional[str]) -> str:
    """Map a stored category onto the closed label set.

    Missing, empty and unrecognized labels all become ``DEFAULT_CATEGORY``.
    """
    if isinstance(label, str):
        label = label.strip()
    return label if is_known_category(label) else DEFAULT_CATEGORY


def color_for(label: Optional[str]) -> str:
    idx = category_index(label)
    return CATEGORY_COLORS[idx if idx >= 0 else 0]


def category_table() -> List[dict]:
    return [{"label": label, "color": color} for label, color in CATEGORIES]
