"""Shared text formatting for result containers."""

import numpy as np
from prettytable import PrettyTable, TableStyle

WIDTH = 78
THICK_SEP = "=" * WIDTH
THIN_SEP = "-" * WIDTH


def make_table(headers, rows, align_map=None):
    """Create a SINGLE_BORDER PrettyTable with per-column alignment (default right)."""
    align_map = align_map or {}
    t = PrettyTable()
    t.set_style(TableStyle.SINGLE_BORDER)
    t.field_names = headers
    for row in rows:
        t.add_row(row)
    for h in headers:
        t.align[h] = align_map.get(h, "r")
    return str(t)


def format_title(title, subtitle=None):
    """Return title block lines with thick separators."""
    lines = [THICK_SEP, f" {title}"]
    if subtitle is not None:
        lines.append(f" {subtitle}")
    lines.append(THICK_SEP)
    return lines


def format_section_header(label):
    """Return section header lines with thin separators."""
    return ["", THIN_SEP, f" {label}", THIN_SEP]


def format_footer(reference=None):
    """Return footer lines with thick separator and optional reference."""
    lines = [THICK_SEP]
    if reference is not None:
        lines.append(f" {reference}")
    return lines


def format_value(val, fmt=".4f", na_str="NA"):
    """Format a numeric value, returning na_str for None/NaN."""
    if val is None or (isinstance(val, (float, np.floating)) and np.isnan(val)):
        return na_str
    return f"{val:{fmt}}"


def format_shape(shape):
    """Format a shape tuple as ``a x b x c``."""
    return " x ".join(str(int(s)) for s in shape)


def format_kv_line(key, value, indent=1):
    """Format a key-value pair with indentation."""
    return f"{' ' * indent}{key}: {value}"


def adjust_separators(lines):
    """Widen separator lines to match the widest content line."""
    max_w = max(max((len(line) for line in lines), default=WIDTH), WIDTH)
    out = []
    for line in lines:
        if line and set(line) == {"="}:
            out.append("=" * max_w)
        elif line and set(line) == {"-"}:
            out.append("-" * max_w)
        else:
            out.append(line)
    return out


def attach_format(result_class, format_func):
    """Monkey-patch ``__repr__`` and ``__str__`` on a result class."""

    def _repr(self):
        return format_func(self)

    result_class.__repr__ = _repr
    result_class.__str__ = _repr
