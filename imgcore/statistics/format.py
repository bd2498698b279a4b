"""Formatting for histogram results."""

import numpy as np

from imgcore.core.format import attach_format, format_footer, format_kv_line, format_title, format_value, make_table

from .histogram import Histogram

_MAX_ROWS = 10


def format_histogram(result):
    """Format a histogram for display."""
    lines = []
    lines.extend(format_title("Histogram"))
    lines.append(format_kv_line("Bins", result.bin_count))
    lines.append(
        format_kv_line(
            "Range",
            f"[{format_value(float(result.bin_edges[0]))}, {format_value(float(result.bin_edges[-1]))}]",
        )
    )
    lines.append(format_kv_line("Bin width", format_value(result.bin_width, ".6g")))
    lines.append(format_kv_line("Samples", result.total))

    if result.total > 0:
        top = [i for i in np.argsort(result.counts, kind="stable")[::-1][:_MAX_ROWS] if result.counts[i] > 0]
        centers = result.bin_centers
        rows = [[int(i), format_value(float(centers[i])), int(result.counts[i])] for i in sorted(top)]
        lines.append("")
        lines.append(f" Most populated bins (up to {_MAX_ROWS}):")
        lines.append(make_table(["Bin", "Center", "Count"], rows))

    lines.extend(format_footer())
    return "\n".join(lines)


attach_format(Histogram, format_histogram)
