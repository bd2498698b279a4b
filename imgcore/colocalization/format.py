"""Formatting for SACA results."""

import numpy as np

from imgcore.core.format import (
    adjust_separators,
    attach_format,
    format_footer,
    format_kv_line,
    format_section_header,
    format_shape,
    format_title,
    format_value,
    make_table,
)

from .saca_obj import SacaResult


def format_saca_result(result):
    """Format a SACA result for display."""
    z = result.zscore_map
    n = z.size
    n_sig = result.n_significant
    finite = z[np.isfinite(z)]

    lines = []
    lines.extend(format_title("Spatially Adaptive Colocalization Analysis"))
    lines.append(format_kv_line("Image shape", format_shape(z.shape)))
    lines.append(format_kv_line("Iterations", result.iterations))
    lines.append(format_kv_line("Alpha", format_value(result.alpha, ".3g")))
    lines.append(format_kv_line("Critical z (Bonferroni)", format_value(result.z_critical)))
    lines.append(format_kv_line("Significant pixels", f"{n_sig} of {n} ({100.0 * n_sig / n:.2f}%)"))

    lines.extend(format_section_header("Z-score summary"))
    rows = [
        [
            format_value(float(finite.min())) if finite.size else "NA",
            format_value(float(finite.mean())) if finite.size else "NA",
            format_value(float(finite.max())) if finite.size else "NA",
            int(np.count_nonzero(z > result.z_critical)),
            int(np.count_nonzero(z < -result.z_critical)),
        ]
    ]
    lines.append(make_table(["Min", "Mean", "Max", "Coloc.", "Anti-coloc."], rows))

    radii, counts = np.unique(result.radius_map, return_counts=True)
    lines.extend(format_section_header("Final neighbourhood radius"))
    lines.append(make_table(["Radius", "Pixels"], [[int(r), int(c)] for r, c in zip(radii, counts, strict=True)]))

    lines.extend(format_footer("Reference: Wang et al. (2019), IEEE TIP 28(9)"))
    return "\n".join(adjust_separators(lines))


attach_format(SacaResult, format_saca_result)
