"""Command line assembly for nuclei scans."""

from __future__ import annotations

from typing import List, Optional, Sequence


def build_mandatory_arguments(
    binary: str,
    templates: str,
    target: str,
    output: str,
) -> List[str]:
    """Arguments every scan carries, starting with the binary itself."""
    return [
        binary,
        "-templates", templates,
        "-target", target,
        "-output", output,
        "-no-color",
    ]


def merge_extra_flags(mandatory: Sequence[str], extra_flags: Optional[str]) -> List[str]:
    """Append user-supplied flags after the mandatory arguments.

    `extra_flags` is split on whitespace and each token appended in order.
    There is no quoting support, so a single argument cannot contain
    spaces. Tokens are neither validated nor deduplicated against the
    mandatory arguments; repeating a flag leaves the tie-break to nuclei.

    Args:
        mandatory: Mandatory argument list (left untouched).
        extra_flags: Whitespace-delimited flags, e.g. "-v -debug".

    Returns:
        A new argument list.
    """
    merged = list(mandatory)
    if extra_flags:
        merged.extend(extra_flags.split())
    return merged
