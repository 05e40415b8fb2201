"""
Core value types: spans, locations and issues.
"""

from ppm.core.issues import Issue, IssueDisplay, absorb_new_issues, anchor_issues
from ppm.core.span import RowCol, SourceOrigin, Span

__all__ = [
    "Issue",
    "IssueDisplay",
    "RowCol",
    "SourceOrigin",
    "Span",
    "absorb_new_issues",
    "anchor_issues",
]
