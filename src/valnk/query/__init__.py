"""Query functionality: index selectors and the paginating planner."""

from valnk.query.models import (
    COMMENTS_BY_AUTHOR,
    COMMENTS_BY_SUBMISSION,
    REPLIES_BY_AUTHOR,
    REPLIES_BY_SUBMISSION,
    SUBMISSIONS_BY_AUTHOR,
    SUBMISSIONS_BY_TOPIC,
    IndexSpec,
    Page,
)
from valnk.query.planner import IndexQueryPlanner

__all__ = [
    # Models
    "IndexSpec",
    "Page",
    "SUBMISSIONS_BY_TOPIC",
    "SUBMISSIONS_BY_AUTHOR",
    "COMMENTS_BY_SUBMISSION",
    "COMMENTS_BY_AUTHOR",
    "REPLIES_BY_SUBMISSION",
    "REPLIES_BY_AUTHOR",
    # Planner
    "IndexQueryPlanner",
]
