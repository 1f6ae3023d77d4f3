"""Pull request template lookup."""

import logging
from pathlib import Path
from typing import Optional, Tuple, Union

logger = logging.getLogger(__name__)

# Checked in order; the first existing file wins
TEMPLATE_LOCATIONS: Tuple[str, ...] = (
    ".github/PULL_REQUEST_TEMPLATE.md",
    "PULL_REQUEST_TEMPLATE.md",
)


def load_pr_template(working_dir: Union[str, Path]) -> Optional[str]:
    """Return the repository's pull request template, or None if it has none."""
    root = Path(working_dir)
    for relative in TEMPLATE_LOCATIONS:
        candidate = root / relative
        if candidate.is_file():
            logger.debug("Using PR template %s", candidate)
            return candidate.read_text(encoding="utf-8")
    return None
