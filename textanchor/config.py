"""Shared configuration for the textanchor package."""

import re

# Upper bound on classes per element before subset enumeration (2**4 subsets)
MAX_CLASSES = 4

# Browsers reliably accept URLs up to this length
URL_BUDGET = 2048

# Words of before/after context kept in a text fragment directive
FRAGMENT_CONTEXT_WORDS = 2

TEXT_FRAGMENT_DIRECTIVE = ":~:text="

# scrollIntoView options used when a selection is relocated
SCROLL_BLOCK = "center"
SCROLL_BEHAVIOR = "smooth"

URL_PATTERN = re.compile(r"^(https?://[^\s/]+|file://)\S*$")


def validate_url(url: str) -> None:
    """Validate a document origin URL.

    Args:
        url: The URL to validate

    Raises:
        ValueError: If the URL is not an absolute http(s) or file URL
    """
    if not URL_PATTERN.match(url):
        raise ValueError(
            f"Invalid URL: '{url}'. Expected an absolute http(s):// or file:// URL"
        )
