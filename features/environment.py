"""
Behave environment configuration

Runs before and after scenarios to reset the shared logging state and the
per-scenario documents.
"""

import os
import sys

# Add project root to Python path so steps import textanchor without installing it
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from textanchor.logging_config import GlobalIndent  # noqa: E402


def before_scenario(context, scenario):
    """Start each scenario without a document, record or result"""
    GlobalIndent.reset()
    for name in ("markup", "document", "record", "result", "element"):
        if hasattr(context, name):
            delattr(context, name)


def after_scenario(context, scenario):
    """Drop indentation left behind by a failing step"""
    GlobalIndent.reset()
