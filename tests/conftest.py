"""Shared pytest configuration for the ambient monitor tests."""

import sys
from pathlib import Path

# The modules live at the project root
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))
