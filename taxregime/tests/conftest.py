"""
Test configuration for taxregime tests.

Puts the project root on sys.path so 'from taxregime...' resolves when pytest
is run from a checkout without `pip install -e .`.
"""
import sys
from pathlib import Path

_project_root = Path(__file__).parent.parent.parent   # .../package/

if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))
