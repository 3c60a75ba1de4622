"""Root-level conftest.py: make this checkout's livedash package importable.

Tests run against the working tree even when livedash has not been
installed, or when another copy is installed in site-packages.
"""

import sys
from pathlib import Path

_root = str(Path(__file__).parent)
if _root not in sys.path:
    sys.path.insert(0, _root)

# Drop any copy imported before this conftest ran
for _mod in list(sys.modules):
    if _mod == "livedash" or _mod.startswith("livedash."):
        del sys.modules[_mod]
