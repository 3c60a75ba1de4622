"""Allow running as ``python -m livedash``."""

from .cli import main

main()
