"""Allow running with ``python -m enginestats``."""

from .main import run


run()
