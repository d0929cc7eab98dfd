"""
MoneyNote - Source Package

Persistence and aggregation core for a personal-finance record keeper.

DESIGN PRINCIPLES:
1. One serialized collection per entity kind, read and written whole
2. Reads degrade to empty, writes fail loudly
3. Analytics are pure functions over already-loaded data
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "MoneyNote Team"
