"""
Narratix - scripted dialogue overlay.

Provides the dialogue flow built on top of narratix_engine:
- Message segmentation on [AVATAR=N] tags
- Two-line pagination against a line-fit oracle
- Typewriter reveal with skip
- Message/segment/chunk navigation with auto avatar changes
"""

__version__ = "0.1.0"
