"""
A2UI surface runtime.

Validates model-generated component trees against a typed catalog, keeps
surfaces in a session store and renders them with per-subtree fallbacks.
"""

__version__ = "0.9.0"
