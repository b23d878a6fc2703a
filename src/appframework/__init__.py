"""
appframework - app and extension resolution for modular application shells

Decides which apps and extensions a session sees, based on declared order,
feature toggles and require expressions evaluated against a runtime context.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
