"""Client and view-state library for a coaching center's admin dashboard.

Keep package import lightweight; import submodules explicitly where needed.
"""

__version__ = "0.1.0"
