"""Async client library for the coaching center backend.

Keep package import lightweight; import submodules explicitly where needed.
"""

__all__ = [
	"client",
	"auth",
	"models",
	"exceptions",
	"utils",
]
