"""jsprune - remove unused imports and bindings from JavaScript/TypeScript files."""

__version__ = "0.1.0"
