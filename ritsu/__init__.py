"""Ritsu static blog generator.

This package manages a local content repository of Markdown posts through a
draft -> published -> trashed lifecycle and renders the published posts with a
Jinja2 theme into a static site.

The main entry point is the CLI module, which exposes the lifecycle commands
(init, new, publish, delete, generate, regenerate). The commands are thin
wrappers over the operations in the engine module.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
