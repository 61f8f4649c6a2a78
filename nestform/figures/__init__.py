from .preview import render_preview

__all__ = ["render_preview"]
