"""Rectangle packing, text-edit state with undo/redo, and profiling timers."""

__version__ = "0.1.0"
__all__ = ["rectpack", "layout", "undo", "textedit", "profiling"]