"""Route visualizer: free-text trip descriptions to routed paths."""

__version__ = "0.1.0"
