from .metrics import MetricsRenderer, render

__all__ = ["MetricsRenderer", "render"]
