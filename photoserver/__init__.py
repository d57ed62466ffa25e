"""On-demand JPEG thumbnails for stored photographs."""

__version__ = "1.0.0"
