"""diagramforge: turn editor diagrams into React component source."""

__version__ = "0.1.0"
