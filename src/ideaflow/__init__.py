"""ideaflow: idea submission and evaluation workflow engine."""

__version__ = "0.1.0"
