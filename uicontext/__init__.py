"""Index front-end UI components and correlate them with live page elements."""

__version__ = "0.1.0"
