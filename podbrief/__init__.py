"""podbrief: podcast subscriptions with AI episode summaries."""

__version__ = "0.1.0"
