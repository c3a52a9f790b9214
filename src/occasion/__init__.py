"""occasion: print a message for today's occasion."""

__version__ = "0.3.0"
