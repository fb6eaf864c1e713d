"""apiposture — static authorization posture analysis for Node.js web APIs."""

__version__ = "0.1.0"
