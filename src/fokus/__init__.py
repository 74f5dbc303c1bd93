"""fokus - a terminal stopwatch and focus timer with a daily log."""

__version__ = "0.1.0"
