"""Logging, exit codes and the instance lock."""
