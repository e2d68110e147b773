"""Intern learning tracker: students, daily reports, progress and workflows."""

__version__ = "0.1.0"
