"""School administration API: schools, students, scholarships and analytics."""

__version__ = "0.1.0"
