"""
CCRM: Campus Course & Records Manager

Keeps track of students, courses and enrollments, derives letter grades and
GPA from recorded marks, and snapshots data directories into timestamped
backups.
"""

__version__ = "1.0.0"
__author__ = "CCRM Development Team"
__description__ = "Campus Course & Records Manager"
