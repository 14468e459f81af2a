"""
vt_preconditions — sanity checks run on a (source, destination) program
pair before the two are correlated.

Each check compares one structural metric across both artifacts and
reports PASSED / WARNING / CANCELLED with a human-readable message.
The checks never block or repair anything downstream.
"""

__version__ = "1.0.0"
CHECKER_VERSION = "v1"
PACKAGE_NAME = "vt_preconditions"
SCHEMA_VERSION = "1.0"
