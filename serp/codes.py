"""
codes.py
Process exit codes. Each failure category has its own value so scripts can
tell an environment problem from a data problem.
"""

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_CHECKSUM = 3
EXIT_MISSING_TOOL = 4
EXIT_BAD_PATH = 5
EXIT_INTERNAL = 6
EXIT_STEP_FAILED = 7
EXIT_MKDIR = 8
EXIT_INTERRUPTED = 130
