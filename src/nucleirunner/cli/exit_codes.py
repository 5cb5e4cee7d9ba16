"""Exit codes used by the nuclei-runner CLI.

A completed scan returns nuclei's own exit code instead.
"""

EXIT_SUCCESS = 0
EXIT_ISSUES_FOUND = 1
EXIT_SCANNER_ERROR = 2
EXIT_INVALID_USAGE = 3
EXIT_BOOTSTRAP_FAILURE = 4
EXIT_CANCELLED = 130
