"""Exit codes for the lintbridge CLI."""

EXIT_SUCCESS = 0
EXIT_ISSUES_FOUND = 1
EXIT_TOOL_ERROR = 2
EXIT_INVALID_USAGE = 3
