# mirror <sysexits.h>
EXIT_OK = 0  # Normal success
EXIT_GENERIC = 1  # Generic failure (fallback)
EXIT_USAGE = 2  # Bad command line arguments (click's own usage exit code)
EXIT_DATAERR = 65  # Input data was invalid (e.g., state file is not JSON)
EXIT_NOINPUT = 66  # Input file not found (e.g., marked file does not exist)
EXIT_CANTCREAT = 73  # Output file could not be written (e.g., state file)
