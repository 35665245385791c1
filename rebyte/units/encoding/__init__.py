"""
Text encodings and escape sequences. All units in this package decode in their default
operation and encode when run in reverse.
"""
