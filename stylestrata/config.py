"""Global configuration constants for stylestrata."""

# Synthetic root vertex connecting every stylesheet; also its fixed output id
ROOT_LABEL = "ALL_CSS"

# Path suffixes that decide a vertex's type
STYLESHEET_SUFFIXES = (".css",)
PAGE_SUFFIXES = (".htm", ".html")

PATH_SEPARATOR = "/"

# Output
JSON_INDENT = 2
SUMMARY_TABLE_ROWS = 15
