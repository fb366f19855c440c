"""stylestrata: stylesheet dependency analysis for static web sites.

Builds a directed graph of page -> stylesheet imports, counts how many
pages depend on each stylesheet (directly or through other stylesheets),
and folds the result into a directory hierarchy for reporting.
"""

__version__ = "0.1.0"
