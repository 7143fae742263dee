"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~annospec.exceptions.AnnospecError` subclass.
Build scripts and CI jobs can inspect the exit code to tell a broken
annotation apart from an unreadable input file without parsing stderr.

Example::

    $ annospec generate --catalog types.yaml --blocks comments.yaml
    $ echo $?
    7   # EXIT_DIRECTIVE_ERROR -- a comment block could not be parsed
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required options."""

EXIT_DIRECTIVE_ERROR = 7
"""A comment block contained a directive that could not be parsed or resolved."""

EXIT_SOURCE_ERROR = 8
"""A type catalog or comment-block document could not be loaded."""
