"""Exception hierarchy for annospec.

All exceptions inherit from :class:`AnnospecError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`annospec.exit_codes`.
The top-level error handler in :func:`annospec.app.main` catches
``AnnospecError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    AnnospecError (exit 1)
    +-- InvalidUsageError            (exit 2)
    +-- ConfigError                  (exit 1)
    +-- SourceLoadError              (exit 8)
    +-- DirectiveError               (exit 7)
        +-- MalformedDirectiveError
        +-- UnknownTypeError
        +-- CyclicTypeError
        +-- InvalidLiteralError
        +-- MissingResponseError
        +-- ValidationFailureError

Every :class:`DirectiveError` is fatal to the comment block being parsed and
nothing else. Once the parser knows which source line triggered the failure
it attaches it via :meth:`DirectiveError.at_line`, so the message reads
``Unknown type: User (@openapiResponse 200 application/json User)``.
"""

from __future__ import annotations

from typing import Optional

from annospec.exit_codes import (
    EXIT_DIRECTIVE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SOURCE_ERROR,
)


class AnnospecError(Exception):
    """Base exception for all annospec errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`annospec.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(AnnospecError):
    """Raised for invalid CLI arguments or missing required options."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(AnnospecError):
    """Raised for configuration problems (invalid JSON, unknown keys, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE


class SourceLoadError(AnnospecError):
    """Raised when a type catalog or comment-block document cannot be read or parsed."""

    exit_code = EXIT_SOURCE_ERROR


class DirectiveError(AnnospecError):
    """Base class for failures while parsing one comment block.

    Args:
        reason: What went wrong, without location information.
        line: The raw directive line that triggered the failure, if known.

    Attributes:
        reason: The bare failure message.
        line: The offending directive line, or ``None`` until attached.
    """

    exit_code = EXIT_DIRECTIVE_ERROR

    def __init__(self, reason: str, line: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.line = line

    def at_line(self, line: str) -> DirectiveError:
        """Attach the offending directive line unless one is already set."""
        if self.line is None:
            self.line = line
        return self

    def __str__(self) -> str:
        if self.line:
            return f"{self.reason} ({self.line})"
        return self.reason


class MalformedDirectiveError(DirectiveError):
    """Raised when a prefix matched but its payload does not follow the grammar."""


class UnknownTypeError(DirectiveError):
    """Raised when a type name is found in neither the catalog nor the primitive tables.

    Args:
        type_name: The unresolved type name.
    """

    def __init__(self, type_name: str, line: Optional[str] = None):
        super().__init__(f"Unknown type: {type_name}", line)
        self.type_name = type_name


class CyclicTypeError(DirectiveError):
    """Raised when a type (transitively) refers back to itself.

    Args:
        chain: The resolution stack, ending with the re-entered type name.
    """

    def __init__(self, chain: list[str], line: Optional[str] = None):
        super().__init__(f"Cyclic type: {' -> '.join(chain)}", line)
        self.chain = chain


class InvalidLiteralError(DirectiveError):
    """Raised when a ``{``-payload is neither valid JSON nor an inline field list."""


class MissingResponseError(DirectiveError):
    """Raised when a block declares a path but no ``@openapiResponse``."""


class ValidationFailureError(DirectiveError):
    """Raised when a parsed directive violates a structural invariant."""
