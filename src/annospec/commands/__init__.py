"""Built-in CLI sub-commands for annospec.

This package groups the Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~annospec.commands.generate` -- ``generate`` and ``check``, which run
  the directive parser over a comment-block document.
* :mod:`~annospec.commands.config` -- view and modify user settings.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``config``) or plain callback functions registered
directly on the root app (for single commands like ``generate``).
"""
