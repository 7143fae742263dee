"""Config commands -- view and modify the user configuration.

Provides the ``annospec config`` sub-command group for reading, updating,
and resetting the user's configuration file
(:class:`~annospec.models.GeneratorConfig`). Settings are persisted in the
annospec config directory and act as defaults below project config,
environment variables, and CLI flags.
"""

from __future__ import annotations

import typer

from annospec.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(
    effective: bool = typer.Option(
        False,
        "--effective",
        help="Show the merged configuration (project config and env applied).",
    ),
) -> None:
    """Show current configuration.

    Example::

        annospec config show
        annospec config show --effective --json
    """
    from annospec.config import get_config_dir, load_user_config, resolve_config
    from annospec.exceptions import ConfigError

    try:
        config = resolve_config() if effective else load_user_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key (e.g. 'title', 'format')."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The value is coerced to match the existing field's type and the
    updated config is validated against
    :class:`~annospec.models.GeneratorConfig` before saving.

    Raises:
        typer.Exit: With code 2 if the key is unknown or validation fails.

    Example::

        annospec config set title "Billing API"
        annospec config set format json
        annospec config set keep_going true
    """
    from annospec.config import load_user_config, save_user_config
    from annospec.models import GeneratorConfig

    config = load_user_config()
    data = config.model_dump(mode="json")

    if key not in data:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    if isinstance(data[key], bool):
        coerced = value.lower() in ("true", "1", "yes")
    else:
        coerced = value  # type: ignore[assignment]
    data[key] = coerced

    try:
        new_config = GeneratorConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_user_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset configuration to defaults.

    Example::

        annospec config reset
        annospec config reset --force
    """
    from annospec.config import save_user_config
    from annospec.models import GeneratorConfig

    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_user_config(GeneratorConfig())
    success("Configuration reset to defaults.")
