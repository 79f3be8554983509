"""Configuration resolution for the ``ramlmock`` CLI.

Where RAML files come from is resolved with the following precedence
(high to low):

1. CLI arguments (``--path`` or positional files)
2. Environment variables (``RAMLMOCK_PATH``, ``RAMLMOCK_FILES``)
3. Project config (``./ramlmock.json``)
4. Defaults (no source; the CLI reports an options error)

``RAMLMOCK_FILES`` holds several paths separated by :data:`os.pathsep`.
Parser options only come from the project config file.

Example ``ramlmock.json``::

    {
      "path": "specs",
      "parserOptions": {"dereferenceSchemas": true}
    }
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

from ramlmock.exceptions import ConfigError
from ramlmock.models import GenerateOptions, ProjectConfig

_PROJECT_CONFIG_FILENAME = "ramlmock.json"

ENV_PATH = "RAMLMOCK_PATH"
ENV_FILES = "RAMLMOCK_FILES"


def project_config_path(directory: Optional[Path] = None) -> Path:
    """Path of the project config file inside *directory* (default: cwd)."""
    return (directory or Path.cwd()) / _PROJECT_CONFIG_FILENAME


def load_project_config(directory: Optional[Path] = None) -> Optional[ProjectConfig]:
    """Load project-local configuration from ``ramlmock.json``.

    Relative ``path`` and ``files`` entries are resolved against the
    directory holding the config file.

    Returns:
        The parsed :class:`~ramlmock.models.ProjectConfig`, or ``None`` if the
        file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            validation.
    """
    path = project_config_path(directory)
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8")
        config = ProjectConfig.model_validate(json.loads(text))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc

    base = path.parent
    if config.path:
        config.path = str(base / config.path)
    config.files = [str(base / f) for f in config.files]
    return config


def resolve_generate_options(
    cli_path: Optional[str] = None,
    cli_files: Optional[list[str]] = None,
) -> GenerateOptions:
    """Resolve the spec sources and parser options for a CLI invocation.

    Returns:
        A :class:`~ramlmock.models.GenerateOptions` whose ``path`` or
        ``files`` come from the highest-precedence layer that sets either.
        Both stay unset when no layer does.

    Raises:
        ConfigError: If ``ramlmock.json`` is invalid.
    """
    project = load_project_config()
    options = GenerateOptions()
    if project is not None:
        options.parser_options = project.parser_options

    # 1. CLI arguments
    if cli_path or cli_files:
        options.path = cli_path
        options.files = list(cli_files) if cli_files else None
        return options

    # 2. Environment variables
    env_path = os.environ.get(ENV_PATH)
    env_files = os.environ.get(ENV_FILES)
    if env_path or env_files:
        options.path = env_path or None
        options.files = [f for f in (env_files or "").split(os.pathsep) if f] or None
        return options

    # 3. Project config
    if project is not None:
        options.path = project.path
        options.files = project.files or None

    return options
