"""Dataset mutation workflow configuration."""

import logging
import os
from collections.abc import Callable
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import dotenv
from loguru import logger as log

from smdataset.errors import Unset

from .utils import log_user
from .utils import log_user_warning

AttrValueT = str | int | float | bool
logger = logging.getLogger(__name__)


@dataclass
class Attr:
    """Attribute for the configuration."""

    attr_name: str
    value: AttrValueT | None = None
    cast_fn: Callable[[str], AttrValueT] | None = None


def _port_into_storage_url(port: str) -> str:
    return f"http://localhost:{int(port)}"


# '_cfg_name_lookup' maps config names to attribute names (internal).
#   This allows decoupling env file names from attribute
#   names in the object. Use lower case.
_cfg_name_lookup = {
    "http_timeout": Attr(attr_name="timeout", cast_fn=int),
    "img_storage_port": Attr(
        attr_name="img_storage_url", cast_fn=_port_into_storage_url
    ),
    "img_storage_url": Attr(attr_name="img_storage_url"),
    "moldb_api_host": Attr(attr_name="moldb_api_host"),
    "sm_engine_api_host": Attr(attr_name="sm_engine_api_host"),
}

# read from the running environment, taking precedence over everything else
_env_var_names = ("SM_ENGINE_API_HOST", "MOLDB_API_HOST", "IMG_STORAGE_URL")


@dataclass
class DeprecatedOption:
    """Deprecated option for the configuration."""

    deprecated_name: str
    new_name: str | None = None
    deprecation_version: str | None = None
    removal_version: str | None = None
    reason: str | None = None

    @property
    def user_warning(self) -> str:
        """Gets the user warning."""
        warning = ""
        warning += f"Option '{self.deprecated_name}' is deprecated and will be removed"
        warning += f" in v{self.removal_version}." if self.removal_version else "."
        warning += f" Use '{self.new_name}' instead." if self.new_name else ""
        warning += f" {self.reason}" if self.reason else ""
        return warning


class SMConfig:
    """Configuration for the dataset mutation workflow."""

    sm_engine_api_host: str = "localhost:5123"
    moldb_api_host: str | None = None
    img_storage_url: str = "http://localhost:4201"
    timeout: int = 30

    _active_config: list[Attr]
    _env_file: Path | None = None

    def __init__(
        self,
        *,
        env_file: Path | None | type[Unset] = Unset,
        env_config: Mapping[str, Any] | None = None,
        verbose: bool = False,
    ) -> None:
        """Initialize the configuration.
        Args:
            env_file:   Path to the environment file to load the config from.
                            Defaults to `.env`; None disables env files.
            env_config: Overrides for the environment file.
            verbose:    Show which config files are loaded and which attributes are set.
        """
        if env_file is Unset:
            self._env_file = Path(".env")
        elif isinstance(env_file, (str, Path)):
            self._env_file = Path(env_file)
        else:
            self._env_file = None
        if self._env_file and not self._env_file.is_absolute():
            self._env_file = Path.cwd() / self._env_file
        clean_config = self.__load_config(env_cli_config=env_config, verbose=verbose)
        self._set_config(clean_config)

    @property
    def registry_host(self) -> str:
        """Host of the molecular database registry, the engine's unless set."""
        return self.moldb_api_host or self.sm_engine_api_host

    def show_config(self, log_fn: Callable[[str], None] = print) -> None:
        """Show the active configuration."""
        header = "SM_Config: active configuration:"
        log.debug(header)
        log_fn(header)
        for attr in self._active_config:
            _log_redacted(
                key=attr.attr_name,
                value=str(attr.value),
                log_fn=log_fn,
            )

    def _set_config(self, clean_config: list[Attr]) -> None:
        """Sets the instance attributes."""
        for attr in clean_config:
            setattr(self, attr.attr_name, attr.value)
            _log_redacted(key=attr.attr_name, value=str(attr.value))
        self._active_config = clean_config

    def __load_config(
        self,
        *,
        env_cli_config: Mapping[str, Any] | None = None,
        verbose: bool = False,
    ) -> list[Attr]:
        """Load the configuration."""
        if self._env_file and not self._env_file.exists():
            msg = f"Environment file missing: {self._env_file}"
            log_user_warning(msg)

        if verbose:
            if self._env_file:
                log_user(f"SM_Config: found environment file: {self._env_file}")
            else:
                log_user("SM_Config: not using an env file")

        # get variables from running env
        env_vars = {
            name: value for name in _env_var_names if (value := os.environ.get(name))
        }
        log.debug(f"SM_Config: from local env: {list(env_vars.keys())}")

        # merge file, cli, and env vars configs
        env_file_config = (
            dotenv.dotenv_values(self._env_file, verbose=verbose)
            if self._env_file
            else {}
        )
        env_cli_config = env_cli_config or {}
        env_config = {**env_file_config, **env_cli_config, **env_vars}

        cleaned_config: list[Attr] = _clean_config(
            name_lookup=_cfg_name_lookup, env_config=env_config
        )

        # `deprecated_opts` allows gracefully phasing out settings in future
        # releases. Names are case-insensitive, but listed as uppercase for warnings
        deprecated_opts: list[DeprecatedOption] = [
            DeprecatedOption(
                deprecated_name="IMG_STORAGE_PORT",
                new_name="IMG_STORAGE_URL",
                deprecation_version="0.1.0",
                removal_version="0.3.0",
                reason="Image storage may run on a separate host.",
            ),
        ]
        normalized_keys = {_normalize_key(key) for key in env_config}
        for dep_opt in deprecated_opts:
            if dep_opt.deprecated_name.lower() in normalized_keys:
                log_user_warning(dep_opt.user_warning)

        return cleaned_config


def _normalize_key(key: str) -> str:
    return key.lower().replace("-", "_").replace(" ", "_")


def _clean_config(
    name_lookup: dict[str, Attr],
    env_config: Mapping[str, Any],
) -> list[Attr]:
    """Cleans the configuration to match known attributes."""
    cleaned_config: list[Attr] = []
    for key, sensitive_value in env_config.items():
        normalized_key: str = _normalize_key(key)

        # skip if no value
        if sensitive_value is None:
            log.warning(f"SM_Config: {key} has no value")
            continue
        template: Attr | None = name_lookup.get(normalized_key)

        # warn of invalid config
        if template is None:
            msg = f"SM_Config: {key} not recognized"
            log.warning(msg)
            logger.warning(msg)
            continue

        value = (
            template.cast_fn(sensitive_value) if template.cast_fn else sensitive_value
        )
        cleaned_config.append(Attr(attr_name=template.attr_name, value=value))

    return cleaned_config


def _log_redacted(
    key: str,
    value: str,
    log_fn: Callable[[str], None] = logger.info,
    depth: int = 1,
) -> None:
    """Logs but redacts value if the key hints to a sensitive content, as passwords."""
    std_length: int = 4
    lower_case_hints = {
        "key",
        "secret",
        "token",
        "pass",
    }
    safe_value = (
        "*" * std_length
        if any(hint in key.lower() for hint in lower_case_hints)
        else value
    )
    del value
    msg = f"\tSM_Config: set {key}={safe_value}"
    log.opt(depth=depth).debug(msg)
    log_fn(msg)


__all__ = ["SMConfig"]
