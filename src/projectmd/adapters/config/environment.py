"""
Environment Config Provider - Load configuration from environment variables.

Supports:
- Environment variables (GITHUB_TOKEN, GITHUB_API_URL, PROJECTMD_*)
- .env files
- Command line argument overrides

Precedence, lowest first: .env file, environment, command line.
"""

import os
from pathlib import Path
from typing import Any, Optional

from ...core.ports.config_provider import (
    ConfigProviderPort,
    AppConfig,
    TrackerConfig,
    SyncConfig,
)


class EnvironmentConfigProvider(ConfigProviderPort):
    """
    Configuration provider that loads from environment variables and .env files.
    """

    SUPPORTED_BACKENDS = ("github",)

    ENV_MAPPING = {
        "GITHUB_TOKEN": "github_token",
        "GITHUB_API_URL": "api_url",
        "PROJECTMD_FILE": "project_file",
        "PROJECTMD_VERBOSE": "verbose",
        "PROJECTMD_TIMEOUT": "timeout",
    }

    CLI_MAPPING = {
        "project_file": "project_file",
        "github_token": "github_token",
        "dry_run": "dry_run",
        "force": "force",
        "verbose": "verbose",
    }

    def __init__(
        self,
        env_file: Optional[Path] = None,
        cli_overrides: Optional[dict[str, Any]] = None,
        environ: Optional[dict[str, str]] = None,
    ):
        """
        Initialize the config provider.

        Args:
            env_file: Path to .env file (auto-detected if not specified)
            cli_overrides: Command line argument overrides
            environ: Environment mapping (defaults to os.environ)
        """
        self._values: dict[str, Any] = {}
        self._env_file = env_file
        self._cli_overrides = cli_overrides or {}
        self._environ = os.environ if environ is None else environ

        self._load_env_file()
        self._load_environment()
        self._apply_cli_overrides()

    # -------------------------------------------------------------------------
    # ConfigProviderPort Implementation
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return "Environment"

    def load(self) -> AppConfig:
        """Load complete configuration."""
        tracker = TrackerConfig(
            backend=self.get("backend", "github"),
            repo=self.get("repo", ""),
            token=self.get("github_token", "") or "",
            api_url=self.get("api_url", TrackerConfig.api_url),
            timeout=self._get_float("timeout", TrackerConfig.timeout),
        )

        sync = SyncConfig(
            dry_run=self._get_bool("dry_run"),
            force=self._get_bool("force"),
            verbose=self._get_bool("verbose"),
        )

        return AppConfig(
            tracker=tracker,
            sync=sync,
            project_path=Path(self.get("project_file", "project.md")),
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        key = key.lower().replace("-", "_")
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value."""
        key = key.lower().replace("-", "_")
        self._values[key] = value

    def validate(self, require_token: bool = True) -> list[str]:
        """
        Validate configuration needed to talk to the tracker.

        Args:
            require_token: Dry runs never call the tracker and may omit it
        """
        errors = []

        backend = self.get("backend", "github")
        if backend not in self.SUPPORTED_BACKENDS:
            errors.append(
                f"Unsupported backend: {backend}. Only 'github' is currently supported."
            )
        if require_token and not self.get("github_token"):
            errors.append("Missing GITHUB_TOKEN - set in environment, .env file or --github-token")
        if self.get("timeout") is not None and self._get_float("timeout", -1.0) <= 0:
            errors.append(f"Invalid PROJECTMD_TIMEOUT: {self.get('timeout')!r}")

        return errors

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    def _load_env_file(self) -> None:
        """Load values from .env file."""
        env_file = self._find_env_file()
        if not env_file:
            return

        for line in env_file.read_text(encoding="utf-8").splitlines():
            line = line.strip()

            # Skip empty lines and comments
            if not line or line.startswith("#"):
                continue

            if line.startswith("export "):
                line = line[len("export "):]

            if "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip().upper()
            value = value.strip().strip('"').strip("'")

            config_key = self.ENV_MAPPING.get(key)
            if config_key:
                self._values[config_key] = self._coerce(value)

    def _find_env_file(self) -> Optional[Path]:
        """Find .env file."""
        if self._env_file is not None:
            return self._env_file if self._env_file.exists() else None

        cwd_env = Path.cwd() / ".env"
        if cwd_env.exists():
            return cwd_env

        return None

    def _load_environment(self) -> None:
        """Load values from environment variables."""
        for env_key, config_key in self.ENV_MAPPING.items():
            raw_value = self._environ.get(env_key)
            if raw_value is not None:
                self._values[config_key] = self._coerce(raw_value)

    def _apply_cli_overrides(self) -> None:
        """Apply CLI argument overrides."""
        for cli_key, config_key in self.CLI_MAPPING.items():
            if cli_key in self._cli_overrides and self._cli_overrides[cli_key] is not None:
                self._values[config_key] = self._cli_overrides[cli_key]

    def _coerce(self, raw_value: str) -> Any:
        """Convert boolean-ish values."""
        if raw_value.lower() in ("true", "yes"):
            return True
        if raw_value.lower() in ("false", "no"):
            return False
        return raw_value

    def _get_bool(self, key: str) -> bool:
        value = self.get(key, False)
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes", "on")
        return bool(value)

    def _get_float(self, key: str, default: float) -> float:
        value = self.get(key)
        if value is None:
            return default
        try:
            return float(value)
        except (TypeError, ValueError):
            return default
