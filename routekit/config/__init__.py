import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from routekit.config.logging import StructuredLogger, get_logger, setup_logging
from routekit.models.route import Route

logger = get_logger(__name__)


class RouterSettings(BaseSettings):
    """Router settings, overridable through ROUTEKIT_* environment variables."""
    model_config = SettingsConfigDict(
        env_prefix="ROUTEKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    config_dir: str = Field(default="config", description="Directory holding routes.yaml")
    log_level: str = Field(default="INFO", description="Log level for routekit loggers")
    log_format: str = Field(default="text", description="Log format ('json' or 'text')")
    log_file: Optional[str] = Field(default=None, description="Optional log file path")

    # Request path normalization applied by Router.match
    collapse_slashes: bool = Field(default=False, description="Collapse repeated slashes")
    strip_prefixes: List[str] = Field(default_factory=list, description="Prefixes removed from request paths")
    directory_index: List[str] = Field(default_factory=list, description="Index file names stripped from paths")
    ending_slash: bool = Field(default=False, description="Add a trailing slash to directory paths")
    ending_slash_excludes: List[str] = Field(default_factory=list, description="Regexes exempt from ending_slash")


class RouterConfig(BaseModel):
    """Router settings together with the route table."""
    settings: RouterSettings = Field(default_factory=RouterSettings)
    routes: List[Route] = Field(default_factory=list)

    def create_router(self):
        """Create a Router for this route table."""
        from routekit.routing.router import Router

        return Router(routes=self.routes, settings=self.settings)

    def configure_logging(self) -> None:
        """Apply the logging settings."""
        setup_logging(
            log_level=self.settings.log_level,
            log_format=self.settings.log_format,
            log_file=self.settings.log_file
        )


class ConfigLoader:
    """Route table loader for YAML files with environment-specific overrides."""

    BASE_FILE = "routes.yaml"

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize the configuration loader.

        Args:
            config_dir: Directory containing configuration files.
                       Defaults to the ROUTEKIT_CONFIG_DIR setting.
        """
        if config_dir is None:
            config_dir = RouterSettings().config_dir
        self.config_dir = Path(config_dir)

    def load_config(self, environment: Optional[str] = None) -> RouterConfig:
        """Load configuration for the specified environment.

        Args:
            environment: Environment name (development, production, etc.).
                        If None, will try to detect from ENVIRONMENT variable.

        Returns:
            Loaded and validated configuration.

        Raises:
            InvalidRoute: If a route entry is malformed
            yaml.YAMLError: If a configuration file is not valid YAML
        """
        if environment is None:
            environment = os.getenv("ENVIRONMENT", "development")

        config_data = self._load_base_config()

        env_config = self._load_environment_config(environment)
        if env_config:
            config_data = self._merge_configs(config_data, env_config)

        config_data = self._substitute_env_vars(config_data)

        config = self._create_router_config(config_data)

        logger.info(
            "Loaded route configuration",
            extra={
                "config_dir": str(self.config_dir),
                "environment": environment,
                "routes_count": len(config.routes)
            }
        )
        return config

    def _load_base_config(self) -> Dict[str, Any]:
        """Load the base route configuration."""
        base_path = self.config_dir / self.BASE_FILE
        if base_path.exists():
            return self._load_yaml_file(base_path)
        logger.warning(f"No route configuration found at {base_path}")
        return {}

    def _load_environment_config(self, environment: str) -> Optional[Dict[str, Any]]:
        """Load environment-specific configuration."""
        env_config_path = self.config_dir / f"{environment}.yaml"
        if env_config_path.exists():
            return self._load_yaml_file(env_config_path)
        return None

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load and parse a YAML file."""
        try:
            with open(file_path, 'r') as file:
                return yaml.safe_load(file) or {}
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse config file {file_path}: {e}")
            raise

    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries. Lists are replaced, not merged."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def _substitute_env_vars(self, config: Any) -> Any:
        """Substitute environment variables in configuration values."""
        if isinstance(config, dict):
            return {key: self._substitute_env_vars(value) for key, value in config.items()}
        elif isinstance(config, list):
            return [self._substitute_env_vars(item) for item in config]
        elif isinstance(config, str):
            return self._substitute_string_env_vars(config)
        else:
            return config

    def _substitute_string_env_vars(self, value: str) -> str:
        """Substitute ${VAR_NAME} and ${VAR_NAME:default} references in a string."""
        def replace_env_var(match):
            var_spec = match.group(1)
            if ':' in var_spec:
                var_name, default_value = var_spec.split(':', 1)
                return os.getenv(var_name, default_value)
            else:
                return os.getenv(var_spec, match.group(0))

        return re.sub(r'\$\{([^}]+)\}', replace_env_var, value)

    def _create_router_config(self, config_data: Dict[str, Any]) -> RouterConfig:
        """Create a RouterConfig object from configuration data."""
        settings = RouterSettings(**config_data.get("settings", {}))
        routes = [Route.parse(entry) for entry in config_data.get("routes") or []]

        return RouterConfig(settings=settings, routes=routes)


# Global configuration instance
_router_config: Optional[RouterConfig] = None


def get_config() -> RouterConfig:
    """Get the current router configuration."""
    global _router_config
    if _router_config is None:
        _router_config = ConfigLoader().load_config()
    return _router_config


def reload_config(environment: Optional[str] = None) -> RouterConfig:
    """Reload the router configuration."""
    global _router_config
    _router_config = ConfigLoader().load_config(environment)
    return _router_config


__all__ = [
    "RouterSettings",
    "RouterConfig",
    "ConfigLoader",
    "StructuredLogger",
    "get_config",
    "get_logger",
    "reload_config",
    "setup_logging",
]
