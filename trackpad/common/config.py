"""Configuration file loading and management"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


@dataclass
class ServerConfig:
    """Gesture server settings"""
    host: str = "0.0.0.0"
    port: int = 4567
    name: Optional[str] = None  # Announced identity, defaults to the host name
    read_buffer_size: int = 1024
    cooldown_ms: int = 250  # Below the client send block, so paced gestures with jitter pass
    idle_timeout_seconds: Optional[float] = None  # None keeps idle sessions open


@dataclass
class DiscoveryConfig:
    """Announcement beacon settings"""
    enabled: bool = True
    port: int = 4568
    interval_ms: int = 2000
    broadcast_address: str = "255.255.255.255"


@dataclass
class LoggingConfig:
    """Logging configuration settings"""
    level: str = "INFO"
    file: Optional[str] = None
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Config:
    """Complete application configuration"""
    server: ServerConfig = field(default_factory=ServerConfig)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """Loads and parses configuration from YAML files"""

    DEFAULT_CONFIG_PATHS = [
        "config.yml",
        "~/.config/trackpad/config.yml",
        "/etc/trackpad/config.yml",
    ]

    @staticmethod
    def configFile_find() -> Optional[Path]:
        """
        Find configuration file in standard locations

        Returns:
            Path to config file, or None if not found
        """
        for config_path in ConfigLoader.DEFAULT_CONFIG_PATHS:
            path = Path(config_path).expanduser().resolve()
            if path.exists() and path.is_file():
                return path
        return None

    @staticmethod
    def yaml_load(file_path: Path) -> Dict[str, Any]:
        """
        Load YAML configuration file

        Args:
            file_path: Path to YAML file

        Returns:
            Parsed configuration dictionary. An empty file yields an empty dict.

        Raises:
            FileNotFoundError: If file does not exist
            yaml.YAMLError: If file is not valid YAML
            ValueError: If the document is not a mapping
        """
        with open(file_path, "r") as f:
            data = yaml.safe_load(f)

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {file_path} must contain a YAML dictionary")

        return data

    @staticmethod
    def section_get(data: Dict[str, Any], name: str) -> Dict[str, Any]:
        """
        Get an optional top-level section as a dictionary

        Args:
            data: Raw configuration dictionary
            name: Section key

        Returns:
            Section dictionary, empty when the section is absent or null

        Raises:
            ValueError: If the section is present but not a mapping
        """
        section = data.get(name)
        if section is None:
            return {}
        if not isinstance(section, dict):
            raise ValueError(f"Config section '{name}' must be a dictionary")
        return section

    @staticmethod
    def config_parse(data: Dict[str, Any]) -> Config:
        """
        Parse configuration dictionary into Config object

        Every key is optional; missing keys take the dataclass defaults.

        Args:
            data: Raw configuration dictionary

        Returns:
            Parsed Config object

        Raises:
            ValueError: If a value is out of range
        """
        defaults = Config()

        # Parse server config
        server_data = ConfigLoader.section_get(data, "server")
        server = ServerConfig(
            host=server_data.get("host", defaults.server.host),
            port=int(server_data.get("port", defaults.server.port)),
            name=server_data.get("name", defaults.server.name),
            read_buffer_size=int(
                server_data.get("read_buffer_size", defaults.server.read_buffer_size)
            ),
            cooldown_ms=int(server_data.get("cooldown_ms", defaults.server.cooldown_ms)),
            idle_timeout_seconds=server_data.get(
                "idle_timeout_seconds", defaults.server.idle_timeout_seconds
            ),
        )

        # Parse discovery config
        discovery_data = ConfigLoader.section_get(data, "discovery")
        discovery = DiscoveryConfig(
            enabled=discovery_data.get("enabled", defaults.discovery.enabled),
            port=int(discovery_data.get("port", defaults.discovery.port)),
            interval_ms=int(discovery_data.get("interval_ms", defaults.discovery.interval_ms)),
            broadcast_address=discovery_data.get(
                "broadcast_address", defaults.discovery.broadcast_address
            ),
        )

        # Parse logging config
        logging_data = ConfigLoader.section_get(data, "logging")
        logging = LoggingConfig(
            level=logging_data.get("level", defaults.logging.level),
            file=logging_data.get("file", defaults.logging.file),
            format=logging_data.get("format", defaults.logging.format),
        )

        config = Config(server=server, discovery=discovery, logging=logging)
        ConfigLoader.config_validate(config)
        return config

    @staticmethod
    def config_validate(config: Config) -> None:
        """
        Check value ranges of a parsed configuration

        Args:
            config: Parsed configuration

        Raises:
            ValueError: On the first invalid value found
        """
        for label, port in (
            ("server.port", config.server.port),
            ("discovery.port", config.discovery.port),
        ):
            if not 0 <= port <= 65535:
                raise ValueError(f"{label} must be within 0..65535, got {port}")
        if config.server.read_buffer_size <= 0:
            raise ValueError("server.read_buffer_size must be positive")
        if config.server.cooldown_ms < 0:
            raise ValueError("server.cooldown_ms must not be negative")
        if not isinstance(config.discovery.enabled, bool):
            raise ValueError(
                f"discovery.enabled must be true or false, got {config.discovery.enabled!r}"
            )
        timeout = config.server.idle_timeout_seconds
        if timeout is not None:
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
                raise ValueError(
                    f"server.idle_timeout_seconds must be a number or null, got {timeout!r}"
                )
            if timeout <= 0:
                raise ValueError("server.idle_timeout_seconds must be positive or null")
        if config.discovery.interval_ms <= 0:
            raise ValueError("discovery.interval_ms must be positive")

    @staticmethod
    def config_load(file_path: Optional[Path] = None) -> Config:
        """
        Load configuration from file

        Args:
            file_path: Optional path to config file. If None, searches standard
                locations and falls back to built-in defaults when none exists.

        Returns:
            Parsed Config object

        Raises:
            FileNotFoundError: If an explicit file_path does not exist
            ValueError: If config file is invalid
        """
        if file_path is None:
            file_path = ConfigLoader.configFile_find()
            if file_path is None:
                return Config()

        data = ConfigLoader.yaml_load(file_path)
        return ConfigLoader.config_parse(data)

    @staticmethod
    def configWithOverrides_load(
        file_path: Optional[Path] = None,
        **overrides: Any
    ) -> Config:
        """
        Load configuration and apply command-line overrides

        Args:
            file_path: Optional path to config file
            **overrides: Key-value pairs to override config values

        Returns:
            Config object with overrides applied

        Example:
            config = ConfigLoader.configWithOverrides_load(
                host="127.0.0.1",
                port=25000
            )
        """
        config = ConfigLoader.config_load(file_path)

        # Apply overrides to server config
        if overrides.get("host") is not None:
            config.server.host = overrides["host"]
        if overrides.get("port") is not None:
            config.server.port = overrides["port"]
        if overrides.get("name") is not None:
            config.server.name = overrides["name"]

        # Apply overrides to discovery config
        if overrides.get("discovery_port") is not None:
            config.discovery.port = overrides["discovery_port"]
        if overrides.get("no_discovery"):
            config.discovery.enabled = False

        ConfigLoader.config_validate(config)
        return config
