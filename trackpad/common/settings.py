"""Process-wide settings: fixed constants plus the loaded configuration

Configurable values (ports, intervals, cool-down) live on the config
dataclasses; this module holds the values that are not meant to be tuned
per deployment, and a handle to the Config loaded at startup.

Usage:
    from trackpad.common.settings import settings

    # Initialize once at startup with loaded config
    config = ConfigLoader.config_load()
    settings.initialize(config)

    # Use anywhere in the application
    time.sleep(settings.TASK_RESTART_DELAY_SEC)
"""

from typing import Optional

from trackpad.common.config import Config


class Settings:
    """Singleton holding fixed constants and the startup Config"""

    _instance: Optional["Settings"] = None

    def __new__(cls) -> "Settings":
        """Ensure only one Settings instance exists"""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        """Initialize settings singleton (only runs once)"""
        if hasattr(self, "_initialized") and self._initialized:
            return
        self._initialized = True
        self._config: Optional[Config] = None

    def initialize(self, config: Config) -> None:
        """
        Initialize with loaded configuration

        Args:
            config: Loaded application configuration.
        """
        self._config = config

    # =========================================================================
    # Protocol Constants
    # =========================================================================

    # NOTE: ports, beacon interval, read buffer size and cool-down are
    # configurable and carry their defaults in trackpad.common.config.

    LOOPBACK_FALLBACK_IP: str = "127.0.0.1"
    """Announced address when no non-loopback IPv4 address exists

    Discovery does not work across hosts in this state.
    """

    # =========================================================================
    # Server Constants
    # =========================================================================

    ACCEPT_POLL_SECONDS: float = 0.5
    """Accept timeout so the accept loop can observe a stop request"""

    TASK_RESTART_DELAY_SEC: float = 1.0
    """Delay before a supervised task is restarted after a crash"""

    MS_PER_SECOND: float = 1000.0

    # =========================================================================
    # Client Constants
    # =========================================================================

    DISCOVERY_STALE_SECONDS: float = 6.0
    """Age after which a discovered server is considered gone (3 beacons)"""

    CONNECT_TIMEOUT_SECONDS: float = 5.0
    """Timeout for the gesture client's TCP connect"""

    CLIENT_SEND_BLOCK_MS: int = 300
    """Gap after each send during which the client drops further gestures

    The server cool-down must stay below this value: it measures arrival
    times, and network jitter can bring two paced sends closer together.
    """

    # =========================================================================
    # Runtime Configuration Access
    # =========================================================================

    @property
    def config(self) -> Config:
        """
        Get loaded configuration object

        Returns:
            Loaded configuration.

        Raises:
            RuntimeError: If initialize() has not been called.
        """
        if self._config is None:
            raise RuntimeError("Settings not initialized. Call settings.initialize(config) first.")
        return self._config


# Global singleton instance
settings = Settings()
"""Global settings singleton instance

Import this anywhere in the application:
    from trackpad.common.settings import settings
"""
