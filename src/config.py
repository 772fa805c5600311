"""
Configuration module for the Release Status Updater.

Loads configuration from environment variables. Every section has sensible
defaults so the updater can run with no environment at all.
"""

import os
from dataclasses import dataclass
from typing import Optional


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class UpdaterConfig:
    """Status update loop configuration."""

    namespace: str = ""  # empty means all namespaces
    tick_interval: float = 10.0  # seconds

    def __post_init__(self):
        if self.tick_interval <= 0:
            raise ValueError(
                f"tick_interval must be positive, got {self.tick_interval}"
            )

    @classmethod
    def from_env(cls):
        """Load from environment variables."""
        return cls(
            namespace=os.getenv("WATCH_NAMESPACE", "").strip(),
            tick_interval=float(os.getenv("TICK_INTERVAL", "10")),
        )


@dataclass
class KubeConfig:
    """Kubernetes API access and intent resource coordinates."""

    in_cluster: bool = False
    kubeconfig: Optional[str] = None
    context: Optional[str] = None
    group: str = "flux.weave.works"
    version: str = "v1beta1"
    plural: str = "helmreleases"
    use_status_subresource: bool = False

    @classmethod
    def from_env(cls):
        """Load from environment variables."""
        return cls(
            in_cluster=_env_bool("KUBE_IN_CLUSTER"),
            kubeconfig=os.getenv("KUBECONFIG") or None,
            context=os.getenv("KUBE_CONTEXT") or None,
            group=os.getenv("INTENT_GROUP", "flux.weave.works"),
            version=os.getenv("INTENT_VERSION", "v1beta1"),
            plural=os.getenv("INTENT_PLURAL", "helmreleases"),
            use_status_subresource=_env_bool("USE_STATUS_SUBRESOURCE"),
        )


@dataclass
class HelmConfig:
    """Helm CLI backend configuration."""

    binary: str = "helm"
    kube_context: Optional[str] = None
    timeout: float = 30.0  # seconds per helm invocation

    def __post_init__(self):
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def from_env(cls):
        """Load from environment variables."""
        return cls(
            binary=os.getenv("HELM_BINARY", "helm"),
            kube_context=os.getenv("HELM_KUBE_CONTEXT") or None,
            timeout=float(os.getenv("HELM_TIMEOUT", "30")),
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"

    @classmethod
    def from_env(cls):
        """Load from environment variables."""
        return cls(level=os.getenv("LOG_LEVEL", "INFO").upper())


@dataclass
class Config:
    """Main configuration object."""

    updater: UpdaterConfig
    kube: KubeConfig
    helm: HelmConfig
    logging: LoggingConfig

    @classmethod
    def from_env(cls):
        """Load all configuration from environment variables."""
        return cls(
            updater=UpdaterConfig.from_env(),
            kube=KubeConfig.from_env(),
            helm=HelmConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )

    @classmethod
    def default(cls):
        """Return default configuration."""
        return cls(
            updater=UpdaterConfig(),
            kube=KubeConfig(),
            helm=HelmConfig(),
            logging=LoggingConfig(),
        )


# Global config instance
config: Optional[Config] = None


def load_config() -> Config:
    """Load configuration (singleton pattern)."""
    global config
    if config is None:
        config = Config.from_env()
    return config


def get_config() -> Config:
    """Get the current configuration."""
    if config is None:
        return load_config()
    return config


def reset_config() -> None:
    """Reset configuration (mainly for testing)."""
    global config
    config = None
