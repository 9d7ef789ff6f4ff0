"""System config access for enrichment workflows."""

from enricher.system_config.core import (
    ClassificationConfig,
    CLIPConfig,
    MachineLearningConfig,
    SystemConfig,
    SystemConfigCore,
    SystemConfigKey,
    get_default_config,
)

__all__ = [
    "ClassificationConfig",
    "CLIPConfig",
    "MachineLearningConfig",
    "SystemConfig",
    "SystemConfigCore",
    "SystemConfigKey",
    "get_default_config",
]
