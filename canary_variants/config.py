"""Configuration objects for canary-variants.

The strategy configuration is passed explicitly to the functions that need it
and may be loaded from a yaml file such as:

```yaml
deploymentStrategy: canary
trafficSplitMethod: smi
```
"""

from dataclasses import dataclass, field
import logging
from pathlib import Path

import aiofiles
from mashumaro import DataClassDictMixin, field_options
from mashumaro.codecs.yaml import yaml_decode
from mashumaro.config import BaseConfig
from mashumaro.exceptions import MissingField, InvalidFieldValue
import yaml

from .exceptions import InputException

__all__ = [
    "StrategyConfig",
    "load_config",
    "is_canary_strategy",
    "is_smi_canary_strategy",
]

_LOGGER = logging.getLogger(__name__)

CANARY_DEPLOYMENT_STRATEGY = "CANARY"
TRAFFIC_SPLIT_STRATEGY = "SMI"


@dataclass
class StrategyConfig(DataClassDictMixin):
    """Configuration of the active deployment strategy."""

    deployment_strategy: str | None = field(
        metadata=field_options(alias="deploymentStrategy"), default=None
    )
    """The deployment strategy e.g. `canary`."""

    traffic_split_method: str | None = field(
        metadata=field_options(alias="trafficSplitMethod"), default=None
    )
    """How traffic is split between variants e.g. `pod` or `smi`."""

    @classmethod
    def from_yaml(cls, content: str) -> "StrategyConfig":
        """Parse a serialized configuration."""
        if not content.strip():
            return cls()
        try:
            return yaml_decode(content, cls)
        except (
            MissingField,
            InvalidFieldValue,
            ValueError,
            TypeError,
            yaml.YAMLError,
        ) as err:
            raise InputException(f"Invalid strategy configuration: {err}") from err

    class Config(BaseConfig):
        omit_none = True
        serialize_by_alias = True


async def load_config(config_path: Path) -> StrategyConfig:
    """Load the strategy configuration from a yaml file."""
    _LOGGER.debug("Loading configuration from %s", config_path)
    async with aiofiles.open(str(config_path)) as config_file:
        content = await config_file.read()
    return StrategyConfig.from_yaml(content)


def is_canary_strategy(config: StrategyConfig) -> bool:
    """Return true if the canary deployment strategy is active."""
    strategy = config.deployment_strategy
    return strategy is not None and strategy.upper() == CANARY_DEPLOYMENT_STRATEGY


def is_smi_canary_strategy(config: StrategyConfig) -> bool:
    """Return true if the canary strategy splits traffic with SMI."""
    method = config.traffic_split_method
    return (
        is_canary_strategy(config)
        and method is not None
        and method.upper() == TRAFFIC_SPLIT_STRATEGY
    )
