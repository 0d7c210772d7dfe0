"""Canary-variants strategy action."""

import logging
from argparse import (
    ArgumentParser,
    _SubParsersAction as SubParsersAction,
)
from typing import Any, cast

from canary_variants.config import is_canary_strategy, is_smi_canary_strategy

from . import common
from .format import PrintFormatter


_LOGGER = logging.getLogger(__name__)


class StrategyAction:
    """Print the active deployment strategy."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "strategy",
                help="Print whether the canary strategies are active",
                description="Print the deployment strategy configuration.",
            ),
        )
        common.add_strategy_flags(args)
        args.set_defaults(cls=cls)
        return args

    async def run(self, **kwargs: Any) -> None:
        """Async Action implementation."""
        config = await common.build_strategy_config(**kwargs)
        PrintFormatter(["strategy", "split", "canary", "smi"]).print(
            [
                {
                    "strategy": config.deployment_strategy or "-",
                    "split": config.traffic_split_method or "-",
                    "canary": is_canary_strategy(config),
                    "smi": is_smi_canary_strategy(config),
                }
            ]
        )
