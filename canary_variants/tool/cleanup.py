"""Canary-variants cleanup action."""

import logging
from argparse import (
    ArgumentParser,
    BooleanOptionalAction,
    _SubParsersAction as SubParsersAction,
)
from typing import Any, cast

from canary_variants import cleanup

from . import common


_LOGGER = logging.getLogger(__name__)


class CleanupAction:
    """Delete canary and baseline variants from the cluster."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "cleanup",
                help="Delete canary and baseline variants of resources in manifests",
                description=(
                    "Delete the canary and baseline variants of the workloads "
                    "in the manifest files from the cluster."
                ),
            ),
        )
        args.add_argument(
            "paths",
            nargs="+",
            help="Manifest files, directories or glob patterns",
        )
        args.add_argument(
            "--include-services",
            default=False,
            action=BooleanOptionalAction,
            help="Also delete canary and baseline variants of services",
        )
        common.add_cluster_flags(args)
        args.set_defaults(cls=cls)
        return args

    async def run(
        self,
        paths: list[str],
        include_services: bool,
        **kwargs: Any,
    ) -> None:
        """Async Action implementation."""
        kubectl = common.build_kubectl(**kwargs)
        await cleanup.delete_canary_deployment(kubectl, paths, include_services)
