"""Canary-variants fetch action."""

import logging
from argparse import (
    ArgumentParser,
    BooleanOptionalAction,
    _SubParsersAction as SubParsersAction,
)
from typing import Any, cast

from canary_variants import fetch
from canary_variants.variants import canary_name

from . import common
from .format import FORMATTERS


_LOGGER = logging.getLogger(__name__)


class FetchAction:
    """Print a resource from the cluster without cluster assigned fields."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "fetch",
                help="Print a resource from the cluster",
                description=(
                    "Print a resource from the cluster with status and "
                    "cluster assigned metadata removed."
                ),
            ),
        )
        args.add_argument("kind", help="Kind of the resource")
        args.add_argument("name", help="Name of the resource")
        args.add_argument(
            "--canary",
            default=False,
            action=BooleanOptionalAction,
            help="Fetch the canary variant of the named resource",
        )
        args.add_argument(
            "--output",
            "-o",
            choices=list(FORMATTERS),
            default="yaml",
            help="Output format of the command",
        )
        common.add_cluster_flags(args)
        args.set_defaults(cls=cls)
        return args

    async def run(
        self,
        kind: str,
        name: str,
        canary: bool,
        output: str,
        **kwargs: Any,
    ) -> None:
        """Async Action implementation."""
        kubectl = common.build_kubectl(**kwargs)
        if canary:
            resource = await fetch.fetch_canary_resource(kubectl, kind, name)
            name = canary_name(name)
        else:
            resource = await fetch.fetch_resource(kubectl, kind, name)
        if resource is None:
            print(f"{kind} object '{name}' not found")
            return
        FORMATTERS[output]().print([resource.to_doc()])
