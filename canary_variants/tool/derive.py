"""Canary-variants derive action."""

import logging
from argparse import (
    ArgumentParser,
    _SubParsersAction as SubParsersAction,
)
from collections.abc import Callable
from typing import Any, cast

from canary_variants import variants
from canary_variants.exceptions import ManifestNotFoundError
from canary_variants.labels import is_deployment_entity, is_service_entity
from canary_variants.manifest import (
    ManagedObject,
    read_manifest_documents,
    resolve_manifest_files,
)

from .format import FORMATTERS


_LOGGER = logging.getLogger(__name__)


def _derive_func(
    variant: str, replicas: int | None
) -> Callable[[ManagedObject], ManagedObject]:
    """Return the function that derives the requested variant."""
    if variant == "canary":
        return lambda obj: variants.get_canary_resource(obj, replicas)
    if variant == "baseline":
        return lambda obj: variants.get_baseline_resource(obj, replicas)
    if variant == "stable":
        return variants.get_stable_resource
    return variants.mark_as_stable


class DeriveAction:
    """Print canary, baseline or stable variants of resources."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "derive",
                help="Print variants of the resources in manifests",
                description=(
                    "Print the canary, baseline or stable variant of every "
                    "workload and service in the manifest files."
                ),
            ),
        )
        args.add_argument(
            "variant",
            choices=["canary", "baseline", "stable", "mark-stable"],
            help="The variant to derive",
        )
        args.add_argument(
            "paths",
            nargs="+",
            help="Manifest files, directories or glob patterns",
        )
        args.add_argument(
            "--replicas",
            type=int,
            default=None,
            help="Replica count of canary or baseline variants",
        )
        args.add_argument(
            "--output",
            "-o",
            choices=list(FORMATTERS),
            default="yaml",
            help="Output format of the command",
        )
        args.set_defaults(cls=cls)
        return args

    async def run(
        self,
        variant: str,
        paths: list[str],
        replicas: int | None,
        output: str,
        **kwargs: Any,
    ) -> None:
        """Async Action implementation."""
        files = await resolve_manifest_files(paths)
        if not files:
            raise ManifestNotFoundError(paths)
        derive = _derive_func(variant, replicas)
        results: list[dict[str, Any]] = []
        for path in files:
            for doc in await read_manifest_documents(path):
                obj = ManagedObject.parse_doc(doc)
                if not (is_deployment_entity(obj.kind) or is_service_entity(obj.kind)):
                    _LOGGER.debug("Skipping %s", obj.named_resource)
                    continue
                results.append(derive(obj).to_doc())
        FORMATTERS[output]().print(results)
