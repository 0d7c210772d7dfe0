"""Library for removing canary and baseline variants from a cluster.

The manifest files describe the stable resources. For every workload (and
optionally every service) in the manifests the canary and baseline variants
are deleted from the cluster. Deletes are best-effort: variants often do not
exist, and a failure deleting one resource does not stop the sweep, so a
partially cleaned cluster is left for the next run.

```python
from canary_variants import cleanup
from canary_variants.kubectl import Kubectl

await cleanup.delete_canary_deployment(Kubectl(), ["deploy/"], include_services=True)
```
"""

from collections.abc import Iterable
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any

from .exceptions import ManifestNotFoundError
from .kubectl import ClusterClient, Outcome
from .labels import is_deployment_entity, is_service_entity
from .manifest import NamedResource, read_manifest_documents, resolve_manifest_files
from .variants import baseline_name, canary_name

__all__ = [
    "DeleteResult",
    "delete_object",
    "delete_canary_deployment",
    "clean_up_canary",
]

_LOGGER = logging.getLogger(__name__)


@dataclass
class DeleteResult:
    """Result of deleting a resource from the cluster."""

    resource: NamedResource
    outcome: Outcome
    message: str | None = None


async def delete_object(client: ClusterClient, kind: str, name: str) -> DeleteResult:
    """Delete the resource from the cluster, classifying the outcome.

    Any error raised by the client is returned as an ignored outcome so that
    one failed delete never stops a sweep.
    """
    resource = NamedResource(kind=kind, name=name)
    try:
        result = await client.delete([kind, name])
    except Exception as err:
        return DeleteResult(
            resource, Outcome.ERROR_IGNORED, f"{type(err).__name__}: {err}"
        )
    return DeleteResult(resource, result.outcome, result.stderr)


def _variant_target(doc: Any, include_services: bool) -> NamedResource | None:
    """Return the kind and name of the document if it has variants to remove."""
    if not isinstance(doc, dict):
        _LOGGER.warning("Skipping document that is not a mapping: %s", doc)
        return None
    kind = doc.get("kind")
    metadata = doc.get("metadata")
    name = metadata.get("name") if isinstance(metadata, dict) else None
    if not isinstance(kind, str) or not kind or not isinstance(name, str) or not name:
        _LOGGER.warning("Skipping document missing kind or metadata.name: %s", doc)
        return None
    if is_deployment_entity(kind) or (include_services and is_service_entity(kind)):
        return NamedResource(kind=kind, name=name)
    return None


async def clean_up_canary(
    client: ClusterClient, files: Iterable[Path], include_services: bool
) -> None:
    """Delete the canary and baseline variants of resources in the manifest files.

    Every file is read and parsed before the first delete is issued, so a
    manifest that is not valid YAML raises InputException with the cluster
    left untouched.
    """
    targets: list[NamedResource] = []
    for path in files:
        for doc in await read_manifest_documents(path):
            if (target := _variant_target(doc, include_services)) is not None:
                targets.append(target)
    for target in targets:
        for variant_name in (canary_name(target.name), baseline_name(target.name)):
            result = await delete_object(client, target.kind, variant_name)
            if result.outcome == Outcome.SUCCESS:
                _LOGGER.info("Deleted %s", result.resource)
            else:
                _LOGGER.debug(
                    "Ignoring delete of %s (%s): %s",
                    result.resource,
                    result.outcome,
                    result.message,
                )


async def delete_canary_deployment(
    client: ClusterClient,
    manifest_paths: Iterable[str | Path],
    include_services: bool,
) -> None:
    """Delete canary and baseline variants for the resources in the manifests.

    Raises ManifestNotFoundError if no manifest files are found, and
    InputException before any delete if a manifest can't be parsed.
    """
    manifest_paths = list(manifest_paths)
    files = await resolve_manifest_files(manifest_paths)
    if not files:
        raise ManifestNotFoundError([str(path) for path in manifest_paths])
    await clean_up_canary(client, files, include_services)
