"""Library for fetching the live state of a resource from the cluster.

Fields assigned by the cluster (resourceVersion, uid, timestamps, status) are
removed from fetched resources so that comparing a fetched resource against a
local manifest only reports changes to the fields that were declared.

A resource that does not exist or can't be parsed is returned as `None`, since
callers fall back to treating it as a first deployment.
"""

from dataclasses import dataclass
import json
import logging
from typing import Any

from .exceptions import FetchParseError, InputException
from .kubectl import ClusterClient, Outcome
from .manifest import ManagedObject
from .variants import canary_name

__all__ = [
    "FetchResult",
    "fetch",
    "fetch_resource",
    "fetch_canary_resource",
    "strip_cluster_details",
]

_LOGGER = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """Result of fetching a resource from the cluster."""

    outcome: Outcome
    resource: ManagedObject | None = None
    message: str | None = None


def strip_cluster_details(doc: dict[str, Any]) -> dict[str, Any]:
    """Remove fields set by the cluster, modifying the resource in place."""
    if isinstance(metadata := doc.get("metadata"), dict):
        doc["metadata"] = {
            key: metadata[key]
            for key in ("annotations", "labels", "name")
            if key in metadata
        }
    if doc.get("status"):
        doc["status"] = {}
    return doc


def _parse(kind: str, name: str, payload: str) -> ManagedObject:
    try:
        doc = json.loads(payload)
    except ValueError as err:
        raise FetchParseError(kind, name, str(err)) from err
    if not isinstance(doc, dict):
        raise FetchParseError(kind, name, f"expected an object: {payload}")
    try:
        return ManagedObject.parse_doc(strip_cluster_details(doc))
    except InputException as err:
        raise FetchParseError(kind, name, str(err)) from err


async def fetch(client: ClusterClient, kind: str, name: str) -> FetchResult:
    """Fetch the resource from the cluster, classifying the outcome."""
    result = await client.get(kind, name)
    if result.stderr:
        return FetchResult(outcome=result.outcome, message=result.stderr)
    if not result.stdout:
        return FetchResult(outcome=Outcome.NOT_FOUND)
    try:
        resource = _parse(kind, name, result.stdout)
    except FetchParseError as err:
        _LOGGER.debug("Exception occurred while parsing %s: %s", result.stdout, err)
        return FetchResult(outcome=Outcome.ERROR_IGNORED, message=str(err))
    return FetchResult(outcome=Outcome.SUCCESS, resource=resource)


async def fetch_resource(
    client: ClusterClient, kind: str, name: str
) -> ManagedObject | None:
    """Return the resource from the cluster, or None if it can't be fetched."""
    result = await fetch(client, kind, name)
    if result.outcome != Outcome.SUCCESS:
        _LOGGER.debug("Resource %s/%s not fetched: %s", kind, name, result.outcome)
        return None
    return result.resource


async def fetch_canary_resource(
    client: ClusterClient, kind: str, name: str
) -> ManagedObject | None:
    """Return the canary variant of the named resource from the cluster."""
    return await fetch_resource(client, kind, canary_name(name))
