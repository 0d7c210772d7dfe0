"""Representation of kubernetes objects handled by canary-variants.

Manifests are read from local files as a stream of yaml documents, and each
document may be parsed into a `ManagedObject`. A `ManagedObject` keeps the
fields needed to derive canary, baseline and stable variants (kind, name,
labels, annotations, spec) and carries any other content through untouched so
that a derived object renders back to the same manifest apart from the fields
that were rewritten.

This example prints the objects in a set of manifest files:
```python
from canary_variants import manifest

for path in await manifest.resolve_manifest_files(["deploy/"]):
    for doc in await manifest.read_manifest_documents(path):
        obj = manifest.ManagedObject.parse_doc(doc)
        print(f"Found object {obj.kind} {obj.name}")
```
"""

import copy
import glob
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import aiofiles
from aiofiles.ospath import exists, isdir
import yaml

from .exceptions import InputException

__all__ = [
    "ManagedObject",
    "ObjectMeta",
    "NamedResource",
    "KindProfile",
    "kind_profile",
    "resolve_manifest_files",
    "read_manifest_documents",
    "parse_documents",
]

_LOGGER = logging.getLogger(__name__)

POD_KIND = "Pod"
REPLICA_SET_KIND = "ReplicaSet"
DEPLOYMENT_KIND = "Deployment"
STATEFUL_SET_KIND = "StatefulSet"
DAEMON_SET_KIND = "DaemonSet"
CRON_JOB_KIND = "CronJob"
SERVICE_KIND = "Service"

MANIFEST_SUFFIXES = (".yaml", ".yml")
GLOB_CHARS = ("*", "?", "[")

_SELECTOR_MATCH_LABELS = ("selector", "matchLabels")
_POD_TEMPLATE = ("template",)


@dataclass(frozen=True)
class KindProfile:
    """Describes which parts of a kind's spec are meaningful for variants."""

    replicas: bool = True
    """The spec carries a replica count."""

    service: bool = False
    """The kind routes traffic instead of running pods."""

    workload: bool = False
    """The kind is a workload eligible for canary variants."""

    selector_path: tuple[str, ...] | None = _SELECTOR_MATCH_LABELS
    """Path under spec to the selector label map."""

    template_path: tuple[str, ...] | None = _POD_TEMPLATE
    """Path under spec to the pod template, or None if the object is the pod."""


_DEFAULT_PROFILE = KindProfile()

# Keyed by lower case kind since kinds are compared case insensitively
KIND_PROFILES: dict[str, KindProfile] = {
    POD_KIND.lower(): KindProfile(
        replicas=False, workload=True, selector_path=None, template_path=None
    ),
    REPLICA_SET_KIND.lower(): KindProfile(workload=True),
    DEPLOYMENT_KIND.lower(): KindProfile(workload=True),
    STATEFUL_SET_KIND.lower(): KindProfile(workload=True),
    DAEMON_SET_KIND.lower(): KindProfile(replicas=False, workload=True),
    CRON_JOB_KIND.lower(): KindProfile(
        selector_path=None,
        template_path=("jobTemplate", "spec", "template"),
    ),
    SERVICE_KIND.lower(): KindProfile(
        replicas=False, service=True, selector_path=("selector",)
    ),
}


def kind_profile(kind: str) -> KindProfile:
    """Return the profile for the kind, with a permissive default for unknown kinds."""
    return KIND_PROFILES.get(kind.lower(), _DEFAULT_PROFILE)


def _lookup(root: dict[str, Any] | None, path: tuple[str, ...]) -> Any:
    """Walk a path of mapping keys, returning None if any step is missing."""
    value: Any = root
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


@dataclass(frozen=True, order=True)
class NamedResource:
    """Identifier for a kubernetes resource."""

    kind: str
    name: str

    def __str__(self) -> str:
        """Return the kind and name concatenated as an id."""
        return f"{self.kind}/{self.name}"


@dataclass
class ObjectMeta:
    """Metadata of a kubernetes object."""

    name: str
    """The name of the object."""

    labels: dict[str, str] | None = None
    """Labels on the object."""

    annotations: dict[str, str] | None = None
    """Annotations on the object."""

    extra: dict[str, Any] = field(default_factory=dict)
    """Any other metadata such as namespace or fields assigned by the cluster."""

    @classmethod
    def parse_doc(cls, doc: dict[str, Any]) -> "ObjectMeta":
        """Parse ObjectMeta from the metadata of a kubernetes object."""
        if not isinstance(name := doc.get("name"), str) or not name:
            raise InputException(f"Invalid object missing metadata.name: {doc}")
        return cls(
            name=name,
            labels=doc.get("labels"),
            annotations=doc.get("annotations"),
            extra={
                k: v
                for k, v in doc.items()
                if k not in ("name", "labels", "annotations")
            },
        )

    def to_doc(self) -> dict[str, Any]:
        """Return the metadata as a mapping."""
        doc: dict[str, Any] = {"name": self.name}
        doc.update(self.extra)
        if self.labels is not None:
            doc["labels"] = self.labels
        if self.annotations is not None:
            doc["annotations"] = self.annotations
        return doc


@dataclass
class ManagedObject:
    """A kubernetes object that variants can be derived from."""

    kind: str
    """The kind of the object."""

    metadata: ObjectMeta
    """The metadata of the object."""

    api_version: str | None = None
    """The apiVersion of the object."""

    spec: dict[str, Any] | None = None
    """The spec of the object, kept as an opaque structure."""

    status: dict[str, Any] | None = None
    """The status of the object, populated by the cluster."""

    extra: dict[str, Any] = field(default_factory=dict)
    """Other top level fields such as `data`, kept as is."""

    @classmethod
    def parse_doc(cls, doc: Any) -> "ManagedObject":
        """Parse a ManagedObject from a raw kubernetes object."""
        if not isinstance(doc, dict):
            raise InputException(f"Invalid object is not a mapping: {doc}")
        if not isinstance(kind := doc.get("kind"), str) or not kind:
            raise InputException(f"Invalid object missing kind: {doc}")
        if not isinstance(metadata := doc.get("metadata"), dict):
            raise InputException(f"Invalid object missing metadata: {doc}")
        return cls(
            kind=kind,
            metadata=ObjectMeta.parse_doc(metadata),
            api_version=doc.get("apiVersion"),
            spec=doc.get("spec"),
            status=doc.get("status"),
            extra={
                k: v
                for k, v in doc.items()
                if k not in ("apiVersion", "kind", "metadata", "spec", "status")
            },
        )

    def to_doc(self) -> dict[str, Any]:
        """Return the object as a kubernetes manifest mapping."""
        doc: dict[str, Any] = {}
        if self.api_version is not None:
            doc["apiVersion"] = self.api_version
        doc["kind"] = self.kind
        doc["metadata"] = self.metadata.to_doc()
        if self.spec is not None:
            doc["spec"] = self.spec
        doc.update(self.extra)
        if self.status is not None:
            doc["status"] = self.status
        return doc

    def clone(self) -> "ManagedObject":
        """Return a deep copy that shares no mutable state with this object."""
        return ManagedObject(
            kind=self.kind,
            metadata=ObjectMeta(
                name=self.metadata.name,
                labels=copy.deepcopy(self.metadata.labels),
                annotations=copy.deepcopy(self.metadata.annotations),
                extra=copy.deepcopy(self.metadata.extra),
            ),
            api_version=self.api_version,
            spec=copy.deepcopy(self.spec),
            status=copy.deepcopy(self.status),
            extra=copy.deepcopy(self.extra),
        )

    @property
    def name(self) -> str:
        """Return the name of the object."""
        return self.metadata.name

    @property
    def named_resource(self) -> NamedResource:
        """Return the identifier of the object."""
        return NamedResource(kind=self.kind, name=self.metadata.name)

    @property
    def profile(self) -> KindProfile:
        """Return the kind profile of the object."""
        return kind_profile(self.kind)

    @property
    def replicas(self) -> int | None:
        """Return the declared replica count, if any."""
        if self.spec is None:
            return None
        return self.spec.get("replicas")

    @replicas.setter
    def replicas(self, value: int | None) -> None:
        if self.spec is None:
            self.spec = {}
        self.spec["replicas"] = value

    @property
    def selector_labels(self) -> dict[str, str] | None:
        """Return the mutable selector label map of the spec, if present."""
        if (path := self.profile.selector_path) is None:
            return None
        value = _lookup(self.spec, path)
        return value if isinstance(value, dict) else None

    @property
    def pod_template(self) -> dict[str, Any] | None:
        """Return the mutable pod template of the spec, if present."""
        if (path := self.profile.template_path) is None:
            return None
        value = _lookup(self.spec, path)
        return value if isinstance(value, dict) else None

    @property
    def template_labels(self) -> dict[str, str] | None:
        """Return the labels applied to pods created by this object.

        A Pod is its own template so its object labels are returned.
        """
        if self.profile.template_path is None:
            return self.metadata.labels
        return _lookup(self.pod_template, ("metadata", "labels"))


def parse_documents(content: str | bytes) -> Iterator[Any]:
    """Parse a stream of yaml documents, skipping empty documents."""
    try:
        for doc in yaml.safe_load_all(content):
            if doc is None:
                continue
            yield doc
    except yaml.YAMLError as err:
        raise InputException(f"Unable to parse manifest content: {err}") from err


async def read_manifest_documents(path: Path) -> list[Any]:
    """Read and parse all documents in the manifest file."""
    _LOGGER.debug("Reading manifest file %s", path)
    async with aiofiles.open(str(path), mode="rb") as manifest_file:
        content = await manifest_file.read()
    try:
        return list(parse_documents(content))
    except InputException as err:
        raise InputException(f"Unable to parse manifest file {path}: {err}") from err


def _walk_manifests(path: Path) -> list[Path]:
    return sorted(
        child
        for child in path.rglob("*")
        if child.is_file() and child.suffix in MANIFEST_SUFFIXES
    )


async def resolve_manifest_files(paths: Iterable[str | Path]) -> list[Path]:
    """Resolve files, directories and glob patterns to a list of manifest files.

    Directories are searched recursively for yaml files. Paths that do not
    exist are skipped.
    """
    results: list[Path] = []
    for value in paths:
        candidates: list[Path]
        if any(char in str(value) for char in GLOB_CHARS):
            candidates = [
                Path(match) for match in sorted(glob.glob(str(value), recursive=True))
            ]
        else:
            candidates = [Path(value)]
        for candidate in candidates:
            if await isdir(candidate):
                found = _walk_manifests(candidate)
            elif await exists(candidate):
                found = [candidate]
            else:
                _LOGGER.warning("Manifest path does not exist: %s", candidate)
                continue
            for path in found:
                if path not in results:
                    results.append(path)
    _LOGGER.debug("Resolved manifest files: %s", results)
    return results
