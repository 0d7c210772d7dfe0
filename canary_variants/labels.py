"""Library for classifying object kinds and editing their labels.

The version label marks which variant (canary, baseline or stable) an object
represents. It is written to the object labels, the spec selector and the pod
template labels so that pods of a variant can be selected independently of
the other variants.
"""

from enum import StrEnum
import logging

from .manifest import ManagedObject, kind_profile

__all__ = [
    "VERSION_LABEL",
    "VariantTag",
    "spec_contains_replicas",
    "is_service_entity",
    "is_deployment_entity",
    "update_object_labels",
    "update_selector_labels",
    "update_spec_labels",
    "add_variant_labels",
]

_LOGGER = logging.getLogger(__name__)

VERSION_LABEL = "workflow/version"


class VariantTag(StrEnum):
    """A variant of a resource, valued by its version label."""

    CANARY = "canary"
    BASELINE = "baseline"
    STABLE = "stable"

    @property
    def suffix(self) -> str:
        """Suffix appended to the name of a derived resource."""
        return f"-{self.value}"


def spec_contains_replicas(kind: str) -> bool:
    """Return true if the spec of the kind carries a replica count."""
    return kind_profile(kind).replicas


def is_service_entity(kind: str) -> bool:
    """Return true for kinds that route traffic rather than run pods."""
    return kind_profile(kind).service


def is_deployment_entity(kind: str) -> bool:
    """Return true for workload kinds eligible for canary variants."""
    return kind_profile(kind).workload


def _merge(
    existing: dict[str, str] | None, labels: dict[str, str], override: bool
) -> dict[str, str]:
    if override or existing is None:
        return dict(labels)
    existing.update(labels)
    return existing


def update_object_labels(
    obj: ManagedObject, labels: dict[str, str], override: bool = False
) -> None:
    """Merge labels into the object labels, or replace them with override."""
    obj.metadata.labels = _merge(obj.metadata.labels, labels, override)


def update_selector_labels(
    obj: ManagedObject, labels: dict[str, str], override: bool = False
) -> None:
    """Merge labels into the spec selector.

    Service selectors are never modified, and a selector is only updated if the
    spec already has one.
    """
    if is_service_entity(obj.kind):
        return
    if (selector := obj.selector_labels) is None:
        return
    if override:
        selector.clear()
    selector.update(labels)


def update_spec_labels(
    obj: ManagedObject, labels: dict[str, str], override: bool = False
) -> None:
    """Merge labels into the labels of the pods created by the object."""
    if obj.profile.template_path is None:
        update_object_labels(obj, labels, override)
        return
    if (template := obj.pod_template) is None:
        return
    metadata = template.setdefault("metadata", {})
    if metadata is None:
        metadata = template["metadata"] = {}
    metadata["labels"] = _merge(metadata.get("labels"), labels, override)


def add_variant_labels(obj: ManagedObject, tag: VariantTag) -> None:
    """Add the version label for the variant to the object, modifying it in place."""
    new_labels = {VERSION_LABEL: tag.value}
    update_object_labels(obj, new_labels)
    update_selector_labels(obj, new_labels)
    if not is_service_entity(obj.kind):
        update_spec_labels(obj, new_labels)
    _LOGGER.debug("Added %s label to %s", tag, obj.named_resource)
