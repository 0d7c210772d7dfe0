"""Library for deriving canary, baseline and stable variants of a resource.

A variant is a copy of a source object renamed with the variant suffix, with
an optional replica count override, and labeled with the version label. The
source object is never modified.

```python
from canary_variants import variants
from canary_variants.manifest import ManagedObject

stable = ManagedObject.parse_doc(doc)
canary = variants.get_canary_resource(stable, replicas=1)
baseline = variants.get_baseline_resource(stable, replicas=1)
print(canary.name, baseline.name)  # app-canary app-baseline
```

Deriving from an object that was already derived suffixes the name again
e.g. `app-canary` becomes `app-canary-canary`.
"""

import logging

from .labels import (
    VERSION_LABEL,
    VariantTag,
    add_variant_labels,
    spec_contains_replicas,
)
from .manifest import ManagedObject

__all__ = [
    "VariantTag",
    "is_marked_stable",
    "mark_as_stable",
    "get_stable_resource",
    "get_baseline_resource",
    "get_canary_resource",
    "canary_name",
    "baseline_name",
    "stable_name",
]

_LOGGER = logging.getLogger(__name__)


def canary_name(name: str) -> str:
    """Return the name of the canary variant of a resource."""
    return name + VariantTag.CANARY.suffix


def baseline_name(name: str) -> str:
    """Return the name of the baseline variant of a resource."""
    return name + VariantTag.BASELINE.suffix


def stable_name(name: str) -> str:
    """Return the name of the stable variant of a resource."""
    return name + VariantTag.STABLE.suffix


def is_marked_stable(obj: ManagedObject) -> bool:
    """Return true if the object carries the stable version label."""
    labels = obj.metadata.labels or {}
    return labels.get(VERSION_LABEL) == VariantTag.STABLE.value


def mark_as_stable(obj: ManagedObject) -> ManagedObject:
    """Return the object labeled as stable, without renaming it.

    An object that is already marked stable is returned as is.
    """
    if is_marked_stable(obj):
        return obj
    new_obj = obj.clone()
    add_variant_labels(new_obj, VariantTag.STABLE)
    _LOGGER.debug("Marked %s as stable", new_obj.named_resource)
    return new_obj


def _new_variant(
    obj: ManagedObject, tag: VariantTag, replicas: int | None
) -> ManagedObject:
    new_obj = obj.clone()
    new_obj.metadata.name = obj.metadata.name + tag.suffix
    if replicas is not None and spec_contains_replicas(new_obj.kind):
        new_obj.replicas = replicas
    add_variant_labels(new_obj, tag)
    return new_obj


def get_stable_resource(obj: ManagedObject) -> ManagedObject:
    """Return the stable variant of the object, keeping its declared replicas."""
    return _new_variant(obj, VariantTag.STABLE, obj.replicas)


def get_baseline_resource(
    stable_obj: ManagedObject, replicas: int | None = None
) -> ManagedObject:
    """Return the baseline variant of the stable object.

    The replica count is only changed when `replicas` is given.
    """
    return _new_variant(stable_obj, VariantTag.BASELINE, replicas)


def get_canary_resource(
    obj: ManagedObject, replicas: int | None = None
) -> ManagedObject:
    """Return the canary variant of the object.

    The replica count is only changed when `replicas` is given.
    """
    return _new_variant(obj, VariantTag.CANARY, replicas)
