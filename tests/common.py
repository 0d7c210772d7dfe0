"""Test helpers for canary-variants."""

from typing import Any

from canary_variants.kubectl import KubectlResult


class FakeClusterClient:
    """A cluster client that records calls and returns canned results."""

    def __init__(self) -> None:
        """Initialize FakeClusterClient."""
        self.resources: dict[tuple[str, str], KubectlResult] = {}
        self.delete_results: dict[str, KubectlResult | Exception] = {}
        self.calls: list[tuple[str, ...]] = []

    async def get(self, kind: str, name: str) -> KubectlResult:
        """Return the canned resource or a not found error."""
        self.calls.append(("get", kind, name))
        if (result := self.resources.get((kind, name))) is not None:
            return result
        return KubectlResult(
            stderr=f'Error from server (NotFound): {kind} "{name}" not found',
            returncode=1,
        )

    async def delete(self, identifiers: list[str]) -> KubectlResult:
        """Record the delete and return the canned result."""
        self.calls.append(("delete", *identifiers))
        result = self.delete_results.get(identifiers[-1], KubectlResult())
        if isinstance(result, Exception):
            raise result
        return result

    @property
    def deletes(self) -> list[tuple[str, ...]]:
        """Return the kind and name of each delete call."""
        return [call[1:] for call in self.calls if call[0] == "delete"]


def deployment(name: str = "app", **spec: Any) -> dict[str, Any]:
    """Return a Deployment document."""
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {"name": name, "labels": {"app": name}},
        "spec": {
            "replicas": 3,
            "selector": {"matchLabels": {"app": name}},
            "template": {
                "metadata": {"labels": {"app": name}},
                "spec": {"containers": [{"name": name, "image": f"{name}:1.0"}]},
            },
            **spec,
        },
    }


def service(name: str = "app") -> dict[str, Any]:
    """Return a Service document."""
    return {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": {"name": name},
        "spec": {
            "selector": {"app": name},
            "ports": [{"port": 80, "targetPort": 8080}],
        },
    }
