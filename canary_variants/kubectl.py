"""Library for reading and deleting resources in a live cluster with kubectl.

Commands are run with the `kubectl` binary and the output is captured rather
than raised, since a missing resource is an expected outcome for most
callers. Use `check_for_errors` when a failure should be fatal.

```python
from canary_variants.kubectl import Kubectl

kubectl = Kubectl(namespace="podinfo")
result = await kubectl.get("Deployment", "podinfo-canary")
if not result.stderr:
    print(result.stdout)
```
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
import logging
from typing import Protocol

from .command import Command
from .exceptions import CommandException, KubectlException

__all__ = [
    "ClusterClient",
    "Kubectl",
    "KubectlResult",
    "Outcome",
    "check_for_errors",
]

_LOGGER = logging.getLogger(__name__)

KUBECTL_BIN = "kubectl"

NOT_FOUND_MARKERS = ("NotFound", "not found")


class Outcome(StrEnum):
    """Outcome of a best-effort cluster operation."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ERROR_IGNORED = "error_ignored"


@dataclass
class KubectlResult:
    """Output of a kubectl command."""

    stdout: str | None = None
    stderr: str | None = None
    returncode: int = 0

    @property
    def outcome(self) -> Outcome:
        """Classify the result of the command."""
        if not self.stderr:
            return Outcome.SUCCESS
        if any(marker in self.stderr for marker in NOT_FOUND_MARKERS):
            return Outcome.NOT_FOUND
        return Outcome.ERROR_IGNORED


class ClusterClient(Protocol):
    """A client that can read and delete resources in a cluster."""

    async def get(self, kind: str, name: str) -> KubectlResult:
        """Return the serialized resource."""

    async def delete(self, identifiers: list[str]) -> KubectlResult:
        """Delete the resource identified by kind and name."""


class Kubectl:
    """Runs kubectl commands against a cluster."""

    def __init__(
        self,
        namespace: str | None = None,
        kubeconfig: str | None = None,
        kubectl_bin: str = KUBECTL_BIN,
    ) -> None:
        """Initialize Kubectl."""
        self._namespace = namespace
        self._kubeconfig = kubeconfig
        self._kubectl_bin = kubectl_bin

    def _args(self, *args: str) -> list[str]:
        cmd = [self._kubectl_bin, *args]
        if self._namespace:
            cmd.extend(["--namespace", self._namespace])
        if self._kubeconfig:
            cmd.extend(["--kubeconfig", self._kubeconfig])
        return cmd

    async def _execute(self, args: list[str]) -> KubectlResult:
        command = Command(self._args(*args), exc=KubectlException)
        try:
            result = await command.capture()
        except CommandException as err:
            return KubectlResult(stderr=str(err), returncode=-1)
        if result.returncode and not result.stderr:
            result.stderr = (
                f"Command '{command}' failed with return code {result.returncode}"
            )
        return KubectlResult(
            stdout=result.stdout or None,
            stderr=result.stderr or None,
            returncode=result.returncode,
        )

    async def get(self, kind: str, name: str) -> KubectlResult:
        """Return the resource serialized as json."""
        return await self._execute(["get", kind, name, "-o", "json"])

    async def delete(self, identifiers: list[str]) -> KubectlResult:
        """Delete the resource identified by kind and name."""
        _LOGGER.debug("Deleting %s", "/".join(identifiers))
        return await self._execute(["delete", *identifiers])


def check_for_errors(results: Iterable[KubectlResult]) -> None:
    """Raise an exception if any of the kubectl commands failed."""
    errors = [result.stderr for result in results if result.stderr]
    if errors:
        raise KubectlException("\n".join(errors))
