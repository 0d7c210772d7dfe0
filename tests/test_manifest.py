"""Tests for manifest library."""

from pathlib import Path

import pytest
import yaml

from canary_variants.exceptions import InputException
from canary_variants.manifest import (
    ManagedObject,
    NamedResource,
    kind_profile,
    parse_documents,
    read_manifest_documents,
    resolve_manifest_files,
)

from .common import deployment, service

CONFIG_MAP = {
    "apiVersion": "v1",
    "kind": "ConfigMap",
    "metadata": {"name": "settings", "namespace": "podinfo"},
    "data": {"key": "value"},
}


def test_parse_doc() -> None:
    """Test parsing a kubernetes object."""
    obj = ManagedObject.parse_doc(deployment())
    assert obj.kind == "Deployment"
    assert obj.api_version == "apps/v1"
    assert obj.name == "app"
    assert obj.metadata.labels == {"app": "app"}
    assert obj.metadata.annotations is None
    assert obj.replicas == 3
    assert obj.named_resource == NamedResource(kind="Deployment", name="app")
    assert str(obj.named_resource) == "Deployment/app"


def test_to_doc_preserves_fields() -> None:
    """Test fields that are not interpreted are rendered unchanged."""
    obj = ManagedObject.parse_doc(CONFIG_MAP)
    assert obj.spec is None
    assert obj.metadata.extra == {"namespace": "podinfo"}
    assert obj.to_doc() == CONFIG_MAP
    assert list(obj.to_doc()) == ["apiVersion", "kind", "metadata", "data"]


@pytest.mark.parametrize(
    ("doc", "match"),
    [
        (["a", "b"], "not a mapping"),
        ({"metadata": {"name": "app"}}, "missing kind"),
        ({"kind": ["Deployment"], "metadata": {"name": "app"}}, "missing kind"),
        ({"kind": "Deployment"}, "missing metadata"),
        ({"kind": "Deployment", "metadata": "app"}, "missing metadata"),
        ({"kind": "Deployment", "metadata": {}}, "missing metadata.name"),
        ({"kind": "Deployment", "metadata": {"name": 2048}}, "missing metadata.name"),
    ],
)
def test_parse_doc_invalid(doc: object, match: str) -> None:
    """Test parsing invalid objects."""
    with pytest.raises(InputException, match=match):
        ManagedObject.parse_doc(doc)


def test_clone() -> None:
    """Test a clone does not share state with the original."""
    obj = ManagedObject.parse_doc(deployment())
    clone = obj.clone()
    assert clone == obj

    clone.metadata.name = "other"
    assert clone.metadata.labels is not None
    clone.metadata.labels["team"] = "web"
    assert clone.spec is not None
    clone.spec["template"]["metadata"]["labels"]["team"] = "web"
    clone.replicas = 1

    assert obj.to_doc() == deployment()


def test_replicas_setter_creates_spec() -> None:
    """Test setting replicas on an object without a spec."""
    obj = ManagedObject.parse_doc({"kind": "Deployment", "metadata": {"name": "a"}})
    assert obj.replicas is None
    obj.replicas = 2
    assert obj.spec == {"replicas": 2}


def test_accessors() -> None:
    """Test the selector and template accessors."""
    obj = ManagedObject.parse_doc(deployment())
    assert obj.selector_labels == {"app": "app"}
    assert obj.template_labels == {"app": "app"}

    svc = ManagedObject.parse_doc(service())
    assert svc.selector_labels == {"app": "app"}
    assert svc.pod_template is None

    cm = ManagedObject.parse_doc(CONFIG_MAP)
    assert cm.selector_labels is None
    assert cm.template_labels is None


def test_kind_profile() -> None:
    """Test kind profiles are case insensitive with a default."""
    assert kind_profile("deployment") == kind_profile("Deployment")
    assert kind_profile("Deployment").workload
    assert kind_profile("Service").service
    assert not kind_profile("Pod").replicas
    assert kind_profile("Widget").replicas
    assert not kind_profile("Widget").workload


def test_parse_documents() -> None:
    """Test parsing a stream of documents skips empty documents."""
    content = yaml.dump_all([deployment(), None, service()], explicit_start=True)
    docs = list(parse_documents(content))
    assert [doc["kind"] for doc in docs] == ["Deployment", "Service"]


def test_parse_documents_invalid() -> None:
    """Test parsing invalid yaml."""
    with pytest.raises(InputException, match="Unable to parse"):
        list(parse_documents("---\nfoo: !bar\n"))


async def test_read_manifest_documents(tmp_path: Path) -> None:
    """Test reading a multi-document manifest file."""
    path = tmp_path / "app.yaml"
    path.write_text(yaml.dump_all([deployment(), service()], explicit_start=True))

    docs = await read_manifest_documents(path)
    assert docs == [deployment(), service()]


async def test_read_manifest_documents_invalid(tmp_path: Path) -> None:
    """Test reading a manifest file with invalid yaml."""
    path = tmp_path / "app.yaml"
    path.write_text("kind: [Deployment\n")

    with pytest.raises(InputException, match="app.yaml"):
        await read_manifest_documents(path)


async def test_resolve_manifest_files(tmp_path: Path) -> None:
    """Test resolving files, directories and glob patterns."""
    (tmp_path / "apps").mkdir()
    (tmp_path / "apps" / "b.yaml").write_text("")
    (tmp_path / "apps" / "a.yml").write_text("")
    (tmp_path / "apps" / "README.md").write_text("")
    (tmp_path / "service.yaml").write_text("")
    (tmp_path / "other.yaml").write_text("")

    files = await resolve_manifest_files(
        [
            tmp_path / "apps",
            str(tmp_path / "serv*.yaml"),
            tmp_path / "does-not-exist.yaml",
            tmp_path / "apps" / "a.yml",
        ]
    )
    assert files == [
        tmp_path / "apps" / "a.yml",
        tmp_path / "apps" / "b.yaml",
        tmp_path / "service.yaml",
    ]


async def test_resolve_manifest_files_empty(tmp_path: Path) -> None:
    """Test resolving paths that do not exist."""
    assert await resolve_manifest_files([tmp_path / "missing"]) == []
    assert await resolve_manifest_files([str(tmp_path / "*.yaml")]) == []
