from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

IdentityMapping = dict[str, str]


class AccountRecord(BaseModel):
    """A KubeSaw UserAccount snapshot; only the name and raw spec are kept."""

    model_config = ConfigDict(frozen=True)

    name: str
    spec: dict[str, Any] | None = None

    @classmethod
    def from_resource(cls, obj: dict[str, Any]) -> "AccountRecord":
        metadata = obj.get("metadata") or {}
        spec = obj.get("spec")
        return cls(name=metadata.get("name", ""), spec=spec if isinstance(spec, dict) else None)


class SubjectEntry(BaseModel):
    kind: str
    name: str
    api_group: str | None = None
    namespace: str | None = None


class RoleRefEntry(BaseModel):
    api_group: str
    kind: str
    name: str


class BindingRecord(BaseModel):
    """A tenant RoleBinding as listed from the cluster."""

    model_config = ConfigDict(frozen=True)

    namespace: str
    name: str
    subjects: list[SubjectEntry] = Field(default_factory=list)
    role_ref: RoleRefEntry
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)
    resource_version: str | None = None
    uid: str | None = None
    creation_timestamp: datetime | None = None
    managed_fields: list[Any] = Field(default_factory=list)


class MigratedBinding(BaseModel):
    api_version: str = "rbac.authorization.k8s.io/v1"
    kind: str = "RoleBinding"
    namespace: str
    name: str
    labels: dict[str, str]
    subjects: list[SubjectEntry]
    role_ref: RoleRefEntry

    @property
    def key(self) -> tuple[str, str]:
        return self.namespace, self.name


class TransformResult(BaseModel):
    migrated: list[MigratedBinding]
    orphan_namespaces: list[str]
    skipped: int = 0


class ManifestResult(BaseModel):
    text: str
    written: int
    duplicates: int
    failed: int = 0


class MigrationReport(BaseModel):
    run_id: str | None = None
    target: str
    accounts: int
    mapped: int
    namespaces: int
    bindings: int
    migrated: int
    orphan_namespaces: list[str]
    written: int
    duplicates: int
    output_file: str
