from datetime import datetime, timezone

import pytest

from wscli.core.config import Settings
from wscli.schemas.migration import AccountRecord, BindingRecord, RoleRefEntry, SubjectEntry


@pytest.fixture
def settings(tmp_path):
    return Settings(kube_config_path=str(tmp_path / "kubeconfig"), output_file=str(tmp_path / "out.yaml"))


@pytest.fixture
def make_account():
    def _make(name, email=None, spec=..., claims=...):
        if spec is ...:
            if claims is ...:
                claims = {"email": email} if email is not None else {}
            spec = {"propagatedClaims": claims} if claims is not None else {}
        return AccountRecord(name=name, spec=spec)

    return _make


@pytest.fixture
def make_binding():
    def _make(namespace, name, subjects=("jdoe",), role="appstudio-user", labels=None):
        return BindingRecord(
            namespace=namespace,
            name=name,
            subjects=[
                SubjectEntry(kind="User", name=subject, api_group="rbac.authorization.k8s.io")
                for subject in subjects
            ],
            role_ref=RoleRefEntry(api_group="rbac.authorization.k8s.io", kind="Role", name=role),
            labels=labels if labels is not None else {"toolchain.dev.openshift.com/provider": "codeready-toolchain"},
            annotations={"toolchain.dev.openshift.com/last-applied-space-roles": "[]"},
            resource_version="12345",
            uid="5f1c9a8e-0d1b-4c5e-9c6e-1d2f3a4b5c6d",
            creation_timestamp=datetime(2024, 5, 1, tzinfo=timezone.utc),
            managed_fields=[{"manager": "member-operator", "operation": "Update"}],
        )

    return _make


class FakeEntry:
    def __init__(self, attributes):
        self.entry_attributes_as_dict = attributes


class FakeConnection:
    """Stands in for an ldap3 connection; ``directory`` maps (field, value) to uid."""

    def __init__(self, directory=None, error=None):
        self.directory = directory or {}
        self.error = error
        self.queries = []
        self.entries = []
        self.unbound = False

    def search(self, search_base, search_filter, **kwargs):
        self.queries.append(search_filter)
        if self.error is not None:
            raise self.error
        field, value = search_filter[1:-1].split("=", 1)
        uid = self.directory.get((field, value))
        self.entries = [FakeEntry({"uid": [uid]})] if uid else []
        return bool(self.entries)

    def unbind(self):
        self.unbound = True
        return True


@pytest.fixture
def fake_directory():
    def _make(directory=None, error=None):
        connection = FakeConnection(directory, error)
        calls = []

        def factory(settings):
            calls.append(settings)
            return connection

        factory.connection = connection
        factory.calls = calls
        return factory

    return _make
