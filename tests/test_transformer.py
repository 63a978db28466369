import pytest

from wscli.core.config import Settings
from wscli.exceptions import BindingIntegrityError
from wscli.services.transformer import RenameRules, migrate_binding, replace_first, transform_bindings


@pytest.mark.parametrize(
    "text,old,new,expected",
    [
        ("appstudio-user", "appstudio", "konflux", "konflux-user"),
        ("appstudio-appstudio", "appstudio", "konflux", "konflux-appstudio"),
        ("my-appstudio-role", "appstudio", "konflux", "my-konflux-role"),
        ("viewer", "appstudio", "konflux", "viewer"),
        ("viewer", "", "konflux", "viewer"),
    ],
)
def test_replace_first(text, old, new, expected):
    assert replace_first(text, old, new) == expected


def test_rename_binding_replaces_token_then_subject():
    rules = RenameRules()

    assert rules.rename_binding("appstudio-jdoe-admin", "jdoe", "jdoe@redhat.com") == "konflux-jdoe@redhat.com-admin"
    # the subject is only replaced once
    assert rules.rename_binding("jdoe-jdoe", "jdoe", "john") == "john-jdoe"


def test_rename_rules_from_settings():
    rules = RenameRules.from_settings(Settings(legacy_token="old", new_token="new", migrated_label_value="member"))

    assert rules.rename_role("old-user") == "new-user"
    assert rules.labels() == {"konflux-ci.dev/type": "member"}


def test_end_to_end_example(make_binding):
    binding = make_binding("team-a", "appstudio-pipelines-runner-rolebinding-alt", role="appstudio-user")

    result = transform_bindings({"jdoe": "jdoe@redhat.com"}, [binding])

    assert result.orphan_namespaces == []
    [migrated] = result.migrated
    assert migrated.namespace == "team-a"
    assert migrated.name == "konflux-pipelines-runner-rolebinding-alt"
    assert migrated.subjects[0].name == "jdoe@redhat.com"
    assert migrated.subjects[0].kind == "User"
    assert migrated.role_ref.name == "konflux-user"
    assert migrated.role_ref.kind == "ClusterRole"
    assert migrated.role_ref.api_group == "rbac.authorization.k8s.io"
    assert migrated.api_version == "rbac.authorization.k8s.io/v1"
    assert migrated.kind == "RoleBinding"
    assert migrated.labels == {"konflux-ci.dev/type": "user"}


def test_migrated_binding_drops_server_metadata(make_binding):
    binding = make_binding("team-a", "jdoe-admin")

    migrated = migrate_binding(binding, "jdoe@redhat.com", RenameRules())
    fields = migrated.model_dump()

    for key in ("annotations", "resource_version", "uid", "creation_timestamp", "managed_fields"):
        assert key not in fields
    assert migrated.name == "jdoe@redhat.com-admin"


def test_source_binding_is_not_mutated(make_binding):
    binding = make_binding("team-a", "appstudio-jdoe")
    before = binding.model_dump()

    migrated = migrate_binding(binding, "jdoe@redhat.com", RenameRules())
    migrated.labels["extra"] = "x"
    migrated.subjects[0].name = "changed"

    assert binding.model_dump() == before


def test_multi_subject_binding_aborts(make_binding):
    bindings = [
        make_binding("team-a", "ok", subjects=("jdoe",)),
        make_binding("team-b", "shared", subjects=("jdoe", "asmith")),
    ]

    with pytest.raises(BindingIntegrityError) as exc_info:
        transform_bindings({"jdoe": "jdoe@redhat.com", "asmith": "asmith@redhat.com"}, bindings)

    assert exc_info.value.details == {"namespace": "team-b", "name": "shared"}


def test_binding_without_subject_aborts(make_binding):
    with pytest.raises(BindingIntegrityError):
        transform_bindings({}, [make_binding("team-a", "empty", subjects=())])


def test_unresolved_subject_is_dropped(make_binding):
    bindings = [
        make_binding("team-a", "jdoe-admin", subjects=("jdoe",)),
        make_binding("team-a", "ghost-admin", subjects=("ghost",)),
    ]

    result = transform_bindings({"jdoe": "jdoe@redhat.com"}, bindings)

    assert [m.name for m in result.migrated] == ["jdoe@redhat.com-admin"]
    assert all(s.name != "ghost" for m in result.migrated for s in m.subjects)
    assert result.skipped == 1
    assert result.orphan_namespaces == []


def test_orphan_namespaces(make_binding):
    bindings = [
        make_binding("team-a", "jdoe-admin", subjects=("jdoe",)),
        make_binding("team-b", "ghost-admin", subjects=("ghost",)),
        make_binding("team-b", "ghost-view", subjects=("ghost",)),
        make_binding("team-c", "phantom", subjects=("phantom",)),
        make_binding("team-c", "jdoe-view", subjects=("jdoe",)),
    ]

    result = transform_bindings({"jdoe": "jdoe@redhat.com"}, bindings)

    assert result.orphan_namespaces == ["team-b"]


def test_transform_is_deterministic(make_binding):
    id_map = {"jdoe": "jdoe@redhat.com", "asmith": "asmith"}
    bindings = [
        make_binding("team-a", "appstudio-jdoe", subjects=("jdoe",)),
        make_binding("team-b", "appstudio-asmith", subjects=("asmith",), role="appstudio-maintainer"),
    ]

    first = transform_bindings(id_map, bindings)
    second = transform_bindings(id_map, bindings)

    assert first.model_dump_json() == second.model_dump_json()


def test_resolved_bindings_use_cluster_role_and_new_token(make_binding):
    roles = ["appstudio-user", "appstudio-maintainer", "appstudio-admin", "contributor"]
    bindings = [
        make_binding(f"team-{i}", f"appstudio-{i}-jdoe", role=role) for i, role in enumerate(roles)
    ]

    result = transform_bindings({"jdoe": "john"}, bindings)

    assert len(result.migrated) == len(roles)
    for migrated in result.migrated:
        assert migrated.role_ref.kind == "ClusterRole"
        assert "appstudio" not in migrated.role_ref.name
        assert "appstudio" not in migrated.name
