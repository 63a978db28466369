from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from ..core.config import Settings
from ..core.logging import get_logger
from ..exceptions import BindingIntegrityError
from ..schemas.migration import (
    BindingRecord,
    IdentityMapping,
    MigratedBinding,
    RoleRefEntry,
    TransformResult,
)

logger = get_logger(__name__)

RBAC_API_GROUP = "rbac.authorization.k8s.io"
CLUSTER_ROLE_KIND = "ClusterRole"


def replace_first(text: str, old: str, new: str) -> str:
    """Replace only the first occurrence of ``old`` in ``text``."""
    if not old:
        return text
    return text.replace(old, new, 1)


@dataclass(frozen=True)
class RenameRules:
    legacy_token: str = "appstudio"
    new_token: str = "konflux"
    label_key: str = "konflux-ci.dev/type"
    label_value: str = "user"

    @classmethod
    def from_settings(cls, settings: Settings) -> "RenameRules":
        return cls(
            legacy_token=settings.legacy_token,
            new_token=settings.new_token,
            label_key=settings.migrated_label_key,
            label_value=settings.migrated_label_value,
        )

    def rename_role(self, role: str) -> str:
        return replace_first(role, self.legacy_token, self.new_token)

    def rename_binding(self, name: str, legacy_subject: str, identity: str) -> str:
        renamed = replace_first(name, self.legacy_token, self.new_token)
        return replace_first(renamed, legacy_subject, identity)

    def labels(self) -> dict[str, str]:
        return {self.label_key: self.label_value}


def migrate_binding(binding: BindingRecord, identity: str, rules: RenameRules) -> MigratedBinding:
    """Rewrite one single-subject binding for ``identity``.

    Server-assigned metadata is not carried over, and any previous labels are
    replaced by the migration label.
    """
    subject = binding.subjects[0]
    return MigratedBinding(
        namespace=binding.namespace,
        name=rules.rename_binding(binding.name, subject.name, identity),
        labels=rules.labels(),
        subjects=[subject.model_copy(update={"name": identity})],
        role_ref=RoleRefEntry(
            api_group=RBAC_API_GROUP,
            kind=CLUSTER_ROLE_KIND,
            name=rules.rename_role(binding.role_ref.name),
        ),
    )


def transform_bindings(
    id_map: IdentityMapping,
    bindings: Iterable[BindingRecord],
    rules: RenameRules | None = None,
) -> TransformResult:
    """Migrate tenant bindings whose subject resolved to a new identity.

    Raises:
        BindingIntegrityError: a binding does not have exactly one subject.
    """
    rules = rules or RenameRules()
    migrated: list[MigratedBinding] = []
    processed_namespaces: dict[str, int] = {}
    skipped = 0

    for binding in bindings:
        processed_namespaces.setdefault(binding.namespace, 0)

        if len(binding.subjects) != 1:
            raise BindingIntegrityError(
                f"RoleBinding {binding.name} in Namespace {binding.namespace} "
                f"has {len(binding.subjects)} subjects, expected exactly one",
                details={"namespace": binding.namespace, "name": binding.name},
            )

        user = binding.subjects[0].name
        identity = id_map.get(user)
        if not identity:
            # account not found in the directory, no new binding
            skipped += 1
            continue

        migrated.append(migrate_binding(binding, identity, rules))
        processed_namespaces[binding.namespace] += 1

    orphans = [ns for ns, count in processed_namespaces.items() if count == 0]
    _report_orphans(orphans)

    return TransformResult(migrated=migrated, orphan_namespaces=orphans, skipped=skipped)


def _report_orphans(orphans: list[str]) -> None:
    logger.info("Searching for post-migration orphan Tenant Namespaces:")
    for ns in orphans:
        logger.info("%s", ns)

    if not orphans:
        logger.info("No orphan Tenant Namespaces found")
    else:
        logger.info("There were %d orphan Tenant Namespaces found", len(orphans))
