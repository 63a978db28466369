from .migration import (
    AccountRecord,
    BindingRecord,
    IdentityMapping,
    ManifestResult,
    MigratedBinding,
    MigrationReport,
    RoleRefEntry,
    SubjectEntry,
    TransformResult,
)

__all__ = [
    "AccountRecord",
    "BindingRecord",
    "IdentityMapping",
    "ManifestResult",
    "MigratedBinding",
    "MigrationReport",
    "RoleRefEntry",
    "SubjectEntry",
    "TransformResult",
]
