from __future__ import annotations

from contextlib import ExitStack

from ..core.config import Settings, get_settings
from ..core.logging import get_logger, new_run_id
from ..exceptions import InvalidTargetError
from ..schemas.migration import MigrationReport
from .directory import ConnectionFactory, DirectorySession
from .identity import TARGETS, build_id_mapping, get_transform
from .k8s.account_operations import get_user_accounts
from .k8s.client import KubernetesClientContext
from .k8s.namespace_operations import get_tenant_namespaces
from .k8s.rbac_operations import get_tenant_role_bindings
from .manifest import write_manifest
from .transformer import RenameRules, transform_bindings

logger = get_logger(__name__)


def run_migration(
    target: str,
    output_file: str | None = None,
    kubeconfig: str | None = None,
    context: str | None = None,
    settings: Settings | None = None,
    connection_factory: ConnectionFactory | None = None,
) -> MigrationReport:
    """Run one migration from account listing to the written manifest.

    The directory session is opened only for the ``user`` target and is
    closed when the run ends. Any ``AppException`` raised along the way is
    fatal and propagates to the caller.
    """
    if target not in TARGETS:
        raise InvalidTargetError(f"Unsupported target identity attribute: {target}", details={"target": target})

    settings = settings or get_settings()
    output_file = output_file or settings.output_file
    run_id = new_run_id()

    with ExitStack() as stack:
        api_client = stack.enter_context(
            KubernetesClientContext(kubeconfig or settings.kube_config_path, context or settings.kube_context)
        )

        accounts = get_user_accounts(api_client, settings)

        session = None
        if target == "user":
            session = stack.enter_context(DirectorySession(settings, connection_factory))
            logger.info("migrate called for user name")
        else:
            logger.info("migrate called for email")
        id_map = build_id_mapping(accounts, get_transform(target, session))

        namespaces = get_tenant_namespaces(api_client, settings.tenant_namespace_selector)
        bindings = get_tenant_role_bindings(
            api_client,
            settings.tenant_binding_selector,
            excluded_name=settings.excluded_binding_name,
            excluded_namespace=settings.excluded_namespace,
        )

    result = transform_bindings(id_map, bindings, RenameRules.from_settings(settings))
    manifest = write_manifest(output_file, result.migrated)

    return MigrationReport(
        run_id=run_id,
        target=target,
        accounts=len(accounts),
        mapped=len(id_map),
        namespaces=len(namespaces),
        bindings=len(bindings),
        migrated=len(result.migrated),
        orphan_namespaces=result.orphan_namespaces,
        written=manifest.written,
        duplicates=manifest.duplicates,
        output_file=str(output_file),
    )
