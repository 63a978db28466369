"""
Kubernetes RBAC操作模块
提供租户RoleBinding的查询与模型转换功能
"""

from typing import Any, Dict, List, Optional

from kubernetes import client
from kubernetes.client.rest import ApiException

from ...core.logging import get_logger
from ...exceptions import ClusterListingError
from ...schemas.migration import BindingRecord, MigratedBinding, RoleRefEntry, SubjectEntry


logger = get_logger(__name__)


def to_binding_record(binding: client.V1RoleBinding) -> BindingRecord:
    """将V1RoleBinding转换为BindingRecord"""
    metadata = binding.metadata
    return BindingRecord(
        namespace=metadata.namespace,
        name=metadata.name,
        subjects=[
            SubjectEntry(
                kind=subject.kind,
                name=subject.name,
                api_group=getattr(subject, "api_group", None),
                namespace=getattr(subject, "namespace", None),
            )
            for subject in (binding.subjects or [])
        ],
        role_ref=RoleRefEntry(
            api_group=binding.role_ref.api_group,
            kind=binding.role_ref.kind,
            name=binding.role_ref.name,
        ),
        labels=dict(metadata.labels or {}),
        annotations=dict(metadata.annotations or {}),
        resource_version=metadata.resource_version,
        uid=metadata.uid,
        creation_timestamp=metadata.creation_timestamp,
        managed_fields=list(metadata.managed_fields or []),
    )


def get_tenant_role_bindings(
    api_client: client.ApiClient,
    label_selector: str,
    excluded_name: Optional[str] = None,
    excluded_namespace: Optional[str] = None,
) -> List[BindingRecord]:
    """获取租户RoleBindings列表

    跳过系统流水线的RoleBinding以及主机运维命名空间中的RoleBinding。
    """
    logger.info("Gathering information for Tenant Namespaces")
    try:
        rbac_v1 = client.RbacAuthorizationV1Api(api_client)
        bindings_list = rbac_v1.list_role_binding_for_all_namespaces(label_selector=label_selector)
    except ApiException as e:
        raise ClusterListingError(
            f"Failed to list Tenant RoleBindings: {e.reason}",
            details={"label_selector": label_selector, "status": e.status},
        ) from e

    bindings = []
    for binding in bindings_list.items:
        if excluded_name and binding.metadata.name == excluded_name:
            continue
        if excluded_namespace and binding.metadata.namespace == excluded_namespace:
            continue
        bindings.append(to_binding_record(binding))

    logger.info("Found %d Tenant RoleBindings", len(bindings))
    return bindings


def build_role_binding(migrated: MigratedBinding) -> client.V1RoleBinding:
    """根据迁移结果构建V1RoleBinding对象"""
    return client.V1RoleBinding(
        api_version=migrated.api_version,
        kind=migrated.kind,
        metadata=client.V1ObjectMeta(
            name=migrated.name,
            namespace=migrated.namespace,
            labels=dict(migrated.labels),
        ),
        role_ref=client.V1RoleRef(
            api_group=migrated.role_ref.api_group,
            kind=migrated.role_ref.kind,
            name=migrated.role_ref.name,
        ),
        subjects=[
            client.RbacV1Subject(
                kind=subject.kind,
                name=subject.name,
                api_group=subject.api_group,
                namespace=subject.namespace,
            )
            for subject in migrated.subjects
        ],
    )


def serialize_role_binding(migrated: MigratedBinding, api_client: client.ApiClient) -> Dict[str, Any]:
    """序列化为Kubernetes清单格式（camelCase，去除空字段）

    api_client 由调用方创建并负责关闭。
    """
    return api_client.sanitize_for_serialization(build_role_binding(migrated))
