"""
Kubernetes操作模块
统一导出迁移所需的集群查询函数
"""

from .account_operations import get_user_accounts
from .client import KubernetesClientContext, create_k8s_client
from .namespace_operations import get_tenant_namespaces
from .rbac_operations import (
    build_role_binding,
    get_tenant_role_bindings,
    serialize_role_binding,
    to_binding_record,
)

__all__ = [
    "KubernetesClientContext",
    "build_role_binding",
    "create_k8s_client",
    "get_tenant_namespaces",
    "get_tenant_role_bindings",
    "get_user_accounts",
    "serialize_role_binding",
    "to_binding_record",
]
