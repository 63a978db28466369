"""
Kubernetes命名空间操作模块
提供租户命名空间的查询功能
"""

from typing import List

from kubernetes import client
from kubernetes.client.rest import ApiException

from ...core.logging import get_logger
from ...exceptions import ClusterListingError


logger = get_logger(__name__)


def get_tenant_namespaces(api_client: client.ApiClient, label_selector: str) -> List[str]:
    """获取租户命名空间名称列表"""
    try:
        core_v1 = client.CoreV1Api(api_client)
        namespaces = core_v1.list_namespace(label_selector=label_selector)
    except ApiException as e:
        raise ClusterListingError(
            f"Failed to list namespace: {e.reason}",
            details={"label_selector": label_selector, "status": e.status},
        ) from e

    names = [ns.metadata.name for ns in namespaces.items]
    logger.info("Found %d Tenant Namespaces", len(names))
    return names
