"""
KubeSaw UserAccount操作模块
通过CustomObjectsApi获取成员集群中的UserAccount
"""

from typing import List

from kubernetes import client
from kubernetes.client.rest import ApiException

from ...core.config import Settings
from ...core.logging import get_logger
from ...exceptions import ClusterListingError
from ...schemas.migration import AccountRecord


logger = get_logger(__name__)


def get_user_accounts(api_client: client.ApiClient, settings: Settings) -> List[AccountRecord]:
    """获取UserAccount列表"""
    namespace = settings.account_namespace
    try:
        custom_api = client.CustomObjectsApi(api_client)
        result = custom_api.list_namespaced_custom_object(
            group=settings.account_group,
            version=settings.account_version,
            namespace=namespace,
            plural=settings.account_plural,
        )
    except ApiException as e:
        raise ClusterListingError(
            f"Failed to list user accounts: {e.reason}",
            details={"namespace": namespace, "status": e.status},
        ) from e

    accounts = [AccountRecord.from_resource(item) for item in result.get("items", [])]
    logger.info("Found %d user accounts in %s namespace", len(accounts), namespace)
    return accounts
