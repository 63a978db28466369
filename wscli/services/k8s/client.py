"""
Kubernetes客户端管理模块
根据kubeconfig创建客户端，并提供上下文管理功能
"""

import os
from typing import Optional

from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException

from ...core.logging import get_logger
from ...exceptions import ClusterConfigError


logger = get_logger(__name__)


def create_k8s_client(kubeconfig: str, context: Optional[str] = None) -> client.ApiClient:
    """
    根据kubeconfig文件创建Kubernetes客户端

    Args:
        kubeconfig: kubeconfig文件路径
        context: 可选的kubeconfig上下文名称

    Returns:
        Kubernetes客户端实例

    Raises:
        ClusterConfigError: kubeconfig不存在或无法解析
    """
    path = os.path.expanduser(kubeconfig)
    if not os.path.exists(path):
        raise ClusterConfigError(
            f"Failed to load kubeconfig: {path} does not exist",
            details={"kubeconfig": path},
        )

    try:
        api_client = config.new_client_from_config(config_file=path, context=context)
    except (ConfigException, OSError, ValueError) as e:
        raise ClusterConfigError(
            f"Failed to load kubeconfig: {e}",
            details={"kubeconfig": path, "context": context},
        ) from e

    logger.debug("已加载kubeconfig: %s (context=%s)", path, context or "current")
    return api_client


class KubernetesClientContext:
    """Kubernetes客户端上下文管理器，退出时关闭连接"""

    def __init__(self, kubeconfig: str, context: Optional[str] = None):
        self.kubeconfig = kubeconfig
        self.context = context
        self.client_instance: Optional[client.ApiClient] = None

    def __enter__(self) -> client.ApiClient:
        """进入上下文，创建客户端"""
        self.client_instance = create_k8s_client(self.kubeconfig, self.context)
        return self.client_instance

    def __exit__(self, exc_type, exc_val, exc_tb):
        """退出上下文，关闭客户端"""
        if self.client_instance is not None:
            self.client_instance.close()
            self.client_instance = None
