from typing import Any, Dict, Optional


class AppException(Exception):
    """统一应用异常基类，便于在业务层抛出标准化错误。

    迁移过程中抛出的 AppException 都是致命错误，由 CLI 决定终止运行。
    """

    code = "APP_ERROR"

    def __init__(self, message: str, *, code: Optional[str] = None, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details or {}

    def to_payload(self) -> Dict[str, Any]:
        """构建标准化错误载荷。"""
        return {
            "message": self.message,
            "code": self.code,
            **({"details": self.details} if self.details else {}),
        }


class ClusterConfigError(AppException):
    """kubeconfig 加载失败"""

    code = "CLUSTER_CONFIG_ERROR"


class ClusterListingError(AppException):
    """集群资源列表获取失败"""

    code = "CLUSTER_LISTING_ERROR"


class DirectoryConnectionError(AppException):
    """LDAP 连接或绑定失败"""

    code = "DIRECTORY_CONNECTION_ERROR"


class DirectorySearchError(AppException):
    """LDAP 查询失败"""

    code = "DIRECTORY_SEARCH_ERROR"


class BindingIntegrityError(AppException):
    """RoleBinding 的 subject 数量不是 1"""

    code = "BINDING_INTEGRITY_ERROR"


class OutputWriteError(AppException):
    """迁移结果文件写入失败"""

    code = "OUTPUT_WRITE_ERROR"


class InvalidTargetError(AppException):
    """不支持的目标身份属性"""

    code = "INVALID_TARGET"
