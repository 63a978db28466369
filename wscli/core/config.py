"""
Core configuration module for wscli.
统一管理环境变量和迁移配置
"""
import os
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_kubeconfig() -> str:
    return os.path.join(os.path.expanduser("~"), ".kube", "config")


class Settings(BaseSettings):
    """Migration configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_file=(".env",), env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )

    # 日志配置
    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_json: bool = False
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_date_format: str = "%Y-%m-%d %H:%M:%S"

    # 集群配置
    kube_config_path: str = Field(default_factory=_default_kubeconfig, alias="KUBE_CONFIG_PATH")
    kube_context: Optional[str] = None
    account_group: str = "toolchain.dev.openshift.com"
    account_version: str = "v1alpha1"
    account_plural: str = "useraccounts"
    account_namespace: str = "toolchain-member-operator"
    tenant_namespace_selector: str = "toolchain.dev.openshift.com/type=tenant"
    tenant_binding_selector: str = "toolchain.dev.openshift.com/provider=codeready-toolchain"
    excluded_binding_name: str = "appstudio-pipelines-runner-rolebinding"
    excluded_namespace: str = "toolchain-host-operator"

    # LDAP配置
    ldap_server: str = "ldap.corp.redhat.com"
    ldap_port: int = 389
    ldap_use_ssl: bool = False
    ldap_search_base: str = "ou=users,dc=redhat,dc=com"
    ldap_identity_attribute: str = "uid"
    ldap_mail_attribute: str = "mail"
    ldap_alias_attribute: str = "rhatPreferredAlias"

    # 重命名规则
    legacy_token: str = "appstudio"
    new_token: str = "konflux"
    migrated_label_key: str = "konflux-ci.dev/type"
    migrated_label_value: str = "user"

    output_file: str = "migrated_rolebindings.yaml"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """获取配置实例（单例模式）"""
    return Settings()  # type: ignore[call-arg]
