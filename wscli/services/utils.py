"""
字符串工具函数模块
"""

import re

# 子地址标签，如 jdoe+dev@redhat.com 中的 +dev
_SUBADDRESS_RE = re.compile(r"\+[^@]+@")


def clean_email(email: str) -> str:
    """
    去除邮箱地址中的子地址标签

    Args:
        email: 邮箱地址，如 "jdoe+dev@redhat.com"

    Returns:
        规范化后的邮箱地址，如 "jdoe@redhat.com"
    """
    return _SUBADDRESS_RE.sub("@", email)
