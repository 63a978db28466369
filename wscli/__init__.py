"""Migrate Konflux tenant RoleBindings from KubeSaw accounts to SSO identities."""

__version__ = "1.0.0"
