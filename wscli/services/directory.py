from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

import ldap3
from ldap3.core.exceptions import LDAPException, LDAPNoSuchObjectResult
from ldap3.utils.conv import escape_filter_chars

from ..core.config import Settings, get_settings
from ..core.logging import get_logger
from ..exceptions import DirectoryConnectionError, DirectorySearchError
from .utils import clean_email

logger = get_logger(__name__)

ConnectionFactory = Callable[[Settings], Any]


def open_ldap_connection(settings: Settings) -> ldap3.Connection:
    """Open an anonymous, read-only connection to the corporate directory."""
    server = ldap3.Server(
        settings.ldap_server,
        port=settings.ldap_port,
        use_ssl=settings.ldap_use_ssl,
        get_info=ldap3.NONE,
    )
    return ldap3.Connection(server, auto_bind=True, read_only=True, raise_exceptions=True)


class DirectorySession:
    """Owns the single directory connection shared by every lookup in a run.

    The connection is opened on first use and reused afterwards. Queries go
    through ``search`` which holds the session lock, since an ldap3 sync
    connection must not be driven from several threads at once.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        connection_factory: ConnectionFactory | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._connection_factory = connection_factory or open_ldap_connection
        self._connection: Any = None
        self._lock = threading.RLock()

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    @property
    def connection(self) -> Any:
        if self._connection is not None:
            return self._connection

        with self._lock:
            if self._connection is None:
                host = f"{self.settings.ldap_server}:{self.settings.ldap_port}"
                try:
                    self._connection = self._connection_factory(self.settings)
                except LDAPException as exc:
                    raise DirectoryConnectionError(
                        f"Failed to connect to LDAP server: {exc}",
                        details={"server": host},
                    ) from exc
                logger.info("Connected to LDAP server %s", host)
            return self._connection

    def search(self, field: str, value: str) -> str:
        """Return the identity attribute of the first entry where ``field`` equals ``value``."""
        attribute = self.settings.ldap_identity_attribute
        search_filter = f"({field}={escape_filter_chars(value)})"

        with self._lock:
            conn = self.connection
            try:
                conn.search(
                    search_base=self.settings.ldap_search_base,
                    search_filter=search_filter,
                    search_scope=ldap3.SUBTREE,
                    dereference_aliases=ldap3.DEREF_NEVER,
                    attributes=[attribute],
                )
            except LDAPNoSuchObjectResult:
                return ""
            except LDAPException as exc:
                raise DirectorySearchError(
                    f"Error found searching for email {value}: {exc}",
                    details={"filter": search_filter},
                ) from exc
            entries = list(conn.entries)

        if not entries:
            return ""
        values = entries[0].entry_attributes_as_dict.get(attribute) or []
        return str(values[0]) if values else ""

    def close(self) -> None:
        with self._lock:
            if self._connection is not None:
                try:
                    self._connection.unbind()
                except LDAPException as exc:
                    logger.warning("Failed to close LDAP connection cleanly: %s", exc)
                self._connection = None

    def __enter__(self) -> "DirectorySession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class DirectoryLookup:
    """Resolves a contact address to a short directory identity."""

    def __init__(self, session: DirectorySession) -> None:
        self.session = session

    def resolve(self, address: str) -> str:
        settings = self.session.settings
        email = clean_email(address)

        identity = self.session.search(settings.ldap_mail_attribute, email)
        if not identity:
            identity = self.session.search(settings.ldap_alias_attribute, email)
            if not identity:
                logger.info("No user found for email %s", email)

        return identity
