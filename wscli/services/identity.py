from __future__ import annotations

from collections.abc import Iterable

from ..core.logging import get_logger
from ..exceptions import InvalidTargetError
from ..schemas.migration import AccountRecord, IdentityMapping
from .directory import DirectoryLookup, DirectorySession
from .utils import clean_email

logger = get_logger(__name__)

TARGETS = ("user", "email")


class EmailTransform:
    """Maps an address to its normalized email, without any external call."""

    name = "email"

    def __call__(self, email: str) -> str:
        return clean_email(email)


class DirectoryTransform:
    """Maps an address to the directory user name (``uid``)."""

    name = "user"

    def __init__(self, lookup: DirectoryLookup) -> None:
        self.lookup = lookup

    def __call__(self, email: str) -> str:
        return self.lookup.resolve(email)


def get_transform(target: str, session: DirectorySession | None = None) -> EmailTransform | DirectoryTransform:
    if target == "email":
        return EmailTransform()
    if target == "user":
        if session is None:
            raise InvalidTargetError("The 'user' target requires a directory session", details={"target": target})
        return DirectoryTransform(DirectoryLookup(session))
    raise InvalidTargetError(f"Unsupported target identity attribute: {target}", details={"target": target})


def extract_email(account: AccountRecord) -> tuple[str | None, str | None]:
    """Return ``(email, None)`` or ``(None, reason)`` for an account."""
    spec = account.spec
    if not isinstance(spec, dict):
        return None, "spec missing"

    claims = spec.get("propagatedClaims")
    if not isinstance(claims, dict):
        return None, "claims missing"

    email = claims.get("email")
    if not isinstance(email, str) or not email:
        return None, "email missing"

    return email, None


def build_id_mapping(accounts: Iterable[AccountRecord], transform) -> IdentityMapping:
    """Build the legacy account name -> target identity mapping.

    Accounts without an email claim are skipped with a warning. Accounts
    whose transform result is empty are left out, which downstream means
    "do not migrate this subject".
    """
    id_map: IdentityMapping = {}
    skipped = 0
    unresolved = 0

    for account in accounts:
        email, reason = extract_email(account)
        if email is None:
            logger.warning("UserAccount %s: %s", account.name, reason)
            skipped += 1
            continue

        identity = transform(email)
        if identity:
            id_map[account.name] = identity
        else:
            unresolved += 1

    logger.info(
        "Mapped %d user accounts (%d without email claim, %d unresolved)",
        len(id_map),
        skipped,
        unresolved,
    )
    return id_map
