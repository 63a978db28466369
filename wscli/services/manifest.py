from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import yaml
from kubernetes import client

from ..core.logging import get_logger
from ..exceptions import OutputWriteError
from ..schemas.migration import ManifestResult, MigratedBinding
from .k8s.rbac_operations import serialize_role_binding

logger = get_logger(__name__)

DOCUMENT_SEPARATOR = "---\n"
_EMPTY_TIMESTAMP = "metadata:\n  creationTimestamp: null\n"


def strip_empty_timestamp(text: str) -> str:
    """Collapse the ``creationTimestamp: null`` placeholder into a clean metadata block."""
    return text.replace(_EMPTY_TIMESTAMP, "metadata:\n", 1)


def dump_binding(binding: MigratedBinding, api_client: client.ApiClient) -> str:
    document = serialize_role_binding(binding, api_client)
    text = yaml.safe_dump(document, default_flow_style=False, sort_keys=False)
    return strip_empty_timestamp(text)


def render_manifest(bindings: Iterable[MigratedBinding]) -> ManifestResult:
    """Render bindings as a multi-document YAML stream.

    A binding whose ``(namespace, name)`` was already rendered is dropped, so
    the first one seen wins.
    """
    serializer = client.ApiClient()
    seen: set[tuple[str, str]] = set()
    chunks: list[str] = []
    written = 0
    duplicates = 0
    failed = 0

    try:
        for binding in bindings:
            if binding.key in seen:
                logger.warning(
                    "RoleBinding %s for Namespace %s was already processed", binding.name, binding.namespace
                )
                duplicates += 1
                continue
            seen.add(binding.key)

            try:
                text = dump_binding(binding, serializer)
            except (yaml.YAMLError, ValueError, TypeError) as e:
                logger.error("Failed to encode RoleBinding %s to YAML: %s", binding.name, e)
                failed += 1
                continue

            chunks.append(DOCUMENT_SEPARATOR)
            chunks.append(text)
            written += 1
    finally:
        serializer.close()

    return ManifestResult(
        text="".join(chunks),
        written=written,
        duplicates=duplicates,
        failed=failed,
    )


def write_manifest(path: str | Path, bindings: Iterable[MigratedBinding]) -> ManifestResult:
    """Write the migrated bindings to ``path``.

    Raises:
        OutputWriteError: the file cannot be created or written.
    """
    result = render_manifest(bindings)
    target = Path(path)
    try:
        target.write_text(result.text, encoding="utf-8")
    except OSError as e:
        raise OutputWriteError(f"Failed to create file: {e}", details={"path": str(target)}) from e

    logger.info("Wrote %d migrated RoleBindings to %s", result.written, target)
    if result.duplicates:
        logger.info("Skipped %d duplicate RoleBindings", result.duplicates)
    if result.failed:
        logger.warning("Failed to encode %d RoleBindings", result.failed)
    return result
