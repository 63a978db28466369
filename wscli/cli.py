"""wscli command line interface.

    wscli migrate -t user|email

Where -t is the identity attribute (username or email) that will be targeted.
The tool assumes you have already authenticated with Red Hat SSO and with the
target KubeSaw member cluster.
"""

from __future__ import annotations

import click

from .core.config import get_settings
from .core.logging import get_logger, setup_logging
from .exceptions import AppException
from .services.identity import TARGETS
from .services.migration import run_migration

logger = get_logger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@click.group(
    name="wscli",
    help="CLI tool to migrate Konflux RoleBindings from KubeSaw users to SSO users.",
)
@click.version_option(package_name="wscli")
def cli() -> None:
    pass


@cli.command(
    name="migrate",
    help="Migrate tenant RoleBindings from KubeSaw accounts to SSO users.",
)
@click.option(
    "-t",
    "--target",
    default="user",
    show_default=True,
    help="Select between 'email' and 'user' as the target identity attribute to use in RBAC.",
)
@click.option(
    "-o",
    "--output-file",
    default=None,
    help="Path to output file where migrated role bindings will be written.",
)
@click.option("--kubeconfig", default=None, help="Path to the kubeconfig file.")
@click.option("--context", "kube_context", default=None, help="Kubeconfig context to use.")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level.",
)
@click.pass_context
def migrate_command(
    ctx: click.Context,
    target: str,
    output_file: str | None,
    kubeconfig: str | None,
    kube_context: str | None,
    log_level: str | None,
) -> None:
    setup_logging(level=log_level)

    if target not in TARGETS:
        click.echo("Please select the target identity attribute by passing -t Flag")
        click.echo(ctx.get_help())
        return

    settings = get_settings()
    try:
        report = run_migration(
            target,
            output_file=output_file or settings.output_file,
            kubeconfig=kubeconfig,
            context=kube_context,
            settings=settings,
        )
    except AppException as exc:
        logger.error("Migration aborted: %s", exc.to_payload())
        ctx.exit(1)
    except Exception:
        logger.exception("Migration aborted by unexpected error")
        ctx.exit(1)
    else:
        logger.info(
            "Migration finished: %d accounts, %d mapped, %d bindings, %d written, %d orphan namespaces",
            report.accounts,
            report.mapped,
            report.bindings,
            report.written,
            len(report.orphan_namespaces),
        )


def main() -> None:
    cli()
