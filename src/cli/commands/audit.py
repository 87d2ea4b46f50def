import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer

from core.config import load_settings
from core.engine.audit_engine import audit_resources
from core.engine.identity_engine import ensure_aws_identity
from core.logging_setup import setup_logging
from core.models import AuditError, AuditReport, ConfigError, RequiredTagSet
from core.presenters import OUTPUT_FORMATS, present
from core.providers import get_provider_for_service, normalize_services

from ..params import split_csv

logger = logging.getLogger(__name__)


def _validate_output(value: str) -> str:
    value = value.lower()
    if value not in OUTPUT_FORMATS:
        raise typer.BadParameter(
            f"unsupported output format: {value} (use {', '.join(OUTPUT_FORMATS)})"
        )
    return value


def audit(
    required_tags: List[str] = typer.Option(
        ...,
        "--required-tags",
        "-t",
        help="List of required tags (comma-separated). Can be passed multiple times.",
    ),
    output: str = typer.Option(
        "text",
        "--output",
        "-o",
        callback=_validate_output,
        help="Output format (text/json/csv).",
    ),
    services: List[str] = typer.Option(
        None,
        "--services",
        "-s",
        help="AWS services to audit (comma-separated). Default: ec2,s3,rds,lambda.",
    ),
    profile: Optional[str] = typer.Option(
        None,
        "--profile",
        help="AWS profile name (from ~/.aws/config).",
    ),
    region: Optional[str] = typer.Option(
        None,
        "--region",
        help="AWS region, e.g. sa-east-1.",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Abort the audit after this many seconds.",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        help="YAML config file (profile, region, services, timeouts, log_level).",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level on stderr (DEBUG, INFO, WARNING, ERROR).",
    ),
) -> None:
    """
    Audita recursos AWS e reporta as tags obrigatórias que estão faltando.

    Ex:
    tag-auditor audit -t environment,project,owner
    tag-auditor audit -t owner -s ec2,s3 -o csv
    """
    try:
        settings = load_settings(
            config,
            overrides={
                "profile": profile,
                "region": region,
                "timeout": timeout,
                "log_level": log_level,
                "services": split_csv(services) or None,
            },
        )
    except ConfigError as e:
        raise typer.BadParameter(str(e))

    setup_logging(settings.log_level)

    tags = RequiredTagSet.parse(required_tags)
    known = [s for s in normalize_services(settings.services) if get_provider_for_service(s) is not None]

    if not known:
        # só ids desconhecidos: relatório vazio, sem tocar na AWS
        logger.info("No known services selected, nothing to audit")
        report = AuditReport()
    else:
        ensure_aws_identity(
            profile=settings.profile,
            region=settings.region,
            config=settings.client_config(),
        )
        try:
            report = audit_resources(settings.services, tags, settings)
        except AuditError as e:
            logger.error(f"Audit failed: {e}")
            typer.echo(f"Error running audit: {e}", err=True)
            raise typer.Exit(code=1)

    try:
        present(report, output, sys.stdout)
    except OSError as e:
        logger.error(f"Failed to write report: {e}")
        typer.echo(f"Error writing output: {e}", err=True)
        raise typer.Exit(code=1)
