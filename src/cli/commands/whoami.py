import json
from dataclasses import asdict
from typing import Optional

import typer
import typer_di
import yaml

from core.engine.identity_engine import get_current_aws_identity
from core.models import AwsIdentity, AwsIdentityError

from .console import BOLD, CYAN, GREEN, MAGENTA, RED, RESET, RULE, YELLOW
from ..params import output_params


def _print_error(error: AwsIdentityError, output: str) -> None:
    if output == "json":
        typer.echo(json.dumps({"error": str(error)}, indent=2, ensure_ascii=False))
        return

    if output == "yaml":
        typer.echo(yaml.safe_dump({"error": str(error)}, sort_keys=False, allow_unicode=True))
        return

    typer.echo(RULE, err=True)
    typer.echo(f"{RED}{BOLD}FAILED TO RESOLVE AWS IDENTITY{RESET}", err=True)
    typer.echo(RULE, err=True)
    typer.echo(f"{MAGENTA}Detalhes:{RESET} {error}", err=True)
    typer.echo(f"{YELLOW}Verifique se:{RESET}", err=True)
    typer.echo("  - O AWS_PROFILE está configurado corretamente", err=True)
    typer.echo("  - O login SSO está ativo (ex.: `aws sso login`)", err=True)
    typer.echo("  - A role tem permissão para `sts:GetCallerIdentity`", err=True)


def _print_identity(identity: AwsIdentity, output: str) -> None:
    identity_dict = asdict(identity)

    if output == "json":
        typer.echo(json.dumps(identity_dict, indent=2, ensure_ascii=False))
        return

    if output == "yaml":
        typer.echo(yaml.safe_dump(identity_dict, sort_keys=False, allow_unicode=True))
        return

    typer.echo(RULE)
    typer.echo(f"{CYAN}{BOLD}TAG AUDITOR - AWS Identity Context{RESET}")
    typer.echo(RULE)
    typer.echo(f"{CYAN}{BOLD}ACCOUNT:{RESET} {identity.account}")
    typer.echo(f"{CYAN}{BOLD}ARN:    {RESET} {identity.arn}")
    typer.echo(f"{CYAN}{BOLD}PROFILE:{RESET} {identity.profile or '(no profile / env creds)'}")
    typer.echo(f"{CYAN}{BOLD}REGION: {RESET} {identity.region or '(no default region)'}")
    typer.echo(RULE)
    typer.echo(f"{GREEN}{BOLD}Identity OK.{RESET}")


def whoami(
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
    output: str = typer_di.Depends(output_params),
) -> None:
    """
    Mostra a identidade AWS atual (Account ID, User ARN).
    """
    try:
        identity = get_current_aws_identity(profile=profile, region=region)
    except AwsIdentityError as e:
        _print_error(e, output)
        raise typer.Exit(code=1)

    _print_identity(identity, output)
