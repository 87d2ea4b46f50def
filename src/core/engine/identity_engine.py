import logging
from typing import Optional

import boto3
import typer
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..models import AwsIdentity, AwsIdentityError

logger = logging.getLogger(__name__)


def get_current_aws_identity(
    profile: Optional[str] = None,
    region: Optional[str] = None,
    config: Optional[Config] = None,
) -> AwsIdentity:
    """
    Tenta descobrir a identidade AWS atual usando STS (Security Token Service),
    respeitando profile/region passados explicitamente (se houver).

    `config` é o mesmo botocore Config dos providers (timeouts, uma tentativa).
    """
    try:
        session = boto3.session.Session(
            profile_name=profile,
            region_name=region,
        )
        sts = session.client("sts", config=config)
        resp = sts.get_caller_identity()
    except (BotoCoreError, ClientError) as e:
        raise AwsIdentityError(f"unable to resolve current AWS identity: {e}") from e

    return AwsIdentity(
        account=resp["Account"],
        arn=resp["Arn"],
        user_id=resp["UserId"],
        region=session.region_name,
        profile=session.profile_name,
    )


def ensure_aws_identity(
    profile: Optional[str] = None,
    region: Optional[str] = None,
    config: Optional[Config] = None,
) -> AwsIdentity:
    """
    Valida as credenciais antes de qualquer provider rodar. Falha aqui é erro
    de configuração: mensagem em stderr e exit 1.
    """
    try:
        identity = get_current_aws_identity(profile=profile, region=region, config=config)
    except AwsIdentityError as exc:
        logger.error(str(exc))
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)

    logger.info(f"Running as {identity.arn}")
    return identity
