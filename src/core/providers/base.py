import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Iterable, Iterator, List, Optional, Type

from boto3.session import Session
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..context import AuditContext
from ..models import ProviderError, RequiredTagSet, ResourceRecord

logger = logging.getLogger(__name__)


class BaseTagProvider(ABC):
    """
    Classe base para todos os providers.

    Ela mantém um registry automático de subclasses concretas. Cada provider
    lista os recursos do seu serviço com UMA chamada (sem paginação) e monta
    um ResourceRecord por recurso.

    Política de erro (igual para todos os providers):
    - falha na listagem -> ProviderError, fatal para o audit
    - falha ao buscar tags de um recurso -> warning e tags vazias
    """

    # registro global de providers concretos
    registry: ClassVar[List[Type["BaseTagProvider"]]] = []

    # Identificador usado no --services (ec2, s3, rds, lambda)
    service: str = ""

    # Nome exibido no relatório (EC2, S3...)
    service_name: str = ""

    # Tipo de recurso exibido no relatório (Instance, Bucket...)
    resource_type: str = ""

    # Mensagem usada quando a listagem falha
    list_error_message: str = ""

    def __init_subclass__(cls, **kwargs):
        """
        Sempre que uma subclass é criada, se não for abstrata, entra no registry.
        """
        super().__init_subclass__(**kwargs)

        # Se tiver métodos abstratos ainda, não registra
        if getattr(cls, "__abstractmethods__", None):
            return

        BaseTagProvider.registry.append(cls)

    def __init__(self, session: Session, client_config: Optional[Config] = None) -> None:
        self.session = session
        # cada provider é dono do próprio client (clients boto3 não são
        # compartilhados entre threads)
        self.client = session.client(self.service, config=client_config)

    @abstractmethod
    def list_resources(self) -> Iterable[Any]:
        """
        Chamada primária de listagem. Devolve os itens crus da API.
        """
        ...

    @abstractmethod
    def resource_id(self, item: Any) -> str: ...

    @abstractmethod
    def fetch_tags(self, item: Any) -> Dict[str, str]:
        """
        Retorna as tags atuais do recurso como dict {Key: Value}.
        """
        ...

    def _aws_tags_to_dict(self, tags: Optional[List[Dict[str, str]]]) -> Dict[str, str]:
        return {t["Key"]: t.get("Value", "") for t in tags or []}

    def audit(self, required_tags: RequiredTagSet, context: AuditContext) -> Iterator[ResourceRecord]:
        context.check()
        try:
            items = list(self.list_resources())
        except (BotoCoreError, ClientError) as e:
            raise ProviderError(self.service, self.list_error_message, e) from e

        logger.info(f"[{self.service}] Found {len(items)} resources")

        for item in items:
            context.check()
            resource_id = self.resource_id(item)

            try:
                tags = self.fetch_tags(item)
            except (BotoCoreError, ClientError) as e:
                logger.warning(f"[{self.service}] Failed to get tags for {resource_id}, reporting without tags: {e}")
                tags = {}

            record = ResourceRecord.build(
                service=self.service_name,
                resource_id=resource_id,
                resource_type=self.resource_type,
                tags=tags,
                required_tags=required_tags,
            )
            logger.debug(f"[{self.service}] {resource_id}: missing={record.missing_tags}")
            yield record
