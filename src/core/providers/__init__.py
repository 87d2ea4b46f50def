# src/core/providers/__init__.py
from .base import BaseTagProvider

import importlib
import logging
import pkgutil
from typing import Dict, Iterable, List, Optional, Type

from boto3.session import Session
from botocore.config import Config

logger = logging.getLogger(__name__)


def load_providers() -> None:
    """
    Garante que todos os módulos de providers em core.providers.* foram importados,
    para que o __init_subclass__ do BaseTagProvider tenha rodado
    e populado o registry.
    """
    package_name = __name__  # "core.providers"

    for _, name, _ in pkgutil.iter_modules(__path__, package_name + "."):
        # evita importar de novo o base
        if name.endswith(".base"):
            continue
        importlib.import_module(name)


def get_provider_for_service(service: str) -> Optional[Type[BaseTagProvider]]:
    """
    Resolve o provider de um serviço (case-insensitive).
    Serviço desconhecido devolve None: o audit simplesmente ignora.
    """
    load_providers()

    service = service.strip().lower()
    for provider_cls in BaseTagProvider.registry:
        if provider_cls.service.lower() == service:
            return provider_cls
    return None


def normalize_services(services: Iterable[str]) -> List[str]:
    """
    Lower-case, sem duplicados, na ordem pedida. Não valida nada.
    """
    result: List[str] = []
    for service in services:
        service = service.strip().lower()
        if service and service not in result:
            result.append(service)
    return result


def build_providers(
    services: Iterable[str],
    session: Session,
    client_config: Optional[Config] = None,
) -> Dict[str, BaseTagProvider]:
    """
    Instancia um provider por serviço conhecido. Os clients são criados aqui,
    na thread chamadora, antes do fan-out.
    """
    providers: Dict[str, BaseTagProvider] = {}
    for service in normalize_services(services):
        provider_cls = get_provider_for_service(service)
        if provider_cls is None:
            logger.debug(f"Ignoring unknown service '{service}'")
            continue
        providers[service] = provider_cls(session, client_config)
    return providers
