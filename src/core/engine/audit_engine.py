import logging
import queue
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Any, Iterable, Iterator, Mapping, Optional, Protocol, Tuple

from botocore.exceptions import BotoCoreError, ClientError

from ..config import AuditSettings
from ..context import AuditContext
from ..models import AuditError, AuditReport, RequiredTagSet, ResourceRecord
from ..providers import build_providers, normalize_services

logger = logging.getLogger(__name__)

# intervalo máximo que o loop fica bloqueado sem olhar cancelamento/deadline
_POLL_SECONDS = 0.1

_RECORD = "record"
_ERROR = "error"
_DONE = "done"


class TagProvider(Protocol):
    def audit(self, required_tags: RequiredTagSet, context: AuditContext) -> Iterator[ResourceRecord]: ...


class AuditCoordinator:
    """
    Roda os providers selecionados em paralelo e junta tudo em um AuditReport.

    - uma thread por provider pedido (sem limite além do catálogo)
    - cada thread publica records numa fila única, conforme vai achando
    - o primeiro erro vence: o contexto é cancelado, o resto é abandonado e
      nenhum relatório parcial é devolvido
    """

    def __init__(self, providers: Mapping[str, TagProvider]) -> None:
        self.providers = {service.lower(): p for service, p in providers.items()}

    @classmethod
    def from_settings(cls, settings: AuditSettings) -> "AuditCoordinator":
        providers = build_providers(
            settings.services,
            session=settings.session(),
            client_config=settings.client_config(),
        )
        return cls(providers)

    def _select(self, services: Iterable[str]) -> Mapping[str, TagProvider]:
        selected = {}
        for service in normalize_services(services):
            provider = self.providers.get(service)
            if provider is None:
                logger.debug(f"Ignoring unknown service '{service}'")
                continue
            selected[service] = provider
        return selected

    def run(
        self,
        services: Iterable[str],
        required_tags: RequiredTagSet,
        context: Optional[AuditContext] = None,
    ) -> AuditReport:
        context = context or AuditContext()
        selected = self._select(services)
        report = AuditReport()

        if not selected:
            return report

        # fila sem limite: um produtor nunca fica preso no put, mesmo depois
        # que o coordinator desistiu de consumir
        sink: "queue.Queue[Tuple[str, str, Any]]" = queue.Queue()

        def produce(service: str, provider: TagProvider) -> None:
            count = 0
            try:
                for record in provider.audit(required_tags, context):
                    sink.put((_RECORD, service, record))
                    count += 1
            except Exception as e:
                sink.put((_ERROR, service, e))
                return
            logger.info(f"[{service}] Completed: {count} resources")
            sink.put((_DONE, service, None))

        executor = ThreadPoolExecutor(max_workers=len(selected), thread_name_prefix="tag-audit")
        for service, provider in selected.items():
            executor.submit(produce, service, provider)

        pending = set(selected)
        try:
            while pending:
                context.check()
                try:
                    kind, service, payload = sink.get(timeout=_poll_timeout(context))
                except queue.Empty:
                    continue

                if kind == _RECORD:
                    report.add(payload)
                elif kind == _ERROR:
                    logger.error(f"[{service}] Failed: {payload}")
                    raise payload
                else:
                    pending.discard(service)
        except BaseException:
            context.cancel()
            # as threads restantes param no próximo context.check()
            executor.shutdown(wait=False, cancel_futures=True)
            raise

        executor.shutdown(wait=True)
        logger.info(f"Audit finished with {len(report.resources)} resources")
        return report


def _poll_timeout(context: AuditContext) -> float:
    remaining = context.remaining()
    if remaining is None:
        return _POLL_SECONDS
    return max(0.0, min(_POLL_SECONDS, remaining))


def audit_resources(
    services: Iterable[str],
    required_tags: RequiredTagSet,
    settings: AuditSettings,
) -> AuditReport:
    """
    Atalho usado pelo CLI: monta o coordinator a partir das settings e roda.
    """
    services = list(services)
    context = AuditContext(timeout=settings.timeout)
    try:
        coordinator = AuditCoordinator.from_settings(replace(settings, services=tuple(services)))
        return coordinator.run(services, required_tags, context)
    except AuditError:
        raise
    except (BotoCoreError, ClientError) as e:
        # ex.: NoRegionError ao criar os clients
        raise AuditError(f"failed to set up AWS clients: {e}") from e
    except Exception as e:
        # erro inesperado de um provider vira erro de audit
        raise AuditError(f"failed to audit resources: {e}") from e
