from typing import Optional


class AuditError(RuntimeError):
    """
    Erro base de uma auditoria. Qualquer subclasse interrompe o audit inteiro.
    """


class ProviderError(AuditError):
    """
    Falha na listagem primária de um provider (ex.: DescribeInstances).
    Fatal para o audit; nunca é levantada por falha de tags de um único recurso.
    """

    def __init__(self, service: str, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"{message}: {cause}" if cause is not None else message)
        self.service = service
        self.cause = cause


class AuditCancelledError(AuditError):
    pass


class AuditTimeoutError(AuditCancelledError):
    pass


class ConfigError(AuditError):
    pass
