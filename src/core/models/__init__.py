from .AuditError import (
    AuditCancelledError,
    AuditError,
    AuditTimeoutError,
    ConfigError,
    ProviderError,
)
from .AuditReport import AuditReport
from .AwsIdentity import AwsIdentity, AwsIdentityError
from .RequiredTagSet import RequiredTagSet
from .ResourceRecord import ResourceRecord

__all__ = [
    "AuditCancelledError",
    "AuditError",
    "AuditReport",
    "AuditTimeoutError",
    "AwsIdentity",
    "AwsIdentityError",
    "ConfigError",
    "ProviderError",
    "RequiredTagSet",
    "ResourceRecord",
]
