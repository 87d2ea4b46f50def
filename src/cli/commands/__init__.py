from .audit import audit
from .services import services
from .whoami import whoami

__all__ = ["audit", "services", "whoami"]
