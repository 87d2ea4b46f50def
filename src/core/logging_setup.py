import logging
import sys


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """
    Configura o root logger com um único handler em stderr.

    O stdout fica reservado para o relatório.
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # evita handlers duplicados quando o app é invocado várias vezes (testes)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    return logging.getLogger("core")
