from importlib.metadata import PackageNotFoundError, version

import typer


def get_version() -> str:
    """
    Retorna a versão instalada do pacote, com fallback seguro se não houver metadados.
    """
    try:
        return version("tag-auditor")
    except PackageNotFoundError:
        return "unknown"


def version_callback(value: bool) -> None:
    if value:
        print(get_version())
        raise typer.Exit()
