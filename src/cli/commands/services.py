import json
from typing import Dict, List

import typer
import typer_di
import yaml

from core.config import DEFAULT_SERVICES
from core.providers import BaseTagProvider, load_providers

from .console import BOLD, CYAN, GREEN, GREY, RESET, RULE
from ..params import output_params


def _catalog() -> List[Dict[str, object]]:
    load_providers()

    catalog = []
    for provider in sorted(BaseTagProvider.registry, key=lambda c: c.service):
        catalog.append(
            {
                "service": provider.service,
                "name": provider.service_name,
                "resource_type": provider.resource_type,
                "default": provider.service in DEFAULT_SERVICES,
            }
        )
    return catalog


def _print_services(catalog: List[Dict[str, object]], output: str) -> None:
    if output == "json":
        typer.echo(json.dumps(catalog, indent=2, ensure_ascii=False))
        return

    if output == "yaml":
        typer.echo(yaml.safe_dump(catalog, sort_keys=False, allow_unicode=True))
        return

    typer.echo()
    typer.echo(RULE)
    typer.echo(f"{CYAN}{BOLD}Audited Services:{RESET}")
    typer.echo(RULE)
    typer.echo()
    if not catalog:
        typer.echo("  (none registered)")
        typer.echo()
        return

    for entry in catalog:
        meta = f"{entry['name']} / {entry['resource_type']}"
        typer.echo(f"  {GREEN}•{RESET} {entry['service']:<10} {GREY}({meta}){RESET}")

    typer.echo()
    typer.echo(RULE)
    typer.echo()


def services(output: str = typer_di.Depends(output_params)) -> None:
    """
    Lista os serviços que o audit sabe verificar (valores aceitos em --services).
    """
    _print_services(_catalog(), output)
