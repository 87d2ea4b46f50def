import typer


def output_params(
    output: str = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: text (default), json ou yaml.",
    ),
    out_json: bool = typer.Option(False, "--json", help="Alias para --output json"),
    out_yaml: bool = typer.Option(False, "--yaml", help="Alias para --output yaml"),
) -> str:
    if sum([out_json, out_yaml, output is not None]) > 1:
        raise typer.BadParameter(
            "Use apenas uma opção de output: --json, --yaml ou --output."
        )

    if out_json:
        return "json"
    if out_yaml:
        return "yaml"

    output = (output or "text").lower()
    if output not in {"text", "json", "yaml"}:
        raise typer.BadParameter(f"unsupported output format: {output}", param_hint="--output")

    return output


def split_csv(values) -> list:
    """
    Junta opções repetíveis no formato "a,b" numa lista só: ["a,b", "c"] -> [a, b, c].
    """
    result = []
    for value in values or []:
        result.extend(v.strip() for v in value.split(",") if v.strip())
    return result
