import typer
from typer_di import TyperDI

from .commands import audit, services, whoami
from .version import version_callback


app = TyperDI(help="Audit AWS resources for missing required tags.", no_args_is_help=True)


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show the version and exit.",
        callback=version_callback,
        is_eager=True,
    )
):
    pass


app.command("audit")(audit)
app.command("services")(services)
app.command("whoami")(whoami)


if __name__ == "__main__":
    app()
