"""CLI main entry point."""

import asyncio
import json
import logging
import os
from pathlib import Path

import click

from .config import Settings
from .consts import CONFIG_FILE_DEFAULT
from .errors import SmartFormException
from .form import Form
from .loader import load_form
from .log import setup as setup_log
from .renderers import ConsoleRegistry, HtmlRegistry
from .validation import format_errors

logger = logging.getLogger(__name__)


def load_settings(config_path: str) -> Settings:
    if Path(config_path).exists():
        return Settings.load_from_file(config_path)
    return Settings()


def read_values(values_path: str | None) -> dict:
    if not values_path:
        return {}
    try:
        data = json.loads(Path(values_path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON in {values_path}: {e}")
    if not isinstance(data, dict):
        raise click.ClickException(f"Values file must contain a JSON object: {values_path}")
    return data


def activate(form_file: str, values_path: str | None) -> Form:
    declaration = load_form(form_file)
    initial = {**declaration.initial_values, **read_values(values_path)}
    return Form(declaration.builder, initial_values=initial)


@click.group()
@click.option("--config", "-c", default=CONFIG_FILE_DEFAULT, help="Configuration file path")
@click.pass_context
def cli(ctx, config: str):
    """SmartForm - declare a form once, validate and render it anywhere."""
    ctx.ensure_object(dict)
    try:
        settings = load_settings(config)
    except SmartFormException as e:
        raise click.ClickException(str(e))
    ctx.obj["settings"] = settings
    ctx.obj["config_path"] = config
    setup_log(settings.log_file)


@cli.command(name="describe")
@click.argument("form_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--values", "values_path", type=click.Path(exists=True), help="JSON file with values")
@click.pass_context
def describe(ctx, form_file: str, values_path: str | None):
    """Print the rendering description of a form as JSON."""
    try:
        form = activate(form_file, values_path)
        description = form.describe(ctx.obj["settings"].render)
    except SmartFormException as e:
        logger.error(f"Application error: {e}", exc_info=True)
        raise click.ClickException(str(e))
    click.echo(description.model_dump_json(indent=2))


@cli.command(name="validate")
@click.argument("form_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("values_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def validate(ctx, form_file: str, values_file: str):
    """Validate a JSON values file against a form declaration."""
    submitted = []
    try:
        declaration = load_form(form_file)
        form = Form(
            declaration.builder,
            initial_values=read_values(values_file),
            on_submit=submitted.append,
        )
        result = asyncio.run(form.submit())
    except SmartFormException as e:
        logger.error(f"Application error: {e}", exc_info=True)
        raise click.ClickException(str(e))

    if not result.success:
        click.echo(format_errors(result.errors), err=True)
        ctx.exit(1)

    click.echo(json.dumps(submitted[0], indent=2, ensure_ascii=False, default=str))


@cli.command(name="render")
@click.argument("form_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--values", "values_path", type=click.Path(exists=True), help="JSON file with values")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["html", "text"]),
    default="html",
    show_default=True,
)
@click.pass_context
def render(ctx, form_file: str, values_path: str | None, output_format: str):
    """Render a form to HTML or plain text."""
    registry = HtmlRegistry() if output_format == "html" else ConsoleRegistry()
    try:
        form = activate(form_file, values_path)
        output = form.render(registry, ctx.obj["settings"].render)
    except SmartFormException as e:
        logger.error(f"Application error: {e}", exc_info=True)
        raise click.ClickException(str(e))
    click.echo(output)


@cli.command(name="serve")
@click.option("--host", "-h", default=None, help="Override host from config")
@click.option("--port", "-p", default=None, type=int, help="Override port from config")
@click.pass_context
def serve(ctx, host, port):
    """Serve configured forms over HTTP."""
    settings = ctx.obj["settings"]
    config_path = Path(ctx.obj["config_path"])

    try:
        import uvicorn

        from .api import create_app

        host = host or settings.web.host
        port = port or settings.web.port
        logger.info(f"Starting web service on http://{host}:{port}")

        if settings.web.reload:
            # reload needs an import string; the factory re-reads the config file
            if config_path.exists():
                os.environ["SMARTFORM_CONFIG_FILE"] = str(config_path.resolve())
            uvicorn.run(
                "smartform.api:create_app", host=host, port=port, factory=True, reload=True
            )
        else:
            uvicorn.run(create_app(settings), host=host, port=port)
    except SmartFormException as e:
        logger.error(f"Application error: {e}", exc_info=True)
        raise click.ClickException(str(e))


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
