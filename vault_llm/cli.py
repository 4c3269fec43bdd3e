"""Command line interface for the vault assistant."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from vault_llm.config.assistant import Mode, Provider
from vault_llm.config.logging_config import configure_logging
from vault_llm.config.settings import Settings, get_settings
from vault_llm.pipeline.factory import create_assistant
from vault_llm.pipeline.models import NoteGenerationError
from vault_llm.pipeline.service import AssistantService
from vault_llm.providers.transport import AiohttpTransport
from vault_llm.providers.validation import ModelCheck, validate_gemini_models, validate_openai_models
from vault_llm.vault.notes import NoteCreationError

console = Console()
app = typer.Typer(help="Vault LLM - ask questions about a markdown vault and generate notes")
config_app = typer.Typer(help="Show or change the assistant configuration")
app.add_typer(config_app, name="config")


def _setup_logging(verbose: bool) -> None:
    configure_logging(debug_mode=verbose, log_level=None if verbose else "WARNING")


def _settings(vault: Optional[Path]) -> Settings:
    settings = get_settings()
    if vault is not None:
        settings = settings.model_copy(update={"vault_dir": str(vault)})
    return settings


async def _assistant(vault: Optional[Path]) -> AssistantService:
    return await create_assistant(_settings(vault), transport=AiohttpTransport())


def _print_check(check: ModelCheck) -> None:
    if check.ok:
        console.print(f"[green]Connection successful![/green] {check.provider} / {check.model}")
    else:
        console.print(f"[red]Connection failed:[/red] {check.error}")


VaultOption = typer.Option(None, "--vault", help="Vault root directory", file_okay=False, resolve_path=True)
VerboseOption = typer.Option(False, "--verbose", "-v", help="Verbose logging")


@app.command()
def ask(
    query: str = typer.Argument(..., help="Question about the vault"),
    vault: Optional[Path] = VaultOption,
    current: Optional[str] = typer.Option(None, "--current", help="Vault path of the open document"),
    mode: Optional[Mode] = typer.Option(None, "--mode", help="Override the configured mode"),
    save: bool = typer.Option(False, "--save", help="Save the response as a new note"),
    verbose: bool = VerboseOption,
) -> None:
    """Answer a question using the vault as context."""
    _setup_logging(verbose)

    async def _run():
        assistant = await _assistant(vault)
        result = await assistant.run(query, current_document=current, mode=mode)
        path = None
        if result.ok and save:
            path = await assistant.save_note(result)
        return result, path

    try:
        result, path = asyncio.run(_run())
    except ValueError as e:
        raise typer.BadParameter(str(e))
    except NoteCreationError as e:
        console.print(f"[red]Error creating note:[/red] {e}")
        raise typer.Exit(code=1)

    if not result.ok:
        console.print(f"[red]{result.error.render()}[/red]")
        raise typer.Exit(code=1)

    console.print(Markdown(result.text or ""))
    if result.sources:
        console.print(f"\n[dim]Sources ({len(result.sources)}):[/dim]")
        for source in result.sources:
            console.print(f"  [dim]{source}[/dim]")
    if path is not None:
        console.print(f"Note created: [bold]{path}[/bold]")


@app.command()
def create(
    topic: str = typer.Argument(..., help="Topic of the note"),
    vault: Optional[Path] = VaultOption,
    current: Optional[str] = typer.Option(None, "--current", help="Vault path of the open document"),
    verbose: bool = VerboseOption,
) -> None:
    """Generate a note about a topic and save it in the vault."""
    _setup_logging(verbose)

    async def _run():
        assistant = await _assistant(vault)
        return await assistant.create_note(topic, current_document=current)

    try:
        _, path = asyncio.run(_run())
    except ValueError as e:
        raise typer.BadParameter(str(e))
    except (NoteGenerationError, NoteCreationError) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"Note created: [bold]{path}[/bold]")


@app.command("test-connection")
def test_connection(
    vault: Optional[Path] = VaultOption,
    verbose: bool = VerboseOption,
) -> None:
    """Send a minimal request to the configured backend."""
    _setup_logging(verbose)

    async def _run():
        assistant = await _assistant(vault)
        return await assistant.test_connection()

    check = asyncio.run(_run())
    _print_check(check)
    if not check.ok:
        raise typer.Exit(code=1)


@app.command("validate-models")
def validate_models(
    openai_key: Optional[str] = typer.Option(None, "--openai", help="OpenAI API key"),
    gemini_key: Optional[str] = typer.Option(None, "--gemini", help="Gemini API key"),
    verbose: bool = VerboseOption,
) -> None:
    """Probe every catalog model with a minimal request."""
    _setup_logging(verbose)
    if not openai_key and not gemini_key:
        raise typer.BadParameter("Provide at least one of --openai or --gemini")

    settings = get_settings()

    async def _run() -> list[ModelCheck]:
        transport = AiohttpTransport()
        checks = []
        if openai_key:
            console.print("Validating OpenAI models...")
            async for check in validate_openai_models(openai_key, transport, settings.openai_base_url):
                checks.append(check)
        if gemini_key:
            console.print("Validating Gemini models...")
            async for check in validate_gemini_models(gemini_key, transport, settings.gemini_base_url):
                checks.append(check)
        return checks

    checks = asyncio.run(_run())

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Provider")
    table.add_column("Model")
    table.add_column("Status")
    table.add_column("Error")
    for check in checks:
        status = "[green]OK[/green]" if check.ok else "[red]FAILED[/red]"
        table.add_row(check.provider, check.model, status, check.error or "")
    console.print(table)

    passed = sum(1 for check in checks if check.ok)
    console.print(f"{passed}/{len(checks)} models OK")


@app.command()
def serve(
    vault: Optional[Path] = VaultOption,
    host: Optional[str] = typer.Option(None, help="Host interface"),
    port: Optional[int] = typer.Option(None, help="Server port"),
) -> None:
    """Start the HTTP API."""
    import uvicorn

    from vault_llm.api.app import create_app

    settings = _settings(vault)
    configure_logging(debug_mode=settings.debug, log_level=settings.log_level)
    host = host or settings.api_host
    port = port or settings.api_port

    console.print(f"Starting API on http://{host}:{port} (vault: {settings.vault_dir})")
    uvicorn.run(
        create_app(settings),
        host=host,
        port=port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


@config_app.command("show")
def config_show(vault: Optional[Path] = VaultOption) -> None:
    """Print the current configuration."""
    _setup_logging(False)
    assistant = asyncio.run(_assistant(vault))
    manager = assistant.config_manager
    config = manager.config

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Setting")
    table.add_column("Value")
    for key, value in config.to_record().items():
        if key.startswith("encrypted_"):
            continue
        table.add_row(key, str(value))
    table.add_row("openai key", "set" if manager.has_api_key(Provider.GPT) else "missing")
    table.add_row("gemini key", "set" if manager.has_api_key(Provider.GEMINI) else "missing")
    console.print(table)


@config_app.command("provider")
def config_provider(
    provider: Provider = typer.Argument(..., help="Hosted provider"),
    vault: Optional[Path] = VaultOption,
) -> None:
    """Select the hosted provider."""
    _setup_logging(False)

    async def _run():
        assistant = await _assistant(vault)
        return await assistant.config_manager.select_provider(provider)

    config = asyncio.run(_run())
    console.print(f"Provider: [bold]{config.model_provider.value}[/bold], model: [bold]{config.model}[/bold]")


@config_app.command("set-key")
def config_set_key(
    provider: Provider = typer.Argument(..., help="Hosted provider"),
    api_key: str = typer.Argument(..., help="API key"),
    vault: Optional[Path] = VaultOption,
) -> None:
    """Store the API key for a provider."""
    _setup_logging(False)

    async def _run():
        assistant = await _assistant(vault)
        await assistant.config_manager.set_api_key(provider, api_key)

    asyncio.run(_run())
    console.print(f"API key stored for [bold]{provider.value}[/bold]")


@config_app.command("set")
def config_set(
    field: str = typer.Argument(..., help="Configuration field"),
    value: str = typer.Argument(..., help="New value"),
    vault: Optional[Path] = VaultOption,
) -> None:
    """Change one configuration field."""
    _setup_logging(False)

    async def _run():
        assistant = await _assistant(vault)
        return await assistant.config_manager.update(**{field: value})

    try:
        config = asyncio.run(_run())
    except ValueError as e:
        raise typer.BadParameter(str(e))

    console.print(f"{field} = {getattr(config, field)}")
