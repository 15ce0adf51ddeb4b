"""Command-line interface for the wikinav parser functions."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

import frontmatter
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import WikinavConfig, ensure_config
from .functions import TEMPLATE_NAMESPACE, PageContext, ParserFunctions, create_registry
from .local.repository import LocalRepository
from .navlist import NavListError, NavListErrorKind, extract_navlist
from .titles import TitleNormalizer
from .urlformat import format_url
from .wiki.client import WikiClient
from .wiki.models import DocumentStore

app = typer.Typer(help="Evaluate navlist and urlformat wiki parser functions from the command line.")
console = Console()

# Lets negative offsets such as -2 through as arguments.
LOOKUP_COMMAND_SETTINGS = {"ignore_unknown_options": True}


def _build_store(config: WikinavConfig) -> tuple[DocumentStore, TitleNormalizer, Callable[[], None]]:
    normalizer = TitleNormalizer(
        capital_links=config.titles.capital_links,
        extra_namespaces=config.titles.extra_namespaces,
    )
    source = config.source
    if source.workspace:
        store = LocalRepository(source.workspace.resolve(), normalizer=normalizer)
        return store, normalizer, lambda: None

    client = WikiClient(api_url=str(source.api_url), timeout=source.timeout)

    def _cleanup() -> None:
        client.close()

    return client, normalizer, _cleanup


def _print_value(value: str) -> None:
    console.print(value, markup=False, highlight=False, emoji=False, soft_wrap=True)


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a configuration TOML file",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log lookups and fetches"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    ctx.obj = {"config_path": config_path}


def _resolve_config(
    ctx: typer.Context,
    *,
    workspace: Optional[Path] = None,
    api_url: Optional[str] = None,
    page: Optional[str] = None,
    capital_links: Optional[bool] = None,
    require_source: bool = True,
) -> WikinavConfig:
    config_path: Optional[Path] = ctx.obj.get("config_path")
    try:
        return ensure_config(
            workspace=workspace,
            api_url=api_url,
            page=page,
            capital_links=capital_links,
            config_path=config_path,
            require_source=require_source,
        )
    except RuntimeError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command(context_settings=LOOKUP_COMMAND_SETTINGS)
def navlist(
    ctx: typer.Context,
    template: str = typer.Argument(..., help="Template holding the list (Template: prefix optional)"),
    action: str = typer.Argument("", help="next, prev, first, last, size, #, or a signed offset"),
    lookup_value: str = typer.Argument("", metavar="[LOOKUP]", help="List item, or an index when ACTION is #"),
    flag: str = typer.Argument("", help="target, pipe, or #"),
    page: Optional[str] = typer.Option(None, "--page", "-p", help="Title of the page the lookup is made from"),
    workspace: Optional[Path] = typer.Option(None, "--workspace", "-w", help="Directory of local .wiki pages"),
    api_url: Optional[str] = typer.Option(None, "--api-url", help="MediaWiki api.php endpoint"),
    capital_links: Optional[bool] = typer.Option(
        None,
        "--capital-links/--no-capital-links",
        help="Uppercase the first letter of titles",
    ),
) -> None:
    """Look up a value in the bulleted list of a template."""

    config = _resolve_config(
        ctx,
        workspace=workspace,
        api_url=api_url,
        page=page,
        capital_links=capital_links,
    )
    store, normalizer, cleanup = _build_store(config)
    try:
        functions = ParserFunctions(store, normalizer=normalizer)
        result = functions.lookup(
            PageContext(title=config.defaults.page),
            template.strip(),
            action.strip(),
            lookup_value.strip(),
            flag.strip(),
        )
    finally:
        cleanup()

    _print_value(result.text)
    if not result.ok:
        raise typer.Exit(code=1)


@app.command()
def urlformat(
    ctx: typer.Context,
    text: str = typer.Argument("", help="Text to format; defaults to the page title"),
    page: Optional[str] = typer.Option(None, "--page", "-p", help="Title of the page the function is on"),
) -> None:
    """Format text as a slug for links to the official site."""

    config = _resolve_config(ctx, page=page, require_source=False)
    _print_value(format_url(text.strip(), current_title=config.defaults.page))


@app.command()
def show(
    ctx: typer.Context,
    template: str = typer.Argument(..., help="Template holding the list"),
    workspace: Optional[Path] = typer.Option(None, "--workspace", "-w", help="Directory of local .wiki pages"),
    api_url: Optional[str] = typer.Option(None, "--api-url", help="MediaWiki api.php endpoint"),
    capital_links: Optional[bool] = typer.Option(
        None,
        "--capital-links/--no-capital-links",
        help="Uppercase the first letter of titles",
    ),
) -> None:
    """Print the list extracted from a template."""

    config = _resolve_config(ctx, workspace=workspace, api_url=api_url, capital_links=capital_links)
    store, normalizer, cleanup = _build_store(config)
    try:
        title = normalizer.normalize(template.strip(), default_namespace=TEMPLATE_NAMESPACE)
        if title is None:
            _print_value(NavListErrorKind.INVALID_TEMPLATE_PARAMETER.value)
            raise typer.Exit(code=1)
        document = store.fetch(title)
    finally:
        cleanup()

    if not document.exists:
        _print_value(NavListErrorKind.INVALID_TEMPLATE_NAME.value)
        raise typer.Exit(code=1)
    try:
        entries = extract_navlist(document.raw_content, normalizer)
    except NavListError as exc:
        _print_value(exc.kind.value)
        raise typer.Exit(code=1) from exc

    table = Table(title=escape(title.prefixed_text))
    table.add_column("#", justify="right")
    table.add_column("Page")
    table.add_column("Display")
    for index, entry in enumerate(entries, start=1):
        table.add_row(str(index), escape(entry.name), escape(entry.display))
    console.print(table)


@app.command()
def render(
    ctx: typer.Context,
    page_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Wikitext file to expand"),
    page: Optional[str] = typer.Option(None, "--page", "-p", help="Title of the page being rendered"),
    workspace: Optional[Path] = typer.Option(None, "--workspace", "-w", help="Directory of local .wiki pages"),
    api_url: Optional[str] = typer.Option(None, "--api-url", help="MediaWiki api.php endpoint"),
    capital_links: Optional[bool] = typer.Option(
        None,
        "--capital-links/--no-capital-links",
        help="Uppercase the first letter of titles",
    ),
) -> None:
    """Expand navlist and urlformat calls in a page and print the result."""

    post = frontmatter.load(page_file)
    if page is None and post.metadata.get("title") is not None:
        page = str(post.metadata["title"])
    config = _resolve_config(
        ctx,
        workspace=workspace,
        api_url=api_url,
        page=page,
        capital_links=capital_links,
    )
    store, normalizer, cleanup = _build_store(config)
    try:
        registry = create_registry(ParserFunctions(store, normalizer=normalizer))
        output = registry.expand(post.content, PageContext(title=config.defaults.page))
    finally:
        cleanup()

    _print_value(output)


def run() -> None:
    """Entry point for console scripts."""

    app()


if __name__ == "__main__":  # pragma: no cover
    run()
