"""
Accounting Law Search CLI - Command Line Interface
"""

import sys
import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markdown import Markdown
from rich.progress import Progress, SpinnerColumn, TextColumn
from dotenv import load_dotenv

# Load environment variables
load_dotenv()
load_dotenv(".env.local")

console = Console()


def _load_store(corpus: str):
    """Load the corpus or exit with an error message."""
    from lawsearch import CorpusStore, CorpusLoadError

    try:
        return CorpusStore.load(corpus)
    except CorpusLoadError as e:
        console.print(f"[red]Could not load corpus: {e}[/red]")
        sys.exit(1)


def _default_corpus() -> str:
    from lawsearch.server.config import get_settings
    return str(get_settings().corpus_path)


@click.group()
@click.version_option(version="1.0.0")
def cli():
    """Accounting Law Search CLI - search and consult Japanese accounting laws"""
    pass


@cli.command()
@click.option("--corpus", "-c", default=_default_corpus, help="Path to the laws JSON file")
def laws(corpus: str):
    """List all laws in the corpus."""
    store = _load_store(corpus)

    table = Table(title="Laws")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Category", style="dim")

    for law in store.list_laws():
        table.add_row(law.id, law.name, law.category)

    console.print(table)

    stats = store.stats()
    console.print(f"[dim]{stats['laws']} laws, {stats['sections']} sections, "
                  f"{stats['articles']} articles[/dim]")


@cli.command()
@click.argument("query")
@click.option("--law-id", "-l", default=None, help="Restrict the search to one law")
@click.option("--corpus", "-c", default=_default_corpus, help="Path to the laws JSON file")
@click.option("--full", "-f", is_flag=True, help="Show full article contents")
def search(query: str, law_id: str, corpus: str, full: bool):
    """Search article titles and contents."""
    from lawsearch.retrieval import SearchEngine

    store = _load_store(corpus)
    engine = SearchEngine(store)
    results = engine.search(query, law_id)

    if not results:
        console.print("[yellow]No results found[/yellow]")
        return

    console.print(f"\n[bold green]{len(results)} results for '{query}':[/bold green]")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Citation", style="cyan", width=40)
    table.add_column("Title", width=20)
    table.add_column("Content", width=70)
    table.add_column("Match", width=8)

    for r in results:
        content = r.article_content
        if not full and len(content) > 200:
            content = content[:200] + "..."
        match = "+".join(
            name for name, hit in (("title", r.highlights.title), ("content", r.highlights.content)) if hit
        )
        table.add_row(
            r.get_citation(),
            r.article_title,
            content,
            match,
        )

    console.print(table)


@cli.command()
@click.argument("law_id")
@click.option("--corpus", "-c", default=_default_corpus, help="Path to the laws JSON file")
def show(law_id: str, corpus: str):
    """Show a law with all its sections and articles."""
    from lawsearch import NotFoundError

    store = _load_store(corpus)
    try:
        law = store.get_law(law_id)
    except NotFoundError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    console.print(Panel.fit(
        f"[bold blue]{law.name}[/bold blue]\n"
        f"ID: {law.id}\n"
        f"Category: {law.category}",
        title="📖 Law"
    ))

    for section in law.sections:
        console.print(f"\n[bold cyan]{section.title}[/bold cyan]")
        for article in section.articles:
            console.print(Panel(
                article.content,
                title=f"{article.number}. {article.title}",
                border_style="dim"
            ))


@cli.command()
@click.option("--corpus", "-c", default=_default_corpus, help="Path to the laws JSON file")
@click.option("--database-only", "-d", is_flag=True, help="Answer strictly from the law database")
def chat(corpus: str, database_only: bool):
    """Start an interactive AI consultation session."""
    from lawsearch.server.config import get_settings
    from lawsearch.server.dependencies import build_services
    from lawsearch.retrieval import truncate_history

    settings = get_settings()
    if not settings.gemini_api_key:
        console.print("[yellow]Set GEMINI_API_KEY to enable chat[/yellow]")
        sys.exit(1)

    store = _load_store(corpus)
    services = build_services(settings, store=store)
    orchestrator = services.orchestrator

    mode = "database only" if database_only else "database + general knowledge"
    console.print(Panel.fit(
        "[bold blue]Accounting Law Consultation[/bold blue]\n"
        f"Mode: {mode}\n"
        "Type 'quit' or 'exit' to end the session.",
        title="⚖️ Law Assistant"
    ))

    history = []

    # Chat loop
    while True:
        try:
            message = console.input("[bold cyan]You:[/bold cyan] ").strip()

            if not message:
                continue

            if message.lower() in ["quit", "exit", "q"]:
                console.print("[dim]Goodbye![/dim]")
                break

            history = truncate_history(history, settings.max_history_messages)

            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True
            ) as progress:
                progress.add_task("Thinking...", total=None)
                result = orchestrator.run_turn(message, history=history, database_only=database_only)

            history = result.history

            if result.ok:
                console.print(f"\n[bold green]Assistant:[/bold green]")
                console.print(Markdown(result.message))
                if result.tool_calls:
                    queries = ", ".join(str(c.args.get("q", "")) for c in result.tool_calls)
                    console.print(f"\n[dim]Searched: {queries}[/dim]")
            else:
                console.print(f"[red]{result.message}: {result.error}[/red]")

            console.print()

        except (KeyboardInterrupt, EOFError):
            console.print("\n[dim]Goodbye![/dim]")
            break


@cli.command()
@click.option("--host", "-h", default="0.0.0.0", help="Bind address")
@click.option("--port", "-p", default=8000, help="Port to listen on")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: str, port: int, reload: bool):
    """Run the HTTP API server."""
    import uvicorn

    uvicorn.run("lawsearch.server.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    cli()
