#!/usr/bin/env python3
"""
Domra Lexicon CLI Interface
Search and browse the English/Khmer technical glossary from the terminal
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from domra.core.config import DomraConfig
from domra.core.controller import LexiconController
from domra.core.errors import ExportError
from domra.core.models import ALL_CATEGORIES, MatchResult
from domra.core.state import (
    THEME_ICONS, CloseModal, OpenModal, SetCategory, ToggleTheme,
)

console = Console()

CONTRIBUTE_TEXT = (
    "Know a technical term that is missing?\n"
    "Add it to [bold]data/lexicon.json[/bold] with its English and Khmer names,\n"
    "a category key from [bold]data/categories.json[/bold], and a short description."
)


class LexiconCLI:
    """Command-line interface for the lexicon"""

    def __init__(self, controller: LexiconController):
        self.controller = controller

    @property
    def state(self):
        return self.controller.state

    def load(self) -> bool:
        with console.status("[bold green]Loading lexicon..."):
            state = self.controller.start()

        if not state.is_ready:
            console.print(Panel(
                "Could not load the lexicon data.\n"
                f"[dim]{escape(state.error or '')}[/dim]\n\n"
                "Check the data source and run the command again.",
                title="❌ Error",
                border_style="red"
            ))
            return False

        stats = self.controller.view()["stats"]
        console.print(
            f"✅ Loaded {stats['total_terms']} terms in {stats['total_categories']} categories",
            style="green"
        )
        return True

    def show_results(self, limit: Optional[int] = None):
        """Print the results count and one panel per matching term"""
        view = self.controller.view()
        result: MatchResult = view["result"]

        console.print(f"\n[bold]{view['label']}[/bold]")

        if view["no_results"]:
            console.print(Panel(
                "Try adjusting your search or filter criteria\n"
                "Type [cyan]/contribute[/cyan] to learn how to add new terms",
                title="No terms found",
                border_style="yellow"
            ))
            return

        categories = self.state.lexicon.categories
        terms = result.terms if limit is None else result.terms[:limit]
        for term in terms:
            category = categories.get(term.category)
            icon = (category.icon if category else None) or "📝"
            category_name = category.display_name if category else term.category

            body = [
                f"[bold cyan]{escape(term.khmer)}[/bold cyan]",
                f"[dim]{icon} {escape(category_name)}[/dim]",
                escape(term.description or "No description available"),
            ]
            if term.examples is not None and not term.examples.is_empty():
                body.append("\n[yellow]Examples:[/yellow]")
                if term.examples.english:
                    body.append(f'"{escape(term.examples.english)}"')
                if term.examples.khmer:
                    body.append(f'"{escape(term.examples.khmer)}"')
            if term.tags:
                body.append("\n" + " ".join(f"[magenta]#{escape(tag)}[/magenta]" for tag in term.tags))
            footer = f"Added: {escape(term.date_added or 'Unknown')}"
            if term.reference and term.reference != "#":
                footer += f"  📂 {escape(term.reference)}"
            body.append(f"\n[dim]{footer}[/dim]")

            console.print(Panel(
                "\n".join(body),
                title=escape(term.english),
                border_style="cyan"
            ))

        if limit is not None and result.count > limit:
            console.print(f"[dim]...and {result.count - limit} more terms[/dim]")

    def show_categories(self):
        view = self.controller.view()
        counts = view["category_counts"]
        selected = view["selected_category"]

        table = Table(title="📚 Categories")
        table.add_column("Key", style="cyan")
        table.add_column("Name", style="green")
        table.add_column("Terms", style="yellow", justify="right")

        marker = "▶ " if selected == ALL_CATEGORIES else ""
        table.add_row(f"{marker}{ALL_CATEGORIES}", "All Categories", str(counts[ALL_CATEGORIES]))
        for key, category in self.state.lexicon.categories.items():
            marker = "▶ " if selected == key else ""
            table.add_row(f"{marker}{escape(key)}", f"{category.icon or '📝'} {escape(category.display_name)}", str(counts.get(key, 0)))

        console.print(table)

    def show_stats(self):
        stats = self.controller.view()["stats"]
        table = Table(title="📊 Lexicon Statistics")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("Technical Terms", str(stats["total_terms"]))
        table.add_row("Categories", str(stats["total_categories"]))
        table.add_row("Contributors", str(stats["total_contributors"]))
        table.add_row("Verified Terms", str(stats["verified_terms"]))
        version = self.state.lexicon.version
        if version:
            table.add_row("Version", version)
        console.print(table)

    def export(self, directory: Optional[str] = None) -> Optional[Path]:
        if directory:
            self.controller.export_dir = Path(directory)
        try:
            path = self.controller.export()
        except ExportError as e:
            console.print(f"❌ Error exporting data: {str(e)}", style="red")
            return None
        console.print(f"✅ Exported lexicon to {path}", style="green")
        return path

    def set_category(self, key: str):
        categories = self.state.lexicon.categories
        if key != ALL_CATEGORIES and key not in categories:
            console.print(f"Unknown category: {key}", style="yellow")
        self.controller.handle(SetCategory(key))
        self.show_results()

    def search(self, text: str):
        # Typed commands arrive whole, so there is nothing to debounce
        self.controller.search(text, debounce=False)
        self.show_results()

    def interactive_mode(self):
        """Run interactive search mode"""
        console.print(Panel(
            "[bold cyan]Domra Tech Lexicon[/bold cyan]\n"
            "Type text to search, or use commands:\n"
            "  /help - Show commands\n"
            "  /category <key> - Filter by category (/category all to reset)\n"
            "  /categories - List categories\n"
            "  /clear - Clear search and filter\n"
            "  /stats - Show statistics\n"
            "  /theme - Toggle light/dark theme\n"
            "  /export \\[dir] - Export lexicon as JSON\n"
            "  /exit - Exit",
            title=f"{THEME_ICONS[self.state.theme]} Welcome",
            border_style="cyan"
        ))

        while True:
            try:
                line = console.input("\n[bold cyan]Search:[/bold cyan] ")
            except (KeyboardInterrupt, EOFError):
                console.print("\n👋 Goodbye!", style="yellow")
                break

            try:
                if line.startswith("/"):
                    if not self._handle_command(line):
                        break
                else:
                    self.search(line)
            except Exception as e:
                # Keep the session usable
                console.print(f"❌ Error: {str(e)}", style="red")

    def _handle_command(self, command: str) -> bool:
        """Handle special commands; returns False to leave interactive mode"""
        parts = command.split(maxsplit=1)
        cmd = parts[0].lower()

        if cmd == "/exit":
            console.print("👋 Goodbye!", style="yellow")
            return False

        elif cmd == "/help":
            help_text = """
[bold]Available Commands:[/bold]
  /help             - Show this help
  /category <key>   - Filter by category
  /categories       - List categories with term counts
  /clear            - Clear search and category filter
  /stats            - Show lexicon statistics
  /theme            - Toggle light/dark theme
  /export \\[dir]     - Export lexicon as JSON
  /contribute       - How to contribute new terms
  /exit             - Exit the program
            """
            console.print(Panel(help_text, title="Help", border_style="green"))

        elif cmd == "/category":
            self.set_category(parts[1].strip() if len(parts) > 1 else ALL_CATEGORIES)

        elif cmd == "/categories":
            self.show_categories()

        elif cmd == "/clear":
            self.controller.reset_filters()
            self.show_results()

        elif cmd == "/stats":
            self.show_stats()

        elif cmd == "/theme":
            state = self.controller.handle(ToggleTheme())
            console.print(f"{THEME_ICONS[state.theme]} Theme set to {state.theme}")

        elif cmd == "/export":
            self.export(parts[1].strip() if len(parts) > 1 else None)

        elif cmd == "/contribute":
            self.controller.handle(OpenModal())
            console.print(Panel(CONTRIBUTE_TEXT, title="➕ Contribute New Terms", border_style="green"))
            self.controller.handle(CloseModal())

        else:
            console.print(f"Unknown command: {cmd}", style="red")

        return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Domra Tech Lexicon - English/Khmer technical glossary",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive mode
  domra

  # Search once
  domra --search cache

  # Filter by category, from a remote site
  domra --data https://example.org/lexicon/ --category storage

  # Export the lexicon
  domra --export ./exports
        """
    )

    parser.add_argument(
        "--data", "-d",
        help="Directory or base URL holding data/lexicon.json, data/categories.json and data/website.json"
    )

    parser.add_argument(
        "--search", "-s",
        help="Text to search for"
    )

    parser.add_argument(
        "--category", "-c",
        default=ALL_CATEGORIES,
        help="Category key to filter by (default: all)"
    )

    parser.add_argument(
        "--limit", "-n",
        type=int,
        help="Show at most this many cards"
    )

    parser.add_argument(
        "--stats",
        action="store_true",
        help="Show lexicon statistics"
    )

    parser.add_argument(
        "--export", "-e",
        metavar="DIR",
        help="Export the lexicon as JSON into DIR"
    )

    parser.add_argument(
        "--config",
        help="YAML configuration file"
    )

    parser.add_argument(
        "--timeout",
        type=float,
        help="Per-resource load timeout in seconds"
    )

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    config = DomraConfig.load_from_file(args.config) if args.config else DomraConfig()
    if args.data:
        config.loader.data_source = args.data
    if args.timeout:
        config.loader.timeout = args.timeout
    config.configure_logging()

    cli = LexiconCLI(LexiconController(config))
    if not cli.load():
        return 1

    if args.stats:
        cli.show_stats()

    if args.export:
        if cli.export(args.export) is None:
            return 1

    if args.category != ALL_CATEGORIES:
        cli.controller.handle(SetCategory(args.category))

    if args.search is not None or args.category != ALL_CATEGORIES:
        cli.controller.search(args.search or "", debounce=False)
        cli.show_results(limit=args.limit)

    # Enter interactive mode if no specific action
    elif not any([args.stats, args.export]):
        cli.interactive_mode()

    return 0


if __name__ == "__main__":
    sys.exit(main())
