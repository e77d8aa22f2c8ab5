#!/usr/bin/env python3
"""
Recipe Harmonizer - Main Orchestrator
The CLI interface that ties corpus loading, conflict detection, auto-fixing
and recipe editing together
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.syntax import Syntax
from rich.table import Table

from auto_fixer import AutoFixResult, auto_fix
from config import Config
from conflict_detector import ConflictDetector
from conflict_graph import build_conflict_graph, conflict_clusters, render_conflict_graph
from corpus_store import CorpusStore, SaveResult
from data_models import ConflictReport, EncodeError, Recipe, UnknownRecipeTypeError
from item_registry import StaticItemRegistry
from recipe_modifier import TRANSFORMS, MultiplyOutputCount, modify
from recipe_validation import validate_recipe
from report_writer import ConflictReportWriter
from schema_adapters import default_registry, render_script

app = typer.Typer(help="🎯 Recipe Harmonizer - Find and fix KubeJS recipe conflicts")
console = Console()

class RecipeHarmonizer:
    """Main orchestrator class"""

    def __init__(self, scripts_dir: Optional[Path] = None, output_dir: Optional[Path] = None,
                 config: Optional[Config] = None):
        self.config = config or Config()
        self.scripts_dir = Path(scripts_dir) if scripts_dir else self.config.scripts_dir
        self.output_dir = Path(output_dir) if output_dir else self.config.output_dir

        # Setup logging
        self._setup_logging()

        # Initialize components
        item_registry = None
        if self.config.registry_file:
            item_registry = StaticItemRegistry.from_file(self.config.registry_file)
        self.adapters = default_registry()
        self.store = CorpusStore(self.scripts_dir, self.adapters, item_registry)
        self.detector = ConflictDetector()
        self.writer = ConflictReportWriter()

    def _setup_logging(self):
        """Setup logging configuration"""
        log_dir = Path(self.config.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        logging.basicConfig(
            level=getattr(logging, self.config.log_level.upper(), logging.INFO),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=[
                logging.FileHandler(log_dir / "harmonizer.log", encoding='utf-8'),
                logging.StreamHandler()
            ]
        )

        self.logger = logging.getLogger(__name__)

    def load_corpus(self) -> List[Recipe]:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console
        ) as progress:
            task = progress.add_task("🔍 Loading recipes...", total=None)
            corpus = self.store.load_corpus()
            progress.update(task, description=f"🔍 Loaded {len(corpus)} recipes")
        return corpus

    def analyze(self, corpus: List[Recipe]) -> ConflictReport:
        return self.detector.detect(corpus)

    def plan_fix(self, corpus: List[Recipe], report: ConflictReport) -> AutoFixResult:
        return auto_fix(corpus, report, self.config.max_rename_attempts)

    def apply_fix(self, fix_result: AutoFixResult) -> List[SaveResult]:
        """Persist every renamed recipe to its source"""
        results = []
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console
        ) as progress:
            task = progress.add_task("💾 Writing renamed recipes...", total=len(fix_result.renames))
            for rename in fix_result.renames:
                results.append(self.store.save(fix_result.fixed[rename.index]))
                progress.advance(task)
        return results

    def generate_outputs(self, report: ConflictReport, corpus: List[Recipe],
                         fix_result: Optional[AutoFixResult] = None, graph: bool = False) -> Dict[str, Path]:
        """Generate all output files and visualizations"""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        outputs = {}

        text_report = self.writer.generate_conflict_report(report, corpus, fix_result)
        text_path = self.output_dir / "conflict_report.txt"
        with open(text_path, 'w', encoding='utf-8') as f:
            f.write(text_report)
        outputs['text_report'] = text_path

        outputs['json_data'] = self.writer.export_report_json(
            report, self.output_dir / "conflict_report.json", fix_result)

        if graph:
            conflict_graph = build_conflict_graph(corpus, report)
            self.logger.info(f"{len(conflict_clusters(conflict_graph))} conflict clusters in graph")
            outputs['graph'] = render_conflict_graph(conflict_graph, self.output_dir / "conflict_graph.html")

        return outputs

    def find_recipe(self, corpus: List[Recipe], recipe_id: str) -> Optional[Recipe]:
        matches = [recipe for recipe in corpus if recipe.id == recipe_id]
        if len(matches) > 1:
            self.logger.warning(f"{recipe_id} is defined {len(matches)} times; using {matches[0].source_location}")
        return matches[0] if matches else None

def _print_summary(report: ConflictReport, corpus: List[Recipe], failures: int):
    summary_table = Table(title="📈 Conflict Summary")
    summary_table.add_column("Metric", style="cyan")
    summary_table.add_column("Count", style="magenta", justify="right")

    summary_table.add_row("Recipes", str(len(corpus)))
    summary_table.add_row("Undecodable Snippets", str(failures))
    summary_table.add_row("Duplicate IDs", str(len(report.errors())))
    summary_table.add_row("Shared Outputs", str(len(report.warnings())))
    summary_table.add_row("Affected Recipes", str(len(report.affected_recipes)))
    console.print(summary_table)

    if report.errors():
        console.print("\n[bold red]🚨 DUPLICATE IDS:[/bold red]")
        for conflict in report.errors():
            console.print(f"  • [red]{conflict.message}[/red]")
            console.print(f"    Locations: {', '.join(conflict.source_locations)}")

def _print_outputs(outputs: Dict[str, Path]):
    console.print(f"\n[bold blue]📁 Generated Files:[/bold blue]")
    for key, value in outputs.items():
        console.print(f"  {key}: {value}")

@app.command()
def scan(
    scripts_dir: Optional[Path] = typer.Option(
        None, "--scripts", "-s",
        help="KubeJS server_scripts directory (or any folder of recipe JSON)"
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output", "-o",
        help="Output directory for reports"
    ),
    show_graph: bool = typer.Option(
        False, "--graph/--no-graph",
        help="Write an interactive conflict graph"
    )
):
    """🔍 Detect duplicate recipe ids and shared outputs"""
    console.print(Panel.fit(
        "[bold blue]🎯 Recipe Harmonizer[/bold blue]\n"
        "[dim]Scanning recipes for conflicts...[/dim]",
        border_style="blue"
    ))

    harmonizer = RecipeHarmonizer(scripts_dir, output_dir)
    corpus = harmonizer.load_corpus()
    if not corpus:
        console.print("[red]❌ No recipes found![/red]")
        raise typer.Exit(code=1)

    report = harmonizer.analyze(corpus)
    _print_summary(report, corpus, len(harmonizer.store.decode_failures))
    _print_outputs(harmonizer.generate_outputs(report, corpus, graph=show_graph))

    if report.has_errors:
        console.print("\n[yellow]⚠️  Duplicate ids remain. Run 'fix' to rename them.[/yellow]")
        raise typer.Exit(code=1)
    console.print("\n[bold green]✅ No duplicate ids.[/bold green]")

@app.command()
def fix(
    scripts_dir: Optional[Path] = typer.Option(
        None, "--scripts", "-s",
        help="KubeJS server_scripts directory (or any folder of recipe JSON)"
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output", "-o",
        help="Output directory for reports"
    ),
    yes: bool = typer.Option(
        False, "--yes", "-y",
        help="Write the renames without asking"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run",
        help="Only show what would be renamed"
    )
):
    """🛠️ Rename duplicate recipe ids and write them back"""
    harmonizer = RecipeHarmonizer(scripts_dir, output_dir)
    corpus = harmonizer.load_corpus()
    report = harmonizer.analyze(corpus)
    fix_result = harmonizer.plan_fix(corpus, report)

    if not fix_result.renames and not fix_result.failures:
        console.print("[bold green]✅ Nothing to fix.[/bold green]")
        return

    table = Table(title="🛠️ Planned Renames")
    table.add_column("Old ID", style="red")
    table.add_column("New ID", style="green")
    table.add_column("Location", style="cyan")
    for rename in fix_result.renames:
        table.add_row(rename.old_id, rename.new_id, rename.source_location or "unknown")
    console.print(table)
    for failure in fix_result.failures:
        console.print(f"[red]❌ Could not rename {failure.original_id} "
                      f"(occurrence #{failure.index}) after {failure.attempts} attempts[/red]")

    _print_outputs(harmonizer.generate_outputs(report, corpus, fix_result))
    if dry_run:
        return
    if fix_result.renames and (yes or typer.confirm(f"Write {len(fix_result.renames)} renamed recipes?")):
        saved = harmonizer.apply_fix(fix_result)
        for result in saved:
            if not result.ok:
                console.print(f"[red]❌ {result.location}: {result.error}[/red]")
        written = sum(1 for result in saved if result.ok)
        console.print(f"\n[bold green]✅ Wrote {written} of {len(saved)} renamed recipes.[/bold green]")
        if written != len(saved):
            raise typer.Exit(code=1)
    if fix_result.failures:
        raise typer.Exit(code=1)

@app.command()
def decode(
    script_file: Path = typer.Argument(..., help="KubeJS server script or recipe JSON file"),
    output_file: Optional[Path] = typer.Option(
        None, "--output", "-o",
        help="Write canonical JSON here instead of printing it"
    )
):
    """📥 Convert a server script into canonical recipe JSON"""
    if not script_file.exists():
        console.print(f"[red]❌ File not found: {script_file}[/red]")
        raise typer.Exit(code=1)

    store = CorpusStore(script_file.parent)
    recipes = store.load_file(script_file)
    data = [recipe.to_dict() for recipe in recipes]

    for loaded in store.decode_failures:
        console.print(f"[yellow]⚠️  {loaded.location}: {loaded.failure.reason}[/yellow]")

    if output_file:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        console.print(f"[green]✅ Wrote {len(data)} recipes to {output_file}[/green]")
    else:
        console.print_json(data=data)

    if store.decode_failures and not recipes:
        raise typer.Exit(code=1)

@app.command()
def encode(
    json_file: Path = typer.Argument(..., help="Canonical recipe JSON (one recipe or a list)"),
    output_file: Optional[Path] = typer.Option(
        None, "--output", "-o",
        help="Write the server script here instead of printing it"
    )
):
    """📤 Generate KubeJS code from canonical recipe JSON"""
    try:
        with open(json_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]❌ Could not read {json_file}: {e}[/red]")
        raise typer.Exit(code=1)

    entries = data.get('recipes', [data]) if isinstance(data, dict) else data
    if not isinstance(entries, list):
        console.print(f"[red]❌ {json_file} holds neither a recipe nor a list of recipes[/red]")
        raise typer.Exit(code=1)
    adapters = default_registry()
    snippets = []
    for index, entry in enumerate(entries):
        try:
            recipe = Recipe.from_dict(entry)
        except (ValueError, TypeError, AttributeError) as e:
            console.print(f"[red]❌ Entry {index} is not a readable recipe: {e}[/red]")
            raise typer.Exit(code=1)
        try:
            snippets.append(adapters.encode(recipe))
        except (EncodeError, UnknownRecipeTypeError) as e:
            console.print(f"[red]❌ {recipe.id or '<no id>'}: {e}[/red]")
            raise typer.Exit(code=1)

    script = render_script(snippets)
    if output_file:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(script, encoding='utf-8')
        console.print(f"[green]✅ Wrote {len(snippets)} recipes to {output_file}[/green]")
    else:
        console.print(Syntax(script, "javascript"))

@app.command(name="modify")
def modify_recipe(
    recipe_id: str = typer.Argument(..., help="Id of the recipe to change"),
    operation: str = typer.Argument(..., help=f"One of: {', '.join(TRANSFORMS)}"),
    values: List[str] = typer.Argument(..., help="Operation arguments, e.g. OLD NEW for replace_ingredient"),
    scripts_dir: Optional[Path] = typer.Option(
        None, "--scripts", "-s",
        help="KubeJS server_scripts directory (or any folder of recipe JSON)"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run",
        help="Only show the modified recipe"
    )
):
    """✏️ Apply one transform to a recipe and save it"""
    transform_type = TRANSFORMS.get(operation)
    if transform_type is None:
        console.print(f"[red]❌ Unknown operation {operation}. Choose from: {', '.join(TRANSFORMS)}[/red]")
        raise typer.Exit(code=1)

    try:
        if transform_type is MultiplyOutputCount:
            transform = MultiplyOutputCount(*[float(value) for value in values])
        else:
            transform = transform_type(*values)
    except (TypeError, ValueError) as e:
        console.print(f"[red]❌ Bad arguments for {operation}: {e}[/red]")
        raise typer.Exit(code=1)

    harmonizer = RecipeHarmonizer(scripts_dir)
    corpus = harmonizer.load_corpus()
    recipe = harmonizer.find_recipe(corpus, recipe_id)
    if recipe is None:
        console.print(f"[red]❌ Recipe not found: {recipe_id}[/red]")
        raise typer.Exit(code=1)

    result = modify(recipe, transform)
    if not result.ok:
        console.print(f"[red]❌ {result.error.transform}: {result.error.reason}[/red]")
        raise typer.Exit(code=1)

    try:
        console.print(Syntax(harmonizer.adapters.encode(result.recipe), "javascript"))
    except (EncodeError, UnknownRecipeTypeError) as e:
        console.print(f"[yellow]⚠️  No KubeJS form for {result.recipe.id}: {e}[/yellow]")
        console.print_json(data=result.recipe.to_dict())
    if dry_run:
        return
    saved = harmonizer.store.save(result.recipe)
    if not saved.ok:
        console.print(f"[red]❌ {saved.location}: {saved.error}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[bold green]✅ Saved {result.recipe.id} to {saved.location}[/bold green]")

@app.command()
def validate(
    scripts_dir: Optional[Path] = typer.Option(
        None, "--scripts", "-s",
        help="KubeJS server_scripts directory (or any folder of recipe JSON)"
    )
):
    """✅ Check every recipe's fields"""
    harmonizer = RecipeHarmonizer(scripts_dir)
    corpus = harmonizer.load_corpus()

    table = Table(title="🔎 Validation Problems")
    table.add_column("Recipe", style="cyan")
    table.add_column("Field", style="magenta")
    table.add_column("Severity")
    table.add_column("Message")

    error_count = 0
    for recipe in corpus:
        result = validate_recipe(recipe)
        error_count += len(result.errors)
        for issue in result.errors + result.warnings:
            style = "red" if issue in result.errors else "yellow"
            table.add_row(recipe.id, issue.field, f"[{style}]{issue.severity.value.upper()}[/{style}]", issue.message)

    if table.row_count:
        console.print(table)
    if error_count:
        console.print(f"\n[red]❌ {error_count} errors in {len(corpus)} recipes[/red]")
        raise typer.Exit(code=1)
    console.print(f"\n[bold green]✅ {len(corpus)} recipes valid.[/bold green]")

if __name__ == "__main__":
    app()
