"""CLI for the name similarity engine."""

from pathlib import Path

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .exceptions import NameSimilarityError
from .types import NameType

app = typer.Typer(
    name="gps-names",
    help="Name similarity scoring and similar-name table maintenance",
    add_completion=False,
)
console = Console()


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", "-l", help="DEBUG, INFO, WARNING or ERROR"),
    json_logs: bool = typer.Option(True, "--json-logs/--plain-logs", help="Log format on stderr"),
):
    """Name similarity scoring and similar-name table maintenance."""
    from .logging import configure_logging

    level = log_level.upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        console.print(f"[red]Unknown log level: {log_level}[/red]")
        raise typer.Exit(1)
    configure_logging(level, json_output=json_logs)


def get_settings():
    """Load settings from the environment (and a .env file if present)."""
    from dotenv import load_dotenv

    from .config import Settings

    load_dotenv()
    try:
        return Settings.from_env()
    except ValueError as e:
        console.print(f"[red]Error: invalid configuration: {e}[/red]")
        raise typer.Exit(1)


def get_engine(settings, surname: bool):
    from .engine import build_engine

    try:
        return build_engine(settings, NameType.from_flag(surname))
    except NameSimilarityError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


def get_generator(settings, engine, use_clusters: bool = True):
    from .clusters import read_clusters
    from .generator import SimilarNameGenerator

    clusters_path = settings.for_type(engine.name_type).clusters_path
    if clusters_path is None:
        console.print("[red]Error: no clusters file configured[/red]")
        raise typer.Exit(1)
    try:
        clusters = read_clusters(clusters_path)
    except NameSimilarityError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    return SimilarNameGenerator.from_engine(engine, clusters, use_clusters=use_clusters)


def _read_table(path: Path):
    from .table import read_table

    try:
        return read_table(path)
    except NameSimilarityError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def codes(
    names: list[str] = typer.Argument(..., help="Normalized name pieces"),
    surname: bool = typer.Option(False, "--surname", "-s", help="Include surname-only codes"),
):
    """Show the phonetic codes for one or more names."""
    from .phonetic import code_kinds, encode

    kinds = code_kinds(NameType.from_flag(surname))
    table = Table(title="Phonetic Codes")
    table.add_column("Name")
    for kind in kinds:
        table.add_column(kind.value)

    for name in names:
        table.add_row(name, *(encode(kind, name) for kind in kinds))

    console.print(table)


@app.command()
def phonemes(
    name: str = typer.Argument(..., help="Normalized name piece"),
    against: str = typer.Option(None, "--against", "-a", help="Show the alignment against this name"),
    surname: bool = typer.Option(False, "--surname", "-s", help="Use the surname cost matrix"),
):
    """Show a name's phonemes, optionally aligned against another name."""
    settings = get_settings()

    if against is None:
        from .phonemes import PhonemeTokenizer, build_converter

        try:
            tokenizer = PhonemeTokenizer(build_converter(settings.converter, settings.lexicon_path))
            symbols = tokenizer.get_phonemes(name)
        except NameSimilarityError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)
        console.print(f"{name}: {' '.join(symbols) or '[dim](none)[/dim]'}")
        return

    engine = get_engine(settings, surname)
    source = engine.tokenizer.tokenize(name)
    target = engine.tokenizer.tokenize(against)
    lattice = engine.distance.lattice(source, target)

    table = Table(title=f"Alignment {name} -> {against}")
    table.add_column("Step")
    table.add_column("Source")
    table.add_column("Target")
    table.add_column("Cost")
    for i, ((a, b), (sa, sb)) in enumerate(zip(lattice.steps(), lattice.edit_script())):
        table.add_row(str(i), sa or "-", sb or "-", str(engine.distance.costs.get_cost(a, b)))
    console.print(table)
    console.print(f"forward={engine.distance.score(source, target):.4f} "
                  f"reverse={engine.distance.score(target, source):.4f}")


@app.command()
def score(
    name1: str = typer.Argument(..., help="First normalized name piece"),
    name2: str = typer.Argument(..., help="Second normalized name piece"),
    surname: bool = typer.Option(False, "--surname", "-s", help="Score as surnames"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show the feature vector"),
):
    """Score how similar two names are."""
    settings = get_settings()
    engine = get_engine(settings, surname)

    features = engine.features.features(name1, name2)
    value = engine.scorer.score(features)
    console.print(f"{name1} ~ {name2}: [bold]{value:.4f}[/bold]")

    if verbose:
        table = Table(title="Features")
        table.add_column("Feature")
        table.add_column("Value")
        for feature, v in features.as_dict().items():
            table.add_row(feature, f"{v:.4f}")
        console.print(table)


@app.command()
def similar(
    name: str = typer.Argument(..., help="Normalized name piece"),
    surname: bool = typer.Option(False, "--surname", "-s", help="Generate surnames"),
    classifier_threshold: float = typer.Option(None, "--classifier-threshold", "-t", help="Minimum score"),
    cluster_threshold: float = typer.Option(None, "--cluster-threshold", "-c", help="Minimum cluster score"),
    max_names: int = typer.Option(None, "--max-names", "-m", help="Maximum results"),
    no_clusters: bool = typer.Option(False, "--no-clusters", help="Score the whole vocabulary"),
):
    """List vocabulary names similar to a name."""
    if max_names is not None and max_names < 0:
        console.print("[red]Error: --max-names must be >= 0[/red]")
        raise typer.Exit(1)
    settings = get_settings()
    engine = get_engine(settings, surname)
    generator = get_generator(settings, engine, use_clusters=not no_clusters)

    results = generator.generate_scored(name, classifier_threshold, cluster_threshold, max_names)
    if not results:
        console.print(f"[yellow]No similar names found for '{name}'[/yellow]")
        return

    table = Table(title=f"Names similar to '{name}'")
    table.add_column("Name")
    table.add_column("Score")
    for ns in results:
        table.add_row(ns.name, f"{ns.score:.3f}")
    console.print(table)


@app.command()
def train(
    corpus: Path = typer.Argument(..., help="File of 'name,variant...' lines"),
    output: Path = typer.Argument(..., help="Cost matrix to write"),
    initial: Path = typer.Option(None, "--initial", "-i", help="Starting cost matrix"),
    max_iterations: int = typer.Option(20, "--max-iterations", "-n", help="Iteration cap"),
    threshold: int = typer.Option(1, "--threshold", "-t", help="Convergence threshold"),
    smooth: bool = typer.Option(True, "--smooth/--no-smooth", help="Add-one smoothing"),
):
    """Train a phoneme cost matrix from known-equivalent name pairs."""
    from .alignment import CostMatrix, read_training_pairs, train_cost_matrix
    from .phonemes import PhonemeTokenizer, build_converter

    settings = get_settings()
    try:
        pairs = read_training_pairs(corpus)
        start = CostMatrix.load(initial) if initial else None
        tokenizer = PhonemeTokenizer(build_converter(settings.converter, settings.lexicon_path))
    except NameSimilarityError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task(f"Training on {len(pairs)} pairs...", total=None)
        result = train_cost_matrix(
            pairs,
            tokenizer,
            max_iterations=max_iterations,
            convergence_threshold=threshold,
            smooth=smooth,
            initial=start,
        )
        progress.update(task, completed=True)

    result.cost_matrix.save(output)
    status = "converged" if result.converged else "stopped at iteration cap"
    console.print(f"[green]{status} after {result.iterations} iterations; wrote {output}[/green]")


@app.command()
def build(
    common_names: Path = typer.Argument(..., help="File with one normalized name per line"),
    output: Path = typer.Argument(..., help="Similar-name table to write"),
    surname: bool = typer.Option(False, "--surname", "-s", help="Score as surnames"),
    threshold: float = typer.Option(0.0, "--threshold", "-t", help="Minimum score"),
    begin: int = typer.Option(0, "--begin", "-b", help="Index of the first name to generate"),
    count: int = typer.Option(None, "--count", "-n", help="Number of names to generate"),
):
    """Build table rows by scoring every pair of common names."""
    from .maintenance import build_similar_names
    from .table import SimilarNameTable, write_table

    settings = get_settings()
    engine = get_engine(settings, surname)
    names = [line.strip() for line in common_names.read_text(encoding="utf-8").splitlines() if line.strip()]

    table = SimilarNameTable()
    for name, similar_names in build_similar_names(names, engine.score_pair, threshold, begin=begin, count=count):
        table.add_node(name, similar_names)
    write_table(output, table)
    console.print(f"[green]Wrote {len(table)} rows to {output}[/green]")


@app.command()
def add(
    table_in: Path = typer.Argument(..., help="Existing similar-name table"),
    names_file: Path = typer.Argument(..., help="Names to add, one per line"),
    output: Path = typer.Argument(..., help="Table to write"),
    surname: bool = typer.Option(False, "--surname", "-s", help="Surnames"),
    limit: int = typer.Option(None, "--limit", "-m", help="Maximum rows to add"),
    no_clusters: bool = typer.Option(False, "--no-clusters", help="Score the whole vocabulary"),
):
    """Add rows for new names to a similar-name table."""
    from .maintenance import add_similar_names
    from .normalize import SimpleNameNormalizer
    from .table import write_table

    settings = get_settings()
    table = _read_table(table_in)
    engine = get_engine(settings, surname)
    generator = get_generator(settings, engine, use_clusters=not no_clusters)

    with names_file.open(encoding="utf-8") as f:
        added = add_similar_names(table, f, generator, SimpleNameNormalizer(), is_surname=surname, limit=limit)
    write_table(output, table)
    console.print(f"[green]Added {len(added)} names; wrote {output}[/green]")


@app.command()
def augment(
    table_in: Path = typer.Argument(..., help="Existing similar-name table"),
    names_file: Path = typer.Argument(..., help="Lines of 'target: source source...'"),
    output: Path = typer.Argument(..., help="Table to write"),
    surname: bool = typer.Option(False, "--surname", "-s", help="Surnames"),
    pairwise: bool = typer.Option(False, "--pairwise", "-p", help="Also add each source's reverse edge"),
    all_combos: bool = typer.Option(False, "--all-combos", "-a", help="Add every combination on a line"),
):
    """Add explicit similar names to existing rows."""
    from .maintenance import SimilarNameAugmenter
    from .normalize import SimpleNameNormalizer
    from .table import write_table

    table = _read_table(table_in)
    augmenter = SimilarNameAugmenter(table, SimpleNameNormalizer(), is_surname=surname)
    with names_file.open(encoding="utf-8") as f:
        augmenter.add_lines(f, pairwise=pairwise, all_combos=all_combos)
    added = augmenter.apply(table)
    write_table(output, table)
    console.print(
        f"[green]Added {added} similar names; {augmenter.uncommon_targets} uncommon targets, "
        f"{augmenter.invalid_lines} invalid lines; wrote {output}[/green]"
    )


@app.command()
def prune(
    table_in: Path = typer.Argument(..., help="Similar-name table"),
    output: Path = typer.Argument(..., help="Table to write"),
    surname: bool = typer.Option(False, "--surname", "-s", help="Surnames"),
    max_names: int = typer.Option(None, "--max-names", "-m", help="Maximum similar names per name"),
):
    """Cap the number of similar names per name, dropping the weakest."""
    from .maintenance import prune_similar_names
    from .table import write_table

    if max_names is not None and max_names < 0:
        console.print("[red]Error: --max-names must be >= 0[/red]")
        raise typer.Exit(1)
    settings = get_settings()
    table = _read_table(table_in)
    engine = get_engine(settings, surname)
    cap = settings.max_similar_names if max_names is None else max_names

    removed = prune_similar_names(table, engine.score_pair, cap)
    write_table(output, table)
    console.print(f"[green]Removed {removed} similar names; wrote {output}[/green]")


@app.command()
def symmetrize(
    table_in: Path = typer.Argument(..., help="Similar-name table"),
    output: Path = typer.Argument(..., help="Table to write"),
):
    """Add every missing reverse edge to a similar-name table."""
    from .maintenance import symmetrize as symmetrize_table
    from .table import write_table

    table = _read_table(table_in)
    added = symmetrize_table(table)
    write_table(output, table)
    console.print(f"[green]Added {added} reverse edges; wrote {output}[/green]")


@app.command()
def evaluate(
    labeled: Path = typer.Argument(..., help="Labeled name-pair file"),
    surname: bool = typer.Option(False, "--surname", "-s", help="Surnames"),
    coder: str = typer.Option(None, "--coder", "-c", help="Evaluate a phonetic code (soundex, nysiis, ...)"),
    table_file: Path = typer.Option(None, "--table", help="Evaluate a similar-name table"),
    threshold: float = typer.Option(None, "--threshold", "-t", help="Evaluate the engine at this score"),
):
    """Report precision and recall against labeled pairs."""
    from .evaluation import code_matcher, evaluate as run_evaluation, score_matcher, table_matcher
    from .normalize import SimpleNameNormalizer
    from .phonetic import CodeKind

    if table_file is not None:
        matcher = table_matcher(_read_table(table_file))
    elif threshold is not None:
        engine = get_engine(get_settings(), surname)
        matcher = score_matcher(engine.score_pair, threshold)
    else:
        try:
            kind = CodeKind(coder or "soundex")
        except ValueError:
            console.print(f"[red]Unknown coder. Choose from: {[k.value for k in CodeKind]}[/red]")
            raise typer.Exit(1)
        matcher = code_matcher(kind)

    try:
        result = run_evaluation(labeled, matcher, SimpleNameNormalizer(), is_surname=surname)
    except NameSimilarityError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title="Evaluation")
    table.add_column("Metric")
    table.add_column("Value")
    table.add_row("True positives", str(result.true_pos))
    table.add_row("False negatives", str(result.false_neg))
    table.add_row("False positives", str(result.false_pos))
    table.add_row("True negatives", str(result.true_neg))
    table.add_row("Skipped", str(result.skipped))
    table.add_row("Precision", f"{result.precision:.4f}")
    table.add_row("Recall", f"{result.recall:.4f}")
    table.add_row("F1", f"{result.f1:.4f}")
    console.print(table)


if __name__ == "__main__":
    app()
