import json
import os
from typing import List, Optional

import click
import pandas as pd
from click import Group

from mdrcluster._boot import Services
from mdrcluster.api.clustering_plots import make_cluster_scatter
from mdrcluster.config.config import AppConfig
from mdrcluster.pipeline.models import Document, PipelineResult
from mdrcluster.pipeline.pipeline import PROJECTION_SOURCES, run_pipeline
from mdrcluster.pipeline.tracker import ProgressTracker
from mdrcluster.retrieval.openfda import OpenFDAQuery, RetrievalError, default_date_range


def read_documents(path: str) -> List[Document]:
    """Reads `id` and `text` columns from a CSV, JSON (records) or JSON lines file."""
    ext = os.path.splitext(path)[1].lower()
    if ext == '.csv':
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    elif ext == '.jsonl':
        df = pd.read_json(path, lines=True, dtype=False)
    elif ext == '.json':
        df = pd.read_json(path, orient='records', dtype=False)
    else:
        raise click.UsageError(f'unsupported input file type: {ext or path}, use .csv, .json or .jsonl')

    missing = [col for col in ('id', 'text') if col not in df.columns]
    if missing:
        raise click.UsageError(f'input file is missing columns: {", ".join(missing)}')

    df['text'] = df['text'].fillna('')
    return [Document(str(row.id), str(row.text)) for row in df.itertuples(index=False)]


def _run(documents, top: int, projection: str, output: Optional[str], plot: Optional[str], events_found: int):
    tracker = ProgressTracker(on_progress=lambda message, progress: click.echo(f'[{int(progress * 100):3d}%] {message}', err=True))
    try:
        result: PipelineResult = run_pipeline(documents, top_clusters=top, projection=projection, tracker=tracker)
    except ValueError as e:
        raise click.UsageError(str(e))

    if plot:
        on_plotted = tracker('plot', 'Plotting ...', 0.9)
        png = make_cluster_scatter(result.events)
        if png:
            with open(plot, 'wb') as f:
                f.write(png)
        else:
            click.echo('no clusters to plot', err=True)
        on_plotted()

    tracker.finish()

    if output:
        with open(output, 'w', encoding='utf-8') as f:
            json.dump({**result.to_dict(), 'events_found': events_found}, f, indent=2)

    click.echo(f'Events Found: {events_found}')
    click.echo(f'Clusters Generated: {result.cluster_count}')
    for cluster in result.clusters:
        click.echo(f'  cluster {cluster.rank}: {cluster.size} events')


def _shared_options(fn):
    fn = click.option('--plot', type=click.Path(dir_okay=False, writable=True), help='Write a PNG scatter plot of the clusters.')(fn)
    fn = click.option('--output', '-o', type=click.Path(dir_okay=False, writable=True), help='Write the result as JSON.')(fn)
    fn = click.option('--projection', type=click.Choice(PROJECTION_SOURCES), default=AppConfig.PROJECTION, show_default=True)(fn)
    fn = click.option('--top', type=click.IntRange(min=1), default=AppConfig.TOP_CLUSTERS, show_default=True, help='Number of clusters to keep.')(fn)
    return fn


def cli_cluster(cli: Group, s: Services):
    @cli.command()
    @click.argument('input_file', type=click.Path(exists=True, dir_okay=False))
    @_shared_options
    def cluster(input_file: str, top: int, projection: str, output: Optional[str], plot: Optional[str]):
        """Cluster the narratives of a CSV or JSON file with `id` and `text` columns."""
        documents = read_documents(input_file)
        _run(documents, top, projection, output, plot, events_found=len(documents))

    @cli.command()
    @click.option('--date-from', type=click.DateTime(formats=['%Y-%m-%d']), help='Defaults to two years ago.')
    @click.option('--date-to', type=click.DateTime(formats=['%Y-%m-%d']), help='Defaults to today.')
    @click.option('--company', help='Manufacturer name (optional).')
    @click.option('--device', help='Brand name of the product (optional).')
    @_shared_options
    def search(date_from, date_to, company, device, top: int, projection: str, output: Optional[str], plot: Optional[str]):
        """Search openFDA device adverse events and cluster their narratives."""
        default_from, default_to = default_date_range()
        query = OpenFDAQuery(
            date_from=date_from.date() if date_from else default_from,
            date_to=date_to.date() if date_to else default_to,
            company=company,
            device=device,
        )
        if query.date_from > query.date_to:
            raise click.UsageError('--date-from must not be after --date-to')

        click.echo('Connecting to openFDA ...', err=True)
        try:
            batch = s.openfda.fetch_events(query)
        except RetrievalError as e:
            raise click.ClickException(str(e))

        if not batch.documents:
            click.echo('No query results found.')
            return

        _run(batch.documents, top, projection, output, plot, events_found=batch.events_found)
