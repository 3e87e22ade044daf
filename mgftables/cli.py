"""Command line tools for converting MGF files into spectrum and fragment tables"""
import logging
import sys

import click
import numpy as np

from mgftables.errors import MGFError
from mgftables.parser import ParseOptions, parse
from mgftables.tables import MGFTables
from mgftables.writer import write_mgf

logger = logging.getLogger(__name__)

PROGRESS_STEPS = 1000

DELIMITERS = {
    "tsv": "\t",
    "csv": ",",
}


def _parse_or_abort(inpath: str, options: ParseOptions) -> MGFTables:
    try:
        return parse(inpath, options)
    except MGFError as err:
        click.echo(f"{err}", err=True)
        raise click.Abort()


def _parse_with_progressbar(inpath: str, options: ParseOptions) -> MGFTables:
    with click.progressbar(length=PROGRESS_STEPS, label=f"Parsing {inpath}", file=sys.stderr) as bar:

        def update(fraction: float):
            step = int(fraction * PROGRESS_STEPS)
            if step > bar.pos:
                bar.update(step - bar.pos)

        options.progress = update
        return _parse_or_abort(inpath, options)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log debugging information")
def main(verbose: bool = False):
    """Read MGF spectra into linked spectrum and fragment tables"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command("describe")
@click.argument("inpath", type=click.Path(exists=True, dir_okay=False))
@click.option("--encoding", default="utf8", show_default=True, help="The text encoding of INPATH")
@click.option("--strict", is_flag=True, help="Fail if the last spectrum is missing END IONS")
@click.option("--progress", is_flag=True, help="Log progress while parsing")
def describe(inpath: str, encoding: str = "utf8", strict: bool = False, progress: bool = False):
    """Summarize the spectra in INPATH"""
    tables = _parse_or_abort(inpath, ParseOptions(strict=strict, show_progress=progress, encoding=encoding))
    spectra = tables.spectra
    n_empty = int(((spectra.last_entry - spectra.first_entry + 1) == 0).sum())
    click.echo(f"Spectra: {len(spectra)}")
    click.echo(f"Fragments: {len(tables.fragments)}")
    click.echo(f"Empty spectra: {n_empty}")
    rt = spectra.rt_in_seconds[~np.isnan(spectra.rt_in_seconds)]
    if len(rt):
        click.echo(f"Retention time range: {rt.min():.2f} - {rt.max():.2f} seconds")


@main.command("convert")
@click.argument("inpath", type=click.Path(exists=True, dir_okay=False))
@click.argument("output_prefix", type=click.Path(dir_okay=False, writable=True))
@click.option("-d", "--delimiter", type=click.Choice(sorted(DELIMITERS)), default="tsv",
              help="The output table format")
@click.option("--encoding", default="utf8", show_default=True, help="The text encoding of INPATH")
@click.option("--strict", is_flag=True, help="Fail if the last spectrum is missing END IONS")
@click.option("--progress", is_flag=True, help="Show a progress bar while parsing")
def convert(inpath: str, output_prefix: str, delimiter: str = "tsv", encoding: str = "utf8",
            strict: bool = False, progress: bool = False):
    """
    Convert INPATH into two linked tables, OUTPUT_PREFIX.spectra.<ext> and
    OUTPUT_PREFIX.fragments.<ext>
    """
    options = ParseOptions(strict=strict, encoding=encoding)
    if progress:
        tables = _parse_with_progressbar(inpath, options)
    else:
        tables = _parse_or_abort(inpath, options)
    spectra, fragments = tables.to_dataframes()
    sep = DELIMITERS[delimiter]
    spectra_path = f"{output_prefix}.spectra.{delimiter}"
    fragments_path = f"{output_prefix}.fragments.{delimiter}"
    spectra.to_csv(spectra_path, sep=sep, index=False)
    fragments.to_csv(fragments_path, sep=sep, index=False)
    logger.info("Wrote %d spectra to %s and %d fragments to %s",
                len(spectra), spectra_path, len(fragments), fragments_path)


@main.command("head")
@click.argument("inpath", type=click.Path(exists=True, dir_okay=False))
@click.option("-n", "--spectra-to-read", type=int, default=20)
def head(inpath: str, spectra_to_read: int = 20):
    """Write only the first `n` spectra from INPATH to STDOUT in MGF format"""
    tables = _parse_or_abort(inpath, ParseOptions())
    stream = click.get_text_stream("stdout")
    write_mgf(tables.head(spectra_to_read), stream)


if __name__ == "__main__":
    main.main()
