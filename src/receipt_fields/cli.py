"""Command-line interface for extracting receipt fields from OCR output."""

import logging
import click
from pathlib import Path
from typing import List, Dict, Any, Optional
import json
from concurrent.futures import ThreadPoolExecutor, as_completed
from tqdm import tqdm
import sys
from collections import Counter

from .parse import ReceiptParser

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stderr)
    ]
)
logger = logging.getLogger(__name__)

OCR_SUFFIXES = ('.txt', '.json')


def read_ocr_text(path: Path) -> str:
    """
    Read OCR output from a plain text file or an OCR JSON result.

    JSON results must carry the recognized text under ``full_text``.
    """
    content = path.read_text(encoding='utf-8')
    if path.suffix.lower() != '.json':
        return content

    data = json.loads(content)
    if not isinstance(data, dict) or 'full_text' not in data:
        raise ValueError(f"{path.name} has no 'full_text' field")
    return data['full_text'] or ''


class BatchExtractor:
    """Extract fields from every OCR result in a directory."""

    def __init__(self, parser: ReceiptParser, max_workers: int = 4):
        """
        Args:
            parser: Shared receipt parser
            max_workers: Number of parallel workers
        """
        self.parser = parser
        self.max_workers = max_workers
        self.stats = Counter()

    def find_ocr_files(self, input_dir: Path) -> List[Path]:
        """Find all OCR text/JSON files under the input directory."""
        files = sorted(p for p in input_dir.rglob('*')
                       if p.is_file() and p.suffix.lower() in OCR_SUFFIXES)
        logger.info(f"Found {len(files)} OCR files in {input_dir}")
        return files

    def extract_file(self, path: Path) -> Dict[str, Any]:
        """Extract one file; failures are recorded instead of raised."""
        try:
            result = self.parser.parse_receipt(read_ocr_text(path))
            record = {'file_path': str(path), **result.to_dict()}
            self.stats['processed'] += 1
            if not (result.date and result.total_amount):
                self.stats['incomplete'] += 1
            return record

        except Exception as e:
            logger.error(f"Failed to process {path}: {e}")
            self.stats['failed'] += 1
            return {'file_path': str(path), 'error': str(e)}

    def run(self, input_dir: Path) -> List[Dict[str, Any]]:
        """Extract every OCR file, returning records in file order."""
        files = self.find_ocr_files(input_dir)
        self.stats['total_files'] = len(files)
        if not files:
            logger.warning("No OCR files found!")
            return []

        results: Dict[Path, Dict[str, Any]] = {}
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_file = {executor.submit(self.extract_file, path): path for path in files}

            with tqdm(total=len(files), desc="Extracting receipts") as pbar:
                for future in as_completed(future_to_file):
                    path = future_to_file[future]
                    results[path] = future.result()
                    pbar.update(1)
                    pbar.set_postfix({
                        'processed': self.stats['processed'],
                        'failed': self.stats['failed']
                    })

        logger.info(f"Batch extraction complete. Processed: {self.stats['processed']}, "
                    f"Failed: {self.stats['failed']}, Incomplete: {self.stats['incomplete']}")
        return [results[path] for path in files]


def _configure(debug: bool):
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        click.echo("🔍 Debug mode enabled - detailed parsing logs will be shown", err=True)


def _build_parser(rules: Optional[Path]) -> ReceiptParser:
    try:
        return ReceiptParser(rules_path=rules)
    except Exception as e:
        raise click.ClickException(f"Could not load keyword rules: {e}")


@click.group()
def cli():
    """Receipt Fields - Extract date, amount, registration number and payee from OCR text."""
    pass


@cli.command()
@click.argument('source', type=click.Path(allow_dash=True, path_type=Path))
@click.option('--rules', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Path to a keyword rules YAML file')
@click.option('--details', is_flag=True, help='Include per-field strategy details')
@click.option('--debug', is_flag=True, help='Enable debug output')
def extract(source: Path, rules: Optional[Path], details: bool, debug: bool):
    """
    Extract fields from one OCR result (text or OCR JSON; '-' reads stdin).

    Example:
        receipts extract ./out/ocr_json/receipt_01.txt
    """
    _configure(debug)
    parser = _build_parser(rules)

    if str(source) == '-':
        text = click.get_text_stream('stdin').read()
    else:
        if not source.is_file():
            raise click.BadParameter(f"{source} is not a file", param_hint='SOURCE')
        try:
            text = read_ocr_text(source)
        except (OSError, ValueError) as e:
            raise click.ClickException(str(e))

    result = parser.parse_receipt(text)
    record = result.to_dict()
    if details:
        record['details'] = result.metadata
    click.echo(json.dumps(record, ensure_ascii=False, indent=2))


@cli.command()
@click.option('--in', 'input_dir', required=True,
              type=click.Path(exists=True, file_okay=False, path_type=Path),
              help='Directory containing OCR text or JSON files')
@click.option('--out', 'output_file', required=True, type=click.Path(dir_okay=False, path_type=Path),
              help='Output JSON file for extracted records')
@click.option('--rules', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Path to a keyword rules YAML file')
@click.option('--max-workers', default=4, type=int,
              help='Maximum number of parallel workers')
@click.option('--debug', is_flag=True, help='Enable debug output')
def batch(input_dir: Path, output_file: Path, rules: Optional[Path], max_workers: int, debug: bool):
    """
    Extract fields from every OCR result in a directory.

    Example:
        receipts batch --in ./out/ocr_json --out ./out/fields.json
    """
    _configure(debug)
    extractor = BatchExtractor(_build_parser(rules), max_workers=max_workers)
    records = extractor.run(input_dir)

    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(json.dumps(records, ensure_ascii=False, indent=2), encoding='utf-8')

    stats = extractor.stats
    click.echo("\n" + "=" * 50)
    click.echo("EXTRACTION SUMMARY")
    click.echo("=" * 50)
    click.echo(f"Total files found: {stats['total_files']}")
    click.echo(f"Successfully processed: {stats['processed']}")
    click.echo(f"Missing date or amount: {stats['incomplete']}")
    click.echo(f"Failed: {stats['failed']}")
    click.echo(f"Output: {output_file}")

    if stats['failed']:
        sys.exit(1)


if __name__ == '__main__':
    cli()
