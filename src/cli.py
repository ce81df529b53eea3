#!/usr/bin/env python3
"""Find unreferenced files, assets, dependencies, labels and registrations in a Flutter project"""

import logging
import sys
from pathlib import Path

import click

from reachability.errors import AnalysisError
from report.unused_report import export_to_json, print_report, remove_files
from runner import AnalysisOptions, run_analysis


@click.command()
@click.argument('path', type=click.Path(exists=True, path_type=Path), default='.')
@click.option('-a', '--assets', is_flag=True, help='Report registered assets no source mentions')
@click.option('-d', '--deps', is_flag=True, help='Report dependencies no reachable file uses')
@click.option('-l', '--labels', is_flag=True, help='Report translation keys that are never read')
@click.option('-g', '--locator', is_flag=True, help='Report locator registrations that are never retrieved')
@click.option('--entry', help='Entry file relative to the project (default: lib/main.dart)')
@click.option('--config', 'config_file', help='Config file (default: unused.config.yaml in the project)')
@click.option('--output', help='Also write the report to this JSON file')
@click.option('--remove', is_flag=True, help='Delete unreferenced Dart files')
@click.option('--yes', is_flag=True, help='Do not ask before deleting files')
@click.option('-v', '--verbose', is_flag=True, help='Log every scanned file')
def main(path, assets, deps, labels, locator, entry, config_file, output, remove, yes, verbose):
    """Report what PATH's entry file never reaches"""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO,
                        format='%(levelname)s %(name)s: %(message)s')

    project_root = path if path.is_dir() else path.parent
    options = AnalysisOptions(assets=assets, deps=deps, labels=labels, locator=locator,
                              entry=entry, config_file=config_file)

    try:
        report = run_analysis(project_root, options)
    except AnalysisError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    print_report(report, options.categories())

    if output:
        export_to_json(report, output)
        click.echo(f"\n✅ Report written to {output}")

    files = report.unreferenced_files
    if remove and files:
        if yes or click.confirm(f"Delete {len(files)} unreferenced files?"):
            try:
                removed = remove_files(project_root, files)
            except AnalysisError as e:
                click.echo(f"Error: {e}", err=True)
                sys.exit(2)
            click.echo(f"Removed {removed} files")

    sys.exit(1 if report.has_unused() else 0)


if __name__ == '__main__':
    main()
