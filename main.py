import argparse
import logging
import sys

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError

from dsadmin import config
from dsadmin.delete import delete_all
from dsadmin.errors import DatastoreAdminError
from dsadmin.export import export_kind
from dsadmin.logging_setup import setup_logging
from dsadmin.source import DatastoreSource
from dsadmin.writers import FORMATS

logger = logging.getLogger('dsadmin')

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def split_list(value):
    """
    Turn a comma separated option into a list, ignoring blanks.
    """
    if not value:
        return None
    items = [item.strip() for item in value.split(',')]
    return [item for item in items if item] or None


def run_delete_all(args, source):
    deleted = delete_all(
        source,
        namespaces=split_list(args.namespaces),
        kinds=split_list(args.kinds),
        assume_yes=args.yes,
    )
    print("-------------------------------------------------------------------")
    print(f"All entities have been successfully deleted! ({deleted} keys)")
    print("Namespaces itself will be cleaned up automatically within 48 hours.")


def run_export_kind(args, source):
    logger.info("Exporting '%s' from '%s/%s'", args.kind, args.project, args.namespace or '')
    result = export_kind(
        source,
        args.kind,
        namespace=args.namespace,
        export_dir=args.out,
        fmt=args.format,
    )
    if result.skipped:
        logger.warning("%d entities could not be exported", result.skipped)
    print(f"Exported {result.written} entities to {result.path}")


def build_parser():
    parser = argparse.ArgumentParser(
        prog='dsadmin',
        description="Bulk delete and export tools for Google Cloud Datastore",
    )
    parser.add_argument('--log-level', default=config.LOG_LEVEL.upper(), type=str.upper,
                        choices=LOG_LEVELS)
    commands = parser.add_subparsers(dest='command', required=True)

    def add_project(p):
        p.add_argument(
            '-p', '--project',
            default=config.PROJECT_ID,
            required=config.PROJECT_ID is None,
            help="Project to be used (defaults to GOOGLE_CLOUD_PROJECT)",
        )

    delete = commands.add_parser('delete-all', help="Delete all entities in namespaces/kinds")
    add_project(delete)
    delete.add_argument('-n', '--namespaces', help="Namespaces to clean up, comma separated")
    delete.add_argument('-k', '--kinds', help="Kinds to clean up, comma separated")
    delete.add_argument('-y', '--yes', action='store_true',
                        help="Delete from every discovered namespace without asking")
    delete.set_defaults(handler=run_delete_all)

    export = commands.add_parser('export-kind', help="Dump a kind to a json or csv file")
    add_project(export)
    export.add_argument('-n', '--namespace', help="Namespace to get data from")
    export.add_argument('-k', '--kind', required=True, help="Kind to export")
    export.add_argument('--format', default='json', choices=sorted(FORMATS))
    export.add_argument('--out', default=config.EXPORT_DIR, help="Directory for export files")
    export.set_defaults(handler=run_export_kind)

    return parser


def main(argv=None, source_factory=DatastoreSource.for_project):
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        source = source_factory(args.project)
        args.handler(args, source)
    except (DatastoreAdminError, GoogleAPIError, GoogleAuthError, OSError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
