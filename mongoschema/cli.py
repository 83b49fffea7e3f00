# mongoschema/cli.py
import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version

from mongoschema.config import InferenceConfig, UNION_POLICIES
from mongoschema.errors import EmptySourceError, MongoSchemaError
from mongoschema.logger import set_level
from mongoschema.mongo_utils import MongoDocumentSource
from mongoschema.parser import JsonFileSource
from mongoschema.schema_infer import generate_schema


def _package_version() -> str:
    try:
        return version("mongoschema")
    except PackageNotFoundError:
        return "unknown"


def _positive_int(text: str) -> int:
    try:
        n = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}")
    if n <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mongoschema",
        description="Generate Mongoose schemas from MongoDB collections",
    )
    parser.add_argument("-u", "--url", help="MongoDB connection URL")
    parser.add_argument("-c", "--collection", help="MongoDB collection name")
    parser.add_argument("-d", "--db-name", help="MongoDB database name (default: from the URL)")
    parser.add_argument("-f", "--file", help="Read documents from a JSON / NDJSON / Extended JSON file instead")
    parser.add_argument("-t", "--type-key", default="type", help="Custom typeKey for Mongoose schema")
    parser.add_argument("-s", "--sample-size", type=_positive_int, help="Number of documents to sample")
    parser.add_argument("-o", "--output", help="Also write the schema to this file")
    parser.add_argument("--union-policy", default="union", choices=UNION_POLICIES,
                        help="How to record conflicting types at one path")
    parser.add_argument("--no-date-strings", action="store_true",
                        help="Treat date-looking strings as String")
    parser.add_argument("--indent", type=_positive_int, default=2, help="Spaces per indent level")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")
    return parser


def _open_source(args):
    if args.file:
        return JsonFileSource(args.file, sample_size=args.sample_size)
    return MongoDocumentSource.connect(args.url, args.collection, db_name=args.db_name,
                                       sample_size=args.sample_size)


def _write_text(path: str, content: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(content + "\n")


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.file and not (args.url and args.collection):
        parser.error("either --file or both --url and --collection are required")

    if args.verbose:
        set_level(logging.INFO)

    cfg = InferenceConfig(
        type_key=args.type_key,
        indent=" " * args.indent,
        union_policy=args.union_policy,
        detect_date_strings=not args.no_date_strings,
    )

    source = None
    try:
        cfg.validate()
        source = _open_source(args)
        result = generate_schema(source, cfg)
    except EmptySourceError as exc:
        print(exc)
        return 0
    except MongoSchemaError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        if source is not None and hasattr(source, "close"):
            source.close()

    print(result.schema)
    if args.output:
        try:
            _write_text(args.output, result.schema)
        except OSError as exc:
            print(f"Error: cannot write {args.output}: {exc}", file=sys.stderr)
            return 1
    if result.skipped:
        print(f"Skipped {len(result.skipped)} field value(s) of unsupported type: "
              f"{', '.join(sorted(set(result.skipped)))}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
