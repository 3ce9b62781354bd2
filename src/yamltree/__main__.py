"""Command-line converter between YAML text and native document trees.

`load` prints the tree of a YAML stream as JSON, `dump` reads such a JSON
tree and prints the YAML stream, and `schema` prints the JSON Schema of
the tree.
"""

from json import JSONDecodeError, dumps, load
from typing import TYPE_CHECKING

from click import ClickException, File, IntRange, argument, echo, group, option
from pydantic import ValidationError

from yamltree.core import StreamProcessor
from yamltree.errors import YAMLTreeError
from yamltree.jsonschema import SchemaGenerator
from yamltree.native import to_native
from yamltree.settings import TreeSettings

if TYPE_CHECKING:
    from io import TextIOBase

JSON_INDENT = 2


def _make_processor(**overrides: bool | int | None) -> StreamProcessor:
    """Build a processor from environment settings and CLI overrides.

    Raises:
        ClickException: If the resulting settings are invalid.
    """
    try:
        settings = TreeSettings(**{
            name: value
            for name, value in overrides.items()
            if value is not None
        })
    except ValidationError as base:
        raise ClickException(f'Invalid settings: {base}') from base

    return StreamProcessor.from_settings(settings)


@group(help='Command-line utilities for structured YAML document trees.')
def cli() -> None:
    """Root CLI group for yaml-tree tools."""
    return None


@cli.command(
    name='load',
    help='Parse a YAML stream and print its document tree as JSON.',
)
@option(
    '--libyaml/--no-libyaml',
    default=None,
    help='Use the LibYAML-backed parser.',
)
@argument('source', type=File('rt'), default='-')
def load_tree(source: 'TextIOBase', libyaml: bool | None) -> None:
    """Print the native tree of a YAML stream.

    Args:
        source: Readable YAML stream.
        libyaml: Whether to use the LibYAML parser.
    """
    processor = _make_processor(libyaml=libyaml)

    try:
        documents = processor.load(source)
    except YAMLTreeError as base:
        raise ClickException(str(base)) from base

    echo(dumps(to_native(documents), ensure_ascii=False, indent=JSON_INDENT))


@cli.command(
    name='dump',
    help='Read a document tree as JSON and print it as a YAML stream.',
)
@option(
    '--strict/--no-strict',
    default=None,
    help='Fail on missing or invalid style and implicit flags.',
)
@option(
    '--libyaml/--no-libyaml',
    default=None,
    help='Use the LibYAML-backed emitter.',
)
@option(
    '--indent',
    type=IntRange(2, 9),
    default=None,
    help='Number of spaces per block indentation level.',
)
@argument('source', type=File('rt'), default='-')
def dump_tree(source: 'TextIOBase', strict: bool | None,
              libyaml: bool | None, indent: int | None) -> None:
    """Print the YAML stream of a native tree.

    Args:
        source: Readable JSON document tree.
        strict: Whether to fail on malformed presentation flags.
        libyaml: Whether to use the LibYAML emitter.
        indent: Block indentation of the output.
    """
    processor = _make_processor(strict=strict, libyaml=libyaml, indent=indent)

    try:
        data = load(source)
    except JSONDecodeError as base:
        raise ClickException(f'Invalid JSON: {base}') from base

    if not isinstance(data, list):
        raise ClickException('Expected a JSON list of documents')

    try:
        text = processor.dump(data)
    except YAMLTreeError as base:
        raise ClickException(str(base)) from base

    echo(text, nl=False)


@cli.command(
    name='schema',
    help='Print the JSON Schema of document trees to standard output.',
)
def print_schema() -> None:
    """Generate and print the JSON Schema."""
    echo(SchemaGenerator.make_schema())


if __name__ == '__main__':
    cli()
