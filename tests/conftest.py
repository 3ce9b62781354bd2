"""Tests configurations and fixtures."""

import pytest
import yaml

from yamltree.core import StreamProcessor, TreeDumper


@pytest.fixture
def loader() -> type[yaml.SafeLoader]:
    """Provide an isolated YAML SafeLoader class for tests.

    Creates a dedicated subclass of `yaml.SafeLoader` so that spies and
    patches applied during a test do not leak into PyYAML's own classes.
    """
    class Loader(yaml.SafeLoader):
        pass

    return Loader


@pytest.fixture
def dumper() -> type[TreeDumper]:
    """Provide an isolated tree dumper class for tests."""
    class Dumper(TreeDumper):
        pass

    return Dumper


@pytest.fixture
def processor(loader: type[yaml.SafeLoader],
              dumper: type[TreeDumper]) -> StreamProcessor:
    """Provide a non-strict processor over the isolated YAML classes."""
    return StreamProcessor(loader, dumper, allow_unicode=True)


@pytest.fixture
def strict_processor(loader: type[yaml.SafeLoader],
                     dumper: type[TreeDumper]) -> StreamProcessor:
    """Provide a strict processor over the isolated YAML classes."""
    return StreamProcessor(loader, dumper, strict=True, allow_unicode=True)
