"""Shared test fixtures for codeshape tests."""

import logging

import pytest

from codeshape.scanning import TREE_SITTER_AVAILABLE, TreeSitterNormalizer

requires_tree_sitter = pytest.mark.skipif(
    not TREE_SITTER_AVAILABLE, reason="tree-sitter not installed"
)


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture(autouse=True)
def reset_logging():
    """CLI runs call setup_logging, which changes the package logger level."""
    yield
    logging.getLogger("codeshape").setLevel(logging.NOTSET)


@pytest.fixture(scope="session")
def normalizer():
    """Tree-sitter normalizer; skips the test when grammars are missing."""
    if not TREE_SITTER_AVAILABLE:
        pytest.skip("tree-sitter not installed")
    return TreeSitterNormalizer()


@pytest.fixture
def parse(normalizer):
    """Parse a snippet into a SourceFile: ``parse(code, "python")``."""

    def _parse(code, language="python", path=None):
        extension = {"python": "py", "javascript": "js", "typescript": "ts", "java": "java"}
        path = path or f"sample.{extension.get(language, 'txt')}"
        source = normalizer.parse_file(code, path, language)
        if source.root is None:
            pytest.skip(f"{language} grammar not available")
        return source

    return _parse


@pytest.fixture
def write_tree(tmp_path):
    """Write ``{relative path: content}`` under tmp_path and return the root."""

    def _write(files):
        for relative, content in files.items():
            target = tmp_path / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return tmp_path

    return _write
