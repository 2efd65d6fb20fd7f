import os
import sys
import pytest

# Ensure repository root is on sys.path so local modules import correctly during pytest
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


@pytest.fixture(scope='session')
def font_dir():
    """Bundled fonts and mappings, staged once for the whole session."""
    from csv2pdf.assets import prepare_font_dir
    path, cleanup = prepare_font_dir()
    yield path
    cleanup()


@pytest.fixture
def write_csv(tmp_path):
    """Return a helper writing CSV text to a file and returning its path."""
    def _write(text, name='input.csv', encoding='utf-8'):
        path = tmp_path / name
        path.write_bytes(text.encode(encoding))
        return str(path)
    return _write


@pytest.fixture
def identity():
    return lambda text: text
