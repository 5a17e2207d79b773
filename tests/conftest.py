"""
================================================================================
PYTEST CONFIGURATION
================================================================================

Pytest configuration and shared fixtures for the entire test suite.

Global Fixtures:
    - isolated_paths: Points every path constant at a per-test temp dir
    - store / tracker: FamilyStore + CompletionTracker on a temp data file
    - demo_family: "demo" family with members a, b, c over 5 parts
    - client: Flask test client over freshly built services

Test Isolation Strategy:
    Path constants are monkeypatched per test, so no test writes to the
    real project directory.

================================================================================
"""
import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.core.family_store import FamilyStore
from src.core.tracker import CompletionTracker
from src.utils import constants
from src.utils.logger import logger
from test_common import FIXED_NOW


@pytest.fixture(autouse=True)
def isolated_paths(tmp_path, monkeypatch):
    """Redirect all file constants into tmp_path"""
    monkeypatch.setattr(constants, 'BASE_DIR', tmp_path)
    monkeypatch.setattr(constants, 'OUTPUT_DIR', tmp_path / 'outputs')
    monkeypatch.setattr(constants, 'LOG_DIR', tmp_path / 'outputs' / 'logs')
    monkeypatch.setattr(constants, 'CONFIG_FILE', tmp_path / 'configs' / 'config.json')
    monkeypatch.setattr(constants, 'FAMILIES_FILE', tmp_path / 'families.json')
    monkeypatch.setattr(constants, 'CONTENT_FILE', tmp_path / 'tehilim.txt')
    return tmp_path


@pytest.fixture(autouse=True)
def reset_logger_handlers():
    """Drop handlers added by setup_logging so they don't outlive capsys"""
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / 'families.json'


@pytest.fixture
def store(data_file):
    return FamilyStore(data_file, total_items=5, clock=lambda: FIXED_NOW)


@pytest.fixture
def tracker(store):
    return CompletionTracker(store)


@pytest.fixture
def demo_family(store):
    return store.register('demo', ['a', 'b', 'c'], 'secret')


@pytest.fixture
def content_file(tmp_path):
    path = tmp_path / 'tehilim.txt'
    path.write_text(
        "part 1 first psalm text\npart 2 second psalm\npart 3 third\npart 4 fourth\npart 5 fifth\n",
        encoding='utf-8',
    )
    return path


@pytest.fixture
def app_config(tmp_path, content_file):
    """Config with a 5-part corpus and only the built-in family enabled"""
    from src.utils.config import default_config

    config = default_config()
    config['general']['total_parts'] = 5
    config['general']['content_file'] = str(content_file)
    config['general']['families_file'] = str(tmp_path / 'families.json')
    config['legacy_family']['enabled'] = False
    config['scheduler']['enabled'] = False
    return config


@pytest.fixture
def services(app_config):
    from src.web.server import build_services
    return build_services(app_config)


@pytest.fixture
def client(services):
    from src.web.server import create_app
    app = create_app(services)
    app.config['TESTING'] = True
    return app.test_client()
