"""Test configuration."""

import pytest
from datetime import datetime, timezone
from pathlib import Path
import tempfile

from windyplug.core.config import Config
from windyplug.core.models import ChunkInfo
from windyplug.transform.orchestrator import TransformOrchestrator
from windyplug.transform.side_config import SideConfigLoader


FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
FIXED_BUILT = 1704164645678
FIXED_BUILT_READABLE = "2024-01-02T03:04:05.678Z"

EXAMPLE_PLUGIN_CONFIG = '''import type { ExternalPluginConfig } from '@windy/interfaces';

const config: ExternalPluginConfig = {
    name: 'windy-plugin-example',
    version: '0.1.0',
    icon: '🔌',
    title: 'Example plugin',
    description: 'This is my first plugin.',
    author: 'Plugin Author',
    repository: 'https://github.com/example/windy-plugin-example',
    desktopUI: 'rhpane',
    mobileUI: 'fullscreen',
    routerPath: '/my-plugin',
};

export default config;
'''


# Test fixtures
@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fixed_clock():
    """Clock that always returns the same UTC instant."""
    return lambda: FIXED_NOW


@pytest.fixture
def plugin_dir(temp_dir):
    """Directory holding a minimal side config file."""
    (temp_dir / "pluginConfig.ts").write_text(
        "const config = { name: 'x', version: '1' };\n\nexport default config;\n",
        encoding="utf-8"
    )
    return temp_dir


@pytest.fixture
def chunk_info(plugin_dir):
    """Chunk built from an entry module inside plugin_dir."""
    return ChunkInfo(file_name="plugin.js", facade_module_id=str(plugin_dir / "plugin.svelte"))


@pytest.fixture
def orchestrator(fixed_clock):
    """Orchestrator with default config and a fixed build clock."""
    config = Config()
    loader = SideConfigLoader(config.side_config, clock=fixed_clock)
    return TransformOrchestrator(config, side_config_loader=loader)
