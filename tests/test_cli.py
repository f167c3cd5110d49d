"""Test the command-line interface."""

import json

import pytest
from click.testing import CliRunner

from windyplug.cli.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(temp_dir):
    path = temp_dir / 'windyplug.yaml'
    path.write_text('log_level: ERROR\n')
    return path


@pytest.fixture
def chunk_file(temp_dir):
    path = temp_dir / 'plugin.js'
    path.write_text("import { map } from '@windy/map';\nexport { map };\n", encoding='utf-8')
    return path


class TestCli:
    """Test CLI commands."""
    
    def test_transform_to_stdout(self, runner, config_file, chunk_file, plugin_dir):
        result = runner.invoke(cli, [
            '-q', '-c', str(config_file), 'transform', str(chunk_file),
            '--entry', str(plugin_dir / 'plugin.svelte'),
        ])
        
        assert result.exit_code == 0, result.output
        assert "const { map } = W.map;" in result.output
        assert "export { __pluginConfig, map };" in result.output
    
    def test_transform_writes_outputs(self, runner, config_file, chunk_file, plugin_dir, temp_dir):
        out_dir = temp_dir / 'dist'
        result = runner.invoke(cli, [
            '-c', str(config_file), 'transform', str(chunk_file),
            '--entry', str(plugin_dir / 'plugin.svelte'),
            '--out-dir', str(out_dir), '--sourcemap', '--format', 'json',
        ])
        
        assert result.exit_code == 0, result.output
        assert (out_dir / 'plugin.js').exists()
        assert (out_dir / 'plugin.js.map').exists()
        assert '"succeeded": true' in result.output
    
    def test_missing_side_config_exits_non_zero(self, runner, config_file, chunk_file, temp_dir):
        entry_dir = temp_dir / 'no-config'
        entry_dir.mkdir()
        out_dir = temp_dir / 'dist'
        
        result = runner.invoke(cli, [
            '-c', str(config_file), 'transform', str(chunk_file),
            '--entry', str(entry_dir / 'plugin.svelte'), '--out-dir', str(out_dir),
        ])
        
        assert result.exit_code == 1
        assert "Side config file not found" in result.output
        assert str(entry_dir / 'pluginConfig.ts') in result.output
        assert not (out_dir / 'plugin.js').exists()
    
    def test_show_config(self, runner, config_file, plugin_dir):
        result = runner.invoke(cli, ['-q', '-c', str(config_file), 'show-config', str(plugin_dir)])
        
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data['name'] == 'x'
        assert 'built' in data and 'builtReadable' in data
    
    def test_init_creates_config(self, runner, config_file, temp_dir):
        target = temp_dir / 'new' / '.windyplug.yaml'
        result = runner.invoke(cli, ['-c', str(config_file), 'init', '--output', str(target)])
        
        assert result.exit_code == 0, result.output
        assert target.exists()
        assert 'virtual_prefix' in target.read_text()
    
    def test_conflicting_output_flags_are_reported(self, runner, config_file, plugin_dir):
        result = runner.invoke(cli, ['-v', '-q', '-c', str(config_file), 'show-config', str(plugin_dir)])
        
        assert result.exit_code == 0, result.output
        assert "Warning: Verbose and quiet output are mutually exclusive" in result.output
    
    def test_binding_shadowing_runtime_global_is_reported(self, runner, temp_dir, plugin_dir):
        config_path = temp_dir / 'shadow.yaml'
        config_path.write_text('log_level: ERROR\nside_config:\n  binding_name: W\n')
        
        result = runner.invoke(cli, ['-c', str(config_path), 'show-config', str(plugin_dir)])
        
        assert result.exit_code == 0, result.output
        assert "Warning: Side config binding name must differ from the runtime global" in result.output
    
    def test_valid_config_has_no_warnings(self, runner, config_file, plugin_dir):
        result = runner.invoke(cli, ['-c', str(config_file), 'show-config', str(plugin_dir)])
        
        assert result.exit_code == 0, result.output
        assert "Warning:" not in result.output
