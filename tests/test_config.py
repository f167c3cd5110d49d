"""Test configuration management."""

import pytest
from pathlib import Path
from pydantic import ValidationError

from windyplug.core.config import Config, RewriteConfig, SideConfigSettings, OutputConfig
from windyplug.core.models import OutputFormat


class TestConfig:
    """Test configuration management."""
    
    def test_default_config_creation(self, monkeypatch):
        """Test creating default configuration."""
        monkeypatch.delenv('WINDYPLUG_LOG_LEVEL', raising=False)
        config = Config.get_default_config()
        
        assert isinstance(config.rewrite, RewriteConfig)
        assert isinstance(config.side_config, SideConfigSettings)
        assert isinstance(config.output, OutputConfig)
        assert config.rewrite.virtual_prefix == "@windy/"
        assert config.rewrite.runtime_global == "W"
        assert config.side_config.binding_name == "__pluginConfig"
        assert config.side_config.extensions == [".ts", ".js", ".mjs"]
        assert config.output.sourcemap is False
        assert config.log_level == "INFO"
    
    def test_log_level_from_environment(self, monkeypatch):
        monkeypatch.setenv('WINDYPLUG_LOG_LEVEL', 'debug')
        assert Config().log_level == "DEBUG"
    
    def test_config_from_dict(self):
        """Test creating config from dictionary."""
        config = Config.load_from_dict({
            'rewrite': {'virtual_prefix': '@plugins/', 'runtime_global': 'window.W'},
            'output': {'sourcemap': True, 'format': 'json'},
        })
        
        assert config.rewrite.virtual_prefix == '@plugins/'
        assert config.rewrite.runtime_global == 'window.W'
        assert config.output.sourcemap is True
        assert config.output.format == OutputFormat.JSON
    
    @pytest.mark.parametrize("section,values", [
        ('rewrite', {'virtual_prefix': ''}),
        ('rewrite', {'virtual_prefix': '@windy'}),
        ('rewrite', {'runtime_global': 'W[0]'}),
        ('side_config', {'binding_name': 'plugin-config'}),
        ('side_config', {'extensions': []}),
    ])
    def test_invalid_values(self, section, values):
        with pytest.raises(ValidationError):
            Config.load_from_dict({section: values})
    
    def test_config_save_and_load(self, temp_dir):
        """Test saving and loading configuration."""
        config = Config.get_default_config()
        config.rewrite.runtime_global = 'H'
        config.output.sourcemap = True
        
        config_file = temp_dir / 'windyplug.yaml'
        config.save_to_file(config_file)
        
        assert config_file.exists()
        
        loaded_config = Config.load_from_file(config_file)
        assert loaded_config.rewrite.runtime_global == 'H'
        assert loaded_config.output.sourcemap is True
    
    def test_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            Config.load_from_file(temp_dir / 'missing.yaml')
    
    def test_pyproject_config(self, temp_dir):
        """Test loading the [tool.windyplug] section."""
        pyproject = temp_dir / 'pyproject.toml'
        pyproject.write_text(
            '[project]\nname = "demo"\n\n'
            '[tool.windyplug.rewrite]\nvirtual_prefix = "@demo/"\n'
        )
        
        assert Config.find_config_file(temp_dir) == pyproject
        assert Config.load_from_file(pyproject).rewrite.virtual_prefix == '@demo/'
    
    def test_pyproject_without_section(self, temp_dir):
        pyproject = temp_dir / 'pyproject.toml'
        pyproject.write_text('[project]\nname = "demo"\n')
        
        assert not Config._has_windyplug_config(pyproject)
        with pytest.raises(ValueError):
            Config.load_from_pyproject(pyproject)
    
    def test_find_config_file_in_parent(self, temp_dir):
        config_file = temp_dir / '.windyplug.yaml'
        config_file.write_text('output:\n  sourcemap: true\n')
        nested = temp_dir / 'src' / 'plugin'
        nested.mkdir(parents=True)
        
        assert Config.find_config_file(nested) == config_file
    
    def test_config_validation(self):
        """Test configuration validation."""
        config = Config.get_default_config()
        assert config.validate_config() == []
        
        config.side_config.binding_name = 'W'
        config.output.verbose = True
        config.output.quiet = True
        config.log_file = Path('/nonexistent-dir/windyplug.log')
        issues = config.validate_config()
        
        assert any('runtime global' in issue for issue in issues)
        assert any('mutually exclusive' in issue for issue in issues)
        assert any('Log directory' in issue for issue in issues)
    
    def test_merge_with_cli_args(self):
        """Test merging config with CLI arguments."""
        config = Config.get_default_config()
        
        merged = config.merge_with_cli_args(
            verbose=True,
            format='json',
            sourcemap=True,
            hires=None
        )
        
        assert merged.output.verbose is True
        assert merged.output.format.value == 'json'
        assert merged.output.sourcemap is True
        assert merged.output.hires is True
        assert config.output.sourcemap is False
