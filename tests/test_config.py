"""
Tests for configuration and environment overrides.
"""

import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


class TestConfig:
    """Test PipelineConfig and get_config."""

    def test_defaults(self):
        """Test default thresholds."""
        from docreflow.config import PipelineConfig

        config = PipelineConfig()

        assert config.normalizer.max_length == 75000
        assert config.filter.min_content_chars == 20
        assert config.cleaner.edge_lines == 2
        assert config.processing_mode == "auto"
        assert config.large_input_threshold == 200_000

    def test_sub_configs_are_independent(self):
        """Test mutable defaults are not shared between instances."""
        from docreflow.config import PipelineConfig

        a, b = PipelineConfig(), PipelineConfig()
        a.detector.disabled_passes.append("math")

        assert b.detector.disabled_passes == []

    def test_environment_overrides(self, monkeypatch):
        """Test DOC_REFLOW_* variables."""
        from docreflow.config import get_config

        monkeypatch.setenv("DOC_REFLOW_MAX_LENGTH", "500")
        monkeypatch.setenv("DOC_REFLOW_LARGE_INPUT_THRESHOLD", "1000")
        monkeypatch.setenv("DOC_REFLOW_MODE", "Reduced")

        config = get_config()

        assert config.normalizer.max_length == 500
        assert config.large_input_threshold == 1000
        assert config.processing_mode == "reduced"

    def test_no_overrides(self, monkeypatch):
        """Test defaults when nothing is set."""
        from docreflow.config import get_config

        for name in ("DOC_REFLOW_MAX_LENGTH", "DOC_REFLOW_LARGE_INPUT_THRESHOLD",
                     "DOC_REFLOW_MODE", "DOC_REFLOW_DEBUG"):
            monkeypatch.delenv(name, raising=False)

        config = get_config()

        assert config.normalizer.max_length == 75000
        assert config.processing_mode == "auto"

    def test_debug_raises_package_log_level(self, monkeypatch):
        """Test DOC_REFLOW_DEBUG switches the package logger to DEBUG."""
        import logging
        from docreflow.config import get_config

        package_logger = logging.getLogger("docreflow")
        previous = package_logger.level
        monkeypatch.setenv("DOC_REFLOW_DEBUG", "true")

        try:
            config = get_config()
            assert package_logger.level == logging.DEBUG
            assert not hasattr(config, "debug_mode")
        finally:
            package_logger.setLevel(previous)

    @pytest.mark.parametrize("name,value", [
        ("DOC_REFLOW_MAX_LENGTH", "lots"),
        ("DOC_REFLOW_MAX_LENGTH", "0"),
        ("DOC_REFLOW_LARGE_INPUT_THRESHOLD", "-5"),
        ("DOC_REFLOW_MODE", "turbo"),
    ])
    def test_invalid_overrides(self, monkeypatch, name, value):
        """Test bad environment values fail loudly."""
        from docreflow.config import get_config

        monkeypatch.setenv(name, value)

        with pytest.raises(ValueError):
            get_config()

    def test_invalid_mode_rejected_by_assembler(self):
        """Test an unknown processing mode."""
        from docreflow.config import PipelineConfig
        from docreflow.utils.assembler import DocumentAssembler

        with pytest.raises(ValueError):
            DocumentAssembler(PipelineConfig(processing_mode="fast"))
