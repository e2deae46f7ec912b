"""
Unit tests for configuration, errors and the legacy decoder
"""

import pytest

from smartrle.config import CodecConfig, DEFAULT_CONFIG
from smartrle.errors import SmartRLEError, ConfigError, InputTypeError
from smartrle.models import CompressionStats
from smartrle.services import SmartRLECodec, legacy_decompress


class TestCodecConfig:
    """Test configuration defaults and validation"""

    def test_defaults(self):
        assert DEFAULT_CONFIG.max_patterns == 30
        assert DEFAULT_CONFIG.min_pattern_frequency == 5
        assert DEFAULT_CONFIG.block_run_threshold == 4
        assert DEFAULT_CONFIG.char_run_threshold == 6
        assert DEFAULT_CONFIG.header_compress_threshold == 1024
        assert DEFAULT_CONFIG.header_growth_budget == 8192
        assert (DEFAULT_CONFIG.path_cap, DEFAULT_CONFIG.referer_cap, DEFAULT_CONFIG.agent_cap) == (5000, 1000, 1000)
        assert DEFAULT_CONFIG.char_map is False

    def test_from_dict(self):
        config = CodecConfig.from_dict({'max_patterns': 10, 'char_map': True})
        assert config.max_patterns == 10
        assert config.char_map is True
        assert config.to_dict()['max_patterns'] == 10

    def test_unknown_keys_rejected(self):
        with pytest.raises(ConfigError, match="max_pattern_count"):
            CodecConfig.from_dict({'max_pattern_count': 10})

    @pytest.mark.parametrize("settings", [
        {'max_patterns': -1},
        {'min_pattern_length': 0},
        {'min_pattern_length': 8, 'max_pattern_length': 6},
        {'char_run_threshold': 1},
        {'gzip_level': 11},
        {'pattern_length_divisor': 0},
    ])
    def test_invalid_values_rejected(self, settings):
        with pytest.raises(ConfigError):
            CodecConfig(**settings)

    def test_config_is_immutable(self):
        with pytest.raises(AttributeError):
            DEFAULT_CONFIG.max_patterns = 5

    def test_config_error_is_value_error(self):
        assert issubclass(ConfigError, ValueError)
        assert issubclass(ConfigError, SmartRLEError)

    def test_codec_overrides(self):
        codec = SmartRLECodec(CodecConfig(max_patterns=7), char_map=True)
        assert codec.config.max_patterns == 7
        assert codec.config.char_map is True


class TestInputTypes:
    """Test argument type checks"""

    @pytest.mark.parametrize("value", [b"bytes", None, 42])
    def test_compress_rejects_non_str(self, codec, value):
        with pytest.raises(InputTypeError):
            codec.compress(value)

    def test_decompress_rejects_non_str(self, codec):
        with pytest.raises(TypeError):
            codec.decompress(b"artifact")


class TestCompressionStats:
    """Test statistics reporting"""

    def test_ratio_percent(self):
        stats = CompressionStats(original_size=200, compressed_size=50, compression_ratio=4.0,
                                 compression_time=0.01, line_count=3, pattern_count=1)
        assert stats.ratio_percent == 25.0
        assert "ratio=4.00x" in repr(stats)

    def test_empty_input_percent(self):
        stats = CompressionStats(0, 0, 0.0, 0.0, 0, 0)
        assert stats.ratio_percent == 0.0


class TestLegacyDecoder:
    """Test the best-effort decoder for header-less artifacts"""

    def test_runs_use_code_point_count(self):
        assert legacy_decompress("Ra" + chr(6)) == "aaaaaa"

    def test_dictionary_codes_expanded(self):
        assert legacy_decompress("D00 cat D05 D15") == "the cat for all"

    def test_empty(self):
        assert legacy_decompress("") == ""

    def test_codec_routes_headerless_input(self, codec):
        assert codec.decompress("xR-" + chr(3) + " D01") == "x---" + " and"
