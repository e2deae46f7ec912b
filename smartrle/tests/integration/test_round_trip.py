"""
Integration tests for the compress/decompress round trip
"""

import pytest

import smartrle
from smartrle.context.header import DATA_DELIMITER, COMPRESSED_HEADER_MARKER, HEADER_MARKER
from smartrle.services import SmartRLECodec, SMOKE_SAMPLES, run_smoke


WORDS = (
    "balance", "cabinet", "dolphin", "eclipse", "fashion", "gateway", "horizon", "journey",
    "kingdom", "lantern", "machine", "network", "orchard", "pilgrim", "quarter", "rainbow",
    "serpent", "thunder", "uniform", "victory", "weather", "example", "yelling", "zealous",
    "amazing", "brother", "capital", "diamond", "emerald", "firefly", "glacier", "harmony",
    "imagine", "justice", "kitchen", "library", "mystery", "natural", "outline", "phantom",
)


def _payload(artifact: str) -> str:
    return artifact.partition(DATA_DELIMITER)[2]


class TestRoundTrip:
    """Test that decompress(compress(x)) == x"""

    @pytest.mark.parametrize("text", [
        "a",
        "\n",
        "\n\n\n\n\n",
        "line one\nline two\n",
        "line one\r\nline two\r\n",
        "mixed\r\nterminators\nhere\r",
        "no trailing\r\nnewline",
        "\r\n",
        "tabs\tand  spaces   \n\ttrailing  ",
        "unicode: héllo wörld ✓ 日本語\n" * 3,
        "control\x00chars\x1b[0m\x1fsentinel\x1f",
        "escapes \\ ; : | R: R|x|2| \\n",
        "__IP0__ __LIT0__ __ATS3__ look-alikes",
    ])
    def test_round_trip(self, codec, text):
        assert codec.decompress(codec.compress(text)) == text

    def test_access_logs(self, codec, access_logs):
        text = '\n'.join(access_logs) + '\n'
        artifact = codec.compress(text)

        assert codec.decompress(artifact) == text
        assert len(artifact) < len(text)

    def test_application_logs(self, codec, application_logs):
        text = '\r\n'.join(application_logs * 10) + '\r\n'
        assert codec.decompress(codec.compress(text)) == text

    def test_smoke_samples(self, codec):
        for _, text in SMOKE_SAMPLES:
            assert codec.decompress(codec.compress(text)) == text

    def test_module_level_functions(self, apache_line):
        assert smartrle.decompress(smartrle.compress(apache_line)) == apache_line


class TestEmptyInput:
    """Test that the empty string maps to itself"""

    def test_compress_empty(self, codec):
        assert codec.compress("") == ""

    def test_decompress_empty(self, codec):
        assert codec.decompress("") == ""


class TestArtifactFormat:
    """Test observable properties of the artifact"""

    def test_character_run(self, codec):
        artifact = codec.compress("aaaaaa")

        assert artifact.startswith(HEADER_MARKER + '\n')
        assert DATA_DELIMITER in artifact
        assert "R:a:6;" in _payload(artifact)

    def test_block_run(self, codec):
        artifact = codec.compress("GET /index.html\n" * 4)
        assert _payload(artifact) == "B4:GET /index.html;"
        assert "TRAILING:1" in artifact.partition(DATA_DELIMITER)[0]

    def test_nothing_to_encode(self, codec):
        artifact = codec.compress("xyz")
        header = artifact.partition(DATA_DELIMITER)[0]

        assert _payload(artifact) == "Sxyz;"
        for key in ("PAT:", "DICT:", "LINE:", "ATS_BASE:", "IP:"):
            assert key not in header

    def test_crlf_recorded(self, codec):
        artifact = codec.compress("a\r\nb\r\n")
        assert "EOL:CRLF" in artifact
        assert "\r" not in _payload(artifact)

    def test_apache_timestamp_restored_from_delta(self, codec, apache_line):
        artifact = codec.compress(apache_line)
        ctx = codec.read_header(artifact)

        assert ctx.apache.base_epoch == 1696935336
        assert ctx.apache.offset == "+0300"
        assert ctx.apache.deltas == [0]
        assert "10/Oct/2023" not in artifact
        assert codec.decompress(artifact) == apache_line

    def test_dictionary_codes_in_header(self, codec):
        text = "the quick brown fox jumps over the lazy dog."
        ctx = codec.read_header(codec.compress(text))
        assert ctx.dictionary_codes == {"D00": "the"}


class TestMalformedPayload:
    """Test that damaged run counts degrade instead of raising"""

    @pytest.mark.parametrize("payload", [
        "SR:a:99999999999999999999;;",
        "B99999999999999999999:x;",
        "R|x|99999999999999999999|",
    ])
    def test_huge_counts_kept_as_text(self, codec, payload):
        header = codec.compress("xyz").partition(DATA_DELIMITER)[0]
        restored = codec.decompress(header + DATA_DELIMITER + payload)

        assert "99999999999999999999" in restored


class TestPatternCap:
    """Test the per-document pattern limit"""

    @staticmethod
    def _rich_text():
        words = " ".join(WORDS)
        return "\n".join(f"{n} {words}" for n in range(6))

    def test_cap_reached_at_30(self, codec):
        text = self._rich_text()
        artifact = codec.compress(text)

        assert len(codec.read_header(artifact).patterns) == 30
        assert codec.decompress(artifact) == text

    def test_custom_cap(self):
        codec = SmartRLECodec(max_patterns=4)
        text = self._rich_text()
        artifact = codec.compress(text)

        assert len(codec.read_header(artifact).patterns) == 4
        assert SmartRLECodec().decompress(artifact) == text


class TestGuardrail:
    """Test the header growth guardrail end to end"""

    def test_paths_stop_mapping_after_budget(self, codec):
        lines = [
            f'10.0.0.{i % 200 + 1} - - [10/Oct/2023:13:55:{i % 60:02d} +0300] '
            f'"GET /resource/{i}/{"abcdefghij" * 5} HTTP/1.1" 200 {100 + i} "-" "agent"'
            for i in range(400)
        ]
        text = '\n'.join(lines)
        artifact = codec.compress(text)
        ctx = codec.read_header(artifact)

        assert 0 < len(ctx.table('PATH')) < 400
        assert artifact.startswith(COMPRESSED_HEADER_MARKER)
        assert codec.decompress(artifact) == text


class TestCharMap:
    """Test the opt-in character remap end to end"""

    def test_char_map_round_trip(self):
        codec = SmartRLECodec(char_map=True)
        text = "Größe: 10 €\nPreis: 20 €\nÄnderung: größer\n" * 3
        artifact = codec.compress(text)

        assert "CHARMAP:" in artifact.partition(DATA_DELIMITER)[0]
        assert "€" not in _payload(artifact)
        # Decoding honours the header regardless of configuration
        assert SmartRLECodec().decompress(artifact) == text


class TestCompressionStats:
    """Test compress_with_stats reporting"""

    def test_stats(self, codec, access_logs):
        text = '\n'.join(access_logs)
        artifact, stats = codec.compress_with_stats(text)

        assert stats.original_size == len(text.encode('utf-8'))
        assert stats.compressed_size == len(artifact.encode('utf-8'))
        assert stats.line_count == len(access_logs)
        assert stats.compression_ratio > 1.0
        assert stats.compression_time >= 0

    def test_verbose_output(self, codec, capsys):
        codec.compress_with_stats("hello\nhello\nhello\nhello\n", verbose=True)
        out = capsys.readouterr().out

        assert "Starting compression of 4 lines" in out
        assert "block-rle" in out
        assert "Compression complete" in out


class TestSmokeHarness:
    def test_all_samples_round_trip(self):
        results = run_smoke()
        assert [r.name for r in results] == [name for name, _ in SMOKE_SAMPLES]
        assert all(r.correct for r in results)
