"""
Pytest configuration and shared fixtures for SmartRLE tests
"""

import pytest
from pathlib import Path
from typing import List

from smartrle.config import CodecConfig
from smartrle.models import CompressionContext
from smartrle.services import SmartRLECodec

APACHE_LINE = (
    '127.0.0.1 - frank [10/Oct/2023:13:55:36 +0300] '
    '"GET /apache_pb.gif HTTP/1.0" 200 2326 '
    '"http://www.example.com/start.html" "Mozilla/4.08 [en] (Win98; I ;Nav)"'
)


@pytest.fixture
def codec() -> SmartRLECodec:
    """Codec with the default configuration"""
    return SmartRLECodec()


@pytest.fixture
def ctx() -> CompressionContext:
    return CompressionContext()


@pytest.fixture
def config() -> CodecConfig:
    return CodecConfig()


@pytest.fixture
def apache_line() -> str:
    return APACHE_LINE


@pytest.fixture
def access_logs() -> List[str]:
    """Combined-format access log lines with repeated clients and agents"""
    agents = [
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 Chrome/118.0 Safari/537.36",
        "curl/8.1.2",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:109.0) Gecko/20100101 Firefox/119.0",
    ]
    paths = ["/", "/index.html", "/static/app.js", "/api/v1/items?page=2", "/favicon.ico"]
    lines = []
    for i in range(60):
        lines.append(
            f'10.0.{i % 4}.{i % 7 + 1} - - [10/Oct/2023:13:{i // 60 + 55:02d}:{i % 60:02d} +0300] '
            f'"{"POST" if i % 9 == 0 else "GET"} {paths[i % len(paths)]} HTTP/1.1" '
            f'{404 if i % 11 == 0 else 200} {512 + i * 3} '
            f'"https://example.com/ref/{i % 3}" "{agents[i % len(agents)]}"'
        )
    return lines


@pytest.fixture
def application_logs() -> List[str]:
    """Application log lines with generic timestamps, IPs, UUIDs and IDs"""
    return [
        "2023-10-10 13:55:36,123 INFO Connection from 192.168.1.10 accepted",
        "2023-10-10 13:55:36,456 INFO Session 550e8400-e29b-41d4-a716-446655440000 opened",
        "2023-10-10 13:55:37,001 WARN Retrying request 1234567 for user 7654321",
        "2023-10-10 13:55:37,002 ERROR Connection from 192.168.1.10 reset by peer",
        "2023-10-10 13:55:38,950 INFO Session 550e8400-e29b-41d4-a716-446655440000 closed",
    ]


@pytest.fixture
def test_output_dir(tmp_path) -> Path:
    """Temporary output directory for artifacts"""
    output_dir = tmp_path / "compressed"
    output_dir.mkdir()
    return output_dir
