"""
Pytest configuration and fixtures.
"""

import pytest
from pathlib import Path


XML_ENCODING_NAMES = {
    "utf-8": "UTF-8",
    "utf-16-le": "UTF-16",
    "utf-16-be": "UTF-16",
    "utf-32-be": "UTF-32",
    "utf-7": "UTF-7",
}


def build_head(xml_encoding: str = "UTF-8") -> str:
    return (
        f'<?xml version="1.0" encoding="{xml_encoding}"?>\n'
        '<!DOCTYPE tmx SYSTEM "tmx14.dtd">\n'
        '<tmx version="1.4">\n'
        '  <header creationtool="pytest" creationtoolversion="1.0" '
        'segtype="sentence" o-tmf="none" adminlang="en-US" srclang="en-US" '
        'datatype="plaintext">\n'
        '    <prop type="x-note">Test memory</prop>\n'
        "  </header>\n"
        "  <body>\n"
    )


TAIL = "  </body>\n</tmx>\n"

FILLER_LINE = '      <prop type="x-filler">' + "x" * 60 + "</prop>\n"


def build_record(index: int, approx_size: int = 300) -> str:
    """Build one multi-line <tu> record of roughly approx_size characters."""
    lines = [
        f'    <tu tuid="{index}">\n',
        '      <tuv xml:lang="en-US">\n',
        f"        <seg>Source segment number {index}</seg>\n",
        "      </tuv>\n",
        '      <tuv xml:lang="de-DE">\n',
        f"        <seg>Zielsegment Nummer {index} äöü</seg>\n",
        "      </tuv>\n",
    ]
    size = sum(len(line) for line in lines) + len("    </tu>\n")
    while size < approx_size:
        lines.insert(1, FILLER_LINE)
        size += len(FILLER_LINE)
    lines.append("    </tu>\n")
    return "".join(lines)


@pytest.fixture(autouse=True)
def utf8_platform_default(monkeypatch):
    """Make BOM-less documents decode as UTF-8 regardless of the host locale."""
    monkeypatch.setattr(
        "tmx_splitter.processing.encoding_detector.default_encoding", lambda: "utf-8"
    )


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove TMX_SPLIT_* overrides that could leak in from the shell."""
    for name in ("TMX_SPLIT_THRESHOLD", "TMX_SPLIT_OUTPUT_DIR", "TMX_SPLIT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("tmx_splitter.utils.config_loader.load_dotenv", lambda: False)


@pytest.fixture(scope="function")
def make_record():
    """Factory for single <tu> records."""
    return build_record


@pytest.fixture(scope="function")
def make_records():
    """Factory for a list of records: make_records(count, approx_size)."""

    def _make(count: int, approx_size: int = 300):
        return [build_record(i + 1, approx_size) for i in range(count)]

    return _make


@pytest.fixture(scope="function")
def tmx_head():
    """Default head used by tmx_factory for UTF-8 documents."""
    return build_head()


@pytest.fixture(scope="function")
def tmx_tail():
    """Default tail used by tmx_factory."""
    return TAIL


@pytest.fixture(scope="function")
def tmx_factory(tmp_path):
    """
    Write a TMX document and return its path.

    Usage:
        path = tmx_factory(records, encoding="utf-16-le", bom=True)
    """

    def _create(
        records,
        name: str = "memory.tmx",
        encoding: str = "utf-8",
        bom: bool = False,
        head: str = None,
        tail: str = TAIL,
        newline: str = "\n",
        directory: Path = None,
    ) -> Path:
        if head is None:
            head = build_head(XML_ENCODING_NAMES.get(encoding, "UTF-8"))
        text = head + "".join(records) + tail
        if newline != "\n":
            text = text.replace("\n", newline)

        # The codec writes U+FEFF as its own byte-order mark
        data = ("\ufeff" + text if bom else text).encode(encoding)

        target_dir = directory or tmp_path
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / name
        path.write_bytes(data)
        return path

    return _create


@pytest.fixture(scope="function")
def out_dir(tmp_path):
    """Output directory for split files (not created in advance)."""
    return tmp_path / "out"


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: end-to-end tests through the CLI")
