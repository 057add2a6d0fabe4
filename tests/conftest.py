"""Test configuration and fixtures for the review toolkit.

Provides helpers that build small OpenDocument Text containers in a
temporary directory, so every test states exactly the XML it converts.
"""

import io
import logging
import zipfile
from pathlib import Path
from typing import Dict, Optional

import pytest

from review_toolkit.config import ConfigManager
from review_toolkit.core.models import ConversionContext
from review_toolkit.core.parser.odt_utils import NAMESPACES, OdtDocument

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

NS_DECL = " ".join(f'xmlns:{prefix}="{uri}"' for prefix, uri in NAMESPACES.items())

# Named styles shared by most tests (styles.xml).
DEFAULT_NAMED_STYLES = """
<style:style style:name="Standard" style:family="paragraph"/>
<style:style style:name="Text_20_body" style:display-name="Text body" style:family="paragraph"
             style:parent-style-name="Standard">
  <style:paragraph-properties fo:margin-top="0cm" fo:margin-bottom="0.212cm"/>
</style:style>
<style:style style:name="Heading" style:family="paragraph" style:parent-style-name="Standard">
  <style:text-properties fo:font-size="14pt"/>
</style:style>
<style:style style:name="Heading_20_1" style:display-name="Heading 1" style:family="paragraph"
             style:parent-style-name="Heading">
  <style:text-properties fo:font-weight="bold"/>
</style:style>
<style:style style:name="Strong_20_Emphasis" style:display-name="Strong Emphasis" style:family="text">
  <style:text-properties fo:font-weight="bold"/>
</style:style>
<text:list-style style:name="Numbering_20_1">
  <text:list-level-style-number text:level="1" style:num-format="1"/>
</text:list-style>
"""

# Automatic styles shared by most tests (content.xml).
DEFAULT_AUTOMATIC_STYLES = """
<style:style style:name="P1" style:family="paragraph" style:parent-style-name="Text_20_body"/>
<style:style style:name="P2" style:family="paragraph" style:parent-style-name="プログラムコード"/>
<style:style style:name="P3" style:family="paragraph" style:parent-style-name="Quotations"/>
<style:style style:name="P4" style:family="paragraph" style:parent-style-name="Signature"/>
<style:style style:name="P5" style:family="paragraph" style:parent-style-name="Text_20_body">
  <style:paragraph-properties fo:margin-left="1.27cm"/>
</style:style>
<style:style style:name="P6" style:family="paragraph" style:parent-style-name="Text_20_body">
  <style:paragraph-properties fo:margin-left="2.54cm"/>
</style:style>
<style:style style:name="T1" style:family="text">
  <style:text-properties fo:font-weight="bold"/>
</style:style>
<style:style style:name="T2" style:family="text">
  <style:text-properties fo:font-style="italic"/>
</style:style>
<style:style style:name="T3" style:family="text" style:parent-style-name="Strong_20_Emphasis"/>
<style:style style:name="T4" style:family="text">
  <style:text-properties fo:font-weight="700"/>
</style:style>
<text:list-style style:name="L1">
  <text:list-level-style-bullet text:level="1" text:bullet-char="•"/>
  <text:list-level-style-bullet text:level="2" text:bullet-char="◦"/>
</text:list-style>
<text:list-style style:name="L2">
  <text:list-level-style-number text:level="1" style:num-format="1"/>
</text:list-style>
"""


def content_xml(body: str, automatic_styles: str = DEFAULT_AUTOMATIC_STYLES) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<office:document-content {NS_DECL} office:version="1.2">'
        f"<office:automatic-styles>{automatic_styles}</office:automatic-styles>"
        f"<office:body><office:text>{body}</office:text></office:body>"
        "</office:document-content>"
    )


def styles_xml(named_styles: str = DEFAULT_NAMED_STYLES) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<office:document-styles {NS_DECL} office:version="1.2">'
        f"<office:styles>{named_styles}</office:styles>"
        "</office:document-styles>"
    )


def write_odt(path: Path, body: str, *, automatic_styles: str = DEFAULT_AUTOMATIC_STYLES,
              named_styles: str = DEFAULT_NAMED_STYLES,
              parts: Optional[Dict[str, bytes]] = None) -> Path:
    """Write a minimal ``.odt`` container to *path*."""
    with zipfile.ZipFile(path, "w") as odt_zip:
        odt_zip.writestr("mimetype", "application/vnd.oasis.opendocument.text",
                         compress_type=zipfile.ZIP_STORED)
        odt_zip.writestr("content.xml", content_xml(body, automatic_styles).encode("utf-8"))
        odt_zip.writestr("styles.xml", styles_xml(named_styles).encode("utf-8"))
        for name, data in (parts or {}).items():
            odt_zip.writestr(name, data)
    return path


@pytest.fixture
def png_bytes():
    """A tiny real PNG image."""
    Image = pytest.importorskip("PIL.Image")
    buf = io.BytesIO()
    Image.new("RGB", (4, 3), (200, 30, 30)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def make_doc():
    """Factory building an in-memory OdtDocument from a body fragment."""

    def _make(body: str, *, automatic_styles: str = DEFAULT_AUTOMATIC_STYLES,
              named_styles: str = DEFAULT_NAMED_STYLES,
              parts: Optional[Dict[str, bytes]] = None) -> OdtDocument:
        return OdtDocument.from_xml(
            content_xml(body, automatic_styles),
            styles_xml(named_styles),
            parts=parts,
            path="sample.odt",
        )

    return _make


@pytest.fixture
def make_odt(tmp_path):
    """Factory writing an ``.odt`` file into a temporary directory."""

    def _make(body: str, name: str = "sample.odt", **kwargs) -> Path:
        source_dir = tmp_path / "src"
        source_dir.mkdir(exist_ok=True)
        return write_odt(source_dir / name, body, **kwargs)

    return _make


@pytest.fixture
def context(tmp_path):
    """A fresh per-run conversion context writing into *tmp_path*."""
    return ConversionContext(filebase="sample", output_dir=tmp_path)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep ConfigManager away from the real home directory."""
    monkeypatch.setattr(
        "review_toolkit.config.manager._get_user_config_dir",
        lambda: tmp_path / "user_config",
    )
    ConfigManager.reset()
    yield
    ConfigManager.reset()
