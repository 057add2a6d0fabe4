from pathlib import Path

from review_toolkit.core.models import (
    ConversionContext,
    ConversionSettings,
    FootnoteCollector,
    RegionState,
)
from review_toolkit.core.parser.style_analyzer import StyleRules


class TestFootnoteCollector:
    def test_push_formats_definition(self):
        collector = FootnoteCollector()
        collector.push("doc_ftn1", "A note.")
        assert len(collector) == 1
        assert collector.flush() == "//footnote[doc_ftn1][A note.]\n"

    def test_body_trimmed_and_escaped(self):
        collector = FootnoteCollector()
        collector.push("id", "\nbody ] \n")
        assert collector.flush() == "//footnote[id][body \\]]\n"

    def test_only_one_leading_newline_removed(self):
        collector = FootnoteCollector()
        collector.push("id", "\n\nbody")
        assert collector.flush() == "//footnote[id][\nbody]\n"

    def test_flush_clears_buffer(self):
        collector = FootnoteCollector()
        collector.push("a", "1")
        collector.push("b", "2")
        assert collector.flush() == "//footnote[a][1]\n//footnote[b][2]\n"
        assert len(collector) == 0
        assert collector.flush() == ""


class TestConversionSettings:
    def test_defaults(self):
        settings = ConversionSettings.from_config(None)
        assert settings.page_width_cm == 15.1
        assert settings.image_dir == "images"
        assert settings.image_suffixes == (".jpg", ".png")
        assert settings.vector_extensions == (".wmf", ".emf", ".svm")
        assert settings.output_extension == "re"
        assert settings.table_separator_width == 14

    def test_overrides(self):
        settings = ConversionSettings.from_config({
            "page_width": "20cm",
            "image_dir": "figures",
            "vector_extensions": [".WMF"],
            "output_extension": ".txt",
            "table_separator_width": 10,
        })
        assert settings.page_width_cm == 20.0
        assert settings.image_dir == "figures"
        assert settings.vector_extensions == (".wmf",)
        assert settings.output_extension == "txt"
        assert settings.table_separator_width == 10
        # untouched keys keep defaults
        assert settings.image_suffixes == (".jpg", ".png")

    def test_non_positive_page_width_ignored(self):
        assert ConversionSettings.from_config({"page_width": "0cm"}).page_width_cm == 15.1


class TestConversionContext:
    def test_fresh_context(self, tmp_path):
        context = ConversionContext(filebase="chapter1", output_dir=tmp_path)
        assert context.region is RegionState.NONE
        assert context.style_rules == StyleRules()
        assert context.stats == {}
        assert len(context.footnotes) == 0

    def test_paths(self, tmp_path):
        context = ConversionContext(filebase="chapter1", output_dir=tmp_path)
        assert context.output_path == tmp_path / "chapter1.re"
        assert context.image_dir == tmp_path / "images"

    def test_default_output_dir_is_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        context = ConversionContext(filebase="x")
        assert Path(context.output_dir) == tmp_path

    def test_footnote_id_namespaced_by_filebase(self, tmp_path):
        context = ConversionContext(filebase="chapter1", output_dir=tmp_path)
        assert context.footnote_id("ftn3") == "chapter1_ftn3"

    def test_count(self, tmp_path):
        context = ConversionContext(filebase="x", output_dir=tmp_path)
        context.count("images")
        context.count("images")
        assert context.stats == {"images": 2}

    def test_contexts_do_not_share_state(self, tmp_path):
        first = ConversionContext(filebase="a", output_dir=tmp_path)
        second = ConversionContext(filebase="b", output_dir=tmp_path)
        first.footnotes.push("a_1", "x")
        first.count("blocks")
        assert len(second.footnotes) == 0
        assert second.stats == {}
