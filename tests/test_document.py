"""Tests for proposal_studio/reporting/pdf/document.py - pages, cursor and draw operations."""

import pytest

from proposal_studio.reporting.pdf.document import Document, StyleRun
from proposal_studio.reporting.pdf.styles import PDFConfig, font_for, line_height


class TestCursor:
    def test_starts_at_top_left_margin(self, document):
        assert document.cursor.x == 50
        assert document.cursor.y == 50
        assert document.cursor.page_index == 0
        assert document.remaining_height == pytest.approx(document.page.content_height)

    def test_move_down_uses_current_font_size(self, document):
        document.draw_text("x", font_size=20)
        y = document.cursor.y
        document.move_down(2)
        assert document.cursor.y == pytest.approx(y + 2 * line_height(20))

    def test_custom_margins(self):
        doc = Document(PDFConfig(margins=(100, 40, 60, 30)))
        assert doc.cursor.x == 30
        assert doc.cursor.y == 100
        assert doc.content_width == pytest.approx(doc.width - 70)
        assert doc.bottom_limit == pytest.approx(doc.height - 60)


class TestPages:
    def test_add_page_resets_cursor_and_runs_hooks(self, document):
        seen = []
        document.on_page_added(lambda d: seen.append(d.page.number))
        document.cursor.y = 500
        document.add_page()
        assert seen == [2]
        assert document.cursor.y == document.margins.top
        assert document.cursor.page_index == 1

    def test_hook_can_move_cursor(self, document):
        def header(d):
            d.cursor.y = 110

        document.on_page_added(header)
        document.add_page()
        assert document.cursor.y == 110
        assert document.at_page_start

    def test_long_text_splits_across_pages(self, document):
        text = "\n".join(f"Line {i}" for i in range(200))
        document.draw_text(text)
        assert len(document.pages) > 1
        drawn = "".join(op.text for page in document.pages for op in page.ops_of("text"))
        assert drawn.startswith("Line")
        assert "199" in document.pages[-1].ops_of("text")[-1].text
        for page in document.pages:
            for op in page.ops_of("text"):
                assert op.y + op.height <= document.bottom_limit + 0.01

    def test_text_that_does_not_fit_moves_to_next_page(self, document):
        document.cursor.y = document.bottom_limit - 5
        document.draw_text("short")
        assert len(document.pages) == 2
        assert document.pages[0].ops == []
        assert document.pages[1].texts() == ["short"]


class TestMarkAndDiscard:
    def test_discard_removes_ops_and_restores_cursor(self, document):
        document.draw_text("keep")
        mark = document.mark()
        document.draw_text("drop")
        document.discard_since(mark)
        assert document.page.texts() == ["keep"]
        assert document.cursor.y == mark.y


class TestRuns:
    def test_continued_runs_form_one_line(self, document):
        document.emit_run(StyleRun("a ", continued=True), font_for)
        document.emit_run(StyleRun("b", bold=True, continued=True), font_for)
        assert document.page.ops == []
        document.emit_run(StyleRun(""), font_for)
        ops = document.page.ops_of("text")
        assert len(ops) == 1
        assert ops[0].text == "a b"
        assert [r.text for r in ops[0].runs] == ["a ", "b"]

    def test_empty_line_draws_nothing(self, document):
        document.draw_runs([StyleRun("")], font_for)
        assert document.page.ops == []


class TestFinalize:
    def test_pdf_bytes(self, document):
        document.draw_text("Hello")
        document.draw_rect(50, 200, 100, 30, fill="#f8f9fa", stroke="#dee2e6")
        pdf = document.finalize()
        assert pdf.startswith(b"%PDF")
        assert document.finalized
        assert document.finalize() is pdf

    def test_drawing_after_finalize_raises(self, document):
        document.finalize()
        with pytest.raises(RuntimeError):
            document.draw_text("late")
        with pytest.raises(RuntimeError):
            document.add_page()

    def test_save(self, document, tmp_path):
        document.draw_text("Saved")
        path = document.save(tmp_path / "out" / "doc.pdf")
        assert path.exists()
        assert path.read_bytes().startswith(b"%PDF")

    def test_blank_pages_kept(self, document):
        document.add_page()
        document.add_page()
        document.finalize()
        assert len(document.pages) == 3
