"""
PDF Document Module.

Owns the pages of one proposal export, the explicit page cursor and a
per-page display list of draw operations. Layout code only talks to this
object; the ReportLab canvas is touched once, in finalize().

Coordinates follow the reading direction: y grows downward from the top
edge of the page and is converted to PDF space on replay.
"""
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union
from xml.sax.saxutils import escape
import logging

from reportlab.lib.colors import HexColor
from reportlab.pdfgen import canvas as pdf_canvas
from reportlab.platypus import Paragraph

from .styles import (
    COLORS,
    PDFConfig,
    FONT_FAMILY,
    FONT_SIZE_BODY,
    line_height,
    paragraph_style,
)


logger = logging.getLogger("ProposalStudio.PDFDocument")

# Large enough that wrap() never clips while measuring
_MEASURE_HEIGHT = 1e6


@dataclass
class PageCursor:
    """Next draw position on the current page."""
    x: float
    y: float
    page_index: int = 0


@dataclass(frozen=True)
class Margins:
    top: float
    right: float
    bottom: float
    left: float


@dataclass(frozen=True)
class StyleRun:
    """Contiguous span of text sharing one set of style attributes."""
    text: str
    bold: bool = False
    italic: bool = False
    font_size: float = FONT_SIZE_BODY
    color: str = COLORS["body"]
    continued: bool = False


@dataclass(frozen=True)
class DrawOp:
    """A single recorded drawing primitive.

    kind is one of "text", "rect" or "image". Position and size are in
    page space (y downward). The flowable / image payloads are excluded
    from equality so identical drawings compare equal across pages.
    """
    kind: str
    x: float
    y: float
    width: float
    height: float
    text: str = ""
    font_name: str = ""
    font_size: float = 0.0
    color: str = ""
    align: str = "left"
    fill: str = ""
    stroke: str = ""
    runs: Tuple[StyleRun, ...] = ()
    tag: str = ""
    flowable: Any = field(default=None, compare=False, repr=False)
    image: Any = field(default=None, compare=False, repr=False)


@dataclass
class Page:
    number: int
    width: float
    height: float
    margins: Margins
    ops: List[DrawOp] = field(default_factory=list)

    @property
    def content_height(self) -> float:
        return self.height - self.margins.top - self.margins.bottom

    @property
    def content_width(self) -> float:
        return self.width - self.margins.left - self.margins.right

    def ops_of(self, kind: str, tag: Optional[str] = None) -> List[DrawOp]:
        return [op for op in self.ops if op.kind == kind and (tag is None or op.tag == tag)]

    def texts(self, tag: Optional[str] = None) -> List[str]:
        return [op.text for op in self.ops_of("text", tag)]


@dataclass(frozen=True)
class Mark:
    """Snapshot returned by Document.mark() for discard_since()."""
    page_index: int
    op_count: int
    x: float
    y: float


PageHook = Callable[["Document"], None]


def to_markup(text: str) -> str:
    """Escape plain text for a ReportLab Paragraph, keeping line breaks."""
    return escape(text).replace("\n", "<br/>")


def runs_to_markup(runs: Sequence[StyleRun], font_resolver: Callable[[bool, bool], str]) -> str:
    parts = []
    for run in runs:
        if not run.text:
            continue
        face = font_resolver(run.bold, run.italic)
        parts.append(
            f'<font name="{face}" size="{run.font_size}" color="{run.color}">'
            f"{to_markup(run.text)}</font>"
        )
    return "".join(parts)


class Document:
    """Paginated drawing surface with an explicit cursor.

    Usage:
        doc = Document(PDFConfig(title="Proposal"))
        doc.on_page_added(add_header)
        doc.draw_text("Hello", font_size=12)
        pdf_bytes = doc.finalize()
    """

    def __init__(self, config: Optional[PDFConfig] = None):
        self.config = config or PDFConfig()
        top, right, bottom, left = self.config.margins
        self.margins = Margins(top=top, right=right, bottom=bottom, left=left)
        self.width, self.height = self.config.page_size

        self.pages: List[Page] = []
        self.cursor = PageCursor(x=left, y=top)
        self.notices: List[str] = []
        self.finalized = False
        self.pdf_bytes: Optional[bytes] = None

        self.current_font_size = FONT_SIZE_BODY
        self._hooks: List[PageHook] = []
        self._pending_runs: List[StyleRun] = []
        self._fresh_y = top

        self._start_page()

    # ------------------------------------------------------------------
    # Pages and cursor
    # ------------------------------------------------------------------

    @property
    def page(self) -> Page:
        return self.pages[self.cursor.page_index]

    @property
    def content_width(self) -> float:
        return self.page.content_width

    @property
    def bottom_limit(self) -> float:
        return self.page.height - self.margins.bottom

    @property
    def remaining_height(self) -> float:
        """Vertical space left between the cursor and the bottom margin."""
        return self.page.content_height - (self.cursor.y - self.margins.top)

    @property
    def at_page_start(self) -> bool:
        """True when nothing has been placed below the page header yet."""
        return self.cursor.y <= self._fresh_y

    def on_page_added(self, hook: PageHook) -> None:
        """Register a callback run after every page break."""
        self._hooks.append(hook)

    def _start_page(self) -> Page:
        self._ensure_open()
        page = Page(
            number=len(self.pages) + 1,
            width=self.width,
            height=self.height,
            margins=self.margins,
        )
        self.pages.append(page)
        self.cursor = PageCursor(x=self.margins.left, y=self.margins.top, page_index=len(self.pages) - 1)
        return page

    def add_page(self) -> Page:
        """Start a new page, reset the cursor and run the page hooks."""
        page = self._start_page()
        for hook in self._hooks:
            hook(self)
        self._fresh_y = self.cursor.y
        logger.debug("Page %d started (cursor y=%.1f)", page.number, self.cursor.y)
        return page

    def run_page_hooks(self) -> None:
        """Run the page hooks on the current page (used for the first page)."""
        for hook in self._hooks:
            hook(self)
        self._fresh_y = self.cursor.y

    def move_down(self, lines: float = 1.0) -> None:
        """Advance the cursor by a number of lines at the current font size."""
        self.cursor.y += lines * line_height(self.current_font_size)

    def reset_x(self) -> None:
        self.cursor.x = self.margins.left

    def mark(self) -> Mark:
        return Mark(
            page_index=self.cursor.page_index,
            op_count=len(self.page.ops),
            x=self.cursor.x,
            y=self.cursor.y,
        )

    def discard_since(self, mark: Mark) -> None:
        """Drop everything drawn on the marked page after the mark.

        Only content on the marked page is removed; the cursor returns to
        the marked position when the cursor is still on that page.
        """
        page = self.pages[mark.page_index]
        del page.ops[mark.op_count:]
        if self.cursor.page_index == mark.page_index:
            self.cursor.x = mark.x
            self.cursor.y = mark.y

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def _ensure_open(self) -> None:
        if self.finalized:
            raise RuntimeError("Document already finalized")

    def draw_rect(self, x: float, y: float, width: float, height: float,
                  fill: str, stroke: str, tag: str = "") -> None:
        self._ensure_open()
        self.page.ops.append(DrawOp(
            kind="rect", x=x, y=y, width=width, height=height,
            fill=fill, stroke=stroke, tag=tag,
        ))

    def draw_image(self, image: Any, x: float, y: float, width: float, height: float,
                   tag: str = "image", name: str = "") -> None:
        self._ensure_open()
        self.page.ops.append(DrawOp(
            kind="image", x=x, y=y, width=width, height=height,
            text=name, tag=tag, image=image,
        ))

    def measure_text(self, text: str, width: float, font_name: str = FONT_FAMILY,
                     font_size: float = FONT_SIZE_BODY, line_gap: float = 0) -> float:
        """Height the text takes when wrapped at width."""
        para = Paragraph(to_markup(text), paragraph_style(font_name, font_size, line_gap=line_gap))
        _, height = para.wrap(width, _MEASURE_HEIGHT)
        return height

    def draw_text_at(self, text: str, x: float, y: float, width: float,
                     font_name: str = FONT_FAMILY, font_size: float = FONT_SIZE_BODY,
                     color: str = COLORS["body"], align: str = "left", tag: str = "") -> float:
        """Draw wrapped text at a fixed position without moving the cursor.

        Returns:
            Height of the drawn text block.
        """
        self._ensure_open()
        self.current_font_size = font_size
        style = paragraph_style(font_name, font_size, color, align)
        para = Paragraph(to_markup(text), style)
        _, height = para.wrap(width, _MEASURE_HEIGHT)
        self.page.ops.append(DrawOp(
            kind="text", x=x, y=y, width=width, height=height, text=text,
            font_name=font_name, font_size=font_size, color=color, align=align,
            tag=tag, flowable=para,
        ))
        return height

    def draw_text(self, text: str, font_name: str = FONT_FAMILY,
                  font_size: float = FONT_SIZE_BODY, color: str = COLORS["body"],
                  align: str = "left", line_gap: float = 0, indent: float = 0,
                  width: Optional[float] = None, tag: str = "") -> None:
        """Draw plain text at the cursor, wrapping and breaking pages as needed."""
        style = paragraph_style(font_name, font_size, color, align, line_gap, indent)
        self._flow(
            Paragraph(to_markup(text), style),
            plain=text, font_name=font_name, font_size=font_size, color=color,
            align=align, width=width, tag=tag,
        )

    def draw_runs(self, runs: Sequence[StyleRun], font_resolver: Callable[[bool, bool], str],
                  align: str = "left", line_gap: float = 0, indent: float = 0,
                  tag: str = "") -> None:
        """Draw one logical line made of styled runs at the cursor."""
        visible = tuple(run for run in runs if run.text)
        if not visible:
            return
        size = max(run.font_size for run in visible)
        base_face = font_resolver(visible[0].bold, visible[0].italic)
        style = paragraph_style(base_face, size, visible[0].color, align, line_gap, indent)
        self._flow(
            Paragraph(runs_to_markup(visible, font_resolver), style),
            plain="".join(run.text for run in visible), font_name=base_face,
            font_size=size, color=visible[0].color, align=align, runs=visible, tag=tag,
        )

    def emit_run(self, run: StyleRun, font_resolver: Callable[[bool, bool], str],
                 align: str = "left", line_gap: float = 0, indent: float = 0,
                 tag: str = "") -> None:
        """Queue a run; a non-continued run closes and draws the queued line."""
        self._pending_runs.append(run)
        if run.continued:
            return
        runs, self._pending_runs = self._pending_runs, []
        self.draw_runs(runs, font_resolver, align=align, line_gap=line_gap, indent=indent, tag=tag)

    def _flow(self, para: Paragraph, plain: str, font_name: str, font_size: float,
              color: str, align: str, width: Optional[float] = None,
              runs: Tuple[StyleRun, ...] = (), tag: str = "") -> None:
        self._ensure_open()
        self.current_font_size = font_size
        x = self.margins.left
        avail_width = width if width is not None else self.content_width

        pending = [para]
        first = True
        while pending:
            flow = pending.pop(0)
            _, height = flow.wrap(avail_width, _MEASURE_HEIGHT)
            available = self.bottom_limit - self.cursor.y

            next_page = False
            if height > available:
                parts = flow.split(avail_width, available) if available > 0 else []
                if len(parts) >= 2:
                    flow = parts[0]
                    _, height = flow.wrap(avail_width, available)
                    pending[0:0] = parts[1:]
                    next_page = True
                elif not self.at_page_start:
                    self.add_page()
                    pending.insert(0, flow)
                    continue
                # A single line taller than a fresh page is drawn as is

            text = plain if first and not pending and not next_page else flow.getPlainText()
            self.page.ops.append(DrawOp(
                kind="text", x=x, y=self.cursor.y, width=avail_width, height=height,
                text=text, font_name=font_name, font_size=font_size, color=color,
                align=align, runs=runs, tag=tag, flowable=flow,
            ))
            self.cursor.y += height
            first = False
            if next_page:
                self.add_page()

        self.cursor.x = x

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _replay(self, c, page: Page, op: DrawOp) -> None:
        bottom = page.height - op.y - op.height
        if op.kind == "text":
            op.flowable.drawOn(c, op.x, bottom)
        elif op.kind == "rect":
            c.saveState()
            c.setFillColor(HexColor(op.fill))
            c.setStrokeColor(HexColor(op.stroke))
            c.rect(op.x, bottom, op.width, op.height, fill=1, stroke=1)
            c.restoreState()
        elif op.kind == "image":
            try:
                c.drawImage(op.image, op.x, bottom, op.width, op.height,
                            preserveAspectRatio=True, anchor="ne", mask="auto")
            except Exception as e:
                logger.warning("Could not render image %s: %s", op.text or op.tag, e)
        else:
            raise ValueError(f"Unknown draw operation: {op.kind}")

    def finalize(self) -> bytes:
        """Render all pages to PDF bytes and close the document."""
        if self.finalized:
            return self.pdf_bytes

        buffer = BytesIO()
        c = pdf_canvas.Canvas(buffer, pagesize=(self.width, self.height))
        c.setTitle(self.config.title)
        c.setAuthor(self.config.author)

        for page in self.pages:
            c.setPageSize((page.width, page.height))
            for op in page.ops:
                self._replay(c, page, op)
            c.showPage()

        c.save()
        self.pdf_bytes = buffer.getvalue()
        buffer.close()
        self.finalized = True
        logger.info("PDF finalized: %d pages, %d bytes", len(self.pages), len(self.pdf_bytes))
        return self.pdf_bytes

    def save(self, output_path: Union[str, Path]) -> Path:
        """Write the finalized PDF to disk."""
        pdf_bytes = self.finalize()
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            f.write(pdf_bytes)
        return path
