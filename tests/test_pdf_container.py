import pytest

from text2quiz.ingest.container import PdfContainer
from text2quiz.ingest.errors import CorruptInput, RenderError
from text2quiz.ingest.extractors import TextLayerExtractor
from text2quiz.ingest.models import ExtractionMethod
from text2quiz.ingest.rendering import PageRenderer


@pytest.mark.parametrize("data", [b"", b"%PDF-1.7 truncated garbage"])
def test_open_rejects_unparseable_data(data: bytes) -> None:
    with pytest.raises(CorruptInput) as excinfo:
        PdfContainer.open(data)

    assert excinfo.value.status_code == 422


def test_close_is_idempotent(make_pdf) -> None:
    container = PdfContainer.open(make_pdf(["Hello world"]))
    container.render_document()

    container.close()
    container.close()

    assert container.closed
    with pytest.raises(RuntimeError):
        container.reader


def test_context_manager_closes(make_pdf) -> None:
    with PdfContainer.open(make_pdf(["one", "two"])) as container:
        assert container.page_count == 2

    assert container.closed


def test_text_layer_extractor_reads_embedded_text(make_pdf) -> None:
    extractor = TextLayerExtractor()
    with PdfContainer.open(make_pdf(["Mitochondria produce ATP.", ""])) as container:
        first = extractor.extract_page(container, 1)
        blank = extractor.extract_page(container, 2)

    assert "Mitochondria produce ATP." in first.text
    assert first.method is ExtractionMethod.TEXT_LAYER
    assert first.page_number == 1
    assert blank.text.strip() == ""
    assert not blank.failed


def test_renderer_scales_pages(make_pdf) -> None:
    renderer = PageRenderer()
    with PdfContainer.open(make_pdf(["Scaled", "Native"], sizes=[(200, 100), (200, 100)])) as container:
        doubled = renderer.render(container, 1)
        native = renderer.render(container, 2, scale=1.0)

    assert doubled.data.startswith(b"\x89PNG")
    assert doubled.mime_type == "image/png"
    assert (doubled.width, doubled.height) == (400, 200)
    assert (native.width, native.height) == (200, 100)


def test_renderer_wraps_failures(make_pdf) -> None:
    renderer = PageRenderer()
    container = PdfContainer.open(make_pdf(["only page"]))
    try:
        with pytest.raises(RenderError) as excinfo:
            renderer.render(container, 5)
        assert excinfo.value.page_number == 5
    finally:
        container.close()

    with pytest.raises(RenderError):
        renderer.render(container, 1)
