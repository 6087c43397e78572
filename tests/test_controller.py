"""
Tests for the conversion pipeline.

Test Coverage:
- convert_images(): call sequence and geometry sent to the assembler
- Failure handling: no assembler calls, progress reset, error wrapping
- convert_files() / save_pdf(): file-level helpers
"""

import io
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from PIL import Image
from pypdf import PdfReader

from conftest import encode_image
from imagestack.config import ConverterConfig
from imagestack.controller import convert_files, convert_images, save_pdf
from imagestack.errors import (
    AssemblyError,
    DecodeError,
    EmptyInputError,
    InvalidFileTypeError,
)
from imagestack.layout import LayoutConfig
from imagestack.loading import ImageInput
from imagestack.output import DocumentAssembler, ImageFormatPolicy
from imagestack.progress import ProgressReporter


@pytest.fixture
def mock_assembler():
    """Assembler double recording every call."""
    assembler = MagicMock(spec=DocumentAssembler)
    assembler.finalize.return_value = b"%PDF-fake"
    return assembler


@pytest.fixture
def two_inputs():
    """100x200 then 200x100, both PNG."""
    return [
        ImageInput("tall.png", encode_image((100, 200), "PNG"), "image/png"),
        ImageInput("wide.png", encode_image((200, 100), "PNG"), "image/png"),
    ]


class TestConvertImagesSequence:
    """The assembler receives exactly one call per placement, in order."""

    def test_convert_when_two_images_then_assembler_receives_exact_geometry(self, two_inputs, mock_assembler):
        # Act
        result = convert_images(two_inputs, assembler=mock_assembler)

        # Assert
        begin = mock_assembler.begin_document.call_args
        assert begin.args[0] == 595.28
        assert begin.args[1] == pytest.approx(20 + 1110.56 + 10 + 277.64 + 20)

        placed = mock_assembler.place_image.call_args_list
        assert len(placed) == 2
        data, fmt, x, y, width, height = placed[0].args
        assert (data, fmt) == (two_inputs[0].data, "PNG")
        assert (x, y) == (20, 20)
        assert width == pytest.approx(555.28)
        assert height == pytest.approx(1110.56)
        assert placed[1].args[3] == pytest.approx(1140.56)

        method_names = [c[0] for c in mock_assembler.method_calls]
        assert method_names == ["begin_document", "place_image", "place_image", "finalize", "close"]

        assert result.pdf_bytes == b"%PDF-fake"
        assert result.filename == "combined-images.pdf"
        assert result.image_count == 2

    def test_convert_when_jpeg_policy_then_images_embedded_as_jpeg(self, two_inputs, mock_assembler):
        # Arrange
        config = ConverterConfig(image_format=ImageFormatPolicy.JPEG)

        # Act
        convert_images(two_inputs, config=config, assembler=mock_assembler)

        # Assert
        formats = [c.args[1] for c in mock_assembler.place_image.call_args_list]
        assert formats == ["JPEG", "JPEG"]

    def test_convert_when_custom_layout_then_used(self, two_inputs, mock_assembler):
        # Arrange
        layout_config = LayoutConfig(page_width=300, margin=0, spacing=0)

        # Act
        result = convert_images(two_inputs, layout_config=layout_config, assembler=mock_assembler)

        # Assert
        assert result.page_size == (300, pytest.approx(600 + 150))


class TestConvertImagesProgress:
    """Progress observed during a conversion."""

    def test_convert_when_four_images_then_progress_ends_at_100_then_resets(self, image_inputs, mock_assembler):
        # Arrange
        seen = []
        progress = ProgressReporter()
        progress.subscribe(seen.append)

        # Act
        convert_images(image_inputs, assembler=mock_assembler, progress=progress)

        # Assert
        assert seen[-1] == 0
        run = seen[seen.index(25) - 1 : -1]
        assert run == [0, 25, 50, 75, 100]
        assert progress.value == 0

    def test_convert_when_progress_sampled_during_placement_then_matches_steps(self, image_inputs, mock_assembler):
        """Progress is updated only after each successful place_image."""
        # Arrange
        progress = ProgressReporter()
        during = []
        mock_assembler.place_image.side_effect = lambda *args: during.append(progress.value)

        # Act
        convert_images(image_inputs, assembler=mock_assembler, progress=progress)

        # Assert
        assert during == [0, 25, 50, 75]


class TestConvertImagesFailures:
    """Every failure aborts the conversion without partial output."""

    def test_convert_when_empty_then_raises_and_assembler_unused(self, mock_assembler):
        with pytest.raises(EmptyInputError):
            convert_images([], assembler=mock_assembler)

        mock_assembler.begin_document.assert_not_called()
        mock_assembler.place_image.assert_not_called()
        mock_assembler.finalize.assert_not_called()

    def test_convert_when_non_image_in_batch_then_no_decode_task_started(self, two_inputs, mock_assembler):
        # Arrange
        batch = two_inputs + [ImageInput("notes.txt", b"hi", "text/plain")]

        # Act & Assert
        with patch("imagestack.loading.loader.measure_image") as measure:
            with pytest.raises(InvalidFileTypeError):
                convert_images(batch, assembler=mock_assembler)

        measure.assert_not_called()
        mock_assembler.begin_document.assert_not_called()

    def test_convert_when_decode_fails_then_no_assembler_calls_and_progress_reset(self, two_inputs, mock_assembler):
        # Arrange
        seen = []
        progress = ProgressReporter()
        progress.subscribe(seen.append)
        batch = [two_inputs[0], ImageInput("broken.png", b"nope", "image/png")]

        # Act
        with pytest.raises(DecodeError):
            convert_images(batch, assembler=mock_assembler, progress=progress)

        # Assert
        mock_assembler.begin_document.assert_not_called()
        mock_assembler.close.assert_called_once()
        assert progress.value == 0
        assert max(seen) == 0

    def test_convert_when_assembler_raises_then_wrapped_and_progress_reset(self, two_inputs, mock_assembler):
        # Arrange
        progress = ProgressReporter()
        mock_assembler.place_image.side_effect = [None, RuntimeError("disk full")]

        # Act
        with pytest.raises(AssemblyError, match="disk full") as excinfo:
            convert_images(two_inputs, assembler=mock_assembler, progress=progress)

        # Assert
        assert isinstance(excinfo.value.__cause__, RuntimeError)
        mock_assembler.finalize.assert_not_called()
        mock_assembler.close.assert_called_once()
        assert progress.value == 0

    def test_convert_when_assembly_error_raised_then_not_rewrapped(self, two_inputs, mock_assembler):
        # Arrange
        original = AssemblyError("canvas exploded")
        mock_assembler.finalize.side_effect = original

        # Act & Assert
        with pytest.raises(AssemblyError) as excinfo:
            convert_images(two_inputs, assembler=mock_assembler)
        assert excinfo.value is original


class TestConvertEndToEnd:
    """Real ReportLab output."""

    def test_convert_when_default_assembler_then_valid_pdf(self, image_inputs, rgba_input):
        # Act
        result = convert_images(image_inputs + [rgba_input])

        # Assert
        reader = PdfReader(io.BytesIO(result.pdf_bytes))
        assert len(reader.pages) == 1
        box = reader.pages[0].mediabox
        assert float(box.width) == pytest.approx(595.28, abs=0.01)
        assert float(box.height) == pytest.approx(result.layout.total_page_height, abs=0.01)
        assert len(reader.pages[0].images) == 5

    def test_convert_files_when_paths_then_reads_and_guesses_mime(self, tmp_path: Path):
        # Arrange
        first = tmp_path / "a.png"
        second = tmp_path / "b.jpg"
        Image.new("RGB", (10, 20), "red").save(first)
        Image.new("RGB", (20, 10), "blue").save(second)

        # Act
        result = convert_files([first, second], config=ConverterConfig(output_name="out.pdf"))

        # Assert
        assert result.filename == "out.pdf"
        assert [p.image_id for p in result.layout.placements] == ["a.png", "b.jpg"]

    def test_convert_files_when_text_file_then_invalid_file_type(self, tmp_path: Path, sample_image: Path):
        # Arrange
        notes = tmp_path / "notes.txt"
        notes.write_text("not an image")

        # Act & Assert
        with pytest.raises(InvalidFileTypeError):
            convert_files([sample_image, notes])

    def test_save_pdf_when_called_then_writes_named_file(self, tmp_path: Path, two_inputs, mock_assembler):
        # Arrange
        result = convert_images(two_inputs, assembler=mock_assembler)

        # Act
        path = save_pdf(result, tmp_path / "nested" / "out")

        # Assert
        assert path == tmp_path / "nested" / "out" / "combined-images.pdf"
        assert path.read_bytes() == b"%PDF-fake"
