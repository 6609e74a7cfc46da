import shutil
from pathlib import Path

import pytest

from PdfCompare.ComparePdf import ComparePdf
from PdfCompare.ComparisonModels import Coordinates, PageCrop, PageMask

from conftest import blank_page, with_block


@pytest.fixture
def builder(make_config):
    return ComparePdf(make_config())


class TestDocumentResolution:

    def test_existing_path_is_used(self, builder, make_pdf):
        pdf = make_pdf("invoice.pdf")
        assert builder.actual_pdf_file(pdf).actual_pdf == pdf

    def test_name_is_resolved_in_root_folder(self, builder, staging_paths):
        assert Path(builder.actual_pdf_file("invoice.pdf").actual_pdf) == Path(staging_paths.actual_pdf_root_folder) / "invoice.pdf"
        assert Path(builder.baseline_pdf_file("invoice.pdf").baseline_pdf) == Path(staging_paths.baseline_pdf_root_folder) / "invoice.pdf"

    def test_missing_extension_is_added(self, builder, staging_paths):
        assert Path(builder.baseline_pdf_file("invoice").baseline_pdf) == Path(staging_paths.baseline_pdf_root_folder) / "invoice.pdf"

    def test_url_is_downloaded_to_root_folder(self, builder, staging_paths, make_pdf, monkeypatch):
        source = make_pdf("remote.pdf")

        def _copy(_, destination):
            shutil.copyfile(source, destination)
            return destination, None

        monkeypatch.setattr("PdfCompare.Downloader.urllib.request.urlretrieve", _copy)
        builder.actual_pdf_file("https://example.com/files/remote.pdf")
        assert Path(builder.actual_pdf) == Path(staging_paths.actual_pdf_root_folder) / "remote.pdf"
        assert Path(builder.actual_pdf).is_file()

    def test_buffers_are_written_to_root_folders(self, builder, staging_paths, make_pdf):
        data = Path(make_pdf("buffer.pdf")).read_bytes()
        builder.actual_pdf_buffer(data, "actual.pdf").baseline_pdf_buffer(data)
        assert Path(builder.actual_pdf) == Path(staging_paths.actual_pdf_root_folder) / "actual.pdf"
        assert Path(builder.actual_pdf).read_bytes() == data
        assert Path(builder.baseline_pdf).parent == Path(staging_paths.baseline_pdf_root_folder)
        assert Path(builder.baseline_pdf).suffix == ".pdf"


class TestBuildConfig:

    def test_edits_are_collected(self, builder):
        config = (
            builder
            .add_mask(0, {"x0": 1, "y0": 2, "x1": 3, "y1": 4}, "red")
            .add_masks([{"pageIndex": 1, "coordinates": {"x0": 0, "y0": 0, "x1": 5, "y1": 5}}])
            .crop_page(0, {"x": 0, "y": 0, "width": 10, "height": 10})
            .crop_pages([PageCrop(2, Coordinates(0, 0, 1, 1))])
            .only_page_indexes([0, 1])
            .skip_page_indexes([1])
            .build_config()
        )
        assert config.masks == (
            PageMask(0, Coordinates(1, 2, 3, 4), "red"),
            PageMask(1, Coordinates(0, 0, 5, 5), "black"),
        )
        assert config.crops == (PageCrop(0, Coordinates(0, 0, 10, 10)), PageCrop(2, Coordinates(0, 0, 1, 1)))
        assert config.only_page_indexes == frozenset({0, 1})
        assert config.skip_page_indexes == frozenset({1})

    def test_edits_from_initial_config_are_kept(self, make_config):
        builder = ComparePdf(make_config(masks=[PageMask(0, Coordinates(0, 0, 1, 1))], skip_page_indexes=[3]))
        config = builder.add_mask(1, {"x0": 0, "y0": 0, "x1": 2, "y1": 2}).build_config()
        assert [mask.page_index for mask in config.masks] == [0, 1]
        assert config.skip_page_indexes == frozenset({3})

    def test_settings_are_kept(self, make_config):
        config = ComparePdf(make_config(tolerance=12)).build_config()
        assert config.settings.tolerance == 12
        assert config.settings.density == 72

    def test_mask_without_coordinates(self, builder):
        config = builder.add_mask(0).build_config()
        assert config.masks[0].coordinates == Coordinates(0, 0, 0, 0)


class TestCompare:

    def test_documents_are_required(self, builder, make_pdf):
        with pytest.raises(ValueError):
            builder.compare()
        with pytest.raises(ValueError):
            builder.actual_pdf_file(make_pdf("a.pdf")).compare()

    def test_only_by_image_is_supported(self, builder, make_pdf):
        builder.actual_pdf_file(make_pdf("a.pdf")).baseline_pdf_file(make_pdf("b.pdf"))
        with pytest.raises(ValueError, match="byImage"):
            builder.compare("byText")

    def test_compare_native_documents(self, builder, make_pdf):
        result = (
            builder
            .actual_pdf_file(make_pdf("actual.pdf", blocks={0: [(50, 50, 70, 60)]}))
            .baseline_pdf_file(make_pdf("baseline.pdf"))
            .compare()
        )
        assert result.failed
        assert result.message == "actual.pdf is not the same as baseline.pdf compared by their images."

    def test_compare_with_mask(self, builder, make_pdf):
        result = (
            builder
            .actual_pdf_file(make_pdf("actual.pdf", blocks={0: [(50, 50, 70, 60)]}))
            .baseline_pdf_file(make_pdf("baseline.pdf"))
            .add_mask(0, {"x0": 40, "y0": 40, "x1": 80, "y1": 70})
            .compare("byImage")
        )
        assert result.passed

    def test_compare_documents_from_root_folders(self, make_config, staging_paths, fake_engine):
        fake_engine.add_document("invoice.pdf", [with_block(blank_page(), 0, 0, 2, 2)])
        result = (
            ComparePdf(make_config(image_engine="fake"))
            .actual_pdf_file("invoice")
            .baseline_pdf_file("invoice")
            .compare()
        )
        assert result.passed
        assert fake_engine.rendered == [
            str(Path(staging_paths.actual_pdf_root_folder) / "invoice.pdf"),
            str(Path(staging_paths.baseline_pdf_root_folder) / "invoice.pdf"),
        ]
