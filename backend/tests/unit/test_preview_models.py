#!/usr/bin/env python3
"""
Unit tests for run option models and settings validation.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from previewer.config import Settings
from previewer.enums import LogLevel
from previewer.models import PreviewOptions, VariantSpec


@pytest.mark.unit
class TestVariantSpec:
    def test_from_alias(self):
        spec = VariantSpec.model_validate({"from": "md", "height": 10})

        assert spec.from_ == "md"

    def test_type_aliases_normalized(self):
        assert VariantSpec(type="JPG").type == "jpeg"
        assert VariantSpec(type=".png").type == "png"

    def test_has_geometry(self):
        assert VariantSpec(height=10).has_geometry
        assert VariantSpec(width=10).has_geometry
        assert not VariantSpec(type="png", max_width=10).has_geometry

    @pytest.mark.parametrize("quality", [0, 101])
    def test_jpeg_quality_range(self, quality):
        with pytest.raises(ValidationError):
            VariantSpec(jpeg_quality=quality)

    def test_dimensions_must_be_positive(self):
        with pytest.raises(ValidationError):
            VariantSpec(height=0)

    def test_unknown_fields_ignored(self):
        assert VariantSpec.model_validate({"height": 10, "colour": "red"}).height == 10


@pytest.mark.unit
class TestPreviewOptions:
    def test_keys_copied_into_specs(self):
        options = PreviewOptions(
            resize={"sm": {"height": 10}, "orig": {}}, date=1262304000
        )

        assert list(options.resize) == ["sm", "orig"]
        assert options.resize["sm"].key == "sm"
        assert options.resize["orig"].key == "orig"

    def test_spec_instances_rekeyed(self):
        options = PreviewOptions(resize={"sm": VariantSpec(height=10)}, date=0)

        assert options.resize["sm"].key == "sm"

    def test_date_accepts_datetime(self):
        options = PreviewOptions(
            date=datetime(2010, 1, 1, tzinfo=timezone.utc), ext="JPG"
        )

        assert options.date == 1262304000
        assert options.ext == "jpeg"

    def test_date_required(self):
        with pytest.raises(ValidationError):
            PreviewOptions(resize={})

    @pytest.mark.parametrize("key", ["thumb 2x", "a/b", "..", "", "sm\n"])
    def test_unsafe_variant_keys_rejected(self, key):
        with pytest.raises(ValidationError, match="Invalid variant key"):
            PreviewOptions(resize={key: {"height": 10}}, date=0)

    def test_safe_variant_keys_accepted(self):
        options = PreviewOptions(
            resize={"sm": {}, "x2.thumb": {}, "_raw-1": {}}, date=0
        )

        assert list(options.resize) == ["sm", "x2.thumb", "_raw-1"]

    @pytest.mark.parametrize("date", [2**32, -1, "yesterday"])
    def test_date_out_of_range(self, date):
        with pytest.raises(ValidationError):
            PreviewOptions(date=date)


@pytest.mark.unit
class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.default_format == "jpeg"
        assert settings.filter_threads == 1
        assert settings.strict_variant_references is False

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("PREVIEWER_FILTER_THREADS", "3")
        monkeypatch.setenv("PREVIEWER_DEFAULT_FORMAT", "PNG")
        monkeypatch.setenv("PREVIEWER_LOG_LEVEL", "debug")

        settings = Settings(_env_file=None)

        assert settings.filter_threads == 3
        assert settings.default_format == "png"
        assert settings.log_level == LogLevel.DEBUG

    def test_invalid_environment(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, environment="moon")

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="loud")

    def test_store_path(self, tmp_path):
        settings = Settings(_env_file=None, store_directory=str(tmp_path))

        assert settings.store_path == tmp_path
