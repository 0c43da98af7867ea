"""Tests for knitshape/schemas/inputs.py: from_mapping and tuning records."""

import pytest

from knitshape.schemas.inputs import (
    SCOOP_NECKLINE_RATIOS,
    ArmholeRatios,
    InputFieldError,
    NecklineInput,
    NecklineRatios,
    RaglanEase,
    RaglanInput,
    ShawlInput,
)
from knitshape.schemas.schedule import NecklineKind, ShawlMethod, WorkStyle
from knitshape.utilities.types import Gauge, InvalidGauge, MeasurementUnit

_GAUGE = {"stitches_per_ref_length": 20, "rows_per_ref_length": 28}


def _neckline_data(**overrides):
    data = {
        "component_key": "front",
        "gauge": _GAUGE,
        "kind": "rounded",
        "depth_cm": 8,
        "width_cm": 20,
        "panel_width_stitches": 100,
        "shoulder_width_cm": 10,
    }
    data.update(overrides)
    return data


class TestFromMapping:
    def test_builds_record(self):
        inp = NecklineInput.from_mapping(_neckline_data())
        assert inp.kind == NecklineKind.ROUNDED
        assert inp.gauge == Gauge.per_10cm(20, 28)
        assert inp.ratios is None

    def test_unknown_field_rejected(self):
        with pytest.raises(InputFieldError, match="unknown"):
            NecklineInput.from_mapping(_neckline_data(colour="red"))

    def test_missing_field_rejected(self):
        data = _neckline_data()
        del data["depth_cm"]
        with pytest.raises(InputFieldError, match="depth_cm"):
            NecklineInput.from_mapping(data)

    def test_bad_enum_lists_allowed_values(self):
        with pytest.raises(InputFieldError, match="'v_neck'"):
            NecklineInput.from_mapping(_neckline_data(kind="boat"))

    def test_nested_ratios(self):
        inp = NecklineInput.from_mapping(
            _neckline_data(ratios={"center_ratio": 0.4, "rapid_ratio": 0.4})
        )
        assert inp.ratios == SCOOP_NECKLINE_RATIOS

    def test_inch_gauge_unit(self):
        inp = NecklineInput.from_mapping(
            _neckline_data(
                gauge={
                    "stitches_per_ref_length": 18,
                    "rows_per_ref_length": 24,
                    "reference_length": 4,
                    "unit": "inch",
                }
            )
        )
        assert inp.gauge.unit == MeasurementUnit.INCH

    def test_non_positive_gauge_raises_invalid_gauge(self):
        with pytest.raises(InvalidGauge):
            NecklineInput.from_mapping(
                _neckline_data(gauge={"stitches_per_ref_length": 0, "rows_per_ref_length": 28})
            )

    def test_non_numeric_gauge_raises_invalid_gauge(self):
        with pytest.raises(InvalidGauge, match="stitches_per_ref_length"):
            NecklineInput.from_mapping(
                _neckline_data(gauge={"stitches_per_ref_length": "20", "rows_per_ref_length": 28})
            )

    def test_unknown_gauge_field(self):
        with pytest.raises(InputFieldError, match="gauge"):
            NecklineInput.from_mapping(
                _neckline_data(gauge={**_GAUGE, "needle_mm": 4})
            )

    def test_defaults_apply(self):
        inp = ShawlInput.from_mapping(
            {
                "component_key": "shawl",
                "gauge": _GAUGE,
                "method": "bottom_up",
                "target_wingspan_cm": 150,
                "target_depth_cm": 70,
            }
        )
        assert inp.method == ShawlMethod.BOTTOM_UP
        assert inp.work_style == WorkStyle.FLAT
        assert inp.border_stitches_each_side == 0

    def test_raglan_ease_mapping(self):
        inp = RaglanInput.from_mapping(
            {
                "component_key": "yoke",
                "gauge": _GAUGE,
                "bust_circumference_cm": 100,
                "body_length_cm": 60,
                "sleeve_length_cm": 45,
                "upper_arm_circumference_cm": 30,
                "neckline_depth_cm": 8,
                "neckline_circumference_cm": 36,
                "ease": {"neckline_cm": 0, "body_cm": 0, "sleeve_cm": 0},
            }
        )
        assert inp.ease == RaglanEase(0, 0, 0)


class TestSummary:
    def test_flattens_gauge_and_enums(self):
        summary = NecklineInput.from_mapping(_neckline_data()).summary()
        assert summary["stitches_per_10cm"] == 20
        assert summary["rows_per_10cm"] == 28
        assert summary["kind"] == "rounded"
        assert "gauge" not in summary


class TestRatios:
    def test_center_ratio_bounds(self):
        with pytest.raises(ValueError):
            NecklineRatios(center_ratio=1.0)

    def test_interval_bounds(self):
        with pytest.raises(ValueError):
            NecklineRatios(rapid_interval=0)

    def test_non_numeric_ratio_rejected(self):
        with pytest.raises(InputFieldError, match="NecklineRatios.rapid_ratio"):
            NecklineRatios(rapid_ratio="0.3")

    def test_non_numeric_interval_rejected(self):
        with pytest.raises(InputFieldError, match="ArmholeRatios.gradual_interval"):
            ArmholeRatios(gradual_interval="4")
