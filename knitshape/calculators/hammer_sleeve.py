"""
Hammer-sleeve calculator.

A hammer sleeve has a straight, full-width sleeve cap (the vertical part)
topped by a narrow strip (the extension) that runs along the shoulder to the
neckline. The body panels get a matching rectangular cutout: the cutout is as
wide as the vertical part and as deep as it is tall, and a shoulder strap
either side of the neckline is left standing.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Union

from knitshape.schemas.inputs import HammerSleeveInput
from knitshape.schemas.results import CalculationResult, ErrorCode
from knitshape.schemas.schedule import (
    HammerBodyPanel,
    HammerExtension,
    HammerSleeveSchedule,
    HammerVerticalPart,
)
from knitshape.utilities.conversion import cm_to_rows, cm_to_stitches, rows_to_cm, stitches_to_cm

from .common import (
    Findings,
    check_component_key,
    check_gauge,
    check_optional_positive,
    check_positive,
    failed,
    resolve_input,
    succeeded,
)

logger = logging.getLogger(__name__)

ALGORITHM = "hammer-sleeve-rectangular"

MIN_EXTENSION_CM = 5.0
MAX_EXTENSION_CM = 25.0
MIN_UPPER_ARM_CM = 15.0
MAX_UPPER_ARM_CM = 50.0
MIN_ARMHOLE_DEPTH_CM = 15.0
MAX_ARMHOLE_DEPTH_CM = 35.0
MIN_SLEEVE_ROWS = 20
MIN_BODY_ROWS = 40


def shoulder_extension_width_cm(total_shoulder_width_cm: float, neckline_width_cm: float) -> float:
    """Width of one shoulder extension: half of what the neckline leaves of the shoulders."""
    return (total_shoulder_width_cm - neckline_width_cm) / 2


def _validate(inp: HammerSleeveInput) -> Findings:
    findings = Findings()
    check_component_key(findings, inp.component_key)
    check_gauge(findings, inp.gauge)
    shoulder_ok = check_positive(
        findings, "total_shoulder_width_cm", inp.total_shoulder_width_cm, "Total shoulder width"
    )
    arm_ok = check_positive(
        findings, "upper_arm_width_cm", inp.upper_arm_width_cm, "Upper arm width"
    )
    depth_ok = check_positive(findings, "armhole_depth_cm", inp.armhole_depth_cm, "Armhole depth")
    neck_ok = check_positive(findings, "neckline_width_cm", inp.neckline_width_cm, "Neckline width")
    check_optional_positive(findings, "sleeve_length_cm", inp.sleeve_length_cm, "Sleeve length")
    check_optional_positive(
        findings,
        "body_length_to_armhole_cm",
        inp.body_length_to_armhole_cm,
        "Body length to armhole",
    )
    if (
        not isinstance(inp.extension_length_rows, int)
        or isinstance(inp.extension_length_rows, bool)
        or inp.extension_length_rows < 1
    ):
        findings.error(
            ErrorCode.INVALID_INPUT,
            "EXTENSION_LENGTH_INVALID",
            f"Extension length must be at least 1 row, got {inp.extension_length_rows!r}",
            field="extension_length_rows",
        )

    if shoulder_ok and neck_ok:
        if inp.neckline_width_cm >= inp.total_shoulder_width_cm:
            findings.error(
                ErrorCode.INVALID_DIMENSION,
                "NECKLINE_WIDER_THAN_SHOULDERS",
                "Neckline width must be smaller than total shoulder width",
                field="neckline_width_cm",
            )
        else:
            extension = shoulder_extension_width_cm(
                inp.total_shoulder_width_cm, inp.neckline_width_cm
            )
            if extension < MIN_EXTENSION_CM:
                findings.error(
                    ErrorCode.INVALID_DIMENSION,
                    "EXTENSION_TOO_NARROW",
                    f"Shoulder extension width ({extension:.1f}cm) is too small. "
                    f"Minimum: {MIN_EXTENSION_CM:g}cm",
                    field="total_shoulder_width_cm",
                )
            elif extension > MAX_EXTENSION_CM:
                findings.warning(
                    "EXTENSION_TOO_WIDE",
                    f"Shoulder extension width ({extension:.1f}cm) is quite large. "
                    f"Maximum recommended: {MAX_EXTENSION_CM:g}cm",
                    field="total_shoulder_width_cm",
                )

    if arm_ok and inp.upper_arm_width_cm < MIN_UPPER_ARM_CM:
        findings.warning(
            "UPPER_ARM_SMALL",
            f"Upper arm width ({inp.upper_arm_width_cm}cm) is quite small for an adult garment",
            field="upper_arm_width_cm",
        )
    elif arm_ok and inp.upper_arm_width_cm > MAX_UPPER_ARM_CM:
        findings.warning(
            "UPPER_ARM_LARGE",
            f"Upper arm width ({inp.upper_arm_width_cm}cm) is quite large",
            field="upper_arm_width_cm",
        )
    if depth_ok and inp.armhole_depth_cm < MIN_ARMHOLE_DEPTH_CM:
        findings.warning(
            "ARMHOLE_SHALLOW",
            f"Armhole depth ({inp.armhole_depth_cm}cm) is quite shallow",
            field="armhole_depth_cm",
        )
    elif depth_ok and inp.armhole_depth_cm > MAX_ARMHOLE_DEPTH_CM:
        findings.warning(
            "ARMHOLE_DEEP",
            f"Armhole depth ({inp.armhole_depth_cm}cm) is quite deep",
            field="armhole_depth_cm",
        )
    return findings


def _check_geometry(schedule: HammerSleeveSchedule, findings: Findings) -> None:
    """The sleeve's vertical part must fill the body cutout exactly."""
    vertical = schedule.vertical_part
    body = schedule.body_panel
    if vertical.width_stitches != body.armhole_cutout_width_stitches:
        findings.warning(
            "GEOMETRIC_MISMATCH",
            f"Geometric mismatch: sleeve vertical part ({vertical.width_stitches} sts) "
            f"vs body cutout ({body.armhole_cutout_width_stitches} sts)",
        )
    if vertical.height_rows != body.armhole_depth_rows:
        findings.warning(
            "GEOMETRIC_MISMATCH",
            f"Geometric mismatch: sleeve vertical part height ({vertical.height_rows} rows) "
            f"vs body cutout depth ({body.armhole_depth_rows} rows)",
        )
    if schedule.extension.width_stitches > vertical.width_stitches:
        findings.warning(
            "EXTENSION_WIDER_THAN_SLEEVE",
            f"Shoulder extension ({schedule.extension.width_stitches} sts) is wider than the "
            f"sleeve cap ({vertical.width_stitches} sts)",
        )


def calculate_hammer_sleeve_shaping(
    data: Union[HammerSleeveInput, Mapping[str, Any]],
) -> CalculationResult[HammerSleeveSchedule]:
    """
    Calculate the sleeve cap and body cutout of a hammer-sleeve garment.

    Parameters
    ----------
    data:
        A HammerSleeveInput, or a mapping with the same fields.

    Returns
    -------
    CalculationResult[HammerSleeveSchedule]
        Metadata reports the shoulder width, upper arm width and armhole depth
        actually achieved on the stitch grid.
    """
    inp, error = resolve_input(HammerSleeveInput, data)
    if error is not None:
        return failed(error, "hammer_sleeve", log=logger)
    assert inp is not None

    findings = _validate(inp)
    if findings.has_errors:
        return failed(findings.to_validation_error(), "hammer_sleeve", inp.component_key, logger)

    gauge = inp.gauge
    extension_cm = shoulder_extension_width_cm(inp.total_shoulder_width_cm, inp.neckline_width_cm)
    extension = HammerExtension(
        width_cm=extension_cm,
        width_stitches=cm_to_stitches(extension_cm, gauge),
        length_rows=inp.extension_length_rows,
    )
    vertical = HammerVerticalPart(
        width_stitches=cm_to_stitches(inp.upper_arm_width_cm, gauge),
        height_rows=cm_to_rows(inp.armhole_depth_cm, gauge),
    )
    strap = cm_to_stitches(inp.neckline_width_cm / 2, gauge)
    cutout = vertical.width_stitches
    body = HammerBodyPanel(
        shoulder_strap_width_stitches=strap,
        armhole_cutout_width_stitches=cutout,
        armhole_depth_rows=vertical.height_rows,
        bind_off_for_cutout_stitches=cutout,
        body_width_at_chest_stitches=2 * strap + 2 * cutout,
    )

    if inp.sleeve_length_cm is not None:
        sleeve_rows = cm_to_rows(inp.sleeve_length_cm, gauge)
    else:
        sleeve_rows = max(MIN_SLEEVE_ROWS, vertical.height_rows)
    if inp.body_length_to_armhole_cm is not None:
        body_rows = cm_to_rows(inp.body_length_to_armhole_cm, gauge)
    else:
        body_rows = max(MIN_BODY_ROWS, 2 * vertical.height_rows)

    schedule = HammerSleeveSchedule(
        extension=extension,
        vertical_part=vertical,
        body_panel=body,
        sleeve_rows_to_cap=sleeve_rows,
        body_rows_to_armhole=body_rows,
    )
    _check_geometry(schedule, findings)
    logger.debug(
        f"{ALGORITHM}: extension={extension.width_stitches}sts x {extension.length_rows}rows "
        f"vertical={vertical.width_stitches}sts x {vertical.height_rows}rows "
        f"body={body.body_width_at_chest_stitches}"
    )

    actual_shoulder = 2 * stitches_to_cm(strap, gauge) + 2 * stitches_to_cm(
        extension.width_stitches, gauge
    )
    return succeeded(
        schedule,
        findings,
        ALGORITHM,
        inp,
        derived={
            "actual_shoulder_width_cm": round(actual_shoulder, 1),
            "actual_upper_arm_width_cm": round(stitches_to_cm(vertical.width_stitches, gauge), 1),
            "actual_armhole_depth_cm": round(rows_to_cm(vertical.height_rows, gauge), 1),
        },
        log=logger,
    )
