"""
Export validator.

Precondition checks run on submit. Checks run in a fixed order and the first
failure is reported; nothing here touches the encode service.
"""

import os
from typing import Optional

from core.exceptions import ValidationError
from core.result_types import Result

from ..models.export_parameters import ExportParameters, ExportMode


MSG_SELECT_INPUT_A = "Select an Input A file."
MSG_SELECT_INPUT_B = "Select an Input B file."
MSG_SELECT_BOTH_INPUTS = "Select both Input A and Input B for side-by-side export."
MSG_CHOOSE_OUTPUT = "Choose an output file."
MSG_OUTPUT_IS_INPUT = "Output must be different from input."
MSG_STACK_HEIGHT = "Probe both inputs so the stack height can be computed."


def _is_blank(path: Optional[str]) -> bool:
    return not path or not path.strip()


def _same_path(first: str, second: str) -> bool:
    return os.path.normcase(os.path.normpath(first.strip())) == \
        os.path.normcase(os.path.normpath(second.strip()))


def validate_export(
    input_a: Optional[str],
    input_b: Optional[str],
    output_path: Optional[str],
    mode: ExportMode
) -> Optional[ValidationError]:
    """
    Check an export request's inputs and output.

    Args:
        input_a: Input A path
        input_b: Input B path
        output_path: Requested output path
        mode: Export mode

    Returns:
        ValidationError for the first failing check, or None
    """
    if mode is ExportMode.SINGLE_A and _is_blank(input_a):
        return ValidationError(MSG_SELECT_INPUT_A, field='input_a')

    if mode is ExportMode.SINGLE_B and _is_blank(input_b):
        return ValidationError(MSG_SELECT_INPUT_B, field='input_b')

    if mode is ExportMode.SIDE_BY_SIDE and (_is_blank(input_a) or _is_blank(input_b)):
        return ValidationError(MSG_SELECT_BOTH_INPUTS, field='inputs')

    if _is_blank(output_path):
        return ValidationError(MSG_CHOOSE_OUTPUT, field='output_path')

    if mode is ExportMode.SINGLE_A:
        selected = [input_a]
    elif mode is ExportMode.SINGLE_B:
        selected = [input_b]
    else:
        selected = [input_a, input_b]

    if any(_same_path(output_path, path) for path in selected):
        return ValidationError(MSG_OUTPUT_IS_INPUT, field='output_path')

    return None


def validate_request(params: ExportParameters) -> Result[ExportParameters]:
    """
    Validate a complete export request.

    Runs ``validate_export`` and then requires an even stack height for
    side-by-side exports.
    """
    error = validate_export(params.input_a, params.input_b, params.output_path, params.mode)
    if error is not None:
        return Result.error(error)

    if params.is_side_by_side:
        if not params.stack_height or params.stack_height % 2 != 0:
            return Result.error(ValidationError(MSG_STACK_HEIGHT, field='stack_height'))

    return Result.success(params)
