"""Tests for colour matrix composition."""

import numpy as np
import pytest

from iStudio.core.color_matrix import ALPHA_ROW, ColorMatrix, compose, compose_all
from iStudio.core.matrix_builder import (
    brightness_exposure_matrix,
    contrast_matrix,
    saturation_matrix,
    warmth_matrix,
)


def test_identity_leaves_pixel_unchanged() -> None:
    identity = ColorMatrix.identity()

    assert identity.is_identity()
    assert identity.apply_to_pixel((0.2, 0.4, 0.6, 0.8)) == pytest.approx((0.2, 0.4, 0.6, 0.8))


def test_from_rows_rejects_wrong_shape() -> None:
    with pytest.raises(ValueError):
        ColorMatrix.from_rows([[1.0, 0.0, 0.0, 0.0]] * 4)
    with pytest.raises(ValueError):
        ColorMatrix.from_rows([[1.0, 0.0, 0.0, 0.0, 0.0]] * 3)


def test_as_array_is_read_only() -> None:
    array = ColorMatrix.identity().as_array()

    assert array.shape == (4, 5)
    with pytest.raises(ValueError):
        array[0, 0] = 2.0


def test_compose_matches_sequential_application() -> None:
    matrices = [
        brightness_exposure_matrix(30, 10),
        contrast_matrix(45),
        saturation_matrix(-30, 10),
        warmth_matrix(60),
    ]
    composed = compose_all(matrices)

    rng = np.random.default_rng(7)
    for pixel in rng.random((50, 4)):
        sequential = tuple(pixel)
        for matrix in matrices:
            sequential = matrix.apply_to_pixel(sequential)
        assert composed.apply_to_pixel(pixel) == pytest.approx(sequential, abs=1e-6)


def test_compose_order_matters() -> None:
    brighten = brightness_exposure_matrix(50, 0)
    contrast = contrast_matrix(50)

    pixel = (0.5, 0.5, 0.5, 1.0)
    brighten_first = compose(brighten, contrast).apply_to_pixel(pixel)
    contrast_first = compose(contrast, brighten).apply_to_pixel(pixel)

    # 0.5 + 50/255 then pivot around grey versus pivot first then offset.
    assert brighten_first[0] == pytest.approx(1.5 * (0.5 + 50 / 255) - 0.25)
    assert contrast_first[0] == pytest.approx(0.5 + 50 / 255)
    assert brighten_first[0] != pytest.approx(contrast_first[0])


def test_compose_with_identity_returns_other_operand() -> None:
    contrast = contrast_matrix(20)

    assert compose(ColorMatrix.identity(), contrast) is contrast
    assert compose(contrast, ColorMatrix.identity()) is contrast
    assert compose_all([]).is_identity()


def test_composed_alpha_row_is_untouched() -> None:
    composed = compose_all(
        [brightness_exposure_matrix(100, 100), contrast_matrix(100), warmth_matrix(-100)]
    )

    assert composed.rows[3] == pytest.approx(ALPHA_ROW)


def test_apply_to_array_matches_apply_to_pixel() -> None:
    matrix = compose(contrast_matrix(30), warmth_matrix(25))
    pixels = np.array([[[0.1, 0.5, 0.9, 1.0], [0.0, 0.0, 0.0, 0.0]]])

    result = matrix.apply_to_array(pixels)
    for index in range(2):
        assert tuple(result[0, index]) == pytest.approx(matrix.apply_to_pixel(pixels[0, index]))
