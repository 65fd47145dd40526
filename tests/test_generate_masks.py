import numpy as np
import pytest

from hdtr.masks.generate import (
    HorizontalFlat,
    HorizontalLogistic,
    VerticalFlat,
    VerticalLogistic,
    default_masks,
    generate_mask,
    generate_masks,
    mask_type_to_data,
    parse_mask_type,
)


@pytest.mark.parametrize("width,count", [(10, 3), (7, 2), (8, 4), (5, 1), (9, 9)])
def test_vertical_flat_stripes_cover_canvas_without_overlap(width, count):
    masks = generate_masks(count, width, 4, VerticalFlat())

    total = np.stack(masks).astype(np.int64).sum(axis=0)
    assert len(masks) == count
    assert np.all(total == 255)
    for mask in masks:
        assert set(np.unique(mask)) <= {0, 255}


def test_vertical_flat_uses_fractional_stripe_bounds():
    masks = generate_masks(3, 10, 2, VerticalFlat())

    assert np.flatnonzero(masks[0][0, :, 0]).tolist() == [0, 1, 2]
    assert np.flatnonzero(masks[1][0, :, 0]).tolist() == [3, 4, 5]
    assert np.flatnonzero(masks[2][0, :, 0]).tolist() == [6, 7, 8, 9]


def test_horizontal_flat_paints_rows():
    top = generate_mask(0, 2, 5, 6, HorizontalFlat())
    bottom = generate_mask(1, 2, 5, 6, HorizontalFlat())

    assert np.all(top[:3] == 255) and np.all(top[3:] == 0)
    assert np.all(bottom[:3] == 0) and np.all(bottom[3:] == 255)


def test_default_masks_match_vertical_flat():
    for got, expected in zip(default_masks(3, 12, 5), generate_masks(3, 12, 5, VerticalFlat())):
        assert np.array_equal(got, expected)


def test_vertical_logistic_peaks_at_stripe_center_and_is_symmetric():
    mask = generate_mask(0, 2, 20, 3, VerticalLogistic(k=0.1))
    profile = mask[0, :, 0].astype(int)

    assert profile[5] == 127
    assert int(np.argmax(profile)) == 5
    for d in range(1, 6):
        assert profile[5 - d] == profile[5 + d]
    assert np.all(mask == mask[:1])
    assert np.all(mask[..., 0] == mask[..., 2])


def test_second_logistic_stripe_centers_on_its_band():
    mask = generate_mask(1, 2, 20, 3, VerticalLogistic(k=0.1))
    profile = mask[0, :, 0]

    assert int(np.argmax(profile)) == 15
    assert profile[0] < profile[10] < profile[15]


def test_horizontal_logistic_is_constant_along_rows():
    mask = generate_mask(2, 3, 7, 30, HorizontalLogistic(k=0.05))

    assert np.all(mask == mask[:, :1])
    assert int(np.argmax(mask[:, 0, 0])) == 25


def test_single_image_logistic_has_no_division_issue():
    mask = generate_mask(0, 1, 9, 9, VerticalLogistic(k=0.01))

    assert mask.shape == (9, 9, 3)
    assert mask[0, 4, 0] == 127


def test_generate_rejects_empty_set_and_bad_index():
    with pytest.raises(ValueError):
        generate_masks(0, 4, 4, VerticalFlat())
    with pytest.raises(IndexError):
        generate_mask(3, 3, 4, 4, VerticalFlat())


def test_parse_mask_type_reads_tagged_forms():
    assert parse_mask_type("VerticalFlat") == VerticalFlat()
    assert parse_mask_type({"HorizontalFlat": None}) == HorizontalFlat()
    assert parse_mask_type({"HorizontalLogistic": {"k": 0.02}}) == HorizontalLogistic(k=0.02)
    assert mask_type_to_data(VerticalLogistic(k=0.5)) == {"VerticalLogistic": {"k": 0.5}}
    assert mask_type_to_data(HorizontalFlat()) == "HorizontalFlat"


def test_parse_mask_type_rejects_unknown_or_incomplete():
    with pytest.raises(ValueError, match="Unknown mask type"):
        parse_mask_type("Diagonal")
    with pytest.raises(ValueError, match="steepness"):
        parse_mask_type({"VerticalLogistic": {}})
    with pytest.raises(ValueError):
        parse_mask_type(["VerticalFlat"])


def test_horizontal_logistic_is_symmetric_around_stripe_center():
    mask = generate_mask(0, 2, 3, 20, HorizontalLogistic(k=0.1))
    profile = mask[:, 0, 0].astype(int)

    assert profile[5] == 127
    for d in range(1, 6):
        assert profile[5 - d] == profile[5 + d]
