import healpy as hp
import numpy as np
import pytest

from map2cat.mapper.sky_maps import (
    HealpixMap,
    SkyMap,
    check_alignment,
    load_sky_maps,
)
from map2cat.tests import strip_map
from map2cat.utils import MapLoadError


def write_maps(path, maps, nest=False):
    hp.write_map(
        str(path), maps, nest=nest, dtype=np.float64, overwrite=True
    )
    return path


@pytest.fixture
def healpix_maps():
    rng = np.random.default_rng(0)
    npix = hp.nside2npix(2)
    return [
        rng.integers(0, 5, size=npix).astype(float),
        rng.normal(scale=0.1, size=npix),
        rng.normal(scale=0.1, size=npix),
    ]


def test_sky_map():

    sky_map = SkyMap(
        [1, 2.5, -3], pix2ang=lambda pixel: (0.1 * pixel, 0.2 * pixel)
    )

    assert sky_map.npix() == 3, "Incorrect number of pixels."
    assert sky_map.value_at(1) == 2.5, "Incorrect pixel value."
    assert sky_map.pixel_to_angle(2) == pytest.approx((0.2, 0.4)), \
        "Incorrect pixel angles."


def test_sky_map_not_1d():
    with pytest.raises(ValueError):
        SkyMap([[1., 2.]], pix2ang=None)


@pytest.mark.parametrize("nside,nest", [(1, False), (4, True)])
def test_healpix_map(nside, nest):

    sky_map = HealpixMap(np.arange(hp.nside2npix(nside)), nest=nest)

    assert sky_map.nside == nside, "Incorrect 'NSIDE' parameter."
    assert sky_map.scheme == ('healpix', nside, nest), \
        "Incorrect pixelisation scheme."
    assert sky_map.pixel_to_angle(5) == pytest.approx(
        hp.pix2ang(nside, 5, nest=nest)
    ), "Incorrect HEALPix pixel angles."


def test_healpix_map_invalid_size():
    with pytest.raises(ValueError):
        HealpixMap(np.zeros(13))


@pytest.mark.parametrize(
    "sky_maps",
    [
        [strip_map([1., 2.]), strip_map([1., 2.]), strip_map([1.])],
        [HealpixMap(np.zeros(12)), HealpixMap(np.zeros(12), nest=True)],
        [HealpixMap(np.zeros(12)), strip_map(np.zeros(12))],
    ]
)
def test_check_alignment_failure(sky_maps):
    with pytest.raises(MapLoadError):
        check_alignment(*sky_maps)


@pytest.mark.parametrize("nest", [False, True])
def test_load_sky_maps(tmp_path, healpix_maps, nest):

    map_file = write_maps(tmp_path/"maps.fits", healpix_maps, nest=nest)

    loaded_maps = load_sky_maps(map_file)

    for loaded_map, values in zip(loaded_maps, healpix_maps):
        assert loaded_map.nest == nest, "Pixel ordering is not preserved."
        assert np.allclose(loaded_map.values, values), \
            "Loaded map values differ from the stored ones."


def test_load_sky_maps_too_few_fields(tmp_path, healpix_maps):

    map_file = write_maps(tmp_path/"maps.fits", healpix_maps[:2])

    with pytest.raises(MapLoadError):
        load_sky_maps(map_file)


def test_load_sky_maps_missing_file(tmp_path):
    with pytest.raises(MapLoadError):
        load_sky_maps(tmp_path/"absent.fits")


def test_load_sky_maps_not_fits(tmp_path):

    map_file = tmp_path/"maps.fits"
    map_file.write_text("not a map")

    with pytest.raises(MapLoadError):
        load_sky_maps(map_file)
