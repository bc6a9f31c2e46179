"""
Sky maps (:mod:`~map2cat.mapper.sky_maps`)
===========================================================================

Access pixelised sky maps independently of the pixelisation library.

.. autosummary::

    SkyMap
    HealpixMap
    check_alignment
    load_sky_maps

A sky map only needs to offer the number of pixels, the value at a pixel
and the angular position of a pixel, so synthetic in-memory maps on any
pixelisation can stand in for `healpy` maps.

|

"""
import logging
from functools import partial

import healpy as hp
import numpy as np
from astropy.io import fits

from map2cat.utils import MapLoadError

logger = logging.getLogger(__name__)

#: Fields of the map container holding the count, e1 and e2 maps.
MAP_FIELDS = (0, 1, 2)


class SkyMap:
    """Pixelised sky map with a pixel-to-angle conversion.

    Parameters
    ----------
    values : float, array_like
        Pixel values indexed from 0.
    pix2ang : callable
        Function mapping a pixel index to the spherical surface
        coordinates ``(theta, phi)`` of its centre in radians.
    scheme : hashable or None, optional
        Descriptor of the pixelisation scheme (default is `None`).  Maps
        are only aligned if their descriptors agree.

    Attributes
    ----------
    values : float :class:`numpy.ndarray`
        Pixel values.
    scheme : hashable or None
        Descriptor of the pixelisation scheme.

    """

    def __init__(self, values, pix2ang, scheme=None):

        self.values = np.asarray(values, dtype=float)
        if self.values.ndim != 1:
            raise ValueError("Sky map values must be 1-d.")

        self.scheme = scheme
        self._pix2ang = pix2ang

    def __str__(self):

        return "{}(npix={}, scheme={})".format(
            self.__class__.__name__, self.npix(), self.scheme
        )

    def npix(self):
        """Number of pixels in the map.

        Returns
        -------
        int

        """
        return len(self.values)

    def value_at(self, pixel):
        """Value of the map at a pixel.

        Parameters
        ----------
        pixel : int
            Pixel index.

        Returns
        -------
        float

        """
        return float(self.values[pixel])

    def pixel_to_angle(self, pixel):
        """Spherical surface coordinates of a pixel centre.

        Parameters
        ----------
        pixel : int
            Pixel index.

        Returns
        -------
        theta, phi : float
            Polar and azimuthal angles in radians.

        """
        theta, phi = self._pix2ang(pixel)

        return float(theta), float(phi)


class HealpixMap(SkyMap):
    """`healpy` sky map.

    Parameters
    ----------
    values : float, array_like
        Full-sky HEALPix map.
    nest : bool, optional
        If `True` (default is `False`), the map is in the 'NESTED'
        ordering, otherwise 'RING'.

    Attributes
    ----------
    nside : int
        HEALPix 'NSIDE' parameter.
    nest : bool
        Whether the map is in the 'NESTED' ordering.

    """

    def __init__(self, values, nest=False):

        values = np.asarray(values, dtype=float)

        self.nside = hp.npix2nside(len(values))
        self.nest = bool(nest)

        super().__init__(
            values,
            pix2ang=partial(hp.pix2ang, self.nside, nest=self.nest),
            scheme=('healpix', self.nside, self.nest)
        )


def check_alignment(*sky_maps):
    """Check that sky maps share the same pixelisation.

    Parameters
    ----------
    *sky_maps : :class:`~.SkyMap`
        Sky maps.

    Raises
    ------
    :class:`~map2cat.utils.MapLoadError`
        If the maps differ in the number of pixels or in the pixelisation
        scheme.  Maps without a `scheme` descriptor are taken to have
        `None` as their scheme.

    """
    npixs = [sky_map.npix() for sky_map in sky_maps]
    if len(set(npixs)) > 1:
        raise MapLoadError(f"Sky maps have mismatched pixel numbers: {npixs}.")

    schemes = [getattr(sky_map, 'scheme', None) for sky_map in sky_maps]
    if len(set(schemes)) > 1:
        raise MapLoadError(
            f"Sky maps have mismatched pixelisation schemes: {schemes}."
        )


def load_sky_maps(map_file, hdu=1):
    """Load the count and shape component maps from a HEALPix FITS file.

    The count map is the first field of the extension, and the two shape
    component maps the second and third.  The pixel ordering stored in
    the file header is kept.

    Parameters
    ----------
    map_file : *str or* :class:`pathlib.Path`
        HEALPix map container file.
    hdu : int, optional
        Header-data unit holding the map table (default is 1).

    Returns
    -------
    count_map, e1_map, e2_map : :class:`~.HealpixMap`
        Galaxy count map and shape component maps.

    Raises
    ------
    :class:`~map2cat.utils.MapLoadError`
        If the file is missing or unreadable, holds fewer than three
        fields or the maps are not aligned.

    """
    logger.info("Reading the maps from %s.", map_file)

    try:
        with fits.open(map_file) as map_source:
            # pylint: disable=no-member
            num_fields = len(map_source[hdu].columns)
    except (OSError, IndexError, AttributeError) as err:
        raise MapLoadError(f"Cannot read map file {map_file}: {err}") from err

    if num_fields < len(MAP_FIELDS):
        raise MapLoadError(
            f"Map file {map_file} holds {num_fields} fields "
            f"but {len(MAP_FIELDS)} are needed."
        )

    try:
        maps, header = hp.read_map(
            str(map_file), field=MAP_FIELDS, dtype=np.float64, nest=None,
            hdu=hdu, h=True
        )
        header = dict(header)
        nest = str(header.get('ORDERING', 'RING')).strip().upper() \
            .startswith('NEST')
        count_map, e1_map, e2_map = (
            HealpixMap(values, nest=nest) for values in maps
        )
    except (OSError, ValueError, KeyError, IndexError) as err:
        raise MapLoadError(f"Cannot load maps from {map_file}: {err}") from err

    check_alignment(count_map, e1_map, e2_map)

    logger.info(
        "Loaded maps with NSIDE=%d in %s ordering.",
        count_map.nside, 'NESTED' if nest else 'RING'
    )

    return count_map, e1_map, e2_map
