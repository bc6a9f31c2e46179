"""
***************************************************************************
Unit testing (:mod:`~map2cat.tests`)
***************************************************************************

Unit testing with `pytest` in Python 3.6 or above.  Sky maps are either
synthetic in-memory maps or small `healpy` maps written to temporary FITS
files.

"""
import numpy as np

from map2cat.mapper.sky_maps import SkyMap


def strip_map(values, theta=np.pi/2, dphi=0.01):
    """Make a synthetic sky map whose pixels lie along a line of constant
    polar angle with azimuth increasing with the pixel index.

    Parameters
    ----------
    values : float, array_like
        Pixel values.
    theta : float, optional
        Polar angle of all pixels (default is :math:`\\pi/2`).
    dphi : float, optional
        Azimuthal spacing between consecutive pixels (default is 0.01).

    Returns
    -------
    :class:`~map2cat.mapper.sky_maps.SkyMap`
        Synthetic sky map.

    """
    return SkyMap(
        values, pix2ang=lambda pixel: (theta, pixel * dphi), scheme='strip'
    )
