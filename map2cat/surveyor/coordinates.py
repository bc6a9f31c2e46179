"""
Coordinates (:mod:`~map2cat.surveyor.coordinates`)
===========================================================================

Handle the sky coordinate system of pixelised maps.

.. autosummary::

    ROTATION_OFFSET
    spherical_to_sky
    pixel_to_sky

|

"""
import numpy as np

#: Rotation offset (in degrees) added to the right ascension.
ROTATION_OFFSET = 0.


def spherical_to_sky(theta, phi):
    r"""Convert spherical surface coordinates to sky coordinates.

    The spherical surface coordinate transformation is given by

    .. math::

        \alpha = 180/\pi * \phi + \alpha_0 \,, \quad
        \delta = 90 - 180/\pi * \theta \,.

    where :math:`\alpha` is the right ascension (RA), :math:`\delta` the
    declination (DEC), both given in degrees, and :math:`\alpha_0` is
    :data:`ROTATION_OFFSET`.

    Parameters
    ----------
    theta : float, array_like
        Polar angle in radians, ``0 <= theta <= pi``.
    phi : float, array_like
        Azimuthal angle in radians, ``0 <= phi < 2*pi``.

    Returns
    -------
    ra, dec : float or :class:`numpy.ndarray`
        Right ascension and declination in degrees.

    """
    ra = np.rad2deg(phi) + ROTATION_OFFSET
    dec = 90 - np.rad2deg(theta)

    return ra, dec


def pixel_to_sky(sky_map, pixel):
    """Convert a map pixel index to the sky coordinates of its centre.

    Parameters
    ----------
    sky_map : :class:`~map2cat.mapper.sky_maps.SkyMap`
        Sky map providing the pixel-to-angle conversion.
    pixel : int
        Pixel index, ``0 <= pixel < sky_map.npix()``.

    Returns
    -------
    ra, dec : float
        Right ascension and declination in degrees.

    """
    theta, phi = sky_map.pixel_to_angle(pixel)

    ra, dec = spherical_to_sky(theta, phi)

    return float(ra), float(dec)
