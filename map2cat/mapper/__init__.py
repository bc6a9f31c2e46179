"""
***************************************************************************
Catalogue mapper (:mod:`~map2cat.mapper`)
***************************************************************************

Load pixelised sky maps and make synthetic catalogues from them.

.. note::

    Unless otherwise specified, angles in the module are in radians for
    spherical coordinates and in degrees for sky coordinates.

"""
from .catalogue_maker import (
    CatalogueGenerator,
    CatalogueRecord,
    CatalogueWriter,
    galaxy_count,
    make_catalogue,
    synthesise_catalogue,
)
from .sky_maps import HealpixMap, SkyMap, check_alignment, load_sky_maps
