"""
***************************************************************************
Survey factory (:mod:`~map2cat.surveyor`)
***************************************************************************

Produce from the configuration file and the map pixelisation the
quantities needed for catalogue generation, i.e. the generation parameters
and the sky coordinates of map pixels.

"""
from .coordinates import ROTATION_OFFSET, pixel_to_sky, spherical_to_sky
from .definition import (
    GenerationConfig,
    RedshiftBounds,
    parse_bounds,
    read_config,
)
