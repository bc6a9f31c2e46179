"""
Definition (:mod:`~map2cat.surveyor.definition`)
===========================================================================

Define the catalogue generation parameters from a configuration file.

.. autosummary::

    RedshiftBounds
    GenerationConfig
    parse_bounds
    read_config

The configuration file is in the INI format with the sections and keys ::

    [input]
    data_map_file_name = maps.fits
    z_bounds = 0.5,0.6
    rand_seed = 42
    sigma_e = 0.3

    [output]
    catalogue_file_name = catalogue.dat
    delimiter = ,

|

"""
import logging
from configparser import ConfigParser, Error as ConfigParserError
from typing import NamedTuple

import numpy as np

from map2cat.utils import ConfigValidationError

logger = logging.getLogger(__name__)

# Older configuration files carry the misspelt output key.
_LEGACY_OUTPUT_KEY = 'catlogue_file_name'


class RedshiftBounds(NamedTuple):
    """Redshift sampling range ``[z_min, z_max)``.

    """
    z_min: float
    z_max: float


class GenerationConfig(NamedTuple):
    """Catalogue generation parameters.

    Parameters
    ----------
    map_file : str
        Sky map container file.
    z_min, z_max : float
        Redshift sampling range ``[z_min, z_max)``.
    random_seed : int
        Non-negative random seed.
    sigma_e : float
        Standard deviation of the shape noise.
    output_path : str
        Catalogue output file path.
    delimiter : str
        Catalogue field separator.

    """
    map_file: str
    z_min: float
    z_max: float
    random_seed: int
    sigma_e: float
    output_path: str
    delimiter: str

    @classmethod
    def from_parser(cls, parser):
        """Build generation parameters from a parsed configuration.

        Parameters
        ----------
        parser : :class:`configparser.ConfigParser`
            Parsed configuration with 'input' and 'output' sections.

        Returns
        -------
        :class:`~.GenerationConfig`
            Validated generation parameters.

        Raises
        ------
        :class:`~map2cat.utils.ConfigValidationError`
            If any value is missing or malformed.

        """
        try:
            map_file = parser.get('input', 'data_map_file_name')
            z_bounds = parser.get('input', 'z_bounds')
            random_seed = parser.getint('input', 'rand_seed')
            sigma_e = parser.getfloat('input', 'sigma_e')
            if parser.has_option('output', 'catalogue_file_name') \
                    or not parser.has_option('output', _LEGACY_OUTPUT_KEY):
                output_path = parser.get('output', 'catalogue_file_name')
            else:
                output_path = parser.get('output', _LEGACY_OUTPUT_KEY)
            delimiter = parser.get('output', 'delimiter')
        except (ConfigParserError, ValueError) as err:
            raise ConfigValidationError(
                f"Invalid configuration: {err}"
            ) from err

        logger.info("Redshift bounds specified as %s.", z_bounds)
        bounds = parse_bounds(z_bounds)

        if random_seed < 0:
            raise ConfigValidationError(
                f"Random seed must be non-negative: {random_seed}."
            )
        logger.info("Random seed specified as %d.", random_seed)

        if not np.isfinite(sigma_e) or sigma_e < 0:
            raise ConfigValidationError(
                f"Shape noise standard deviation must be a finite "
                f"non-negative number: {sigma_e}."
            )
        logger.info("Shape noise standard deviation specified as %g.", sigma_e)

        try:
            delimiter = delimiter.encode('latin-1', 'backslashreplace') \
                .decode('unicode_escape')
        except UnicodeDecodeError as err:
            raise ConfigValidationError(
                f"Malformed escape sequence in catalogue delimiter: {err}"
            ) from err
        if not delimiter:
            raise ConfigValidationError("Catalogue delimiter is empty.")

        return cls(
            map_file=map_file,
            z_min=bounds.z_min,
            z_max=bounds.z_max,
            random_seed=random_seed,
            sigma_e=sigma_e,
            output_path=output_path,
            delimiter=delimiter,
        )


def parse_bounds(bounds_str, sep=','):
    """Parse a pair of strictly increasing bounds from a delimited string.

    Parameters
    ----------
    bounds_str : str
        Delimited string of two numbers, e.g. ``'0.5,0.6'``.
    sep : str, optional
        Separator (default is ``','``).

    Returns
    -------
    :class:`~.RedshiftBounds`
        Lower and upper bounds.

    Raises
    ------
    :class:`~map2cat.utils.ConfigValidationError`
        If there are not exactly two numerical values or they are not
        strictly increasing.

    """
    tokens = [token.strip() for token in bounds_str.split(sep)]
    tokens = [token for token in tokens if token]

    if len(tokens) != 2:
        raise ConfigValidationError(
            "The bounds should consist of two values, no more, no less: "
            f"{bounds_str!r}."
        )

    try:
        lower, upper = map(float, tokens)
    except ValueError as err:
        raise ConfigValidationError(
            f"Non-numerical bounds: {bounds_str!r}."
        ) from err

    if not (np.isfinite(lower) and np.isfinite(upper)):
        raise ConfigValidationError(f"Non-finite bounds: {bounds_str!r}.")

    if lower >= upper:
        raise ConfigValidationError(
            "The upper bound should be greater than the lower bound: "
            f"{bounds_str!r}."
        )

    return RedshiftBounds(lower, upper)


def read_config(config_file):
    """Read catalogue generation parameters from an INI configuration file.

    Parameters
    ----------
    config_file : *str or* :class:`pathlib.Path`
        Configuration file path.

    Returns
    -------
    :class:`~.GenerationConfig`
        Validated generation parameters.

    Raises
    ------
    :class:`~map2cat.utils.ConfigValidationError`
        If the file cannot be read or any value is missing or malformed.

    """
    logger.info("Reading the configuration file %s.", config_file)

    parser = ConfigParser(interpolation=None)
    try:
        found_files = parser.read(config_file, encoding='utf-8')
    except (ConfigParserError, UnicodeDecodeError) as err:
        raise ConfigValidationError(
            f"Malformed configuration file {config_file}: {err}"
        ) from err

    if not found_files:
        raise ConfigValidationError(
            f"Configuration file not found or unreadable: {config_file}."
        )

    return GenerationConfig.from_parser(parser)
