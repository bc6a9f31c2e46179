"""
Catalogue maker (:mod:`~map2cat.mapper.catalogue_maker`)
===========================================================================

Make synthetic galaxy catalogues from pixelised count and shape maps.

.. autosummary::

    CatalogueRecord
    galaxy_count
    CatalogueGenerator
    CatalogueWriter
    make_catalogue
    synthesise_catalogue

|

"""
import logging
import os
import sys
import warnings
from itertools import chain
from operator import itemgetter
from typing import NamedTuple

import numpy as np
from tqdm import tqdm

from map2cat.mapper.sky_maps import check_alignment, load_sky_maps
from map2cat.surveyor.coordinates import pixel_to_sky
from map2cat.surveyor.definition import read_config
from map2cat.utils import (
    CountClampWarning,
    OutputOpenError,
    Progress,
    allocate_segments,
)

logger = logging.getLogger(__name__)


class CatalogueRecord(NamedTuple):
    """Synthetic galaxy with sky position (in degrees), redshift and
    shape components.

    """
    ra: float
    dec: float
    z: float
    e1: float
    e2: float


def galaxy_count(value):
    """Interpret a count map value as a number of galaxies.

    Negative or non-finite values (including the HEALPix 'UNSEEN'
    sentinel) give zero galaxies; otherwise the integer part is taken.

    Parameters
    ----------
    value : float
        Count map value.

    Returns
    -------
    int
        Number of galaxies.

    """
    if not np.isfinite(value) or value < 0:
        return 0
    return int(value)


class CatalogueGenerator:
    """Synthetic catalogue generator from count and shape maps.

    Pixels are visited in ascending order.  For each galaxy in a pixel,
    the redshift is drawn uniformly in the redshift range, followed by two
    standard normal draws scaled by the shape noise and added to the e1
    and e2 map values; all galaxies in a pixel share the sky position of
    the pixel centre.

    Parameters
    ----------
    count_map, e1_map, e2_map : :class:`~map2cat.mapper.sky_maps.SkyMap`
        Galaxy count map and shape component maps sharing the same
        pixelisation.
    config : :class:`~map2cat.surveyor.definition.GenerationConfig`
        Generation parameters.

    Attributes
    ----------
    config : :class:`~map2cat.surveyor.definition.GenerationConfig`
        Generation parameters.
    attrs : dict
        Attributes including the number of pixels, the random seed, the
        redshift range and the shape noise.

    Notes
    -----
    The random number generator is seeded once at initialisation and is
    never reset, so each generator instance should produce one catalogue.

    """

    _msg = {
        'clamp': (
            "%d pixels with negative or non-finite counts "
            "are clamped to zero galaxies."
        ),
        'size': "Catalogue to be generated holds %d galaxies.",
        'shards': "Catalogue split into %d shards over %d pixels.",
    }

    def __init__(self, count_map, e1_map, e2_map, config):

        self.logger = logging.getLogger(self.__class__.__name__)

        check_alignment(count_map, e1_map, e2_map)

        self.count_map = count_map
        self.e1_map = e1_map
        self.e2_map = e2_map
        self.config = config

        self.attrs = {
            'npix': count_map.npix(),
            'seed': config.random_seed,
            'z_bounds': (config.z_min, config.z_max),
            'sigma_e': config.sigma_e,
        }

        self._rng = np.random.default_rng(config.random_seed)

        self.logger.debug("%s initialised.", self)

    def __str__(self):

        str_info = "npix={npix}, seed={seed}, z_bounds={z_bounds}, " \
            "sigma_e={sigma_e}".format(**self.attrs)

        return f"{self.__class__.__name__}({str_info})"

    def catalogue_size(self):
        """Total number of galaxies over all pixels.

        Returns
        -------
        int

        """
        values = self._count_values()
        with np.errstate(invalid='ignore'):
            valid = np.isfinite(values) & (values >= 0)

        return int(np.sum(np.trunc(values[valid])))

    def generate(self):
        """Generate the catalogue sequentially from a single random stream.

        Yields
        ------
        :class:`~.CatalogueRecord`
            Synthetic galaxy, in ascending pixel order.

        """
        self._inspect_counts()

        npix = self.attrs['npix']
        progress = Progress(
            npix, process_name='catalogue generation', logger=self.logger
        )
        for pixel in range(npix):
            yield from self._sample_pixel(pixel, self._rng)
            progress.report(pixel)

    def generate_in_shards(self, num_shards, comm=None, root=0):
        """Generate the catalogue over contiguous pixel shards, each with
        an independent random stream derived from the random seed.

        Shards may be distributed over MPI processes; records are returned
        in ascending pixel order on the root process only.

        Parameters
        ----------
        num_shards : int
            Number of pixel shards.
        comm : :class:`mpi4py.MPI.Comm` *or None, optional*
            MPI communicator.  If `None` (default), shards are processed
            one after another.
        root : int, optional
            Rank of the process collecting the records (default is 0).

        Returns
        -------
        iterator of :class:`~.CatalogueRecord`
            Synthetic galaxies.  Empty for process ranks other
            than `root`.

        Notes
        -----
        The output is reproducible for the same random seed and number of
        shards, regardless of the number of processes, but differs from
        that of :meth:`generate`.

        """
        shards = self._shard(num_shards)

        if comm is None or comm.size == 1:
            self._inspect_counts()
            return self._generate_from_shards(shards)

        if comm.rank == root:
            self._inspect_counts()

        own_shards = [
            (shard_idx, segment, rng)
            for shard_idx, (segment, rng) in enumerate(shards)
            if shard_idx % comm.size == comm.rank
        ]

        progress = Progress(
            len(own_shards), process_name='catalogue shards',
            logger=self.logger, comm=comm, root=root
        )
        blocks = []
        for position, (shard_idx, segment, rng) in enumerate(own_shards):
            records = list(self._sample_segment(segment, rng))
            blocks.append((shard_idx, records))
            progress.report(position)

        blocks = comm.gather(blocks, root=root)

        if comm.rank != root:
            return iter(())

        ordered_blocks = sorted(chain.from_iterable(blocks), key=itemgetter(0))

        return chain.from_iterable(records for _, records in ordered_blocks)

    def _shard(self, num_shards):

        segments = allocate_segments(
            total_task=self.attrs['npix'], total_proc=num_shards
        )
        seeds = np.random.SeedSequence(self.config.random_seed) \
            .spawn(len(segments))

        self.logger.info(self._msg['shards'], len(segments), self.attrs['npix'])

        return [
            (segment, np.random.default_rng(seed))
            for segment, seed in zip(segments, seeds)
        ]

    def _generate_from_shards(self, shards):

        for segment, rng in tqdm(shards, desc="Catalogue shards",
                                 mininterval=1, file=sys.stdout):
            yield from self._sample_segment(segment, rng)

    def _sample_segment(self, segment, rng):

        for pixel in range(segment.start, segment.stop):
            yield from self._sample_pixel(pixel, rng)

    def _sample_pixel(self, pixel, rng):

        num_gals = galaxy_count(self.count_map.value_at(pixel))
        if num_gals == 0:
            return

        e1_base = self.e1_map.value_at(pixel)
        e2_base = self.e2_map.value_at(pixel)

        ra, dec = pixel_to_sky(self.count_map, pixel)

        z_min, z_max = self.config.z_min, self.config.z_max
        sigma_e = self.config.sigma_e
        for _ in range(num_gals):
            # Draw order is redshift, then e1 noise, then e2 noise.
            z = rng.uniform(z_min, z_max)
            if z >= z_max:
                z = np.nextafter(z_max, z_min)
            e1 = e1_base + rng.standard_normal() * sigma_e
            e2 = e2_base + rng.standard_normal() * sigma_e

            yield CatalogueRecord(ra, dec, float(z), float(e1), float(e2))

    def _count_values(self):

        npix = self.attrs['npix']

        return np.array(
            [self.count_map.value_at(pixel) for pixel in range(npix)],
            dtype=float
        )

    def _inspect_counts(self):

        values = self._count_values()
        with np.errstate(invalid='ignore'):
            num_clamped = np.count_nonzero(
                ~np.isfinite(values) | (values < 0)
            )

        if num_clamped:
            warnings.warn(self._msg['clamp'] % num_clamped, CountClampWarning)

        self.logger.info(self._msg['size'], self.catalogue_size())


class CatalogueWriter:
    """Delimited-text catalogue writer.

    This is a context manager which opens (and truncates) the output file
    and writes the header on entry, and closes the file on exit.  If an
    exception propagates, the partial catalogue file is removed.

    Parameters
    ----------
    output_path : *str or* :class:`pathlib.Path`
        Catalogue output file path.
    delimiter : str, optional
        Field separator (default is ``','``).

    Attributes
    ----------
    num_records : int
        Number of records written.

    Examples
    --------
    >>> with CatalogueWriter("catalogue.dat") as writer:  # doctest: +SKIP
    ...     writer.write(CatalogueRecord(45., 30., 0.5, 0.1, -0.2))

    """

    HEADINGS = ('ra', 'dec', 'z', 'e1', 'e2')

    PRECISION = 10

    def __init__(self, output_path, delimiter=','):

        self.logger = logging.getLogger(self.__class__.__name__)

        self.output_path = output_path
        self.delimiter = delimiter
        self.num_records = 0

        self._file = None
        self._format = '.{}g'.format(self.PRECISION)

    def __enter__(self):

        self.logger.info("Output catalogue file name is %s.", self.output_path)

        try:
            self._file = open(self.output_path, 'w')
        except OSError as err:
            raise OutputOpenError(
                f"Cannot open catalogue output {self.output_path}: {err}"
            ) from err

        self.num_records = 0
        self._file.write('#' + self.delimiter.join(self.HEADINGS) + '\n')

        return self

    def __exit__(self, exc_type, exc_value, traceback):

        self._file.close()

        if exc_type is not None:
            try:
                os.remove(self.output_path)
            except FileNotFoundError:
                pass
            self.logger.warning(
                "Removed partial catalogue %s after %d records.",
                self.output_path, self.num_records
            )

        return False

    def write(self, record):
        """Write a catalogue record as one row.

        Parameters
        ----------
        record : :class:`~.CatalogueRecord`
            Catalogue record.

        """
        self._file.write(
            self.delimiter.join(
                format(value, self._format) for value in record
            ) + '\n'
        )
        self.num_records += 1

    def write_all(self, records):
        """Stream catalogue records row by row.

        Parameters
        ----------
        records : iterable of :class:`~.CatalogueRecord`
            Catalogue records.

        Returns
        -------
        int
            Number of records written so far.

        """
        for record in records:
            self.write(record)

        return self.num_records


def make_catalogue(count_map, e1_map, e2_map, config, num_shards=None,
                   comm=None, root=0):
    """Generate a synthetic catalogue from sky maps and write it out.

    Parameters
    ----------
    count_map, e1_map, e2_map : :class:`~map2cat.mapper.sky_maps.SkyMap`
        Galaxy count map and shape component maps.
    config : :class:`~map2cat.surveyor.definition.GenerationConfig`
        Generation parameters.
    num_shards : int or None, optional
        If not `None` (default), generate over this number of pixel
        shards (see :meth:`~.CatalogueGenerator.generate_in_shards`).
        Defaults to the number of processes if `comm` is provided.
    comm : :class:`mpi4py.MPI.Comm` *or None, optional*
        MPI communicator (default is `None`).
    root : int, optional
        Rank of the process writing the catalogue (default is 0).

    Returns
    -------
    num_records : int
        Number of records written.  Zero for process ranks other than
        `root`.

    """
    generator = CatalogueGenerator(count_map, e1_map, e2_map, config)

    if comm is not None and num_shards is None:
        num_shards = comm.size

    if num_shards is None:
        records = generator.generate()
    else:
        records = generator.generate_in_shards(num_shards, comm=comm, root=root)

    if comm is not None and comm.rank != root:
        return 0

    with CatalogueWriter(config.output_path, config.delimiter) as writer:
        num_records = writer.write_all(records)

    logger.info(
        "Catalogue of %d galaxies written to %s.",
        num_records, config.output_path
    )

    return num_records


def synthesise_catalogue(config_file, num_shards=None, comm=None, root=0):
    """Read the configuration, load the sky maps and make the catalogue.

    Parameters
    ----------
    config_file : *str or* :class:`pathlib.Path`
        INI configuration file.
    num_shards : int or None, optional
        Number of pixel shards (default is `None`).
    comm : :class:`mpi4py.MPI.Comm` *or None, optional*
        MPI communicator (default is `None`).
    root : int, optional
        Rank of the process writing the catalogue (default is 0).

    Returns
    -------
    int
        Number of records written.

    """
    config = read_config(config_file)

    count_map, e1_map, e2_map = load_sky_maps(config.map_file)

    return make_catalogue(
        count_map, e1_map, e2_map, config,
        num_shards=num_shards, comm=comm, root=root
    )
