"""Synthesise a galaxy catalogue from count and shape maps.

"""
import os
import sys
from argparse import ArgumentParser
from pathlib import Path

try:
    from application import application_logger as logger
    from application import confirm_directory, display_args
    from map2cat.mapper import synthesise_catalogue
    from map2cat.surveyor import read_config
except ImportError:
    # Adds to Python search path.
    sys.path.insert(0, os.path.join(
        os.path.dirname(os.path.abspath(__file__)), "../../"
    ))

    from application import application_logger as logger
    from application import confirm_directory, display_args
    from map2cat.mapper import synthesise_catalogue
    from map2cat.surveyor import read_config


@display_args(logger=logger)
def initialise():
    """Initialise the program parameters passed from ``stdin``.

    Returns
    -------
    parsed_args : :class:`argparse.Namespace`
        Parsed parameter namespace.

    """
    parser = ArgumentParser(prog='synthesise catalogue')

    parser.add_argument(
        '--config-file', type=str, required=True,
        help="INI configuration file with 'input' and 'output' sections"
    )
    parser.add_argument(
        '--num-shards', type=int, default=None,
        help="number of pixel shards with independent random streams"
    )
    parser.add_argument(
        '--mpi', action='store_true',
        help="distribute pixel shards over MPI processes"
    )

    parsed_args = parser.parse_args()

    return parsed_args


def synthesise(config_file, num_shards=None, comm=None):
    """Make a catalogue as specified by a configuration file.

    Parameters
    ----------
    config_file : str
        Configuration file path.
    num_shards : int or None, optional
        Number of pixel shards (default is `None`).
    comm : :class:`mpi4py.MPI.Comm` *or None, optional*
        MPI communicator (default is `None`).

    Returns
    -------
    int
        Number of galaxies in the catalogue.

    """
    if comm is None or comm.rank == 0:
        output_path = read_config(config_file).output_path
        confirm_directory(Path(output_path).absolute().parent)

    return synthesise_catalogue(config_file, num_shards=num_shards, comm=comm)


if __name__ == '__main__':

    params = initialise()

    if params.mpi:
        from mpi4py import MPI
        comm = MPI.COMM_WORLD
    else:
        comm = None

    synthesise(params.config_file, num_shards=params.num_shards, comm=comm)
