"""
###########################################################################
Application Pipeline | ``Map2Cat``
###########################################################################

This is the application pipeline of ``map2cat``, a Python package
making synthetic galaxy catalogues from pixelised count and shape maps.

"""
import logging
import os
import sys
import warnings
from functools import wraps
from pathlib import Path
from pprint import pformat


def display_args(logger=None, comm=None):
    """Display parsed command-line arguments parsed by a function (
    e.g. `initialise` as a dictionary.

    Parameters
    ----------
    logger : :class:`logging.Logger` *or None, optional*
        If not `None` (default), print to logger.
    comm : :class:`mpi4py.Comm` *or None*, optional
        MPI communicator.

    """
    def decorator(argparse_func):
        @wraps(argparse_func)
        def wrapper(*args, **kwargs):
            parsed_args = argparse_func(*args, **kwargs)

            if comm is None or comm.rank == 0:
                if logger is not None:
                    logger.info(
                        "\n%s\n%s",
                        "---Program parameters---",
                        pformat(vars(parsed_args))
                        .replace("{", " ").replace("}", " ")
                    )
                else:
                    print(
                        "---Program parameters---",
                        pformat(vars(parsed_args))
                        .replace("{", " ").replace("}", " "),
                        "",
                        sep="\n"
                    )

            return parsed_args
        return wrapper
    return decorator


def confirm_directory(dir_path):
    """Ensure a given directoy path exists.

    Parameters
    ----------
    dir_path : str or :class:`pathlib.Path`
        Directory path.

    Returns
    -------
    bool
        `True` if `dir_path` exists or has been created.

    """
    dir_path = Path(dir_path)

    if not os.path.exists(dir_path):
        os.makedirs(dir_path)

    return os.path.exists(dir_path)


# Application pipeline directory.
application_dir = os.path.dirname(os.path.abspath(__file__))

# Map2Cat package import.
try:
    from map2cat.utils import clean_warning_format, setup_logger
except ImportError:
    sys.path.insert(0, os.path.join(application_dir, "../"))
    from map2cat.utils import clean_warning_format, setup_logger

# Application pipeline logger.
application_logger = setup_logger()

# Set logging and warning behaviour.
logging.captureWarnings(True)
application_logger.setLevel(logging.INFO)

warnings.formatwarning = clean_warning_format
