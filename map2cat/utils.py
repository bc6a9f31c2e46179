"""
Utilities (:mod:`~map2cat.utils`)
===========================================================================

Provide utilities for processing and logging as well as the exception and
warning classes shared by the package.


**Processing and monitoring**

.. autosummary::

    Progress
    setup_logger
    clean_warning_format
    allocate_tasks
    allocate_segments


**Exceptions and warnings**

.. autosummary::

    ConfigValidationError
    MapLoadError
    OutputOpenError
    CountClampWarning

|

"""
import logging
import sys
import time

import numpy as np

__all__ = [
    'Progress',
    'setup_logger',
    'clean_warning_format',
    'allocate_tasks',
    'allocate_segments',
    'ConfigValidationError',
    'MapLoadError',
    'OutputOpenError',
    'CountClampWarning',
]


# Processing and monitoring utilities
# -----------------------------------------------------------------------------

class Progress:
    """Progress status of tasks.

    If multiple parallel processes exist, progress status is only reported
    for the first and last of them.

    Parameters
    ----------
    task_length : int
        Total number of tasks.
    num_checkpts : int, optional
        Number of checkpoints for reporting progress (default is 4).
    process_name : str or None, optional
        If not `None` (default), this is the process name to be logged.
    logger : :class:`logging.Logger` *or None, optional*
        Logger.  If `None` (default), a print statement is issued.
    comm : :class:`mpi4py.MPI.Comm` *or None, optional*
        MPI communicator (default is `None`).
    root : int, optional
        Root process number (default is 0).

    Attributes
    ----------
    process_name : str or None, optional
        If not `None` (default), this is the process name to be logged.
    task_length : int
        Total number of tasks.
    progress_checkpts : float
        Scheduled progress check points, ``0 < progress_checkpts <= 1``.
    last_checkpt : int
        Index of the last passed checkpoint,
        ``0 <= last_checkpt <= num_checkpts``.

    Examples
    --------
    >>> npix = 100
    >>> p = Progress(npix, process_name='null test')
    >>> for pixel in range(npix):
    ...     p.report(pixel)
    Progress for the single 'null test' process: 25% computed.
    Progress for the single 'null test' process: 50% computed.
    Progress for the single 'null test' process: 75% computed.
    Progress for the single 'null test' process: 100% computed.

    """

    def __init__(self, task_length, num_checkpts=4, process_name=None,
                 logger=None, comm=None, root=0):

        self.process_name = process_name
        self.task_length = task_length
        self.logger = logger

        if self.process_name is None:
            self._proc_name = ""
        else:
            self._proc_name = "'{}' ".format(process_name)

        if comm is None:
            self._which_proc = 'single'
        else:
            if comm.rank == root:
                self._which_proc = "first"
            elif comm.rank == comm.size - 1:
                self._which_proc = "last"
            else:
                self._which_proc = None

        self.progress_checkpts = \
            np.linspace(1. / num_checkpts, 1., num=num_checkpts)
        self.last_checkpt = 0

        self._progressor = self._initialise()

    def report(self, current_position):
        """Report the current position in the tasks.

        Parameters
        ----------
        current_position : int
            Index of the current position in the tasks (starting from 0).

        """
        next(self._progressor)
        self._progressor.send(current_position)

    def _initialise(self):

        while True:
            current_idx = yield

            current_progress = (current_idx + 1) / self.task_length
            place_in_checkpts = np.searchsorted(
                self.progress_checkpts, current_progress, side='right'
            )

            if place_in_checkpts > self.last_checkpt \
                    and self._which_proc is not None:
                if self.logger is None:
                    print(
                        "Progress for the {} {}process: {:.0f}% computed."
                        .format(
                            self._which_proc, self._proc_name,
                            100 * current_progress
                        )
                    )
                else:
                    self.logger.info(
                        "Progress for the %s %sprocess: %.0f%% computed.",
                        self._which_proc, self._proc_name,
                        100 * current_progress
                    )
                self.last_checkpt = place_in_checkpts
            yield


class _LoggerFormatter(logging.Formatter):
    """Customised logging formatter.

    """

    _start_time = time.time()

    def format(self, record):
        """Modify the default logging record by adding elapsed time in
        hours, minutes and seconds.

        Parameters
        ----------
        record : :class:`Logging.LogRecord`
            Default logging record object.

        Returns
        -------
        str
            Modified record message with elapsed time.

        """
        elapsed_time = record.created - self._start_time
        h, remainder_time = divmod(elapsed_time, 3600)
        m, s = divmod(remainder_time, 60)

        record.elapsed = "(+{}:{:02d}:{:02d})".format(int(h), int(m), int(s))

        return logging.Formatter.format(self, record)


def setup_logger():
    """Return the root logger formatted with elapsed time and piped
    to ``stdout``.

    Returns
    -------
    logger : :class:`logging.Logger`
        Formatted root logger.

    """
    logger = logging.getLogger()
    logging_handler = logging.StreamHandler(sys.stdout)
    logging_formatter = _LoggerFormatter(
        fmt='[%(asctime)s %(elapsed)s %(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging_handler.setFormatter(logging_formatter)
    logger.addHandler(logging_handler)

    return logger


# pylint: disable=unused-argument
def clean_warning_format(message, category, filename, lineno, line=None):
    """Clean warning message format.

    Parameters
    ----------
    message, category, filename, lineno : str
        Warning message, warning catagory, origin file name, line number.
    line : str or None, optional
        Source code line to be included in the warning message (default is
        `None`).

    Returns
    -------
    str
        Warning message format.

    """
    filename = filename if "map2cat" not in filename \
        else "".join(filename.partition("map2cat")[1:])

    return '%s:%s: %s: %s\n' % (filename, lineno, category.__name__, message)


def allocate_tasks(total_task, total_proc):
    """Allocate tasks to processes (or shards) as evenly as possible.

    If `total_proc` processes share `total_task` tasks, then this decides
    the numbers of tasks, `tasks`, different processes receive: the
    rank-``i`` process receives ``tasks[i]`` many tasks.

    Parameters
    ----------
    total_task : int
        Total number of tasks.
    total_proc : int
        Total number of processes.

    Returns
    -------
    tasks : list of int
        Number of tasks for each process.

    """
    try:
        total_task, total_proc = map(int, (total_task, total_proc))
    except TypeError as err:
        raise TypeError(
            "`total_task` and `total_proc` must have integer values."
        ) from err

    if total_proc < 1:
        raise ValueError("`total_proc` must be a positive integer.")

    num_task_remaining, num_proc_remaining, tasks = total_task, total_proc, []

    while num_proc_remaining > 0:
        num_task_assigned = num_task_remaining // num_proc_remaining
        tasks.append(num_task_assigned)
        num_task_remaining -= num_task_assigned
        num_proc_remaining -= 1

    return tasks


def allocate_segments(tasks=None, total_task=None, total_proc=None):
    """Allocate contiguous segments of tasks to each process by the number
    of tasks it receives and its rank.

    For instance, if the rank-``i`` process receives ``tasks[i]`` tasks
    (e.g. assigned by :func:`allocate_tasks`), then this function assigns
    a slice of the indexed tasks it should receive, with the indices in
    ascending order in correspondence with ranks of the processes.

    Parameters
    ----------
    tasks : list of int or None, optional
        Number of tasks each process receives.  Cannot be `None` if either
        `total_task` or `total_proc` is `None`.  If not `None`,
        `total_task` and `total_proc` are both ignored.
    total_task : int or None, optional
        Total number of tasks.  Ignored if `tasks` is not `None`, otherwise
        cannot be `None`.
    total_proc : int or None, optional
        Total number of processes.  Ignored if `tasks` is not `None`,
        otherwise cannot be `None`.

    Returns
    -------
    segments : list of slice
        Index slice of the segment of tasks that each process should
        receive.

    """
    if tasks is None:
        tasks = allocate_tasks(total_task, total_proc)
    total_proc = len(tasks)

    breakpoints = np.insert(np.cumsum(tasks), 0, values=0)
    segments = [
        slice(int(breakpoints[rank]), int(breakpoints[rank + 1]))
        for rank in range(total_proc)
    ]

    return segments


# Exceptions and warnings
# -----------------------------------------------------------------------------

class ConfigValidationError(ValueError):
    """Raise an exception when configuration values are missing or
    malformed.

    """


class MapLoadError(OSError):
    """Raise an exception when sky maps cannot be loaded or are not
    aligned with each other.

    """


class OutputOpenError(OSError):
    """Raise an exception when the catalogue output cannot be opened for
    writing.

    """


class CountClampWarning(UserWarning):
    """Emit a warning when negative or non-finite pixel counts are clamped
    to zero galaxies.

    """
