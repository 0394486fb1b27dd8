"""Helpful utilities for building analysis pipelines.
"""
import glob
import gzip
import os
import shutil
import sys
import time


def safe_makedir(dname):
    """Make a directory if it doesn't exist, handling concurrent race conditions.
    """
    if not dname:
        return dname
    num_tries = 0
    max_tries = 5
    while not os.path.exists(dname):
        # we could get an error here if multiple workers are creating
        # the directory at the same time.
        try:
            os.makedirs(dname)
        except OSError:
            if num_tries > max_tries:
                raise
            num_tries += 1
            time.sleep(2)
    return dname

def file_exists(fname):
    """Check if a file exists and is non-empty.
    """
    try:
        return bool(fname) and os.path.exists(fname) and os.path.getsize(fname) > 0
    except OSError:
        return False

def get_size(path):
    """ Returns the size in bytes if `path` is a file,
        or the size of all files in `path` if it's a directory.
        Analogous to `du -s`.
    """
    if os.path.isfile(path):
        return os.path.getsize(path)
    return sum(get_size(os.path.join(path, f)) for f in os.listdir(path))

def remove_safe(f):
    try:
        if os.path.isdir(f):
            shutil.rmtree(f)
        else:
            os.remove(f)
    except OSError:
        pass

def is_gzipped(fname):
    _, ext = os.path.splitext(fname)
    return ext in [".gz", ".bgz"]

def open_gzipsafe(f, is_gz=False):
    if is_gzipped(f) or is_gz:
        return gzip.open(f, "rt", encoding="utf-8")
    else:
        return open(f, encoding="utf-8")

def get_abspath(path, pardir=None):
    if pardir is None:
        pardir = os.getcwd()
    path = os.path.expandvars(os.path.expanduser(path))
    return os.path.normpath(os.path.join(pardir, path))

def get_lynchseq_bin():
    return os.path.dirname(os.path.realpath(sys.executable))

def get_all_conda_bins():
    """Retrieve all possible conda bin directories, including environments.
    """
    lynchseq_bin = get_lynchseq_bin()
    conda_dir = os.path.dirname(lynchseq_bin)
    return [lynchseq_bin] + sorted(glob.glob(os.path.join(conda_dir, "envs", "*", "bin")))

def which(program, env=None):
    """ returns the path to an executable or None if it can't be found"""
    if env is None:
        env = os.environ.copy()

    def is_exe(fpath):
        return os.path.isfile(fpath) and os.access(fpath, os.X_OK)

    fpath, fname = os.path.split(program)
    if fpath:
        if is_exe(program):
            return program
    else:
        for path in env.get("PATH", "").split(os.pathsep):
            exe_file = os.path.join(path, program)
            if is_exe(exe_file):
                return exe_file
        for path in get_all_conda_bins():
            exe_file = os.path.join(path, program)
            if is_exe(exe_file):
                return exe_file
    return None
