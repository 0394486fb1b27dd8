"""Handle file based transactions for outputs that must never be half written.

Output files are written to temporary locations during processing and
moved to the final location when finished. A report either exists
complete or does not exist at all, independent of how the run was
interrupted.
"""
import contextlib
import os
import shutil
import tempfile

from lynchseq import utils


DEFAULT_TMP = 'lynchseqtx'


@contextlib.contextmanager
def tx_tmpdir(config=None, base_dir=None, remove=True):
    """Context manager to create and remove a transactional temporary directory.

    Uses the configured `tmp_dir` if present, otherwise a `lynchseqtx`
    directory inside the project directory, base_dir or the current directory.
    """
    base_dir = base_dir or os.getcwd()
    tmpdir_base = utils.get_abspath(_get_base_tmpdir(config, base_dir))
    utils.safe_makedir(tmpdir_base)
    tmp_dir = tempfile.mkdtemp(dir=tmpdir_base)
    try:
        yield tmp_dir
    finally:
        if remove:
            utils.remove_safe(tmp_dir)


def _get_base_tmpdir(config, fallback_base_dir):
    config_tmpdir = getattr(config, "tmp_dir", None)
    base_dir = getattr(config, "project_dir", None) or fallback_base_dir
    return config_tmpdir or os.path.join(base_dir, DEFAULT_TMP)


@contextlib.contextmanager
def file_transaction(*config_and_files):
    """Wrap file generation in a transaction, moving to output if finishes.

    The initial argument can be the run configuration, used to identify
    the temporary directory to create transactional files in.
    """
    with _flatten_plus_safe(config_and_files) as (safe_names, orig_names):
        # remove any half-finished transactions
        for safe in safe_names:
            utils.remove_safe(safe)
        if len(safe_names) == 1:
            yield safe_names[0]
        else:
            yield tuple(safe_names)

        for safe, orig in zip(safe_names, orig_names):
            if os.path.exists(safe):
                _move_file_with_sizecheck(safe, orig)


def _move_file_with_sizecheck(tx_file, final_file):
    """Move transaction file to final location,
       with size checks avoiding failed transfers.

       Creates an empty file with '.lynchseqtmp' extension in the destination
       location, which serves as a flag. If a file like that is present,
       it means that transaction didn't finish successfully.
    """
    utils.safe_makedir(os.path.dirname(final_file))
    tmp_file = final_file + ".lynchseqtmp"
    open(tmp_file, 'wb').close()

    want_size = utils.get_size(tx_file)
    shutil.move(tx_file, final_file)
    transfer_size = utils.get_size(final_file)

    assert want_size == transfer_size, (
        'distributed.transaction.file_transaction: File copy error: '
        'file on temporary storage ({}) size {} bytes '
        'does not equal size of file after transfer to '
        'final location ({}) size {} bytes'.format(
            tx_file, want_size, final_file, transfer_size)
    )
    utils.remove_safe(tmp_file)


@contextlib.contextmanager
def _flatten_plus_safe(config_and_files):
    """Flatten names of files and create temporary file names.
    """
    config, rollback_files = _normalize_args(config_and_files)
    with tx_tmpdir(config) as tmpdir:
        tx_files = [os.path.join(tmpdir, os.path.basename(f))
                    for f in rollback_files]
        yield tx_files, rollback_files


def _normalize_args(config_and_files):
    config, files = _get_args(config_and_files)
    rollback_files = [f for f in _flatten(files) if f]
    return (config, rollback_files)


def _get_args(config_and_files):
    if not isinstance(config_and_files[0], (str, list, tuple)) or hasattr(config_and_files[0], "_fields"):
        return config_and_files[0], config_and_files[1:]
    return None, config_and_files


def _flatten(iterable):
    for elem in iterable:
        if isinstance(elem, (tuple, list)):
            for i in elem:
                yield i
        else:
            yield elem
