"""Centralize running of external commands, providing logging and tracking.
"""
import collections
import os
import subprocess

from lynchseq import utils
from lynchseq.log import logger, logger_cl, logger_stdout


class CommandCancelled(Exception):
    """A running external command was terminated on cancellation.
    """
    pass

def run(cmd, descr=None, data=None, checks=None, log_error=True,
        log_stdout=False, env=None, cancel=None, stdout_file=None):
    """Run the provided command, logging details and checking for errors.

    cmd is a list of program arguments, converted to strings. Providing
    `stdout_file` captures standard output there instead of the log.
    `cancel` is an optional threading.Event that terminates the process
    when set.
    """
    if descr:
        descr = _descr_str(descr, data)
        logger.debug(descr)
    try:
        logger_cl.debug(" ".join(str(x) for x in cmd))
        _do_run(cmd, checks, log_stdout, env=env, cancel=cancel, stdout_file=stdout_file)
    except (subprocess.CalledProcessError, IOError) as e:
        if log_error:
            logger.debug("Command failed%s: %s" % (" (%s)" % descr if descr else "", e))
        raise

def _descr_str(descr, data):
    """Add additional useful information from data to description string.
    """
    if data is not None:
        name = getattr(data, "sample_id", None)
        if name and name not in descr:
            descr = "{0} : {1}".format(descr, name)
    return descr

def _do_run(cmd, checks, log_stdout=False, env=None, cancel=None, stdout_file=None):
    """Perform running and check results, raising errors for issues.
    """
    cmd = [str(x) for x in cmd]
    out_handle = open(stdout_file, "wb") if stdout_file else None
    try:
        s = subprocess.Popen(
            cmd,
            stdout=out_handle or subprocess.PIPE,
            stderr=subprocess.PIPE if out_handle else subprocess.STDOUT,
            close_fds=True,
            env=env,
        )
        output = s.stderr if out_handle else s.stdout
        debug_stdout = collections.deque(maxlen=100)
        while 1:
            if cancel is not None and cancel.is_set():
                s.terminate()
                s.wait()
                output.close()
                raise CommandCancelled(" ".join(cmd))
            line = output.readline().decode("utf-8", errors="replace")
            if line.rstrip():
                debug_stdout.append(line)
                if log_stdout:
                    logger_stdout.debug(line.rstrip())
                else:
                    logger.debug(line.rstrip())
            exitcode = s.poll()
            if exitcode is not None:
                for line in output:
                    debug_stdout.append(line.decode("utf-8", errors="replace"))
                if exitcode != 0:
                    error_msg = " ".join(cmd)
                    error_msg += "\n"
                    error_msg += "".join(debug_stdout)
                    s.communicate()
                    output.close()
                    raise subprocess.CalledProcessError(exitcode, error_msg)
                else:
                    break
        s.communicate()
        output.close()
    finally:
        if out_handle:
            out_handle.close()
    # Check for problems not identified by shell return codes
    if checks:
        for check in checks:
            if not check():
                raise IOError("External command failed")

# checks for validating run completed successfully

def file_nonempty(target_file):
    def check():
        ok = utils.file_exists(target_file)
        if not ok:
            logger.info("Did not find non-empty output file {0}".format(target_file))
        return ok
    return check

def file_exists(target_file):
    def check():
        ok = os.path.exists(target_file)
        if not ok:
            logger.info("Did not find output file {0}".format(target_file))
        return ok
    return check
