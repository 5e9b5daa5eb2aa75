import sys
import logging

from perfact.gitff.main import Runner
from perfact.gitff.errors import GitFFError


def _run(*argv):
    '''Run the given command line, returning the exit status.'''
    try:
        Runner().run(*argv)
    except GitFFError as err:
        logging.getLogger('GitFF').error('Error: %s', err)
        return 1
    except SystemExit as err:
        # argparse already printed the usage error, --help exits with 0
        return 1 if err.code else 0
    return 0


def gitff():
    sys.exit(_run(*sys.argv[1:]))


def git_ff():
    '''Stand-alone variant of "gitff ff", usable as "git ff".'''
    sys.exit(_run('ff', *sys.argv[1:]))


def git_recent():
    '''Stand-alone variant of "gitff recent", usable as "git recent".'''
    sys.exit(_run('recent', *sys.argv[1:]))
