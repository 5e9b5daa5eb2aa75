#!/usr/bin/env python


class GitFFError(Exception):
    '''Base class for all errors that abort a gitff run.'''


class ConfigurationError(GitFFError):
    '''Invalid combination of options, detected before the repository is
    touched.'''


class RepositoryError(GitFFError):
    '''The repository could not be opened, read or updated.'''


class TargetUnresolved(GitFFError):
    '''The target specifier does not name exactly one commit.'''

    def __init__(self, spec, reason=None):
        self.spec = spec
        self.reason = reason
        msg = "Can't resolve %s" % spec
        if reason:
            msg += ': %s' % reason
        super().__init__(msg)


class UpdateFailed(GitFFError):
    '''A ref update failed for a reason other than a checkout conflict.'''
