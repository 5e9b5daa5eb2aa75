#!/usr/bin/env python

from .helpers import Namespace
from .repository import open_repository


class SubCommand(Namespace):
    '''
    Base class for different sub-commands to be used by gitff.
    '''

    @staticmethod
    def add_args(parser):
        ''' Overwrite to add arguments specific to sub-command. '''
        pass

    def check_args(self):
        '''
        Overwrite to reject invalid combinations of arguments by raising
        ConfigurationError. Called by the runner before anything is run.
        '''
        pass

    @property
    def repo_path(self):
        return getattr(self.args, 'repo', None) or self.config['base_dir']

    @staticmethod
    def with_repository(func):
        """
        Decorator for instance methods that need the repository, which is
        available as self.repo while the method runs and released afterwards.
        """
        def wrapper(self, *args, **kwargs):
            with open_repository(self.repo_path) as repo:
                self.repo = repo
                try:
                    return func(self, *args, **kwargs)
                finally:
                    self.repo = None

        return wrapper

    def run(self):
        '''
        Overwrite for the action that is to be performed if this subcommand is
        chosen.
        '''
        print(self.args)
