#!/usr/bin/env python

import os
import sys
import argparse
import logging

try:
    import perfact.loggingtools
except ImportError:
    pass

from .helpers import read_config

from .commands.fastforward import FF
from .commands.recent import Recent


class Runner(object):
    """
    Parses arguments to select the correct SubCommand subclass.
    """
    commands = [FF, Recent]
    default_configfile = '/etc/perfact/gitff.py'

    def __init__(self):
        """
        Set up the argument parser with the possible subcommands
        """
        parser = argparse.ArgumentParser(description='''
            Move branches forward to a target commit, but only if no history
            is lost doing so.
        ''')
        parser.add_argument(
            '--config', '-c', type=str,
            help='Path to config (default: %s)' % self.default_configfile,
        )
        parser.add_argument(
            '--repo', '-C', type=str,
            help='Path of the git repository (default: base_dir of config)',
        )
        parser.add_argument(
            '--verbose', '-v', action='store_true',
            help='Also show debug output',
        )
        if 'perfact.loggingtools' in sys.modules:
            perfact.loggingtools.addArgs(parser, name='GitFF')

        # Add all available SubCommand classes as sub-command runners, using
        # either the property "subcommand" or the name of the class.
        # The chosen subcommand class will be available as args.command
        subs = parser.add_subparsers()
        for cls in self.commands:
            name = getattr(cls, 'subcommand', cls.__name__.lower())
            subparser = subs.add_parser(
                name,
                help=cls.__doc__,
            )
            cls.add_args(subparser)
            subparser.set_defaults(command=cls)

        self.parser = parser

        # These are set by parse()
        self.args = None
        self.logger = None
        self.config = None
        self.command = None

    def setup_logger(self, args):
        if 'perfact.loggingtools' in sys.modules:
            return perfact.loggingtools.createLogger(args=args, name='GitFF')

        logger = logging.getLogger('GitFF')
        logger.setLevel(logging.DEBUG if args.verbose else logging.INFO)
        if not logger.handlers:
            logger.addHandler(logging.StreamHandler())
        logger.propagate = True
        return logger

    def parse(self, *argv):
        """
        Parse the given arguments and set the command accordingly. If no
        arguments are given, sys.argv is used. Raises ConfigurationError for
        invalid combinations of arguments, before the repository is opened.
        """
        args = self.parser.parse_args(argv if argv else None)
        if getattr(args, 'command', None) is None:
            self.parser.error('No sub-command given')
        self.args = args
        self.logger = self.setup_logger(args)

        # An explicitly given config file must exist, the default one is
        # optional
        configfile = args.config or self.default_configfile
        self.config = read_config(
            configfile,
            required=args.config is not None,
        )
        self.logger.debug(
            'Using config %s', configfile
            if os.path.exists(configfile) else 'defaults'
        )

        self.command = args.command(
            args=self.args,
            logger=self.logger,
            config=self.config,
        )
        self.command.check_args()

        return self.command

    def run(self, *argv):
        """
        Parse arguments and run command
        """
        return self.parse(*argv).run()
