#!/usr/bin/env python

import time

from ..subcommand import SubCommand
from ..errors import ConfigurationError
from ..helpers import columns


def recent_branches(repo, local=True, remote=False, prefix=''):
    '''
    Return pairs of (branch, commit time of its tip), the most recently
    changed branch first. Only branches whose name starts with prefix are
    included.
    '''
    result = [
        (branch, repo.commit_time(branch.tip))
        for branch in repo.iter_branches(local=local, remote=remote)
        if branch.name.startswith(prefix)
    ]
    # sort by name first so branches with the same time keep a stable order
    result.sort(key=lambda item: item[0].name)
    result.sort(key=lambda item: item[1], reverse=True)
    return result


class Recent(SubCommand):
    '''List branches, most recently committed to first'''

    @staticmethod
    def add_args(parser):
        parser.add_argument(
            '--all', '-a', action='store_true', default=False,
            dest='all_branches',
            help='Also show remote-tracking branches',
        )
        parser.add_argument(
            '--remote', '-r', type=str,
            help='Only show branches of the given remote',
        )

    def check_args(self):
        if self.args.all_branches and self.args.remote:
            raise ConfigurationError('--all and --remote are exclusive')

    @SubCommand.with_repository
    def run(self):
        if self.args.remote:
            branches = recent_branches(
                self.repo, local=False, remote=True,
                prefix=self.args.remote + '/',
            )
        else:
            branches = recent_branches(
                self.repo, local=True, remote=self.args.all_branches,
            )

        fmt = self.config['date_format']
        rows = [
            (
                '* ' if branch.current else '  ',
                branch.name,
                '({})'.format(time.strftime(fmt, time.localtime(timestamp))),
            )
            for branch, timestamp in branches
        ]
        for line in columns(rows):
            print(line)
