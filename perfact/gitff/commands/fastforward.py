#!/usr/bin/env python

from ..subcommand import SubCommand
from ..errors import ConfigurationError, UpdateFailed
from ..fastforward import FastForward, Outcome, select_branches
from ..helpers import columns


class CheckoutProgress(object):
    '''Log checkout progress each time it advanced by at least step
    percent.'''
    def __init__(self, logger, step=10):
        self.logger = logger
        self.step = step
        self.last = None

    def __call__(self, percent, completed, total):
        if not total:
            return
        if self.last is not None and completed < total \
                and percent < self.last + self.step:
            return
        self.last = percent
        self.logger.info(
            'Updating files: %d%% (%d/%d)', percent, completed, total,
        )


class FF(SubCommand):
    '''
    Fast-forward branches to a target commit, checking out the working tree
    if the current branch is moved
    '''
    subcommand = 'ff'

    @staticmethod
    def add_args(parser):
        parser.add_argument(
            '--list', '-l', action='store_true', default=False,
            help='Only list how the branches relate to the target.',
        )
        parser.add_argument(
            '--only', '-o', action='store_true', default=False,
            help='With --list, only show branches that can be fast-forwarded.',
        )
        parser.add_argument(
            '--not', '-n', action='store_true', default=False, dest='not_ff',
            help='''With --list, only show branches that can not be
            fast-forwarded.''',
        )
        parser.add_argument(
            '--all', '-a', action='store_true', default=False,
            dest='all_branches',
            help='Fast-forward all local branches.',
        )
        parser.add_argument(
            '--remotes', '-r', action='store_true', default=False,
            help='With --list, also show remote-tracking branches.',
        )
        parser.add_argument(
            '--dry-run', action='store_true', default=False,
            help='Only show what would be done.',
        )
        parser.add_argument(
            'names', type=str, nargs='+', metavar='branch',
            help='''Branches to be fast-forwarded, followed by the target
            (commit ID, branch or tag). Without branches, the current branch
            is used.''',
        )

    @property
    def target_spec(self):
        return self.args.names[-1]

    @property
    def branch_names(self):
        return self.args.names[:-1]

    def check_args(self):
        args = self.args
        if (args.only or args.not_ff) and not args.list:
            raise ConfigurationError('--only and --not require --list')
        if args.only and args.not_ff:
            raise ConfigurationError('--only and --not are exclusive')
        if args.remotes and not args.list:
            raise ConfigurationError('--remotes requires --list')
        if args.all_branches and self.branch_names:
            raise ConfigurationError('--all can not be used with branch names')
        if args.all_branches and args.list:
            raise ConfigurationError(
                '--all can not be used with --list, which shows all branches'
            )
        if args.dry_run and args.list:
            raise ConfigurationError('--dry-run can not be used with --list')

    @SubCommand.with_repository
    def run(self):
        ff = FastForward(
            self.repo, self.target_spec,
            logger=self.logger,
            reflog_message=self.config['reflog_message'],
        )
        if self.args.list:
            self.show_list(ff)
        elif self.args.dry_run:
            self.show_plan(ff)
        else:
            self.fastforward(ff)

    def show_list(self, ff):
        branches = select_branches(
            self.repo,
            names=self.branch_names,
            all_branches=not self.branch_names,
            remotes=self.args.remotes,
            logger=self.logger,
        )
        results = ff.classify(branches)
        if self.args.only:
            results = [r for r in results if r.fast_forward]
        if self.args.not_ff:
            results = [r for r in results if not r.fast_forward]

        if self.args.only or self.args.not_ff:
            for result in results:
                print(result.name)
            return

        rows = [
            (
                '* ' if result.current else '  ',
                result.name,
                result.describe(self.target_spec),
            )
            for result in results
        ]
        for line in columns(rows):
            print(line)

    def show_plan(self, ff):
        branches = select_branches(
            self.repo,
            names=self.branch_names,
            all_branches=self.args.all_branches,
            logger=self.logger,
        )
        for result in ff.classify(branches):
            if result.up_to_date:
                print('Branch {} already on {}'.format(
                    result.name, self.target_spec,
                ))
            elif result.fast_forward:
                print('Would fast-forward {} to {}{}'.format(
                    result.name, self.target_spec,
                    ' and update the working tree' if result.current else '',
                ))
            else:
                self.logger.warning(
                    'Not possible to fast-forward %s', result.name,
                )

    def report(self, result):
        '''Show the outcome for one branch.'''
        if result.outcome is Outcome.APPLIED:
            print('Fast-forwarded {} to {}'.format(
                result.name, self.target_spec,
            ))
        elif result.outcome is Outcome.UP_TO_DATE:
            print('Branch {} already on {}'.format(
                result.name, self.target_spec,
            ))
        elif result.outcome is Outcome.NOT_FAST_FORWARD:
            self.logger.warning('Not possible to fast-forward %s', result.name)
        elif result.outcome is Outcome.CHECKOUT_CONFLICT:
            self.logger.error(
                "Can't fast-forward %s, checkout conflict in:", result.name,
            )
            for path in result.conflicts:
                self.logger.error('    %s', path)

    def fastforward(self, ff):
        branches = select_branches(
            self.repo,
            names=self.branch_names,
            all_branches=self.args.all_branches,
            logger=self.logger,
        )
        progress = None
        if self.config['show_progress']:
            progress = CheckoutProgress(
                self.logger, step=self.config['progress_step'],
            )
        self.results = ff.apply(branches, progress=progress, report=self.report)
        if self.results and self.results[-1].fatal:
            failed = self.results[-1]
            raise UpdateFailed('Unable to fast-forward {}: {}'.format(
                failed.name, failed.reason,
            ))
