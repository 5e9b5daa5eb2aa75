import time
import logging

import pytest

from perfact.gitff.main import Runner
from perfact.gitff.errors import ConfigurationError, TargetUnresolved
from perfact.gitff.errors import RepositoryError, UpdateFailed
from perfact.gitff import repository
from perfact.gitff import scripts


class TestCommands():
    '''
    All tests defined in this class automatically use a repository with the
    following history and a config file pointing to it:

    - main (checked out) and feature point to the initial commit
    - upstream is two commits ahead of the initial commit
    - topic has one commit on top of the initial commit that is not part of
      upstream
    '''

    @pytest.fixture(scope='function', autouse=True)
    def setup(self, environment):
        self.repo = environment.repo
        self.config = environment.config
        self.initial = self.repo.commit('a.txt', 'one\n', 'init')
        self.gitrun('branch', 'feature')
        self.gitrun('checkout', '-q', '-b', 'upstream')
        self.repo.commit('a.txt', 'two\n')
        self.target = self.repo.commit('b.txt', 'new\n')
        self.gitrun('checkout', '-q', '-b', 'topic', 'main')
        self.diverged = self.repo.commit('d.txt', 'topic\n')
        self.gitrun('checkout', '-q', 'main')

    def run(self, *cmd):
        "Create runner and run"
        self.runner = Runner()
        return self.runner.run('--config', self.config.path, *cmd)

    def gitrun(self, *cmd):
        self.repo.git(*cmd)

    def refs(self):
        return self.repo.output('show-ref', '--heads')

    def test_ff_current(self, capsys):
        """
        Without branch names, the checked out branch is fast-forwarded together
        with the working tree.
        """
        self.run('ff', 'upstream')
        assert self.repo.rev('main') == self.target
        assert self.repo.read('b.txt') == 'new\n'
        assert self.repo.status() == ''
        assert self.repo.rev('feature') == self.initial
        out = capsys.readouterr().out
        assert out == 'Fast-forwarded main to upstream\n'

    def test_ff_twice(self, capsys):
        self.run('ff', 'upstream')
        self.run('ff', 'upstream')
        assert self.repo.rev('main') == self.target
        assert capsys.readouterr().out.splitlines() == [
            'Fast-forwarded main to upstream',
            'Branch main already on upstream',
        ]

    def test_ff_named(self, capsys, caplog):
        """
        Only the named branches are processed, those that can not be
        fast-forwarded are skipped.
        """
        with caplog.at_level(logging.WARNING):
            self.run('ff', 'topic', 'feature', 'missing', 'upstream')
        assert self.repo.rev('feature') == self.target
        assert self.repo.rev('topic') == self.diverged
        assert self.repo.rev('main') == self.initial
        assert capsys.readouterr().out == \
            'Fast-forwarded feature to upstream\n'
        assert 'Not possible to fast-forward topic' in caplog.text
        assert 'Branch missing not found' in caplog.text

    def test_ff_all(self):
        self.run('ff', '--all', self.target)
        assert self.repo.rev('feature') == self.target
        assert self.repo.rev('main') == self.target
        assert self.repo.rev('topic') == self.diverged
        assert self.repo.read('a.txt') == 'two\n'

    def test_ff_tag(self):
        self.gitrun('tag', '-a', 'v1', '-m', 'Version 1', 'upstream')
        self.run('ff', 'v1')
        assert self.repo.rev('main') == self.target

    def test_ff_conflict(self, caplog):
        """
        A local change in a file that would be overwritten prevents the
        fast-forward of the current branch, but not of others.
        """
        self.repo.write('a.txt', 'local\n')
        with caplog.at_level(logging.WARNING):
            self.run('ff', 'feature', 'main', 'upstream')
        assert self.repo.rev('main') == self.initial
        assert self.repo.rev('feature') == self.target
        assert self.repo.read('a.txt') == 'local\n'
        assert "Can't fast-forward main, checkout conflict" in caplog.text
        assert 'a.txt' in caplog.text

    def test_ff_progress(self, caplog):
        with caplog.at_level(logging.INFO, logger='GitFF'):
            self.run('ff', 'upstream')
        assert 'Updating files: 100%' in caplog.text

    def test_ff_dry_run(self, capsys):
        self.run('ff', '--dry-run', 'feature', 'main', 'upstream')
        assert self.repo.rev('main') == self.initial
        assert self.repo.rev('feature') == self.initial
        assert capsys.readouterr().out.splitlines() == [
            'Would fast-forward feature to upstream',
            'Would fast-forward main to upstream and update the working tree',
        ]

    def test_ff_failed_update(self, monkeypatch):
        """
        An error while updating a branch stops the run.
        """
        def fail(self, name, observed, new, message=None):
            raise RepositoryError('Unable to update branch ' + name)

        monkeypatch.setattr(repository.Repository, 'update_branch', fail)
        with pytest.raises(UpdateFailed):
            self.run('ff', 'feature', 'upstream')

    def test_ff_unresolved(self):
        refs = self.refs()
        with pytest.raises(TargetUnresolved):
            self.run('ff', 'nothing')
        assert self.refs() == refs

    def test_list(self, capsys):
        refs = self.refs()
        self.run('ff', '--list', 'upstream')
        assert capsys.readouterr().out.splitlines() == [
            '  feature   fast-forward to upstream',
            '* main      fast-forward to upstream',
            '  topic     non-fast-forward to upstream',
            '  upstream  already on upstream',
        ]
        assert self.refs() == refs

    def test_list_named(self, capsys):
        self.run('ff', '--list', 'topic', 'main', 'upstream')
        assert capsys.readouterr().out.splitlines() == [
            '* main   fast-forward to upstream',
            '  topic  non-fast-forward to upstream',
        ]

    def test_list_filters(self, capsys):
        self.run('ff', '--list', '--only', 'upstream')
        assert capsys.readouterr().out.splitlines() == [
            'feature', 'main', 'upstream',
        ]
        self.run('ff', '--list', '--not', 'upstream')
        assert capsys.readouterr().out.splitlines() == ['topic']

    def test_list_remotes(self, capsys):
        self.gitrun('update-ref', 'refs/remotes/origin/topic', 'topic')
        self.run('ff', '--list', '--remotes', '--not', 'upstream')
        assert capsys.readouterr().out.splitlines() == [
            'topic', 'origin/topic',
        ]

    @pytest.mark.parametrize('cmd', [
        ['ff', '--only', 'upstream'],
        ['ff', '--not', 'upstream'],
        ['ff', '--list', '--only', '--not', 'upstream'],
        ['ff', '--remotes', 'upstream'],
        ['ff', '--all', 'feature', 'upstream'],
        ['ff', '--all', '--list', 'upstream'],
        ['ff', '--dry-run', '--list', 'upstream'],
        ['recent', '--all', '--remote', 'origin'],
    ])
    def test_invalid_options(self, cmd, monkeypatch):
        """
        Invalid combinations of options are rejected before the repository is
        opened.
        """
        def fail(*args, **kw):
            raise AssertionError('Repository opened')

        monkeypatch.setattr(repository.Repository, '__init__', fail)
        with pytest.raises(ConfigurationError):
            Runner().parse('--config', self.config.path, *cmd)
        assert scripts._run('--config', self.config.path, *cmd) == 1

    def test_exit_codes(self):
        assert scripts._run('--config', self.config.path, 'ff', 'upstream') \
            == 0
        assert scripts._run('--config', self.config.path, 'ff', 'nothing') \
            == 1
        assert scripts._run('--config', '/nonexistent.py', 'ff', 'upstream') \
            == 1

    @pytest.mark.parametrize('cmd', [
        [],
        ['ff'],
        ['ff', '--list'],
        ['ff', '--bogus', 'upstream'],
        ['recent', '--remote'],
    ])
    def test_usage_errors(self, cmd, capsys):
        """
        Command lines that argparse rejects exit with 1 without touching any
        branch.
        """
        refs = self.refs()
        assert scripts._run('--config', self.config.path, *cmd) == 1
        assert 'usage:' in capsys.readouterr().err
        assert self.refs() == refs

    def test_help(self, capsys):
        assert scripts._run('ff', '--help') == 0
        assert 'usage:' in capsys.readouterr().out

    def test_repo_option(self, tmp_path):
        """
        --repo overrides the repository of the config, a directory outside of
        any repository is an error.
        """
        with pytest.raises(RepositoryError):
            self.run('--repo', str(tmp_path), 'ff', 'upstream')
        self.run('--repo', self.repo.path + '/', 'ff', 'upstream')
        assert self.repo.rev('main') == self.target


class TestRecent():
    '''Tests for listing branches by the time of their last commit'''

    @pytest.fixture(scope='function', autouse=True)
    def setup(self, environment, monkeypatch):
        monkeypatch.setenv('TZ', 'UTC')
        time.tzset()
        self.repo = environment.repo
        self.config = environment.config
        self.repo.commit('a.txt', 'one\n', date='2020-01-01T12:00:00+0000')
        self.repo.git('branch', 'old')
        self.repo.commit('a.txt', 'two\n', date='2020-01-02T12:00:00+0000')
        self.repo.git('checkout', '-q', '-b', 'new')
        self.repo.commit('a.txt', 'three\n', date='2020-01-03T12:00:00+0000')
        self.repo.git('checkout', '-q', 'main')
        self.repo.git('update-ref', 'refs/remotes/origin/stale', 'old')
        self.repo.git('update-ref', 'refs/remotes/upstream/x', 'new')
        yield
        monkeypatch.undo()
        time.tzset()

    def run(self, *cmd):
        Runner().run('--config', self.config.path, 'recent', *cmd)

    def test_recent(self, capsys):
        self.run()
        assert capsys.readouterr().out.splitlines() == [
            '  new   (2020-01-03)',
            '* main  (2020-01-02)',
            '  old   (2020-01-01)',
        ]

    def test_recent_all(self, capsys):
        self.run('--all')
        names = [line[2:].split()[0]
                 for line in capsys.readouterr().out.splitlines()]
        assert names == ['new', 'upstream/x', 'main', 'old', 'origin/stale']

    def test_recent_remote(self, capsys):
        self.run('--remote', 'origin')
        assert capsys.readouterr().out.splitlines() == [
            '  origin/stale  (2020-01-01)',
        ]
