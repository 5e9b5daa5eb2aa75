#!/usr/bin/env python
# -*- coding: utf-8 -*-

import re
import contextlib

import pygit2
from pygit2.enums import CheckoutNotify, CheckoutStrategy

from .errors import RepositoryError


# A literal commit ID must be spelled out completely, abbreviated IDs are
# treated as names.
COMMIT_ID_RE = re.compile(r'^[0-9a-fA-F]{40}$')


class Branch(object):
    """
    A local or remote-tracking branch as seen when it was looked up. `tip` is
    the commit the branch pointed to at that time.
    """
    def __init__(self, name, tip, remote=False, current=False):
        self.name = name
        self.tip = tip
        self.remote = remote
        self.current = current

    def __repr__(self):
        return '<Branch {}{} at {}{}>'.format(
            'remote ' if self.remote else '',
            self.name,
            self.tip,
            ' (current)' if self.current else '',
        )


class Tag(object):
    """
    A tag together with what it refers to. For annotated tags this is the
    object the tag object points to, without peeling further. `commit` is
    only set if that object is a commit.
    """
    def __init__(self, name, kind, commit=None):
        self.name = name
        self.kind = kind
        self.commit = commit


class CheckoutObserver(pygit2.CheckoutCallbacks):
    '''Collect conflicting paths and forward progress during a checkout.'''
    def __init__(self, progress=None):
        super().__init__()
        self.progress = progress
        self.conflicts = []

    def checkout_notify_flags(self):
        return CheckoutNotify.CONFLICT

    def checkout_notify(self, why, path, baseline, target, workdir):
        if why == CheckoutNotify.CONFLICT:
            self.conflicts.append(path)

    def checkout_progress(self, path, completed_steps, total_steps):
        if self.progress is None:
            return
        if total_steps:
            percent = completed_steps * 100 // total_steps
        else:
            percent = 100
        self.progress(percent, completed_steps, total_steps)


class Repository(object):
    '''
    Access to a git repository on disk. This is the only place that talks to
    libgit2, everything else works with the branch, tag and commit ID values
    returned from here.
    '''
    def __init__(self, path='.'):
        found = pygit2.discover_repository(path)
        if found is None:
            raise RepositoryError(
                'No git repository found at {}'.format(path)
            )
        try:
            self._repo = pygit2.Repository(found)
        except pygit2.GitError as err:
            raise RepositoryError(
                'Unable to open repository {}: {}'.format(found, err)
            )
        self.path = self._repo.path

    def close(self):
        '''Release the handles to the git database.'''
        if self._repo is not None:
            self._repo.free()
            self._repo = None

    @property
    def workdir(self):
        return self._repo.workdir

    def head_branch(self):
        '''
        Name of the branch that is checked out in the working tree or None if
        HEAD is detached or unborn or there is no working tree at all.
        '''
        repo = self._repo
        if repo.is_bare or repo.head_is_unborn or repo.head_is_detached:
            return None
        return repo.head.shorthand

    def parse_commit_id(self, text):
        '''
        Return the commit ID spelled out by text or None if text is not a
        literal commit ID. The commit is not required to exist.
        '''
        if not COMMIT_ID_RE.match(text):
            return None
        return pygit2.Oid(hex=text.lower())

    def _branch(self, ref, remote, head):
        # Symbolic refs (origin/HEAD) only alias another branch
        if not isinstance(ref.target, pygit2.Oid):
            return None
        name = ref.branch_name
        return Branch(
            name=name,
            tip=ref.target,
            remote=remote,
            current=not remote and name == head,
        )

    def lookup_branch(self, name, remote=False):
        '''
        Return the local (or remote-tracking) branch with exactly the given
        name or None.
        '''
        branches = self._repo.branches.remote if remote \
            else self._repo.branches.local
        try:
            ref = branches.get(name)
        except ValueError:
            # not a valid reference name
            return None
        if ref is None:
            return None
        if not isinstance(ref.target, pygit2.Oid):
            ref = ref.resolve()
        return Branch(
            name=name,
            tip=ref.target,
            remote=remote,
            current=not remote and name == self.head_branch(),
        )

    def iter_branches(self, local=True, remote=False):
        '''Yield local and/or remote-tracking branches.'''
        head = self.head_branch()
        scopes = []
        if local:
            scopes.append((self._repo.branches.local, False))
        if remote:
            scopes.append((self._repo.branches.remote, True))
        try:
            for branches, is_remote in scopes:
                for name in list(branches):
                    branch = self._branch(branches[name], is_remote, head)
                    if branch is not None:
                        yield branch
        except (pygit2.GitError, KeyError) as err:
            raise RepositoryError('Unable to list branches: {}'.format(err))

    def iter_tags(self):
        '''
        Yield all tags. Annotated tags are followed exactly one level, so a tag
        of a tag reports the inner tag object.
        '''
        repo = self._repo
        try:
            for refname in repo.listall_references():
                if not refname.startswith('refs/tags/'):
                    continue
                ref = repo.lookup_reference(refname)
                obj = repo.get(ref.target)
                if isinstance(obj, pygit2.Tag):
                    obj = repo.get(obj.target)
                kind = type(obj).__name__.lower() if obj is not None \
                    else 'missing object'
                yield Tag(
                    name=refname[len('refs/tags/'):],
                    kind=kind,
                    commit=obj.id if isinstance(obj, pygit2.Commit) else None,
                )
        except (pygit2.GitError, KeyError) as err:
            raise RepositoryError('Unable to list tags: {}'.format(err))

    def _commit(self, commit_id):
        try:
            obj = self._repo.get(commit_id)
        except (pygit2.GitError, ValueError) as err:
            raise RepositoryError(
                'Unable to read {}: {}'.format(commit_id, err)
            )
        if not isinstance(obj, pygit2.Commit):
            raise RepositoryError('Commit {} not found'.format(commit_id))
        return obj

    def merge_base(self, one, other):
        '''
        Return the best common ancestor of both commits or None if their
        histories are unrelated. Both commits must exist.
        '''
        self._commit(one)
        self._commit(other)
        try:
            return self._repo.merge_base(one, other)
        except pygit2.GitError as err:
            raise RepositoryError(
                'Unable to compute merge base of {} and {}: {}'.format(
                    one, other, err,
                )
            )

    def commit_time(self, commit_id):
        '''Committer timestamp of the given commit (seconds since epoch).'''
        return self._commit(commit_id).commit_time

    def checkout(self, commit_id, progress=None):
        '''
        Check out the tree of the given commit into the working tree and the
        index, refusing to overwrite local modifications. Returns the list of
        paths that prevented the checkout, in which case nothing was written.
        An empty list means the checkout succeeded. HEAD is not touched.

        progress, if given, is called with (percent, completed, total) after
        each processed file.
        '''
        commit = self._commit(commit_id)
        observer = CheckoutObserver(progress=progress)
        try:
            self._repo.checkout_tree(
                commit,
                strategy=CheckoutStrategy.SAFE,
                callbacks=observer,
            )
        except pygit2.GitError as err:
            if observer.conflicts:
                return observer.conflicts
            raise RepositoryError(
                'Checkout of {} failed: {}'.format(commit_id, err)
            )
        return observer.conflicts

    def update_branch(self, name, observed, new, message=None):
        '''
        Point the local branch name to new, provided it still points to
        observed.
        '''
        refname = 'refs/heads/' + name
        try:
            ref = self._repo.lookup_reference(refname)
        except KeyError:
            raise RepositoryError('Branch {} no longer exists'.format(name))
        if ref.target != observed:
            raise RepositoryError(
                'Branch {} was changed concurrently (expected {}, found {})'
                .format(name, observed, ref.target)
            )
        try:
            # set_target itself only succeeds if the stored value still
            # matches the one read by lookup_reference
            if message is None:
                ref.set_target(new)
            else:
                ref.set_target(new, message)
        except (pygit2.GitError, ValueError) as err:
            raise RepositoryError(
                'Unable to update branch {}: {}'.format(name, err)
            )


@contextlib.contextmanager
def open_repository(path='.'):
    '''Open the repository at or above path for the duration of a block.'''
    repo = Repository(path)
    try:
        yield repo
    finally:
        repo.close()
