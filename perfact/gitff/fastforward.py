#!/usr/bin/env python
# -*- coding: utf-8 -*-

import enum
import logging

from .errors import ConfigurationError, RepositoryError, TargetUnresolved


class Outcome(enum.Enum):
    '''Result of trying to fast-forward a single branch.'''
    APPLIED = 'applied'
    UP_TO_DATE = 'already up to date'
    NOT_FAST_FORWARD = 'not fast-forward'
    CHECKOUT_CONFLICT = 'checkout conflict'
    FAILED = 'failed'


class Classification(object):
    """
    Relationship of a branch tip to the target commit.

    - up_to_date: the branch already points to the target.
    - fast_forward: the tip is an ancestor of (or equal to) the target, so
      moving the branch only adds history.
    - current: the branch is checked out in the working tree.
    """
    def __init__(self, branch, target, merge_base):
        self.branch = branch
        self.target = target
        self.merge_base = merge_base
        self.up_to_date = branch.tip == target
        self.fast_forward = merge_base is not None \
            and branch.tip == merge_base
        self.current = branch.current

    @property
    def name(self):
        return self.branch.name

    @property
    def tip(self):
        return self.branch.tip

    def describe(self, target_spec):
        '''Text as shown by the listing.'''
        if self.up_to_date:
            return 'already on {}'.format(target_spec)
        if self.fast_forward:
            return 'fast-forward to {}'.format(target_spec)
        return 'non-fast-forward to {}'.format(target_spec)


class UpdateResult(object):
    '''Outcome of applying the fast-forward to one classified branch.'''
    def __init__(self, classification, outcome, conflicts=(), reason=None):
        self.classification = classification
        self.outcome = outcome
        self.conflicts = list(conflicts)
        self.reason = reason

    @property
    def name(self):
        return self.classification.name

    @property
    def fatal(self):
        return self.outcome is Outcome.FAILED

    def __repr__(self):
        return '<UpdateResult {}: {}>'.format(self.name, self.outcome.value)


def resolve_target(repo, spec):
    '''
    Resolve spec to a commit ID. In this order, spec may be a literal commit
    ID (which is not checked for existence), a local branch, a remote-tracking
    branch or a tag name. The first match is used. A tag that does not point
    directly to a commit is an error, it is not peeled.
    '''
    commit_id = repo.parse_commit_id(spec)
    if commit_id is not None:
        return commit_id

    for remote in (False, True):
        branch = repo.lookup_branch(spec, remote=remote)
        if branch is not None:
            return branch.tip

    for tag in repo.iter_tags():
        if tag.name != spec:
            continue
        if tag.commit is None:
            raise TargetUnresolved(
                spec, "tag {} doesn't point to a commit but to a {}".format(
                    spec, tag.kind,
                )
            )
        return tag.commit

    raise TargetUnresolved(spec, 'no such commit, branch or tag')


def select_branches(repo, names=(), all_branches=False, remotes=False,
                    logger=None):
    '''
    Return the branches to be processed, ordered by name.
    - Without names and without all_branches, only the currently checked out
      branch.
    - With names, the local branches of these names. Names that are not
      local branches are skipped.
    - With all_branches, all local branches.
    Remote-tracking branches are added if remotes is set, which is only
    meaningful for listing them.
    '''
    logger = logger or logging.getLogger('GitFF')
    names = sorted(set(names))
    if names and all_branches:
        raise ConfigurationError(
            'Selecting all branches and naming branches are exclusive'
        )

    if names:
        selected = []
        for name in names:
            branch = repo.lookup_branch(name)
            if branch is None:
                logger.warning('Branch %s not found, skipping.', name)
                continue
            selected.append(branch)
    elif all_branches:
        selected = sorted(repo.iter_branches(), key=lambda b: b.name)
    else:
        head = repo.head_branch()
        if head is None:
            logger.warning('HEAD is not on a branch, nothing to do.')
            return []
        selected = [repo.lookup_branch(head)]

    if remotes:
        selected.extend(sorted(
            repo.iter_branches(local=False, remote=True),
            key=lambda b: b.name,
        ))
    return selected


def classify(repo, branch, target):
    '''Determine how the branch relates to the target commit.'''
    if branch.tip == target:
        merge_base = target
    else:
        merge_base = repo.merge_base(branch.tip, target)
    return Classification(branch, target, merge_base)


def apply_update(repo, classification, progress=None, message=None):
    '''
    Move the classified branch to its target if that is a fast-forward. If
    the branch is checked out, the working tree is updated first and the
    branch is only moved if that succeeded without conflicts.
    '''
    if classification.up_to_date:
        return UpdateResult(classification, Outcome.UP_TO_DATE)
    if not classification.fast_forward:
        return UpdateResult(classification, Outcome.NOT_FAST_FORWARD)
    if classification.branch.remote:
        return UpdateResult(
            classification, Outcome.FAILED,
            reason='remote-tracking branches are never updated',
        )

    if classification.current:
        conflicts = repo.checkout(classification.target, progress=progress)
        if conflicts:
            return UpdateResult(
                classification, Outcome.CHECKOUT_CONFLICT, conflicts=conflicts,
            )

    try:
        repo.update_branch(
            classification.name,
            classification.tip,
            classification.target,
            message,
        )
    except RepositoryError as err:
        reason = str(err)
        if classification.current:
            reason += ' (working tree is already at the target)'
        return UpdateResult(classification, Outcome.FAILED, reason=reason)
    return UpdateResult(classification, Outcome.APPLIED)


class FastForward(object):
    '''
    Fast-forward branches of a repository to a single target, which is
    resolved once on creation.
    '''
    def __init__(self, repo, target_spec, logger=None,
                 reflog_message='gitff: fast-forward to {target}'):
        self.repo = repo
        self.target_spec = target_spec
        self.logger = logger or logging.getLogger('GitFF')
        self.target = resolve_target(repo, target_spec)
        self.message = reflog_message.format(target=target_spec)
        self.logger.debug('Resolved %s to %s', target_spec, self.target)

    def classify(self, branches):
        '''Classify each branch.'''
        return [classify(self.repo, branch, self.target)
                for branch in branches]

    def apply(self, branches, progress=None, report=None):
        '''
        Process branches one after another and return the list of results.
        Processing stops after the first fatal result, which is the last
        element then. If given, report is called with each result as soon as
        it is available.
        '''
        results = []
        for branch in branches:
            classification = classify(self.repo, branch, self.target)
            result = apply_update(
                self.repo, classification,
                progress=progress, message=self.message,
            )
            results.append(result)
            if report is not None:
                report(result)
            if result.fatal:
                break
        return results
