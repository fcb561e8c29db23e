"""End-to-end tests for MigrationOrchestrator with a mocked GitHub client."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import github

from conftest import make_config
from exceptions import (AuthenticationError, OrganizationNotFoundError,
                        TransferRequestError)
from migration_orchestrator import (EXIT_AUTH_ERROR, EXIT_GITHUB_ERROR,
                                    EXIT_INTERRUPTED, EXIT_MISSING_ARGUMENTS,
                                    EXIT_SUCCESS,
                                    EXIT_TRANSFER_ABORTED,
                                    MigrationOrchestrator)
from utils import Throttle


def _orchestrator(cfg, client, reporter, sleep=None) -> MigrationOrchestrator:
    throttle = Throttle(1.0, sleep=sleep or MagicMock())
    return MigrationOrchestrator(cfg, client=client, throttle=throttle, reporter=reporter)


def _fail_on(*names):
    def transfer(owner, name, new_owner):
        if name in names:
            raise TransferRequestError('Repository cannot be transferred', status_code=422)
        return 202
    return transfer


def _saved_report(report) -> dict:
    with open(report.finalized_path, encoding='utf-8') as fh:
        return json.load(fh)


def test_dry_run_records_simulated_successes(tmp_path, client, reporter) -> None:
    """Dry run over r1, r2 yields two successes and never calls transfer."""
    client.list_org_repos.return_value = ['r1', 'r2']
    orchestrator = _orchestrator(make_config(tmp_path), client, reporter)

    assert orchestrator.run() == EXIT_SUCCESS

    report = orchestrator.context.report
    assert [o.target for o in report.successful] == ['T/r1', 'T/r2']
    assert all(o.dry_run for o in report.successful)
    assert report.failed == [] and report.skipped == []
    assert report.success_rate == 100
    client.transfer_repo.assert_not_called()

    saved = _saved_report(report)
    assert saved['summary']['total'] == 2
    assert saved['summary']['successRate'] == 100
    assert saved['summary']['dryRun'] is True


def test_dry_run_ignores_stop_on_failure(tmp_path, client, reporter) -> None:
    """stop_on_failure is accepted in dry-run and the run completes."""
    client.list_org_repos.return_value = ['r1', 'r2', 'r3']
    client.transfer_repo.side_effect = _fail_on('r1', 'r2', 'r3')
    cfg = make_config(tmp_path, stop_on_failure=True)
    orchestrator = _orchestrator(cfg, client, reporter)

    assert orchestrator.run() == EXIT_SUCCESS
    assert len(orchestrator.context.report.successful) == 3
    assert client.transfer_repo.call_count == 0


def test_live_run_aborts_on_failure(tmp_path, client, reporter) -> None:
    """With stop_on_failure, r2 failing ends the run with a non-zero status."""
    client.list_org_repos.return_value = ['r1', 'r2']
    client.transfer_repo.side_effect = _fail_on('r2')
    cfg = make_config(tmp_path, dry_run=False, stop_on_failure=True)
    orchestrator = _orchestrator(cfg, client, reporter)

    assert orchestrator.run() == EXIT_TRANSFER_ABORTED

    report = orchestrator.context.report
    assert [o.repo for o in report.successful] == ['A/r1']
    assert [o.repo for o in report.failed] == ['A/r2']
    assert report.failed[0].status_code == 422
    assert report.aborted is True

    saved = _saved_report(report)
    assert saved['summary']['aborted'] is True
    assert saved['failed'][0]['error'] == 'Repository cannot be transferred'
    assert saved['failed'][0]['status'] == 422


def test_live_run_continues_without_stop_on_failure(tmp_path, client, reporter) -> None:
    """Without stop_on_failure the same failure is recorded and the run completes."""
    client.list_org_repos.return_value = ['r1', 'r2']
    client.transfer_repo.side_effect = _fail_on('r2')
    cfg = make_config(tmp_path, dry_run=False, stop_on_failure=False)
    orchestrator = _orchestrator(cfg, client, reporter)

    assert orchestrator.run() == EXIT_SUCCESS

    report = orchestrator.context.report
    assert len(report.successful) == 1
    assert len(report.failed) == 1
    assert report.success_rate == 50
    assert report.aborted is False


def test_fail_fast_stops_at_nth_repository(tmp_path, client, reporter) -> None:
    """Nth failure leaves exactly N outcomes and nothing from later orgs."""
    client.list_org_repos.side_effect = lambda org: {
        'A': ['a1', 'a2', 'a3', 'a4'],
        'B': ['b1'],
    }[org]
    client.transfer_repo.side_effect = _fail_on('a3')
    cfg = make_config(tmp_path, source_orgs=['A', 'B'], dry_run=False)
    orchestrator = _orchestrator(cfg, client, reporter)

    assert orchestrator.run() == EXIT_TRANSFER_ABORTED

    report = orchestrator.context.report
    assert report.total == 3
    assert [o.repo for o in report.successful] == ['A/a1', 'A/a2']
    assert [o.repo for o in report.failed] == ['A/a3']
    assert client.transfer_repo.call_count == 3
    client.list_org_repos.assert_called_once_with('A')


def test_listing_failure_does_not_stop_other_orgs(tmp_path, client, reporter) -> None:
    """A failed listing for the first org still processes the second."""
    def list_repos(org):
        if org == 'A':
            raise github.GithubException(500, {'message': 'Server Error'}, None)
        return ['x1', 'x2', 'x3']

    client.list_org_repos.side_effect = list_repos
    cfg = make_config(tmp_path, source_orgs=['A', 'B'])
    orchestrator = _orchestrator(cfg, client, reporter)

    assert orchestrator.run() == EXIT_SUCCESS

    report = orchestrator.context.report
    assert report.total == 3
    assert [o.repo for o in report.successful] == ['B/x1', 'B/x2', 'B/x3']


def test_throttle_waits_after_each_transfer(tmp_path, client, reporter) -> None:
    """The fixed delay follows every step, but not an aborting one."""
    client.list_org_repos.return_value = ['r1', 'r2', 'r3']
    client.transfer_repo.side_effect = _fail_on('r3')
    sleep = MagicMock()
    cfg = make_config(tmp_path, dry_run=False)
    orchestrator = _orchestrator(cfg, client, reporter, sleep=sleep)

    orchestrator.run()

    assert sleep.call_count == 2
    sleep.assert_called_with(1.0)


def test_authentication_failure_is_fatal(tmp_path, client, reporter) -> None:
    """Bad credentials abort before listing, and an empty report is written."""
    client.get_authenticated_login.side_effect = AuthenticationError('invalid token')
    orchestrator = _orchestrator(make_config(tmp_path), client, reporter)

    assert orchestrator.run() == EXIT_AUTH_ERROR

    client.list_org_repos.assert_not_called()
    saved = _saved_report(orchestrator.context.report)
    assert saved['summary']['total'] == 0
    assert saved['summary']['successRate'] is None


def test_missing_target_org_is_fatal(tmp_path, client, reporter) -> None:
    client.get_organization.side_effect = OrganizationNotFoundError('not found')
    orchestrator = _orchestrator(make_config(tmp_path), client, reporter)

    assert orchestrator.run() == EXIT_GITHUB_ERROR
    client.list_org_repos.assert_not_called()
    client.transfer_repo.assert_not_called()


def test_unverifiable_permissions_do_not_block(tmp_path, client, reporter) -> None:
    """A 403 on the membership check only warns."""
    client.get_membership.return_value = (403, {})
    client.list_org_repos.return_value = ['r1']
    orchestrator = _orchestrator(make_config(tmp_path), client, reporter)

    assert orchestrator.run() == EXIT_SUCCESS
    assert len(orchestrator.context.report.successful) == 1


def test_no_sources_is_a_configuration_error(tmp_path, client, reporter) -> None:
    cfg = make_config(tmp_path, source_orgs=[])
    orchestrator = _orchestrator(cfg, client, reporter)

    assert orchestrator.run() == EXIT_MISSING_ARGUMENTS
    client.get_authenticated_login.assert_not_called()


def test_repos_file_input(tmp_path, client, reporter) -> None:
    """Owners come from the URLs; entries without one land in skipped."""
    repos_file = tmp_path / 'test-repos.json'
    repos_file.write_text(json.dumps([
        {'name': 'api', 'url': 'https://github.com/old-a/api', 'sshUrl': ''},
        {'name': 'web', 'url': '', 'sshUrl': 'git@github.com:old-b/web.git'},
        {'name': 'lost', 'url': 'not a url', 'sshUrl': ''},
    ]))
    cfg = make_config(tmp_path, source_orgs=[], repos_file=str(repos_file), dry_run=False)
    orchestrator = _orchestrator(cfg, client, reporter)

    assert orchestrator.run() == EXIT_SUCCESS

    report = orchestrator.context.report
    assert [o.repo for o in report.successful] == ['old-a/api', 'old-b/web']
    assert [o.repo for o in report.skipped] == ['lost']
    client.list_org_repos.assert_not_called()
    client.transfer_repo.assert_any_call('old-a', 'api', 'T')
    client.transfer_repo.assert_any_call('old-b', 'web', 'T')


def test_buckets_are_disjoint_and_sum_to_total(tmp_path, client, reporter) -> None:
    client.list_org_repos.side_effect = lambda org: {'A': ['r1', 'r2'], 'T': ['r3']}[org]
    client.transfer_repo.side_effect = _fail_on('r2')
    cfg = make_config(tmp_path, source_orgs=['A', 'T'], dry_run=False, stop_on_failure=False)
    orchestrator = _orchestrator(cfg, client, reporter)

    orchestrator.run()

    report = orchestrator.context.report
    buckets = [report.successful, report.failed, report.skipped]
    repos = [o.repo for bucket in buckets for o in bucket]
    assert len(repos) == len(set(repos)) == report.total == 3
    assert [o.repo for o in report.skipped] == ['T/r3']


def test_missing_source_org_is_skipped(tmp_path, client, reporter) -> None:
    """An unknown source org is a listing failure, not a fatal target error."""
    def list_repos(org):
        if org == 'A':
            raise OrganizationNotFoundError("organization 'A' does not exist")
        return ['b1']

    client.list_org_repos.side_effect = list_repos
    cfg = make_config(tmp_path, source_orgs=['A', 'B'])
    orchestrator = _orchestrator(cfg, client, reporter)

    assert orchestrator.run() == EXIT_SUCCESS
    assert [o.repo for o in orchestrator.context.report.successful] == ['B/b1']


def test_repeated_source_org_is_listed_once(tmp_path, client, reporter) -> None:
    client.list_org_repos.return_value = ['r1']
    cfg = make_config(tmp_path, source_orgs=['A', 'a'])
    orchestrator = _orchestrator(cfg, client, reporter)

    assert orchestrator.run() == EXIT_SUCCESS

    report = orchestrator.context.report
    assert report.total == 1
    assert [o.repo for o in report.successful] == ['A/r1']
    client.list_org_repos.assert_called_once_with('A')


def test_repeated_file_entry_is_transferred_once(tmp_path, client, reporter) -> None:
    """A second request for an already moved repository is never sent."""
    moved = set()

    def transfer(owner, name, new_owner):
        key = (owner.lower(), name.lower())
        if key in moved:
            raise TransferRequestError('Not Found', status_code=404)
        moved.add(key)
        return 202

    repos_file = tmp_path / 'test-repos.json'
    repos_file.write_text(json.dumps([
        {'name': 'api', 'url': 'https://github.com/old-a/api', 'sshUrl': ''},
        {'name': 'api', 'url': '', 'sshUrl': 'git@github.com:Old-A/api.git'},
        {'name': 'lost', 'url': '', 'sshUrl': ''},
        {'name': 'lost', 'url': '', 'sshUrl': ''},
    ]))
    client.transfer_repo.side_effect = transfer
    cfg = make_config(
        tmp_path, source_orgs=[], repos_file=str(repos_file),
        dry_run=False, stop_on_failure=True,
    )
    orchestrator = _orchestrator(cfg, client, reporter)

    assert orchestrator.run() == EXIT_SUCCESS

    report = orchestrator.context.report
    assert report.total == 2
    assert [o.repo for o in report.successful] == ['old-a/api']
    assert [o.repo for o in report.skipped] == ['lost']
    assert report.failed == []
    client.transfer_repo.assert_called_once_with('old-a', 'api', 'T')


def test_interrupt_still_writes_report(tmp_path, client, reporter) -> None:
    """Ctrl-C mid-run keeps what was done so far in the saved report."""
    def transfer(owner, name, new_owner):
        if name == 'r2':
            raise KeyboardInterrupt
        return 202

    client.list_org_repos.return_value = ['r1', 'r2', 'r3']
    client.transfer_repo.side_effect = transfer
    cfg = make_config(tmp_path, dry_run=False)
    orchestrator = _orchestrator(cfg, client, reporter)

    assert orchestrator.run() == EXIT_INTERRUPTED

    report = orchestrator.context.report
    assert report.finalized_path is not None
    assert report.aborted is True
    assert client.transfer_repo.call_count == 2

    saved = _saved_report(report)
    assert [o['repo'] for o in saved['successful']] == ['A/r1']
    assert saved['summary']['total'] == 1
    assert saved['summary']['aborted'] is True
