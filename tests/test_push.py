# Tests for scmapp.workflow.push
# Refspec construction and push failure classification

import pytest

from scmapp.config import ScmConfig
from scmapp.errors import GitError, NonFastForwardError, PushRejectedError
from scmapp.git.models import Credentials
from scmapp.session import Session
from scmapp.workflow.push import PushEngine
from scmapp.workflow.results import PushStatus


@pytest.fixture
def pusher(backend, session, logger) -> PushEngine:
    backend.seed_commit(branch="dev")
    return PushEngine(backend, session, logger)


class TestBuildRefspec:
    """Tests for PushEngine.build_refspec."""

    @pytest.mark.parametrize(
        "should_force,tracking_exists,expected",
        [
            (False, True, False),
            (False, False, True),
            (True, True, True),
            (True, False, True),
        ],
    )
    def test_force_marker(self, pusher, backend, should_force, tracking_exists, expected):
        if tracking_exists:
            backend.remote_branches["origin"].add("dev")

        refspec = pusher.build_refspec(should_force)

        assert refspec.force is expected
        assert refspec.source == "refs/heads/dev"
        assert refspec.destination == "refs/heads/dev"

    def test_rendering(self, pusher, backend):
        backend.remote_branches["origin"].add("dev")
        assert str(pusher.build_refspec(False)) == "refs/heads/dev:refs/heads/dev"
        assert str(pusher.build_refspec(True)) == "+refs/heads/dev:refs/heads/dev"

    def test_detached_head(self, pusher, backend):
        backend.head_name = None
        with pytest.raises(ValueError, match="detached"):
            pusher.build_refspec()


class TestPushToRemote:
    """Tests for PushEngine.push_to_remote."""

    def test_success(self, pusher, backend, output):
        outcome = pusher.push_to_remote()

        assert outcome.success
        assert outcome.forced
        assert outcome.commit_id == backend.peek_commit().id[:9]
        assert backend.pushes == [outcome.refspec]
        assert f"pushed (forced) -> {outcome.commit_id}" in output()

    def test_fast_forward_not_forced(self, pusher, backend, output):
        backend.remote_branches["origin"].add("dev")

        outcome = pusher.push_to_remote()

        assert outcome.success
        assert not outcome.forced
        assert "pushed -> " in output()

    def test_passes_session_credentials(self, backend, temp_dir, commit_log, logger, monkeypatch):
        monkeypatch.setenv("SCMAPP_TOKEN", "s3cret")
        backend.seed_commit(branch="dev")
        config = ScmConfig.model_validate({"credentials": {"username": "jane"}})
        engine = PushEngine(backend, Session(temp_dir, config=config), logger)

        engine.push_to_remote()

        assert backend.push_credentials == [Credentials(username="jane", token="s3cret")]

    def test_missing_remote(self, pusher, backend, output):
        backend.remotes.clear()

        outcome = pusher.push_to_remote()

        assert outcome.status == PushStatus.MISSING_REMOTE
        assert outcome.fatal
        assert backend.pushes == []
        assert "Remote origin not found! Try running with set-url argument." in output()

    def test_non_fast_forward(self, pusher, backend, output):
        backend.remote_branches["origin"].add("dev")
        backend.push_error = NonFastForwardError("Cannot push non-fast-forwardable reference refs/heads/dev")

        outcome = pusher.push_to_remote(should_force=False)

        assert outcome.status == PushStatus.NON_FAST_FORWARD
        assert not outcome.success
        assert "Attempting fast forward with force flag: False failed! Consider passing --amend" in output()

    def test_rejected_reference(self, pusher, backend, output):
        backend.push_error = PushRejectedError("refs/heads/dev", "protected branch hook declined")

        outcome = pusher.push_to_remote()

        assert outcome.status == PushStatus.REJECTED
        assert outcome.reference == "refs/heads/dev"
        assert outcome.message == "protected branch hook declined"
        assert "Failed to update reference 'refs/heads/dev': protected branch hook declined" in output()

    def test_rejected_reference_reported_once(self, pusher, backend, output):
        rejection = PushRejectedError("refs/heads/dev", "protected branch hook declined")

        def push(remote, refspec, credentials=None, on_error=None, on_progress=None):
            on_error(rejection.reference, rejection.remote_message)
            raise rejection

        backend.push = push

        outcome = pusher.push_to_remote()

        assert outcome.status == PushStatus.REJECTED
        assert output().count("Failed to update reference") == 1

    def test_transport_failure_includes_inner_message(self, pusher, backend, output):
        backend.push_error = GitError("Push to origin failed", returncode=128, stderr="fatal: unable to access")

        outcome = pusher.push_to_remote()

        assert outcome.status == PushStatus.TRANSPORT
        assert outcome.message == "Push to origin failed / fatal: unable to access"
        assert "Canonical name: refs/heads/dev" in output()

    def test_unexpected_failure(self, pusher, backend, output):
        backend.push_error = TypeError("bad argument")

        outcome = pusher.push_to_remote()

        assert outcome.status == PushStatus.UNEXPECTED
        assert "should not happen" in output()

    def test_detached_head_is_reported(self, pusher, backend):
        backend.head_name = None

        outcome = pusher.push_to_remote()

        assert outcome.status == PushStatus.UNEXPECTED
        assert backend.pushes == []
