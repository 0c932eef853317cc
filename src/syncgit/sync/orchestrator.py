"""Sync workflow orchestration.

The workflow is a linear pipeline of fallible steps, each with its own
failure policy:

    locate -> overview -> preflight -> pending pushes -> pull
           -> detect changes -> stage -> commit -> push

A step returns NEXT to continue, DONE to finish the run successfully
early, or FAILED. A FAILED step with policy HALT ends the run; with policy
CONTINUE the failure is reported and the next step runs. GitCommandError
raised inside a step is shown verbatim and treated as FAILED. Nothing is
ever rolled back: a commit survives a failed push and staged changes
survive an aborted commit prompt.

Usage:
    orchestrator = SyncOrchestrator(Path.cwd(), ui=SyncUI())
    report = orchestrator.run()
    raise SystemExit(report.exit_code)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Final

from syncgit.connectivity import ConnectivityProbe
from syncgit.core.config import Config, get_token, load_config, load_env_file
from syncgit.core.exceptions import GitCommandError
from syncgit.git.grouping import group_by_folder
from syncgit.git.locator import RepoContext, context_for_root, discover_child_repos, locate
from syncgit.git.repository import GitRepository
from syncgit.git.status import ChangeRecord, has_staged, split_by_subpath, untracked_mode_for
from syncgit.sync.ui import SyncUI

logger = logging.getLogger(__name__)

MSG_NO_INTERNET_PUSH: Final[str] = (
    "No internet connection. Changes have been saved locally but not pushed."
)
MSG_RUN_PUSH_MANUALLY: Final[str] = (
    "Please run 'git push' manually when you have connection."
)


class StepPolicy(Enum):
    """What a failed step means for the rest of the run."""

    HALT = "halt"
    CONTINUE = "continue"


class StepResult(Enum):
    NEXT = "next"
    DONE = "done"
    FAILED = "failed"


class Outcome(str, Enum):
    """Final state of a sync run."""

    PUSHED = "pushed"
    COMMITTED_LOCAL = "committed_local"
    NOTHING_TO_COMMIT = "nothing_to_commit"
    NO_REPOSITORY = "no_repository"
    HALTED = "halted"
    INTERRUPTED = "interrupted"

    @property
    def exit_code(self) -> int:
        if self in (Outcome.NO_REPOSITORY, Outcome.HALTED):
            return 1
        if self is Outcome.INTERRUPTED:
            return 130
        return 0


@dataclass(frozen=True)
class Step:
    """One named workflow step.

    Attributes:
        name: Short identifier used in reports and logs.
        action: Callable performing the step.
        policy: Failure policy.

    """

    name: str
    action: Callable[[], StepResult]
    policy: StepPolicy = StepPolicy.HALT


@dataclass(frozen=True)
class SyncReport:
    """Summary of a finished run.

    Attributes:
        outcome: Final state.
        committed: A commit was created in this run.
        pushed: That commit (or earlier pending ones) reached the remote.
        failed_step: Name of the halting step, if any.
        warnings: Names of CONTINUE steps that failed.

    """

    outcome: Outcome
    committed: bool = False
    pushed: bool = False
    failed_step: str | None = None
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def exit_code(self) -> int:
        return self.outcome.exit_code


class SyncOrchestrator:
    """Drives the pull, stage, commit and push workflow for one run.

    Collaborators (config, probe, repository) are resolved during the
    locate step unless injected, so tests can substitute any of them.
    """

    def __init__(
        self,
        start_dir: Path,
        ui: SyncUI,
        *,
        config: Config | None = None,
        probe: ConnectivityProbe | None = None,
        repo_factory: Callable[..., GitRepository] = GitRepository,
        push: bool = True,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            start_dir: Directory the user invoked the tool from.
            ui: Console UI for output and prompts.
            config: Preloaded configuration (loaded from the repo if None).
            probe: Connectivity probe (built from config if None).
            repo_factory: Builds the GitRepository for the resolved root.
            push: Push after committing.

        """
        self.start_dir = start_dir
        self.ui = ui
        self.config = config
        self.probe = probe
        self._repo_factory = repo_factory
        self._push_enabled = push

        self.context: RepoContext | None = None
        self.repo: GitRepository | None = None
        self._changes: list[ChangeRecord] = []
        self._outcome: Outcome | None = None
        self._committed = False
        self._pushed = False
        self._warnings: list[str] = []
        self._behind = 0

    def steps(self) -> list[Step]:
        return [
            Step("locate", self._step_locate),
            Step("overview", self._step_overview),
            Step("preflight", self._step_preflight),
            Step("pending_pushes", self._step_pending_pushes, StepPolicy.CONTINUE),
            Step("pull", self._step_pull),
            Step("detect_changes", self._step_detect_changes),
            Step("stage", self._step_stage),
            Step("commit", self._step_commit),
            Step("push", self._step_push, StepPolicy.CONTINUE),
        ]

    def run(self) -> SyncReport:
        """Execute all steps in order and return the report."""
        for step in self.steps():
            logger.debug("Step %s", step.name)
            try:
                result = step.action()
            except GitCommandError as e:
                self.ui.git_error(e)
                result = StepResult.FAILED
            except (KeyboardInterrupt, EOFError):
                self.ui.console.print()
                self.ui.warning("Cancelled. Any staged changes were left staged.")
                return self._report(Outcome.INTERRUPTED, failed_step=step.name)

            if result is StepResult.DONE:
                break
            if result is StepResult.FAILED:
                if step.policy is StepPolicy.CONTINUE:
                    logger.info("Step %s failed, continuing", step.name)
                    self._warnings.append(step.name)
                    continue
                return self._report(self._outcome or Outcome.HALTED, failed_step=step.name)

        return self._report(self._outcome or Outcome.NOTHING_TO_COMMIT)

    def _report(self, outcome: Outcome, failed_step: str | None = None) -> SyncReport:
        return SyncReport(
            outcome=outcome,
            committed=self._committed,
            pushed=self._pushed,
            failed_step=failed_step,
            warnings=tuple(self._warnings),
        )

    def _require_repo(self) -> tuple[RepoContext, GitRepository]:
        assert self.context is not None and self.repo is not None
        return self.context, self.repo

    def _is_online(self) -> bool:
        assert self.probe is not None
        return self.probe.is_online()

    def _untracked_mode(self) -> str:
        assert self.config is not None and self.context is not None
        return untracked_mode_for(self.context.subpath, self.config.untracked_files)

    # -- steps -----------------------------------------------------------

    def _step_locate(self) -> StepResult:
        context = locate(self.start_dir)
        if context is None:
            candidates = discover_child_repos(self.start_dir)
            if not candidates:
                self.ui.error("No Git repository found")
                self.ui.info("Run syncgit from inside a working tree or a folder of repositories.")
                self._outcome = Outcome.NO_REPOSITORY
                return StepResult.FAILED
            chosen = self.ui.choose_repository(candidates)
            if chosen is None:
                self.ui.error("No repository selected")
                self._outcome = Outcome.NO_REPOSITORY
                return StepResult.FAILED
            context = context_for_root(chosen)

        self.context = context
        load_env_file(context.root)
        if self.config is None:
            self.config = load_config(project_path=context.root)
        if self.probe is None:
            self.probe = ConnectivityProbe.from_config(self.config.connectivity)

        token = get_token(self.config.token_env_vars)
        if token is None:
            logger.info("No access token found; relying on git's own credentials")
        self.repo = self._repo_factory(context.root, token=token, remote=self.config.remote)
        return StepResult.NEXT

    def _step_overview(self) -> StepResult:
        context, repo = self._require_repo()
        self.ui.separator()
        self.ui.banner(f"📁 Repository root: {context.name}")
        self.ui.banner(f"🧭 Subpath: {context.subpath_display}")
        self.ui.separator()
        self.ui.banner("🔍 Repository status:")
        self.ui.show_output(repo.short_status())
        self.ui.separator()
        return StepResult.NEXT

    def _step_preflight(self) -> StepResult:
        _, repo = self._require_repo()
        unmerged = repo.unmerged_paths()
        if unmerged:
            self.ui.error("You have unresolved conflicts. Resolve them before continuing:")
            self.ui.show_output("\n".join(unmerged))
            return StepResult.FAILED

        if repo.merge_in_progress():
            self.ui.error("A merge is in progress. Complete or abort it before continuing.")
            return StepResult.FAILED

        stashed = repo.stash_count()
        if stashed:
            self.ui.warning(f"You have {stashed} stashed change set(s)")
            if not self.ui.confirm("Continue anyway?"):
                self.ui.info("Cancelled by user")
                return StepResult.FAILED
        return StepResult.NEXT

    def _step_pending_pushes(self) -> StepResult:
        _, repo = self._require_repo()
        self.ui.banner("🔍 Checking for pending pushes...")
        counts = repo.ahead_behind()

        self._behind = counts.behind
        if counts.behind:
            self.ui.info(f"{counts.behind} commit(s) behind remote. Latest incoming:")
            self.ui.show_output(repo.incoming_log())

        if counts.ahead == 0:
            self.ui.success("No pending commits to push")
            self.ui.separator()
            return StepResult.NEXT

        self.ui.warning("You have commits that need to be pushed")
        self.ui.banner(f"{counts.ahead} commit(s) ahead of remote repository")
        if not self.ui.confirm("Do you want to push the existing commits first?", default=True):
            self.ui.info("Continuing without pushing existing commits")
            self.ui.separator()
            return StepResult.NEXT

        if not self._is_online():
            self.ui.warning("No internet connection. Cannot push existing commits now.")
            return StepResult.FAILED

        self.ui.banner("⬆️  Pushing existing commits...")
        self.ui.show_output(repo.push().stderr)
        self._pushed = True
        self.ui.success("Existing commits pushed")
        self.ui.separator()
        return StepResult.NEXT

    def _step_pull(self) -> StepResult:
        _, repo = self._require_repo()
        assert self.config is not None

        if repo.upstream() is None:
            self.ui.info("No upstream branch configured; skipping pull")
            return StepResult.NEXT
        if not self._is_online():
            self.ui.warning("No internet connection. Working with the local version.")
            return StepResult.NEXT
        if self._behind and not self.ui.confirm("Pull the incoming commits now?", default=True):
            self.ui.info("Skipping pull; a later push may be rejected until you pull")
            return StepResult.NEXT

        self.ui.banner("⬇️  Pulling changes...")
        result = repo.pull(self.config.pull.strategy, self.config.pull.autostash)
        self.ui.show_output(result.stdout)
        self.ui.separator()
        return StepResult.NEXT

    def _step_detect_changes(self) -> StepResult:
        context, repo = self._require_repo()
        assert self.config is not None
        self.ui.banner("📦 Checking local changes...")

        records = repo.status(self._untracked_mode())
        inside, outside = split_by_subpath(records, context.subpath)
        if not inside:
            self.ui.success("Nothing to commit in the current folder")
            if outside:
                self.ui.info(
                    f"There are {len(outside)} pending change(s) elsewhere in the repository."
                )
                self.ui.info("Run syncgit from the repository root or the folder with changes.")
            self._outcome = Outcome.NOTHING_TO_COMMIT
            return StepResult.DONE

        self._changes = inside
        return StepResult.NEXT

    def _step_stage(self) -> StepResult:
        context, repo = self._require_repo()
        assert self.config is not None

        self.ui.separator()
        self.ui.banner("📄 Changes to be staged:")
        self.ui.show_groups(group_by_folder(self._changes, context.subpath))
        self.ui.pause("Press Enter to stage these changes, or Ctrl+C to cancel...")

        # Records with a clean worktree side are already fully staged
        paths = [record.path for record in self._changes if record.is_unstaged]
        if paths:
            self.ui.banner("⏳ Staging changes...")
            repo.stage(paths, chunk_size=self.config.stage_chunk_size)
            self.ui.success(f"Staged {len(paths)} path(s)")

        inside, outside = split_by_subpath(
            repo.status(self._untracked_mode()), context.subpath
        )
        if not has_staged(inside):
            self.ui.info("There's nothing to commit")
            self._outcome = Outcome.NOTHING_TO_COMMIT
            return StepResult.DONE

        staged_elsewhere = [record for record in outside if record.is_staged]
        if staged_elsewhere:
            self.ui.warning(
                f"{len(staged_elsewhere)} change(s) outside this folder are also staged "
                "and will be part of the commit"
            )
        return StepResult.NEXT

    def _step_commit(self) -> StepResult:
        _, repo = self._require_repo()

        self.ui.separator()
        self.ui.banner("📝 Staged changes to be committed:")
        self.ui.show_output(repo.staged_diff_stat())
        self.ui.pause("Press Enter to write the commit message, or Ctrl+C to cancel...")

        message = self.ui.ask_commit_message().strip()
        while not message:
            self.ui.warning("Commit message cannot be empty")
            message = self.ui.ask_commit_message().strip()

        result = repo.commit(message)
        self.ui.show_output(result.stdout)
        self._committed = True
        self._outcome = Outcome.COMMITTED_LOCAL
        self.ui.success("Changes committed")
        self.ui.separator()
        return StepResult.NEXT

    def _step_push(self) -> StepResult:
        _, repo = self._require_repo()

        if not self._push_enabled:
            self.ui.info("Push skipped; the commit is local only")
            return StepResult.NEXT

        self.ui.banner("⬆️  Pushing changes...")
        if not self._is_online():
            self.ui.warning(MSG_NO_INTERNET_PUSH)
            self.ui.info(MSG_RUN_PUSH_MANUALLY)
            return StepResult.NEXT

        set_upstream = repo.upstream() is None
        try:
            result = repo.push(set_upstream=set_upstream)
        except GitCommandError as e:
            self.ui.git_error(e)
            self.ui.warning("Push failed. Your commit is saved locally.")
            self.ui.info(MSG_RUN_PUSH_MANUALLY)
            return StepResult.FAILED
        self.ui.show_output(result.stderr)
        self._pushed = True
        self._outcome = Outcome.PUSHED
        self.ui.success("Changes pushed")
        return StepResult.NEXT
