# src/lint/engine.py — v2
"""Lint engine — expand, partition, execute, merge, persist, summarize.

One run, no state kept between runs:

    Expand     files × matching rules → jobs (content read and hashed once per file)
    Partition  cache hits become results immediately; misses are queued
    Execute    misses go to the remote judge, at most ``concurrency`` in flight
    Merge      hits (input order) + misses (input order)
    Persist    cache saved once, after every miss has completed
    Summarize  counts + exit code, then the reporter is called once

A Fatal judge outcome cancels the outstanding jobs and propagates; the
cache is not saved for that run.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from ailint.core.models import LintJob, LintResult, LintSummary
from ailint.lint.judge import Fatal
from ailint.lint.summary import compute_summary, determine_exit_code
from ailint.logging.context import set_job_context, set_run_context

if TYPE_CHECKING:
    from ailint.cache.base_cache_store import BaseCacheStore
    from ailint.config.models import LinterConfig
    from ailint.lint.judge import RemoteJudge
    from ailint.reporting.base_reporter import BaseReporter
    from ailint.rules.matcher import RuleMatcher

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, LintJob, bool], None]


@dataclass
class LintRun:
    """Outcome of one engine run."""

    results: list[LintResult] = field(default_factory=list)
    summary: LintSummary = field(default_factory=LintSummary)
    exit_code: int = 0


class LinterEngine:
    """Coordinate one lint run.

    Args:
        cache: Content cache (loaded at the start of every run).
        judge: Remote judge producing Judged / Fatal outcomes.
        matcher: Rule matcher for the active config.
        reporter: Sink called once with the final results.
        on_progress: Optional callback ``(completed, total, job, cached)``.
    """

    def __init__(
        self,
        cache: BaseCacheStore,
        judge: RemoteJudge,
        matcher: RuleMatcher,
        reporter: BaseReporter,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self._cache = cache
        self._judge = judge
        self._matcher = matcher
        self._reporter = reporter
        self._on_progress = on_progress

    async def run(self, file_paths: list[str], config: LinterConfig) -> LintRun:
        """Lint ``file_paths`` against ``config``.

        Raises:
            LLMFatalError: If the judge reports a session-wide failure.
        """
        t0 = time.monotonic()
        run_id = uuid.uuid4().hex[:12]
        set_run_context(run_id)

        self._cache.load()

        jobs, total_files = self._expand(file_paths)
        hits, misses = self._partition(jobs)
        logger.info(
            "Run %s: %d files, %d jobs (%d cached, %d to evaluate, concurrency=%d)",
            run_id, total_files, len(jobs), len(hits), len(misses), config.concurrency,
        )

        fresh = await self._execute(misses, config.concurrency, len(jobs), len(hits))
        results = hits + fresh

        self._cache.save()

        duration_ms = int((time.monotonic() - t0) * 1000)
        summary = compute_summary(results, total_files, duration_ms)
        exit_code = determine_exit_code(results, summary)

        self._reporter.report(results, summary)
        logger.info(
            "Run %s finished in %d ms: %d passed, %d errors, %d warnings (exit %d)",
            run_id, duration_ms, summary.passed, summary.errors, summary.warnings, exit_code,
        )
        return LintRun(results=results, summary=summary, exit_code=exit_code)

    # --- Stages ---

    def _expand(self, file_paths: list[str]) -> tuple[list[LintJob], int]:
        """Build one job per (file, matching rule). Returns (jobs, distinct files)."""
        jobs: list[LintJob] = []
        file_count = 0

        # match_files keys are first-seen paths, so duplicates collapse here.
        for file_path, rules in self._matcher.match_files(file_paths).items():
            if not rules:
                logger.debug("No rules match %s", file_path)
                continue
            file_count += 1

            content = Path(file_path).read_text(encoding="utf-8", errors="replace")
            file_hash = self._cache.hash(content)
            for rule in rules:
                jobs.append(
                    LintJob(
                        rule=rule,
                        file_path=file_path,
                        file_content=content,
                        file_hash=file_hash,
                        prompt_hash=self._cache.hash(rule.prompt),
                    )
                )
        return jobs, file_count

    def _partition(self, jobs: list[LintJob]) -> tuple[list[LintResult], list[LintJob]]:
        """Split jobs into cached results (marked cached) and misses."""
        hits: list[LintResult] = []
        misses: list[LintJob] = []
        for job in jobs:
            cached = self._cache.lookup(
                job.rule.id, job.file_path, job.file_hash, job.prompt_hash
            )
            if cached is None:
                misses.append(job)
                continue
            hits.append(cached.model_copy(update={"cached": True}))
            self._progress(len(hits), len(jobs), job, True)
        return hits, misses

    async def _execute(
        self, misses: list[LintJob], concurrency: int, total: int, completed: int
    ) -> list[LintResult]:
        """Judge misses with at most ``concurrency`` calls in flight."""
        if not misses:
            return []

        semaphore = asyncio.Semaphore(concurrency)
        done = completed

        async def _run_one(job: LintJob) -> LintResult:
            nonlocal done
            set_job_context(job.rule.id, job.file_path)
            # The slot is held for the whole judgment, retries and backoff included.
            async with semaphore:
                outcome = await self._judge.judge(job)
            if isinstance(outcome, Fatal):
                raise outcome.error

            result = outcome.result
            self._cache.store(
                job.rule.id, job.file_path, job.file_hash, job.prompt_hash, result
            )
            done += 1
            self._progress(done, total, job, False)
            return result

        tasks = [asyncio.create_task(_run_one(job)) for job in misses]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    def _progress(self, completed: int, total: int, job: LintJob, cached: bool) -> None:
        if self._on_progress is not None:
            self._on_progress(completed, total, job, cached)
