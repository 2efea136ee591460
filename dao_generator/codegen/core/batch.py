"""
Batch driver for DAO generation.

Processes tables one after another: read the existing artifact, apply the
backup policy, assemble, write. A failing table is recorded in the
summary and the batch moves on to the next one.
"""

from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from .backup import BackupCreationError, BackupPolicy, decide
from .generator import CodeGenerator, GeneratorError
from .schema import BatchSummary, GenerationMode, GenerationResult, TableInfo
from .storage import FileSystem, LocalFileSystem, OutputLocationError, write_artifact
from ...logging_config import get_logger

logger = get_logger(__name__)

TableFetcher = Callable[[], TableInfo]


class BatchGenerator:
    """Runs a generator over a list of tables and aggregates the results."""

    def __init__(
        self,
        generator: CodeGenerator,
        output_dir: Path,
        fs: Optional[FileSystem] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Args:
            generator: Language generator producing artifact text
            output_dir: Directory artifacts are written to
            fs: Filesystem adapter, local disk by default
            clock: Source of the generation timestamp
        """
        self.generator = generator
        self.output_dir = Path(output_dir)
        self.fs = fs or LocalFileSystem()
        self.clock = clock
        self.backup_policy = BackupPolicy(
            self.fs,
            dir_name=generator.config.backup_dir_name,
            marker=generator.config.backup_marker,
        )

    def generate(
        self, tables: Iterable[TableInfo], mode: GenerationMode
    ) -> BatchSummary:
        """Generate artifacts for already fetched tables."""
        requests = [(table.name, self._constant(table)) for table in tables]
        return self._run(requests, mode)

    def generate_from_source(
        self,
        source,
        database: Optional[str],
        table_names: Sequence[str],
        mode: GenerationMode,
    ) -> BatchSummary:
        """
        Generate artifacts for tables fetched one by one from a schema source.

        A table whose metadata cannot be fetched is recorded as failed.
        """
        requests = [
            (name, self._fetcher(source, database, name)) for name in table_names
        ]
        return self._run(requests, mode)

    @staticmethod
    def _constant(table: TableInfo) -> TableFetcher:
        return lambda: table

    @staticmethod
    def _fetcher(source, database: Optional[str], name: str) -> TableFetcher:
        return lambda: source.fetch_columns(database, name)

    def _check_output_dir(self):
        if not self.fs.is_dir(self.output_dir):
            raise OutputLocationError(
                f"Output directory does not exist: {self.output_dir}"
            )

    def _run(self, requests: List[tuple], mode: GenerationMode) -> BatchSummary:
        self._check_output_dir()

        summary = BatchSummary()
        # artifact path -> table that wrote it in this batch
        claimed: Dict[Path, str] = {}
        logger.info(
            "Generating %d table(s) into %s (mode=%s)",
            len(requests),
            self.output_dir,
            mode.value,
        )

        for name, fetch in requests:
            result = self.process_table(name, fetch, mode, claimed)
            if result.success:
                claimed[Path(result.path)] = name
            summary.record(result)

        logger.info(
            "Batch finished: %d generated, %d skipped, %d backed up, %d error(s)",
            summary.generated,
            summary.skipped,
            summary.backed_up,
            len(summary.errors),
        )
        return summary

    def process_table(
        self,
        name: str,
        fetch: TableFetcher,
        mode: GenerationMode,
        claimed: Optional[Dict[Path, str]] = None,
    ) -> GenerationResult:
        """
        Run the full pipeline for one table; never raises.

        ``claimed`` maps artifact paths already written by the current batch
        to their table. A table resolving to one of them fails instead of
        replacing the earlier artifact.
        """
        backup_path = None
        try:
            table = fetch()
            for warning in self.generator.validate_table(table):
                logger.warning(warning)

            identifiers = self.generator.resolve(table)
            file_name = self.generator.artifact_file_name(identifiers)
            path = self.output_dir / file_name
            if claimed and path in claimed:
                raise GeneratorError(
                    f"artifact {file_name} collides with {claimed[path]}"
                )

            existing = self.fs.read(path) if self.fs.exists(path) else None
            decision = decide(existing, mode, self.generator.config.version_step)
            timestamp = self.clock()

            if decision.needs_backup:
                header = self.generator.backup_header(
                    file_name, timestamp, decision.version
                )
                try:
                    backup_path = self.backup_policy.create_backup(
                        path, existing, header, timestamp
                    )
                except BackupCreationError as e:
                    logger.error("Skipping %s: %s", name, e)
                    return GenerationResult.skipped(name, str(e))

            code = self.generator.generate(table, decision.version, timestamp)
            write_artifact(self.fs, path, code)

        except Exception as e:
            logger.error("Generation failed for %s: %s", name, e)
            return GenerationResult.failed(
                name, str(e), backup_path=str(backup_path) if backup_path else None
            )

        logger.info(
            "Generated %s (version %s, %s)", path, decision.version, decision.action.value
        )
        return GenerationResult.generated(
            name,
            str(path),
            str(decision.version),
            backup_path=str(backup_path) if backup_path else None,
        )
